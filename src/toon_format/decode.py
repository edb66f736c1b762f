"""TOON decoder implementation."""

from __future__ import annotations

import logging
from bisect import bisect_right
from collections.abc import Iterable

from .errors import (
    ArrayLengthMismatchError,
    BlankLineInArrayError,
    MissingColonError,
    PathExpansionConflictError,
    RowWidthMismatchError,
    ToonDecodeError,
    ToonSyntaxError,
)
from .primitives import parse_key, parse_primitive
from .scanner import parse_array_header, scan_lines
from .string_utils import (
    LIST_ITEM_MARKER,
    LIST_ITEM_PREFIX,
    find_unquoted,
    find_unquoted_colon,
    is_expandable_path,
    split_by_delimiter,
)
from .types import (
    ArrayHeader,
    DecodeOptions,
    Delimiter,
    JsonObject,
    JsonPrimitive,
    JsonValue,
    ParsedLine,
    ScanResult,
)

logger = logging.getLogger(__name__)


def decode(text: str, options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON text to a Python value.

    Args:
        text: The TOON-formatted string.
        options: Decoding options.

    Returns:
        The decoded Python value. Empty input decodes to an empty dict.

    Raises:
        ToonDecodeError: For malformed input. In strict mode (the default) this
            includes count, row-width, blank-line, indentation and
            path-expansion violations.
    """
    return decode_lines(text.split("\n"), options)


def decode_lines(lines: Iterable[str], options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON from pre-split lines.

    Args:
        lines: Iterable of line strings, without newline characters.
        options: Decoding options.

    Returns:
        The decoded Python value.
    """
    opts = options or DecodeOptions()
    scanned = scan_lines(lines, opts.indent, opts.strict)

    if not scanned.lines:
        return {}

    cursor = LineCursor(scanned, opts)
    return _decode_root(cursor)


class LineCursor:
    """Position over the scanned lines of a single decode call."""

    def __init__(self, scanned: ScanResult, options: DecodeOptions):
        self.lines = scanned.lines
        self.blank_line_numbers = [b.line_number for b in scanned.blank_lines]
        self.options = options
        self.pos = 0
        # Line number of the most recently consumed line
        self.last_line_number = 0

    @property
    def strict(self) -> bool:
        return self.options.strict

    @property
    def expand_paths(self) -> bool:
        return self.options.expand_paths == "safe"

    def peek(self) -> ParsedLine | None:
        """Look at current line without advancing."""
        if self.pos < len(self.lines):
            return self.lines[self.pos]
        return None

    def advance(self) -> ParsedLine:
        """Consume the current line."""
        line = self.lines[self.pos]
        self.pos += 1
        self.last_line_number = line.line_number
        return line

    def first_blank_line_between(self, start: int, end: int) -> int | None:
        """Return the first blank line number strictly between two line numbers."""
        idx = bisect_right(self.blank_line_numbers, start)
        if idx < len(self.blank_line_numbers) and self.blank_line_numbers[idx] < end:
            return self.blank_line_numbers[idx]
        return None


def _decode_root(cursor: LineCursor) -> JsonValue:
    """Decode the root value: an array, a single primitive, or an object."""
    first = cursor.peek()

    parsed = _try_array_header(first.content, first)
    if parsed is not None and parsed[0].key is None:
        header, inline = parsed
        logger.debug("Decoding root array of declared length %d", header.length)
        cursor.advance()
        result = _decode_array(header, inline, cursor, first.depth, first)
        trailing = cursor.peek()
        if trailing is not None:
            if cursor.strict:
                raise ToonSyntaxError("Unexpected content after root array", trailing.line_number)
            logger.debug("Ignoring %d lines after root array", len(cursor.lines) - cursor.pos)
        return result

    if len(cursor.lines) == 1 and find_unquoted_colon(first.content) == -1:
        logger.debug("Decoding root primitive")
        return _parse_value(first.content, first)

    if find_unquoted_colon(first.content) == -1:
        # Several bare values with no keys: none of them is authoritative
        raise ToonSyntaxError("Expected key:value or array header at root", first.line_number)

    return _decode_object(cursor, -1)


def _decode_object(cursor: LineCursor, parent_depth: int) -> JsonObject:
    """Decode the fields at parent_depth + 1 into an object."""
    result: JsonObject = {}
    depth = parent_depth + 1

    while True:
        line = cursor.peek()
        if line is None or line.depth <= parent_depth:
            break

        if line.depth != depth:
            if cursor.strict:
                raise ToonSyntaxError(
                    f"Unexpected indentation: expected depth {depth}, got {line.depth}",
                    line.line_number,
                )
            logger.debug("Line %d: skipping line at unexpected depth %d", line.line_number, line.depth)
            cursor.advance()
            continue

        cursor.advance()
        key, quoted, value = _decode_key_value(line.content, line, cursor, depth)
        _insert(cursor, result, key, quoted, value, line)

    return result


def _decode_key_value(
    content: str, line: ParsedLine, cursor: LineCursor, depth: int
) -> tuple[str, bool, JsonValue]:
    """
    Decode a ``key: value`` or ``key[N]...:`` line.

    Returns:
        Tuple of (key, key_was_quoted, value).
    """
    parsed = _try_array_header(content, line)
    if parsed is not None and parsed[0].key is not None:
        header, inline = parsed
        value = _decode_array(header, inline, cursor, depth, line)
        return header.key, header.key_quoted, value

    colon_pos = find_unquoted_colon(content)
    if colon_pos == -1:
        raise MissingColonError("Expected colon in key:value", line.line_number)

    key, quoted = _parse_key(content[:colon_pos], line)
    rest = content[colon_pos + 1 :].strip()

    if rest:
        return key, quoted, _parse_value(rest, line)

    # Nested content, if any, starts on the next deeper line
    next_line = cursor.peek()
    if next_line is not None and next_line.depth > depth:
        return key, quoted, _decode_object(cursor, depth)
    return key, quoted, {}


def _decode_array(
    header: ArrayHeader,
    inline: str,
    cursor: LineCursor,
    depth: int,
    header_line: ParsedLine,
) -> list:
    """
    Decode an array body. The header sits at ``depth``; body lines at depth + 1.
    """
    if inline:
        return _decode_inline_values(inline, header, cursor, header_line)

    if header.fields:
        result = _decode_tabular_rows(header, cursor, depth + 1, header_line)
    else:
        result = _decode_list_items(header, cursor, depth + 1, header_line)

    if cursor.strict:
        blank = cursor.first_blank_line_between(header_line.line_number, cursor.last_line_number)
        if blank is not None:
            raise BlankLineInArrayError("Blank line inside array", blank)

    return result


def _decode_inline_values(
    values_str: str, header: ArrayHeader, cursor: LineCursor, line: ParsedLine
) -> list:
    """Decode values written on the header line."""
    tokens = split_by_delimiter(values_str, header.delimiter)

    if not header.fields:
        values = [_parse_value(t, line) for t in tokens]
        _check_length(cursor, header, len(values), line)
        return values

    # Inline tabular data is row-major
    width = len(header.fields)
    if len(tokens) != header.length * width:
        if cursor.strict:
            raise ArrayLengthMismatchError(
                f"Inline tabular length mismatch: expected {header.length * width} values, "
                f"got {len(tokens)}",
                line.line_number,
            )
        logger.debug("Line %d: accepting %d inline tabular values", line.line_number, len(tokens))

    rows = []
    for start in range(0, len(tokens), width):
        rows.append(_build_row(header.fields, tokens[start : start + width], line))
    return rows


def _decode_tabular_rows(
    header: ArrayHeader, cursor: LineCursor, depth: int, header_line: ParsedLine
) -> list[JsonObject]:
    """Decode tabular rows at the given depth."""
    fields = header.fields
    result = []

    while True:
        line = cursor.peek()
        if line is None or line.depth < depth:
            break

        if line.depth > depth:
            if cursor.strict:
                raise ToonSyntaxError("Unexpected indentation in tabular array", line.line_number)
            logger.debug("Line %d: skipping over-indented tabular line", line.line_number)
            cursor.advance()
            continue

        if not _is_data_row(line.content, header.delimiter):
            break

        cursor.advance()
        values = split_by_delimiter(line.content, header.delimiter)

        if len(values) != len(fields):
            if cursor.strict:
                raise RowWidthMismatchError(
                    f"Expected {len(fields)} values, got {len(values)}", line.line_number
                )
            logger.debug(
                "Line %d: fitting %d values to %d fields", line.line_number, len(values), len(fields)
            )

        result.append(_build_row(fields, values, line))

    _check_length(cursor, header, len(result), header_line)
    return result


def _build_row(fields: list[str], values: list[str], line: ParsedLine) -> JsonObject:
    """Pair field names with values, padding missing values with empty strings."""
    values = values[: len(fields)] + [""] * (len(fields) - len(values))
    return {field: _parse_value(value, line) for field, value in zip(fields, values)}


def _is_data_row(content: str, delimiter: Delimiter) -> bool:
    """
    Tell a tabular row from a key-value line.

    A row has no unquoted colon, or its first delimiter precedes the colon.
    """
    colon_pos = find_unquoted_colon(content)
    if colon_pos == -1:
        return True
    delimiter_pos = find_unquoted(content, delimiter)
    return delimiter_pos != -1 and delimiter_pos < colon_pos


def _is_list_item(content: str) -> bool:
    return content == LIST_ITEM_MARKER or content.startswith(LIST_ITEM_PREFIX)


def _decode_list_items(
    header: ArrayHeader, cursor: LineCursor, depth: int, header_line: ParsedLine
) -> list:
    """Decode list items (lines starting with -) at the given depth."""
    result = []

    while True:
        line = cursor.peek()
        if line is None or line.depth < depth:
            break

        if line.depth > depth:
            if cursor.strict:
                raise ToonSyntaxError("Unexpected indentation in list array", line.line_number)
            logger.debug("Line %d: skipping over-indented list line", line.line_number)
            cursor.advance()
            continue

        if not _is_list_item(line.content):
            break

        cursor.advance()
        result.append(_decode_list_item(line, cursor, depth))

    _check_length(cursor, header, len(result), header_line)
    return result


def _decode_list_item(line: ParsedLine, cursor: LineCursor, depth: int) -> JsonValue:
    """Decode a single list item whose hyphen sits at ``depth``."""
    if line.content == LIST_ITEM_MARKER:
        # Bare hyphen: an object whose fields follow at depth + 1, or an empty one
        next_line = cursor.peek()
        if next_line is not None and next_line.depth > depth:
            return _decode_object(cursor, depth)
        return {}

    item_content = line.content[len(LIST_ITEM_PREFIX) :].strip()

    parsed = _try_array_header(item_content, line)
    if parsed is not None:
        header, inline = parsed
        if header.key is None:
            return _decode_array(header, inline, cursor, depth, line)

        # Keyed array as first field on the hyphen line; its body may sit at
        # depth + 2 or directly at depth + 1
        next_line = cursor.peek()
        base_depth = depth
        if not inline and next_line is not None and next_line.depth == depth + 2:
            base_depth = depth + 1
        obj: JsonObject = {}
        value = _decode_array(header, inline, cursor, base_depth, line)
        _insert(cursor, obj, header.key, header.key_quoted, value, line)
        _decode_remaining_fields(cursor, obj, depth + 1)
        return obj

    if find_unquoted_colon(item_content) != -1:
        # Object with first field on hyphen line
        obj = {}
        key, quoted, value = _decode_key_value(item_content, line, cursor, depth + 1)
        _insert(cursor, obj, key, quoted, value, line)
        _decode_remaining_fields(cursor, obj, depth + 1)
        return obj

    return _parse_value(item_content, line)


def _decode_remaining_fields(cursor: LineCursor, obj: JsonObject, depth: int) -> None:
    """Decode the fields of a list-item object that follow the hyphen line."""
    while True:
        line = cursor.peek()
        if line is None or line.depth != depth or _is_list_item(line.content):
            break
        cursor.advance()
        key, quoted, value = _decode_key_value(line.content, line, cursor, depth)
        _insert(cursor, obj, key, quoted, value, line)


def _check_length(cursor: LineCursor, header: ArrayHeader, actual: int, line: ParsedLine) -> None:
    if actual == header.length:
        return
    if cursor.strict:
        raise ArrayLengthMismatchError(
            f"Array length mismatch: expected {header.length}, got {actual}", line.line_number
        )
    logger.debug(
        "Line %d: accepting %d items for declared length %d", line.line_number, actual, header.length
    )


def _insert(
    cursor: LineCursor,
    target: JsonObject,
    key: str,
    quoted: bool,
    value: JsonValue,
    line: ParsedLine,
) -> None:
    """
    Insert a decoded field, expanding dotted keys when path expansion is on.

    Quoted keys are never expanded.
    """
    if not cursor.expand_paths:
        target[key] = value
        return

    path = key.split(".") if not quoted and is_expandable_path(key) else [key]

    node = target
    for i, segment in enumerate(path[:-1]):
        if segment not in node:
            node[segment] = {}
        elif not isinstance(node[segment], dict):
            _expansion_conflict(cursor, ".".join(path[: i + 1]), line)
            node[segment] = {}
        node = node[segment]

    _merge_field(cursor, node, path[-1], value, key, line)


def _merge_field(
    cursor: LineCursor, node: JsonObject, key: str, value: JsonValue, path: str, line: ParsedLine
) -> None:
    """Set node[key], deep-merging objects that meet at the same path."""
    if key not in node:
        node[key] = value
        return

    existing = node[key]
    if isinstance(existing, dict) and isinstance(value, dict):
        for child_key, child_value in value.items():
            _merge_field(cursor, existing, child_key, child_value, f"{path}.{child_key}", line)
        return

    _expansion_conflict(cursor, path, line)
    node[key] = value


def _expansion_conflict(cursor: LineCursor, path: str, line: ParsedLine) -> None:
    if cursor.strict:
        raise PathExpansionConflictError(
            f"Path expansion conflict at '{path}'", line.line_number
        )
    logger.debug("Line %d: overwriting '%s' during path expansion", line.line_number, path)


def _try_array_header(content: str, line: ParsedLine) -> tuple[ArrayHeader, str] | None:
    try:
        return parse_array_header(content)
    except ToonDecodeError as exc:
        _annotate(exc, line)
        raise


def _parse_value(token: str, line: ParsedLine) -> JsonPrimitive:
    try:
        return parse_primitive(token)
    except ToonDecodeError as exc:
        _annotate(exc, line)
        raise


def _parse_key(token: str, line: ParsedLine) -> tuple[str, bool]:
    try:
        return parse_key(token)
    except ToonDecodeError as exc:
        _annotate(exc, line)
        raise


def _annotate(exc: ToonDecodeError, line: ParsedLine) -> None:
    if exc.line_number is None:
        exc.line_number = line.line_number
