"""Line scanning and array header parsing for the TOON decoder."""

import re
from collections.abc import Iterable

from .errors import InvalidIndentationError
from .primitives import parse_key
from .string_utils import split_by_delimiter
from .types import DEFAULT_DELIMITER, ArrayHeader, BlankLine, ParsedLine, ScanResult

# Pattern for array header: key[N<delim?>]{fields}:
ARRAY_HEADER_PATTERN = re.compile(
    r"^(?P<key>\"(?:[^\"\\]|\\.)*\"|[^:\[\]{}\"]*)"  # Optional key (possibly quoted)
    r"\[(?P<length>\d+)(?P<delim>[,\t|])?\]"  # [N<delim?>]
    r"(?:\{(?P<fields>(?:[^}\"]|\"(?:[^\"\\]|\\.)*\")*)\})?"  # Optional {fields}
    r":(?P<rest>.*)$"  # Colon and rest
)


def scan(text: str, indent_size: int = 2, strict: bool = True) -> ScanResult:
    """
    Split TOON text into depth-tagged lines.

    Args:
        text: The TOON document.
        indent_size: Spaces per indentation level.
        strict: Reject tabs in indentation and partial indentation levels.

    Returns:
        The structural lines and the blank lines between them.

    Raises:
        InvalidIndentationError: In strict mode, for bad indentation.
    """
    return scan_lines(text.split("\n"), indent_size, strict)


def scan_lines(lines: Iterable[str], indent_size: int = 2, strict: bool = True) -> ScanResult:
    """Scan pre-split lines. See :func:`scan`."""
    result = ScanResult()

    for i, raw in enumerate(lines, start=1):
        # Count leading spaces
        indent = len(raw) - len(raw.lstrip(" "))

        if not raw.strip():
            if strict and indent % indent_size != 0:
                raise InvalidIndentationError(
                    f"Indentation {indent} is not a multiple of {indent_size}", i
                )
            result.blank_lines.append(BlankLine(line_number=i, indent=indent, depth=indent // indent_size))
            continue

        # Leading whitespace run, which may include tabs
        body = raw.lstrip(" \t")
        leading = raw[: len(raw) - len(body)]

        if strict:
            if "\t" in leading:
                raise InvalidIndentationError("Tab in indentation (use spaces)", i)
            if indent % indent_size != 0:
                raise InvalidIndentationError(
                    f"Indentation {indent} is not a multiple of {indent_size}", i
                )

        result.lines.append(
            ParsedLine(
                raw=raw,
                content=body.rstrip(" \r"),
                indent=indent,
                depth=indent // indent_size,
                line_number=i,
            )
        )

    return result


def parse_array_header(content: str) -> tuple[ArrayHeader, str] | None:
    """
    Try to parse an array header such as ``key[3|]{a|b}: ...``.

    Args:
        content: Line content (indentation and list marker already removed).

    Returns:
        Tuple of (header, inline content after the colon), or None when the
        content is not an array header.
    """
    match = ARRAY_HEADER_PATTERN.match(content)
    if not match:
        return None

    key_token = match.group("key").strip()
    key: str | None = None
    key_quoted = False
    if key_token:
        key, key_quoted = parse_key(key_token)

    delimiter = match.group("delim") or DEFAULT_DELIMITER

    fields = None
    fields_str = match.group("fields")
    if fields_str:
        fields = [parse_key(f)[0] for f in split_by_delimiter(fields_str, delimiter)]

    header = ArrayHeader(
        length=int(match.group("length")),
        key=key,
        delimiter=delimiter,
        fields=fields,
        key_quoted=key_quoted,
    )
    return header, match.group("rest").strip()
