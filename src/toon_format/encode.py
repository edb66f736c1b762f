"""TOON encoder implementation."""

import logging
import math
from typing import Any

from .normalize import (
    is_array_of_arrays,
    is_array_of_primitives,
    is_primitive,
    is_tabular_array,
    normalize,
)
from .primitives import encode_key, encode_primitive, format_array_header
from .string_utils import LIST_ITEM_MARKER, LIST_ITEM_PREFIX, is_safe_identifier
from .types import EncodeOptions, JsonObject, JsonValue

logger = logging.getLogger(__name__)

# Folding budget for array elements and anything below them
NO_FOLDING = 0


class LineWriter:
    """Accumulates indented output lines for a single encode call."""

    def __init__(self, indent: int):
        self.indent = indent
        self.lines: list[str] = []

    def push(self, depth: int, content: str) -> None:
        self.lines.append(" " * (self.indent * depth) + content)


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """
    Encode a Python value to TOON format.

    Args:
        value: The value to encode (dict, list, or primitive).
        options: Encoding options.

    Returns:
        The TOON-formatted string, without a trailing newline.
    """
    return "\n".join(encode_lines(value, options))


def encode_lines(value: Any, options: EncodeOptions | None = None) -> list[str]:
    """
    Encode a Python value to TOON format, one list entry per output line.

    Args:
        value: The value to encode.
        options: Encoding options.

    Returns:
        Lines of TOON output. An empty object produces no lines.
    """
    opts = options or EncodeOptions()
    normalized = normalize(value)

    # Root form detection
    if is_primitive(normalized):
        return [encode_primitive(normalized, opts.delimiter)]

    writer = LineWriter(opts.indent)
    if isinstance(normalized, list):
        _encode_array(None, normalized, writer, 0, opts)
    else:
        _encode_object(normalized, writer, 0, opts, _folding_budget(opts))

    logger.debug("Encoded %s into %d lines", type(normalized).__name__, len(writer.lines))
    return writer.lines


def _folding_budget(opts: EncodeOptions) -> float:
    if opts.key_folding != "safe":
        return NO_FOLDING
    if opts.flatten_depth is None:
        return math.inf
    return opts.flatten_depth


def _encode_object(
    obj: JsonObject, writer: LineWriter, depth: int, opts: EncodeOptions, budget: float
) -> None:
    """
    Encode an object's key-value pairs.

    ``budget`` is the maximum number of segments a folded key may have here;
    anything below 2 disables folding.
    """
    sibling_keys = set(obj)
    for key, value in obj.items():
        _encode_field((key,), value, writer, depth, opts, budget, sibling_keys)


def _encode_field(
    path: tuple[str, ...],
    value: JsonValue,
    writer: LineWriter,
    depth: int,
    opts: EncodeOptions,
    budget: float,
    sibling_keys: set[str],
) -> None:
    """Encode one field. ``path`` holds more than one segment while folding."""
    key = ".".join(path)

    if isinstance(value, list):
        _encode_array(key, value, writer, depth, opts)
    elif isinstance(value, dict):
        if _can_fold(path, value, sibling_keys, budget):
            for child_key, child_value in value.items():
                _encode_field(path + (child_key,), child_value, writer, depth, opts, budget, sibling_keys)
            return
        writer.push(depth, f"{encode_key(key)}:")
        # Segments already folded into this key count against the nested block
        _encode_object(value, writer, depth + 1, opts, budget - (len(path) - 1))
    else:
        writer.push(depth, f"{encode_key(key)}: {encode_primitive(value, opts.delimiter)}")


def _can_fold(
    path: tuple[str, ...],
    value: JsonObject,
    sibling_keys: set[str],
    budget: float,
) -> bool:
    """Check if an object value can be merged into its parent as dotted keys."""
    if not value or len(path) >= budget:
        return False

    if not all(is_safe_identifier(segment) for segment in path):
        return False

    if not all(is_safe_identifier(child_key) for child_key in value):
        return False

    # Folded keys must not collide with literal sibling keys
    prefix = ".".join(path)
    return not any(f"{prefix}.{child_key}" in sibling_keys for child_key in value)


def _encode_array(
    key: str | None,
    arr: list,
    writer: LineWriter,
    depth: int,
    opts: EncodeOptions,
    marker: str = "",
) -> None:
    """
    Encode an array with the best format.

    ``marker`` is prepended to the header line when the array is a list item.
    """
    delimiter = opts.delimiter

    if not arr:
        writer.push(depth, marker + format_array_header(0, key, delimiter=delimiter))
    elif is_array_of_primitives(arr):
        header = format_array_header(len(arr), key, delimiter=delimiter)
        values = delimiter.join(encode_primitive(v, delimiter) for v in arr)
        writer.push(depth, f"{marker}{header} {values}")
    elif is_tabular_array(arr):
        fields = list(arr[0].keys())
        writer.push(depth, marker + format_array_header(len(arr), key, fields, delimiter))
        for row in arr:
            _encode_tabular_row(row, fields, writer, depth + 1, opts)
    elif is_array_of_arrays(arr) and all(is_array_of_primitives(inner) for inner in arr):
        writer.push(depth, marker + format_array_header(len(arr), key, delimiter=delimiter))
        for inner in arr:
            _encode_array(None, inner, writer, depth + 1, opts, marker=LIST_ITEM_PREFIX)
    else:
        writer.push(depth, marker + format_array_header(len(arr), key, delimiter=delimiter))
        for item in arr:
            _encode_list_item(item, writer, depth + 1, opts)


def _encode_tabular_row(
    row: JsonObject, fields: list[str], writer: LineWriter, depth: int, opts: EncodeOptions
) -> None:
    values = [encode_primitive(row[f], opts.delimiter) for f in fields]
    writer.push(depth, opts.delimiter.join(values))


def _encode_list_item(item: JsonValue, writer: LineWriter, depth: int, opts: EncodeOptions) -> None:
    """Encode a list item (a line starting with the - marker)."""
    if isinstance(item, list):
        _encode_array(None, item, writer, depth, opts, marker=LIST_ITEM_PREFIX)
    elif isinstance(item, dict):
        _encode_object_list_item(item, writer, depth, opts)
    else:
        writer.push(depth, LIST_ITEM_PREFIX + encode_primitive(item, opts.delimiter))


def _encode_object_list_item(obj: JsonObject, writer: LineWriter, depth: int, opts: EncodeOptions) -> None:
    """
    Encode an object as a list item.

    The first field goes on the hyphen line and the rest follow at depth + 1.
    When the first value is an array, the hyphen stands alone and every field
    (array first) is written at depth + 1.
    """
    if not obj:
        writer.push(depth, LIST_ITEM_MARKER)
        return

    items = list(obj.items())
    first_key, first_value = items[0]

    if isinstance(first_value, list):
        writer.push(depth, LIST_ITEM_MARKER)
        remaining = items
    elif isinstance(first_value, dict):
        writer.push(depth, f"{LIST_ITEM_PREFIX}{encode_key(first_key)}:")
        _encode_object(first_value, writer, depth + 2, opts, NO_FOLDING)
        remaining = items[1:]
    else:
        encoded_value = encode_primitive(first_value, opts.delimiter)
        writer.push(depth, f"{LIST_ITEM_PREFIX}{encode_key(first_key)}: {encoded_value}")
        remaining = items[1:]

    for key, value in remaining:
        _encode_field((key,), value, writer, depth + 1, opts, NO_FOLDING, set())
