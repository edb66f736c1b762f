"""
TOON (Token-Oriented Object Notation) - Python Implementation

A line-oriented, indentation-based encoding of the JSON data model that uses
minimal quoting and explicit array lengths, and round-trips exactly.

Usage:
    import toon_format

    # Encode Python data to TOON
    data = {"name": "Alice", "age": 30}
    encoded = toon_format.encode(data)

    # Decode TOON to Python data
    decoded = toon_format.decode(encoded)

    # With options
    from toon_format import EncodeOptions, DecodeOptions

    encoded = toon_format.encode(data, EncodeOptions(indent=4, key_folding="safe"))
    decoded = toon_format.decode(text, DecodeOptions(strict=False, expand_paths="safe"))
"""

__version__ = "0.1.0"

from .decode import decode, decode_lines
from .encode import encode, encode_lines
from .errors import (
    ArrayLengthMismatchError,
    BlankLineInArrayError,
    InvalidEscapeError,
    InvalidIndentationError,
    MissingColonError,
    PathExpansionConflictError,
    RowWidthMismatchError,
    ToonDecodeError,
    ToonError,
    ToonSyntaxError,
    UnterminatedStringError,
)
from .normalize import normalize
from .scanner import parse_array_header, scan
from .string_utils import (
    escape_string,
    find_unquoted,
    is_boolean_or_null_literal,
    is_numeric_literal,
    is_safe_identifier,
    needs_quoting,
    split_by_delimiter,
    unescape_string,
)
from .types import COMMA, PIPE, TAB, DecodeOptions, EncodeOptions, JsonValue

__all__ = [
    # Version
    "__version__",
    # Main API
    "encode",
    "encode_lines",
    "decode",
    "decode_lines",
    "normalize",
    # Options
    "EncodeOptions",
    "DecodeOptions",
    # Types and constants
    "JsonValue",
    "COMMA",
    "TAB",
    "PIPE",
    # Lexical utilities
    "escape_string",
    "unescape_string",
    "needs_quoting",
    "is_safe_identifier",
    "is_numeric_literal",
    "is_boolean_or_null_literal",
    "find_unquoted",
    "split_by_delimiter",
    "scan",
    "parse_array_header",
    # Errors
    "ToonError",
    "ToonDecodeError",
    "ToonSyntaxError",
    "InvalidIndentationError",
    "MissingColonError",
    "ArrayLengthMismatchError",
    "RowWidthMismatchError",
    "InvalidEscapeError",
    "UnterminatedStringError",
    "BlankLineInArrayError",
    "PathExpansionConflictError",
]
