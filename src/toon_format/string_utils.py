"""String utilities for TOON encoding/decoding."""

import re
from typing import TYPE_CHECKING

from .errors import InvalidEscapeError

if TYPE_CHECKING:
    from .types import Delimiter

# TOON only allows these 5 escape sequences
ESCAPE_MAP = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

UNESCAPE_MAP = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

TRUE_LITERAL = "true"
FALSE_LITERAL = "false"
NULL_LITERAL = "null"

# Reserved literals that can't be unquoted strings
RESERVED_LITERALS = frozenset({TRUE_LITERAL, FALSE_LITERAL, NULL_LITERAL})

# Structural characters that require quoting
STRUCTURAL_CHARS = frozenset(':"\\[]{}')

LIST_ITEM_MARKER = "-"
LIST_ITEM_PREFIX = "- "

NUMERIC_PATTERN = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
LEADING_ZERO_PATTERN = re.compile(r"-?0[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")

# Keys matching this pattern are written without quotes
UNQUOTED_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")

# Pattern for valid identifier segments (used in key folding/path expansion)
IDENTIFIER_SEGMENT_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def escape_string(value: str) -> str:
    """
    Escape a string for use in TOON quoted strings.

    Only the 5 valid TOON escape sequences are produced:
    - \\\\ (backslash)
    - \\" (double quote)
    - \\n (newline)
    - \\r (carriage return)
    - \\t (tab)

    Args:
        value: The string to escape.

    Returns:
        The escaped string (without surrounding quotes).
    """
    return "".join(ESCAPE_MAP.get(char, char) for char in value)


def unescape_string(value: str) -> str:
    """
    Unescape the content of a TOON quoted string.

    Args:
        value: The string content (without surrounding quotes).

    Returns:
        The unescaped string.

    Raises:
        InvalidEscapeError: If an invalid escape sequence is found or the
            string ends with a lone backslash.
    """
    result = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\":
            if i + 1 >= len(value):
                raise InvalidEscapeError("Backslash at end of string")
            next_char = value[i + 1]
            if next_char not in UNESCAPE_MAP:
                raise InvalidEscapeError(f"Invalid escape sequence: \\{next_char}")
            result.append(UNESCAPE_MAP[next_char])
            i += 2
        else:
            result.append(char)
            i += 1
    return "".join(result)


def is_numeric_literal(value: str) -> bool:
    """Check if a string matches the TOON number grammar."""
    return NUMERIC_PATTERN.fullmatch(value) is not None


def has_leading_zeros(value: str) -> bool:
    """Check for a forbidden leading zero such as ``007``, ``-01`` or ``00.5``."""
    return LEADING_ZERO_PATTERN.fullmatch(value) is not None


def is_boolean_or_null_literal(value: str) -> bool:
    """Check if a string is ``true``, ``false`` or ``null``."""
    return value in RESERVED_LITERALS


def _has_control_char(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in value)


def needs_quoting(value: str, delimiter: "Delimiter" = ",") -> bool:
    """
    Check if a string value must be quoted.

    A string must be quoted if it:
    - Is empty
    - Has leading/trailing whitespace
    - Is a boolean/null literal or looks like a number
    - Contains structural chars (: " \\ [ ] { })
    - Contains control characters
    - Contains the active delimiter
    - Starts with '-' (list marker)

    Args:
        value: The string to check.
        delimiter: The active delimiter character.

    Returns:
        True if the string needs quotes.
    """
    if not value:
        return True

    if value != value.strip():
        return True

    if is_boolean_or_null_literal(value):
        return True

    if is_numeric_literal(value) or has_leading_zeros(value):
        return True

    if any(c in STRUCTURAL_CHARS for c in value):
        return True

    if _has_control_char(value):
        return True

    if delimiter in value:
        return True

    return value.startswith(LIST_ITEM_MARKER)


def is_valid_unquoted_key(key: str) -> bool:
    """Check if an object key can be written without quotes."""
    return UNQUOTED_KEY_PATTERN.fullmatch(key) is not None


def is_safe_identifier(segment: str) -> bool:
    """
    Check if a string is a safe identifier for key folding and path expansion.

    Safe identifiers contain no dots, start with a letter or underscore and
    continue with letters, digits or underscores.
    """
    return IDENTIFIER_SEGMENT_PATTERN.fullmatch(segment) is not None


def is_expandable_path(key: str) -> bool:
    """Check if a key is a dotted path whose segments are all safe identifiers."""
    if "." not in key:
        return False
    return all(is_safe_identifier(seg) for seg in key.split("."))


def find_closing_quote(s: str, start: int) -> int:
    """
    Find the closing quote in a string.

    Args:
        s: The string to search.
        start: The position of the opening quote.

    Returns:
        Index of the closing quote, or -1 if not found.
    """
    i = start + 1
    while i < len(s):
        char = s[i]
        if char == "\\":
            # Skip escape sequence
            i += 2
            continue
        if char == '"':
            return i
        i += 1
    return -1


def find_unquoted(line: str, target: str, start: int = 0) -> int:
    """
    Find the first occurrence of a character outside quoted sections.

    Args:
        line: The line to search.
        target: The single character to look for.
        start: Position to start searching from.

    Returns:
        Index of the character, or -1 if not found.
    """
    in_quotes = False
    i = start
    while i < len(line):
        char = line[i]
        if char == "\\" and in_quotes and i + 1 < len(line):
            # Skip escape sequence
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
        elif char == target and not in_quotes:
            return i
        i += 1
    return -1


def find_unquoted_colon(line: str) -> int:
    """Find the position of the first unquoted colon in a line, or -1."""
    return find_unquoted(line, ":")


def split_by_delimiter(value: str, delimiter: "Delimiter") -> list[str]:
    """
    Split a string by delimiter, respecting quoted sections.

    Args:
        value: The string to split.
        delimiter: The delimiter character.

    Returns:
        List of trimmed tokens (still containing quotes if originally quoted).
    """
    result = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(value):
        char = value[i]
        if char == "\\" and in_quotes and i + 1 < len(value):
            # Keep escape sequence intact
            current.append(char)
            current.append(value[i + 1])
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == delimiter and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    # Add the last segment
    result.append("".join(current).strip())
    return result
