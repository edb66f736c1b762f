"""Primitive value encoding and parsing for TOON."""

from decimal import Decimal
from typing import TYPE_CHECKING

from .errors import ToonSyntaxError, UnterminatedStringError
from .string_utils import (
    FALSE_LITERAL,
    NULL_LITERAL,
    TRUE_LITERAL,
    escape_string,
    find_closing_quote,
    has_leading_zeros,
    is_numeric_literal,
    is_valid_unquoted_key,
    needs_quoting,
    unescape_string,
)
from .types import COMMA, DEFAULT_DELIMITER

if TYPE_CHECKING:
    from .types import Delimiter, JsonPrimitive


def encode_primitive(value: "JsonPrimitive", delimiter: "Delimiter" = DEFAULT_DELIMITER) -> str:
    """
    Encode a primitive value to TOON format.

    Args:
        value: The primitive value (str, int, float, bool, or None).
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded string representation.
    """
    if value is None:
        return NULL_LITERAL

    if isinstance(value, bool):
        return TRUE_LITERAL if value else FALSE_LITERAL

    if isinstance(value, (int, float)):
        return encode_number(value)

    if isinstance(value, str):
        return encode_string_literal(value, delimiter)

    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def encode_number(value: int | float) -> str:
    """
    Encode a number in canonical decimal form.

    Integers are written as-is. Floats never use exponent notation, carry no
    trailing fractional zeros, and collapse to an integer when whole.
    """
    if isinstance(value, int):
        return str(value)

    if value.is_integer():
        return str(int(value))

    # repr gives the shortest round-tripping digits; Decimal expands any exponent
    s = format(Decimal(repr(value)), "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def encode_string_literal(value: str, delimiter: "Delimiter" = DEFAULT_DELIMITER) -> str:
    """
    Encode a string value, with or without quotes.

    Args:
        value: The string to encode.
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded string (quoted if necessary).
    """
    if needs_quoting(value, delimiter):
        return f'"{escape_string(value)}"'
    return value


def encode_key(key: str) -> str:
    """Encode an object key, quoting it unless it is a plain identifier-like key."""
    if is_valid_unquoted_key(key):
        return key
    return f'"{escape_string(key)}"'


def format_array_header(
    length: int,
    key: str | None = None,
    fields: list[str] | None = None,
    delimiter: "Delimiter" = DEFAULT_DELIMITER,
) -> str:
    """
    Format an array header.

    Args:
        length: The array length.
        key: Optional key name (None for root arrays or list items).
        fields: Optional field names for tabular format.
        delimiter: The delimiter (included in bracket if not comma).

    Returns:
        The formatted header string, ending with a colon.
    """
    if delimiter == COMMA:
        bracket = f"[{length}]"
    else:
        bracket = f"[{length}{delimiter}]"

    fields_part = ""
    if fields:
        fields_part = "{" + delimiter.join(encode_key(f) for f in fields) + "}"

    prefix = encode_key(key) if key is not None else ""
    return f"{prefix}{bracket}{fields_part}:"


def parse_primitive(token: str) -> "JsonPrimitive":
    """
    Parse a primitive token to a Python value.

    Handles: null, true, false, numbers, quoted strings, unquoted strings.

    Args:
        token: The token string.

    Returns:
        The parsed Python value.

    Raises:
        UnterminatedStringError: For a quoted string without a closing quote.
        InvalidEscapeError: For bad escape sequences inside quotes.
    """
    token = token.strip()

    # Empty token is empty string
    if not token:
        return ""

    if token.startswith('"'):
        return parse_string_literal(token)

    if token == NULL_LITERAL:
        return None
    if token == TRUE_LITERAL:
        return True
    if token == FALSE_LITERAL:
        return False

    if is_numeric_literal(token) and not has_leading_zeros(token):
        return _parse_number(token)

    # Unquoted string
    return token


def parse_string_literal(token: str) -> str:
    """
    Parse a quoted string literal.

    Args:
        token: The token starting with '"'.

    Returns:
        The unescaped string content.
    """
    end = find_closing_quote(token, 0)
    if end == -1:
        raise UnterminatedStringError(f"Unterminated string: {token}")
    if end != len(token) - 1:
        raise ToonSyntaxError(f"Unexpected characters after closing quote: {token}")
    return unescape_string(token[1:end])


def parse_key(token: str) -> tuple[str, bool]:
    """
    Parse a key, handling quoted keys.

    Args:
        token: The key text (possibly quoted).

    Returns:
        Tuple of (key, was_quoted).
    """
    token = token.strip()
    if token.startswith('"'):
        return parse_string_literal(token), True
    return token, False


def _parse_number(token: str) -> int | float:
    if "." not in token and "e" not in token.lower():
        return int(token)

    value = float(token)
    # Normalize -0 to 0
    if value == 0.0:
        return 0.0
    return value
