"""Exceptions raised by the TOON decoder."""


class ToonError(Exception):
    """Base class for all toon_format errors."""


class ToonDecodeError(ToonError, ValueError):
    """Malformed TOON input.

    ``line_number`` is the 1-based source line the error was detected on, when known.
    """

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Line {self.line_number}: {self.message}"


class ToonSyntaxError(ToonDecodeError):
    """Grammar violation not covered by a more specific error."""


class InvalidIndentationError(ToonDecodeError):
    """Indentation is not a multiple of the indent size, or uses tabs."""


class MissingColonError(ToonDecodeError):
    """A key line or array header has no colon."""


class ArrayLengthMismatchError(ToonDecodeError):
    """The number of decoded items differs from the declared array length."""


class RowWidthMismatchError(ToonDecodeError):
    """A tabular row has a different number of values than the header has fields."""


class InvalidEscapeError(ToonDecodeError):
    """A quoted string contains an unsupported escape sequence."""


class UnterminatedStringError(ToonDecodeError):
    """A quoted string is missing its closing quote."""


class BlankLineInArrayError(ToonDecodeError):
    """A blank line appears inside an array body."""


class PathExpansionConflictError(ToonDecodeError):
    """Expanding a dotted key would overwrite an incompatible value."""
