"""Type definitions for the TOON encoder/decoder."""

from dataclasses import dataclass, field
from typing import Literal

# JSON type aliases
JsonPrimitive = str | int | float | bool | None
JsonArray = list["JsonValue"]
JsonObject = dict[str, "JsonValue"]
JsonValue = JsonPrimitive | JsonArray | JsonObject

# Delimiter options
Delimiter = Literal[",", "\t", "|"]

COMMA: Delimiter = ","
TAB: Delimiter = "\t"
PIPE: Delimiter = "|"
DEFAULT_DELIMITER: Delimiter = COMMA

DELIMITERS: dict[str, Delimiter] = {"comma": COMMA, "tab": TAB, "pipe": PIPE}

FoldingMode = Literal["off", "safe"]

_MODES = ("off", "safe")


def _resolve_delimiter(value: str) -> Delimiter:
    if value in DELIMITERS:
        return DELIMITERS[value]
    if value in DELIMITERS.values():
        return value  # type: ignore[return-value]
    raise ValueError(f"Unsupported delimiter: {value!r}")


@dataclass(frozen=True)
class EncodeOptions:
    """Options for TOON encoding."""

    indent: int = 2
    """Number of spaces per indentation level."""

    delimiter: Delimiter = DEFAULT_DELIMITER
    """Document delimiter for inline arrays, tabular rows and quoting decisions."""

    key_folding: FoldingMode = "off"
    """Whether to fold nested object chains into dotted keys."""

    flatten_depth: int | None = None
    """Maximum number of segments in a folded key. None means unlimited."""

    def __post_init__(self) -> None:
        if self.indent < 1:
            raise ValueError(f"indent must be a positive integer, got {self.indent}")
        object.__setattr__(self, "delimiter", _resolve_delimiter(self.delimiter))
        if self.key_folding not in _MODES:
            raise ValueError(f"key_folding must be 'off' or 'safe', got {self.key_folding!r}")
        if self.flatten_depth is not None and self.flatten_depth < 0:
            raise ValueError(f"flatten_depth must be non-negative, got {self.flatten_depth}")


@dataclass(frozen=True)
class DecodeOptions:
    """Options for TOON decoding."""

    indent: int = 2
    """Expected indentation size."""

    strict: bool = True
    """Enable strict validation (counts, row widths, blank lines, indentation)."""

    expand_paths: FoldingMode = "off"
    """Expand dotted keys into nested objects."""

    def __post_init__(self) -> None:
        if self.indent < 1:
            raise ValueError(f"indent must be a positive integer, got {self.indent}")
        if isinstance(self.expand_paths, bool):
            object.__setattr__(self, "expand_paths", "safe" if self.expand_paths else "off")
        if self.expand_paths not in _MODES:
            raise ValueError(f"expand_paths must be 'off' or 'safe', got {self.expand_paths!r}")


@dataclass(frozen=True)
class ParsedLine:
    """A non-blank source line with indentation info."""

    raw: str
    """Original line content."""

    content: str
    """Content after stripping indentation and trailing whitespace."""

    indent: int
    """Number of leading spaces."""

    depth: int
    """Indentation level (indent / indent_size)."""

    line_number: int
    """1-based line number."""


@dataclass(frozen=True)
class BlankLine:
    """A whitespace-only source line."""

    line_number: int
    indent: int
    depth: int


@dataclass
class ScanResult:
    """Structural lines plus the blank lines found between them."""

    lines: list[ParsedLine] = field(default_factory=list)
    blank_lines: list[BlankLine] = field(default_factory=list)


@dataclass
class ArrayHeader:
    """Parsed array header information."""

    length: int
    """Declared array length."""

    key: str | None = None
    """Key preceding the bracket, if any."""

    delimiter: Delimiter = DEFAULT_DELIMITER
    """Active delimiter for this array's values."""

    fields: list[str] | None = None
    """Field names for tabular format (None for non-tabular)."""

    key_quoted: bool = False
    """Whether the key was written as a quoted string."""
