"""Normalization of Python values into the JSON data model."""

import dataclasses
import math
import numbers
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from .types import JsonValue


def normalize(value: Any) -> JsonValue:
    """
    Normalize a value for JSON compatibility.

    Converts:
    - NaN and +/-Infinity to None, -0.0 to 0.0
    - Mappings, named tuples and dataclass instances to dicts
    - Tuples, sets and other iterables to lists
    - Date/time objects to ISO strings

    Anything else is converted with ``str()``.

    Args:
        value: The value to normalize.

    Returns:
        A JSON-compatible value.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        return value

    if isinstance(value, str):
        return value

    if isinstance(value, numbers.Integral):
        return int(value)

    if isinstance(value, Decimal):
        return _normalize_decimal(value)

    if isinstance(value, numbers.Real):
        return _normalize_float(float(value))

    if isinstance(value, Mapping):
        return {str(k): normalize(v) for k, v in value.items()}

    # Named tuples are objects, not arrays
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return {str(k): normalize(v) for k, v in value._asdict().items()}

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: normalize(getattr(value, f.name)) for f in dataclasses.fields(value)}

    if isinstance(value, (list, tuple)):
        return [normalize(v) for v in value]

    if isinstance(value, (set, frozenset)):
        return [normalize(v) for v in sorted(value, key=str)]

    if hasattr(value, "isoformat"):
        return value.isoformat()

    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [normalize(v) for v in value]

    # Last resort: string conversion
    return str(value)


def _normalize_float(value: float) -> float | None:
    if math.isnan(value) or math.isinf(value):
        return None
    # -0.0 == 0.0, so this also clears the sign bit
    if value == 0.0:
        return 0.0
    return value


def _normalize_decimal(value: Decimal) -> int | float | None:
    if not value.is_finite():
        return None
    if value == value.to_integral_value():
        return int(value)
    return _normalize_float(float(value))


def is_primitive(value: JsonValue) -> bool:
    """Check if value is a primitive (not dict or list)."""
    return not isinstance(value, (dict, list))


def is_array_of_primitives(arr: list) -> bool:
    return all(is_primitive(v) for v in arr)


def is_array_of_arrays(arr: list) -> bool:
    return all(isinstance(v, list) for v in arr)


def is_tabular_array(arr: list) -> bool:
    """
    Check if an array qualifies for tabular format.

    All elements must be non-empty objects with the same key set, and every
    value must be a primitive.
    """
    if not arr or not all(isinstance(v, dict) for v in arr):
        return False

    first_keys = set(arr[0].keys())
    if not first_keys:
        return False

    for item in arr:
        if set(item.keys()) != first_keys:
            return False
        if not all(is_primitive(v) for v in item.values()):
            return False

    return True
