"""Core type definitions for bodyguard.

This module defines the small vocabulary shared by every other module:
- JsonType: the value shape a property is expected to have
- ViolationCode: the kinds of violation the engine (and constraints) report
- ConditionScope: how long a condition token stays visible during a walk

It also provides the shape predicates used by the type check, which treat
native ints, floats and Decimals (produced when decoding with ``use_number``)
uniformly as JSON numbers.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class JsonType(str, Enum):
    """Expected JSON value shape of a property.

    ANY (or a missing type) skips the type check. INTEGER accepts any
    numeric value whose fractional part is zero (so ``1.0`` is an integer).
    """
    ANY = "any"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    @classmethod
    def parse(cls, value: Any) -> "JsonType":
        """Resolve a JsonType from its token (case-insensitive) or an existing member."""
        if isinstance(value, JsonType):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown JSON type {value!r} - expected one of: "
            f"{', '.join(t.value for t in cls)}"
        )


class ViolationCode(str, Enum):
    """Kinds of violation.

    Structural codes (decoding and top-level shape) are always reported with
    ``bad_request=True``.
    """
    UNABLE_TO_DECODE = "unable_to_decode"
    NOT_JSON_NULL = "not_json_null"
    NOT_JSON_ARRAY = "not_json_array"
    NOT_JSON_OBJECT = "not_json_object"
    EXPECTED_JSON_ARRAY = "expected_json_array"
    EXPECTED_JSON_OBJECT = "expected_json_object"
    MISSING_PROPERTY = "missing_property"
    UNWANTED_PROPERTY = "unwanted_property"
    UNKNOWN_PROPERTY = "unknown_property"
    INVALID_PROPERTY_NAME = "invalid_property_name"
    NULL_VALUE = "null_value"
    TYPE_MISMATCH = "type_mismatch"
    NULL_ARRAY_ELEMENT = "null_array_element"
    ARRAY_ELEMENT_MUST_BE_OBJECT = "array_element_must_be_object"
    VALUE_MUST_BE_OBJECT = "value_must_be_object"
    VALUE_MUST_BE_ARRAY = "value_must_be_array"
    VALUE_MUST_BE_OBJECT_OR_ARRAY = "value_must_be_object_or_array"
    OBJECT_VALIDATOR_MISCONFIGURED = "object_validator_misconfigured"
    CONSTRAINT_FAILED = "constraint_failed"
    CONSTRAINT_ERROR = "constraint_error"

    @property
    def is_structural(self) -> bool:
        return self in _STRUCTURAL_CODES


_STRUCTURAL_CODES = frozenset({
    ViolationCode.UNABLE_TO_DECODE,
    ViolationCode.NOT_JSON_NULL,
    ViolationCode.NOT_JSON_ARRAY,
    ViolationCode.NOT_JSON_OBJECT,
    ViolationCode.EXPECTED_JSON_ARRAY,
    ViolationCode.EXPECTED_JSON_OBJECT,
})


class ConditionScope(str, Enum):
    """Visibility of a condition token set during a walk.

    LOCAL tokens vanish when the current path frame is popped, PARENT tokens
    when the parent frame is popped, GLOBAL tokens live until the walk ends.
    """
    LOCAL = "local"
    PARENT = "parent"
    GLOBAL = "global"


def is_json_number(value: Any) -> bool:
    """Whether a decoded value is a JSON number (booleans are not numbers)."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_json_integer(value: Any) -> bool:
    """Whether a decoded value is a JSON number with a zero fractional part.

    Examples:
        >>> is_json_integer(3), is_json_integer(3.0), is_json_integer(Decimal("0.1e1"))
        (True, True, True)
        >>> is_json_integer(3.5)
        False
    """
    if not is_json_number(value):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return value.is_finite() and value == value.to_integral_value()


def check_json_type(value: Any, json_type: Optional[JsonType]) -> bool:
    """Check that a decoded JSON value has the shape described by json_type.

    Args:
        value: A decoded JSON value (dict, list, str, number, bool or None)
        json_type: The expected shape; None or JsonType.ANY always passes

    Returns:
        True if the value matches the expected shape
    """
    if json_type is None or json_type == JsonType.ANY:
        return True
    if json_type == JsonType.STRING:
        return isinstance(value, str)
    if json_type == JsonType.BOOLEAN:
        return isinstance(value, bool)
    if json_type == JsonType.NUMBER:
        return is_json_number(value)
    if json_type == JsonType.INTEGER:
        return is_json_integer(value)
    if json_type == JsonType.OBJECT:
        return isinstance(value, dict)
    if json_type == JsonType.ARRAY:
        return isinstance(value, list)
    return True


__all__ = [
    "JsonType",
    "ViolationCode",
    "ConditionScope",
    "is_json_number",
    "is_json_integer",
    "check_json_type",
]
