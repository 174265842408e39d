"""Schema types: Validator, PropertyValidator and their companions.

A Validator describes the expected shape of one JSON object (or, with
``allow_array``, of an array of such objects). Each named property is
described by a PropertyValidator, which may in turn nest a Validator for
object or array values.

Schemas are frozen dataclasses. They are built once (by hand or by
``bodyguard.loader``) and may then be shared freely between validations
and threads; validating never mutates them. Others-expressions
(``required_with`` / ``unwanted_with``) and type tokens given as text are
parsed when the schema is constructed, so malformed schemas fail early
with a SchemaError.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bodyguard.errors import SchemaError
from bodyguard.expressions import OthersExpr, parse_expression
from bodyguard.types import JsonType


@dataclass(frozen=True)
class OasInfo:
    """OpenAPI documentation metadata (not used by validation).

    Attributes:
        description: Description of the property or object
        title: Title of the property or object
        format: Format hint (e.g. "date-time")
        example: Example value, as text
        deprecated: Whether the property is deprecated
    """
    description: str = ""
    title: str = ""
    format: str = ""
    example: str = ""
    deprecated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization (empty members are omitted)."""
        result: Dict[str, Any] = {}
        for key in ("description", "title", "format", "example"):
            value = getattr(self, key)
            if value:
                result[key] = value
        if self.deprecated:
            result["deprecated"] = True
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OasInfo":
        """Create OasInfo from dict."""
        return cls(
            description=data.get("description", ""),
            title=data.get("title", ""),
            format=data.get("format", ""),
            example=data.get("example", ""),
            deprecated=data.get("deprecated", False),
        )


def _parse_type(value: Any) -> Optional[JsonType]:
    if value is None:
        return None
    try:
        return JsonType.parse(value)
    except ValueError as e:
        raise SchemaError(str(e)) from e


@dataclass(frozen=True)
class PropertyValidator:
    """Schema for one named property.

    Attributes:
        type: Expected value shape (None or ANY skips the type check)
        not_null: Reject a JSON null value
        mandatory: The property must be present
        mandatory_when: The property must be present when any of these
            condition tokens holds
        constraints: Constraints checked, in order, against the value
        object_validator: Validator for an object value (or for each element
            of an array value when that validator has ``allow_array``)
        order: Position when the owning Validator has ordered_property_checks
        when_conditions: The property is only checked when all of these hold
        unwanted_conditions: The property must be absent when any of these holds
        required_with: Others-expression under which the property is required
        required_with_message: Message used when required_with is not honoured
        unwanted_with: Others-expression under which the property must be absent
        unwanted_with_message: Message used when unwanted_with is not honoured
        oas_info: Documentation metadata

    Examples:
        >>> pv = PropertyValidator(type="string", mandatory=True, required_with=".a && !.b")
        >>> pv.type
        <JsonType.STRING: 'string'>
        >>> str(pv.required_with)
        '.a && !.b'
    """
    type: Optional[JsonType] = None
    not_null: bool = False
    mandatory: bool = False
    mandatory_when: List[str] = field(default_factory=list)
    constraints: List[Any] = field(default_factory=list)
    object_validator: Optional["Validator"] = None
    order: int = 0
    when_conditions: List[str] = field(default_factory=list)
    unwanted_conditions: List[str] = field(default_factory=list)
    required_with: Optional[OthersExpr] = None
    required_with_message: str = ""
    unwanted_with: Optional[OthersExpr] = None
    unwanted_with_message: str = ""
    oas_info: Optional[OasInfo] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _parse_type(self.type))
        object.__setattr__(self, "required_with", parse_expression(self.required_with))
        object.__setattr__(self, "unwanted_with", parse_expression(self.unwanted_with))


@dataclass(frozen=True)
class ConditionalVariant:
    """Additional properties and constraints applied when conditions hold.

    Attributes:
        when_conditions: Condition tokens that must all hold
        properties: Property validators overlaid (by name) onto the base ones
        constraints: Constraints appended after the base constraints
        conditional_variants: Further variants considered only when this one applies
    """
    when_conditions: List[str] = field(default_factory=list)
    properties: Dict[str, PropertyValidator] = field(default_factory=dict)
    constraints: List[Any] = field(default_factory=list)
    conditional_variants: List["ConditionalVariant"] = field(default_factory=list)


@dataclass(frozen=True)
class Validator:
    """Schema for one object shape.

    Attributes:
        properties: Property validators by name, checked in this order
            (unless ordered_property_checks is set)
        constraints: Object-level constraints, checked after the properties
        ignore_unknown_properties: Do not report properties missing from the schema
        allow_array: Accept an array of objects where an object is expected
        disallow_object: Reject a plain object (with allow_array: arrays only)
        allow_null_json: Accept a JSON null document
        allow_null_items: Accept null elements in an accepted array
        stop_on_first: Stop at the first violation
        use_number: Decode numbers as Decimal when validating raw bytes
        ordered_property_checks: Check properties by (order, name)
        when_conditions: The object is only checked when all of these hold
        conditional_variants: Overlays applied when their conditions hold
        oas_info: Documentation metadata

    Examples:
        >>> v = Validator(properties={"foo": PropertyValidator(type=JsonType.STRING, mandatory=True)})
        >>> list(v.properties)
        ['foo']
    """
    properties: Dict[str, PropertyValidator] = field(default_factory=dict)
    constraints: List[Any] = field(default_factory=list)
    ignore_unknown_properties: bool = False
    allow_array: bool = False
    disallow_object: bool = False
    allow_null_json: bool = False
    allow_null_items: bool = False
    stop_on_first: bool = False
    use_number: bool = False
    ordered_property_checks: bool = False
    when_conditions: List[str] = field(default_factory=list)
    conditional_variants: List[ConditionalVariant] = field(default_factory=list)
    oas_info: Optional[OasInfo] = None


__all__ = [
    "OasInfo",
    "PropertyValidator",
    "ConditionalVariant",
    "Validator",
]
