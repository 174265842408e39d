"""Loading and dumping validators in their JSON interchange form.

A validator document looks like::

    {
        "ignoreUnknownProperties": false,
        "allowArray": false,
        "properties": {
            "name": {
                "type": "string",
                "mandatory": true,
                "notNull": true,
                "constraints": [
                    {"name": "StringMinLength", "fields": {"value": 3}},
                    {"name": "StringNotBlank", "whenConditions": ["strict"]}
                ]
            }
        },
        "constraints": [],
        "conditionalVariants": []
    }

Documents are first checked against a Draft 7 meta-schema (using
jsonschema), then built into immutable Validator objects. Constraint names
are resolved through bodyguard.registry; constraint field names may be
written in camelCase, PascalCase or snake_case. A constraint entry carrying
``whenConditions`` or ``othersExpr`` is wrapped in a ConditionalConstraint.

Every problem with a document raises a SchemaError (or subclass); nothing
is deferred to validation time.
"""

import dataclasses
import json
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from bodyguard.constraints import ArrayConditionalConstraint, ConditionalConstraint, ConstraintSet
from bodyguard.errors import SchemaError
from bodyguard.expressions import OthersExpr
from bodyguard.registry import constraint_name, get_constraint_class
from bodyguard.schema import ConditionalVariant, OasInfo, PropertyValidator, Validator
from bodyguard.validation import VariablePropertyConstraint

logger = logging.getLogger(__name__)

_STRING_LIST = {"type": "array", "items": {"type": "string", "minLength": 1}}

META_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$ref": "#/definitions/validator",
    "definitions": {
        "oasInfo": {
            "type": "object",
            "properties": {
                "description": {"type": "string"},
                "title": {"type": "string"},
                "format": {"type": "string"},
                "example": {"type": "string"},
                "deprecated": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "constraint": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "fields": {"type": "object"},
                "whenConditions": _STRING_LIST,
                "othersExpr": {"type": "string"},
            },
            "required": ["name"],
            "additionalProperties": False,
        },
        "constraints": {"type": "array", "items": {"$ref": "#/definitions/constraint"}},
        "properties": {
            "type": "object",
            "additionalProperties": {"$ref": "#/definitions/propertyValidator"},
        },
        "propertyValidator": {
            "type": "object",
            "properties": {
                "type": {"type": "string"},
                "notNull": {"type": "boolean"},
                "mandatory": {"type": "boolean"},
                "mandatoryWhen": _STRING_LIST,
                "constraints": {"$ref": "#/definitions/constraints"},
                "objectValidator": {"$ref": "#/definitions/validator"},
                "order": {"type": "integer"},
                "whenConditions": _STRING_LIST,
                "unwantedConditions": _STRING_LIST,
                "requiredWith": {"type": "string"},
                "requiredWithMessage": {"type": "string"},
                "unwantedWith": {"type": "string"},
                "unwantedWithMessage": {"type": "string"},
                "oasInfo": {"$ref": "#/definitions/oasInfo"},
            },
            "additionalProperties": False,
        },
        "conditionalVariant": {
            "type": "object",
            "properties": {
                "whenConditions": _STRING_LIST,
                "properties": {"$ref": "#/definitions/properties"},
                "constraints": {"$ref": "#/definitions/constraints"},
                "conditionalVariants": {"type": "array", "items": {"$ref": "#/definitions/conditionalVariant"}},
            },
            "additionalProperties": False,
        },
        "validator": {
            "type": "object",
            "properties": {
                "ignoreUnknownProperties": {"type": "boolean"},
                "allowArray": {"type": "boolean"},
                "disallowObject": {"type": "boolean"},
                "allowNullJson": {"type": "boolean"},
                "allowNullItems": {"type": "boolean"},
                "stopOnFirst": {"type": "boolean"},
                "useNumber": {"type": "boolean"},
                "orderedPropertyChecks": {"type": "boolean"},
                "whenConditions": _STRING_LIST,
                "properties": {"$ref": "#/definitions/properties"},
                "constraints": {"$ref": "#/definitions/constraints"},
                "conditionalVariants": {"type": "array", "items": {"$ref": "#/definitions/conditionalVariant"}},
                "oasInfo": {"$ref": "#/definitions/oasInfo"},
            },
            "additionalProperties": False,
        },
    },
}

_meta_validator = Draft7Validator(META_SCHEMA)

_VALIDATOR_FLAGS = {
    "ignoreUnknownProperties": "ignore_unknown_properties",
    "allowArray": "allow_array",
    "disallowObject": "disallow_object",
    "allowNullJson": "allow_null_json",
    "allowNullItems": "allow_null_items",
    "stopOnFirst": "stop_on_first",
    "useNumber": "use_number",
    "orderedPropertyChecks": "ordered_property_checks",
}

_PROPERTY_SIMPLE = {
    "notNull": "not_null",
    "mandatory": "mandatory",
    "mandatoryWhen": "mandatory_when",
    "order": "order",
    "whenConditions": "when_conditions",
    "unwantedConditions": "unwanted_conditions",
    "requiredWithMessage": "required_with_message",
    "unwantedWithMessage": "unwanted_with_message",
}

# Fields of the composition constraints that hold nested constraints or property validators.
_NESTED_CONSTRAINT = "constraint"
_NESTED_CONSTRAINT_LIST = "constraint_list"
_NESTED_PROPERTY = "property"

_NESTED_FIELDS = {
    ConstraintSet: {"constraints": _NESTED_CONSTRAINT_LIST},
    ConditionalConstraint: {"constraint": _NESTED_CONSTRAINT},
    ArrayConditionalConstraint: {"constraint": _NESTED_CONSTRAINT},
    VariablePropertyConstraint: {
        "property_validator": _NESTED_PROPERTY,
        "name_constraints": _NESTED_CONSTRAINT_LIST,
    },
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _snake(name: str) -> str:
    """Normalize a camelCase, PascalCase or snake_case field name to snake_case.

    Examples:
        >>> _snake("exclusiveMin"), _snake("ExclusiveMin"), _snake("exclusive_min")
        ('exclusive_min', 'exclusive_min', 'exclusive_min')
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


# -- loading ---------------------------------------------------------------------

def check_document(document: Any) -> None:
    """Check a validator document against the meta-schema.

    Raises:
        SchemaError: Describing the most relevant problem found
    """
    error = best_match(_meta_validator.iter_errors(document))
    if error is not None:
        location = "/".join(str(p) for p in error.absolute_path) or "<root>"
        raise SchemaError(f"Invalid validator document at {location}: {error.message}")


def load_validator(document: Dict[str, Any]) -> Validator:
    """Build a Validator from its (decoded) interchange form.

    Raises:
        SchemaError: If the document is malformed, names an unknown constraint
            (UnknownConstraintError) or holds a bad expression (ExpressionError)
    """
    check_document(document)
    validator = _load_validator(document)
    logger.debug("Loaded validator with %d properties", len(validator.properties))
    return validator


def loads_validator(text: Union[str, bytes, bytearray]) -> Validator:
    """Build a Validator from JSON text."""
    try:
        document = json.loads(text)
    except ValueError as e:
        raise SchemaError(f"Validator document is not valid JSON: {e}") from e
    return load_validator(document)


def _load_validator(doc: Dict[str, Any]) -> Validator:
    kwargs: Dict[str, Any] = {attr: doc[key] for key, attr in _VALIDATOR_FLAGS.items() if key in doc}
    return Validator(
        properties=_load_properties(doc.get("properties", {})),
        constraints=_load_constraints(doc.get("constraints", [])),
        when_conditions=list(doc.get("whenConditions", [])),
        conditional_variants=[_load_variant(v) for v in doc.get("conditionalVariants", [])],
        oas_info=_load_oas(doc.get("oasInfo")),
        **kwargs,
    )


def _load_oas(doc: Optional[Dict[str, Any]]) -> Optional[OasInfo]:
    return OasInfo.from_dict(doc) if doc is not None else None


def _load_variant(doc: Dict[str, Any]) -> ConditionalVariant:
    return ConditionalVariant(
        when_conditions=list(doc.get("whenConditions", [])),
        properties=_load_properties(doc.get("properties", {})),
        constraints=_load_constraints(doc.get("constraints", [])),
        conditional_variants=[_load_variant(v) for v in doc.get("conditionalVariants", [])],
    )


def _load_properties(doc: Dict[str, Any]) -> Dict[str, PropertyValidator]:
    return {name: _load_property(pv) for name, pv in doc.items()}


def _load_property(doc: Dict[str, Any]) -> PropertyValidator:
    kwargs: Dict[str, Any] = {attr: doc[key] for key, attr in _PROPERTY_SIMPLE.items() if key in doc}
    object_validator = doc.get("objectValidator")
    return PropertyValidator(
        type=doc.get("type"),
        constraints=_load_constraints(doc.get("constraints", [])),
        object_validator=_load_validator(object_validator) if object_validator is not None else None,
        required_with=doc.get("requiredWith"),
        unwanted_with=doc.get("unwantedWith"),
        oas_info=_load_oas(doc.get("oasInfo")),
        **kwargs,
    )


def _load_constraints(items: List[Dict[str, Any]]) -> List[Any]:
    return [load_constraint(item) for item in items]


def load_constraint(doc: Dict[str, Any]) -> Any:
    """Build one constraint from its ``{name, fields, whenConditions?, othersExpr?}`` form.

    Raises:
        UnknownConstraintError: If the name is not registered
        SchemaError: If the fields do not suit the constraint
    """
    if not isinstance(doc, dict) or not isinstance(doc.get("name"), str):
        raise SchemaError(f"Constraint entry must be an object with a name, got {doc!r}")
    name = doc["name"]
    cls = get_constraint_class(name)
    fields = doc.get("fields") or {}
    if not isinstance(fields, dict):
        raise SchemaError(f"Fields of constraint {name!r} must be an object")
    nested = _NESTED_FIELDS.get(cls, {})
    kwargs: Dict[str, Any] = {}
    for key, value in fields.items():
        attr = _snake(key)
        kind = nested.get(attr)
        if kind == _NESTED_CONSTRAINT:
            value = load_constraint(value)
        elif kind == _NESTED_CONSTRAINT_LIST:
            if not isinstance(value, list):
                raise SchemaError(f"Field {key!r} of constraint {name!r} must be a list of constraints")
            value = _load_constraints(value)
        elif kind == _NESTED_PROPERTY:
            if not isinstance(value, dict):
                raise SchemaError(f"Field {key!r} of constraint {name!r} must be a property validator")
            value = _load_property(value)
        kwargs[attr] = value
    try:
        constraint = cls(**kwargs)
    except TypeError as e:
        raise SchemaError(f"Invalid fields for constraint {name!r}: {e}") from e
    except ValueError as e:
        raise SchemaError(f"Invalid field value for constraint {name!r}: {e}") from e

    when = doc.get("whenConditions")
    others = doc.get("othersExpr")
    if when or others:
        constraint = ConditionalConstraint(constraint=constraint, when=list(when or []), others=others)
    return constraint


# -- dumping ---------------------------------------------------------------------

def dump_validator(validator: Validator) -> Dict[str, Any]:
    """Render a Validator in its interchange form (only non-default members are emitted).

    Raises:
        SchemaError: If a constraint is not registered (e.g. a CustomConstraint)
    """
    result: Dict[str, Any] = {}
    for key, attr in _VALIDATOR_FLAGS.items():
        if getattr(validator, attr):
            result[key] = True
    if validator.when_conditions:
        result["whenConditions"] = list(validator.when_conditions)
    result["properties"] = _dump_properties(validator.properties)
    if validator.constraints:
        result["constraints"] = [dump_constraint(c) for c in validator.constraints]
    if validator.conditional_variants:
        result["conditionalVariants"] = [_dump_variant(v) for v in validator.conditional_variants]
    if validator.oas_info is not None:
        result["oasInfo"] = validator.oas_info.to_dict()
    return result


def dumps_validator(validator: Validator, **kwargs: Any) -> str:
    """Render a Validator as JSON text (kwargs are passed to json.dumps)."""
    return json.dumps(dump_validator(validator), **kwargs)


def _dump_variant(variant: ConditionalVariant) -> Dict[str, Any]:
    result: Dict[str, Any] = {"whenConditions": list(variant.when_conditions)}
    if variant.properties:
        result["properties"] = _dump_properties(variant.properties)
    if variant.constraints:
        result["constraints"] = [dump_constraint(c) for c in variant.constraints]
    if variant.conditional_variants:
        result["conditionalVariants"] = [_dump_variant(v) for v in variant.conditional_variants]
    return result


def _dump_properties(properties: Dict[str, PropertyValidator]) -> Dict[str, Any]:
    return {name: dump_property(pv) for name, pv in properties.items()}


def dump_property(pv: PropertyValidator) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if pv.type is not None:
        result["type"] = pv.type.value
    for key, attr in _PROPERTY_SIMPLE.items():
        value = getattr(pv, attr)
        if value:
            result[key] = list(value) if isinstance(value, list) else value
    if pv.constraints:
        result["constraints"] = [dump_constraint(c) for c in pv.constraints]
    if pv.object_validator is not None:
        result["objectValidator"] = dump_validator(pv.object_validator)
    if pv.required_with is not None:
        result["requiredWith"] = str(pv.required_with)
    if pv.unwanted_with is not None:
        result["unwantedWith"] = str(pv.unwanted_with)
    if pv.oas_info is not None:
        result["oasInfo"] = pv.oas_info.to_dict()
    return result


def _dump_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, OthersExpr):
        return str(value)
    if isinstance(value, PropertyValidator):
        return dump_property(value)
    if isinstance(value, list):
        return [_dump_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump_value(v) for k, v in value.items()}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dump_constraint(value)
    return value


def dump_constraint(constraint: Any) -> Dict[str, Any]:
    """Render one constraint as ``{name, fields?, whenConditions?, othersExpr?}``.

    Raises:
        SchemaError: If the constraint's class is not registered
    """
    if isinstance(constraint, ConditionalConstraint) and not isinstance(constraint.constraint, ConditionalConstraint):
        result = dump_constraint(constraint.constraint)
        if constraint.when:
            result["whenConditions"] = list(constraint.when)
        if constraint.others is not None:
            result["othersExpr"] = str(constraint.others)
        return result
    name = constraint_name(constraint)
    if name is None or not dataclasses.is_dataclass(constraint):
        raise SchemaError(f"Constraint {type(constraint).__name__} is not registered and cannot be dumped")
    fields: Dict[str, Any] = {}
    for f in dataclasses.fields(constraint):
        value = getattr(constraint, f.name)
        if f.default is not dataclasses.MISSING and value == f.default:
            continue
        if f.default_factory is not dataclasses.MISSING and value == f.default_factory():
            continue
        fields[_camel(f.name)] = _dump_value(value)
    result = {"name": name}
    if fields:
        result["fields"] = fields
    return result


__all__ = [
    "META_SCHEMA",
    "check_document",
    "load_validator",
    "loads_validator",
    "load_constraint",
    "dump_validator",
    "dumps_validator",
    "dump_property",
    "dump_constraint",
]
