"""Validation engine for decoded JSON documents.

This module walks a decoded JSON document against a Validator and collects
every violation found, each located by a dotted/indexed path (for example
``items[1]`` / ``name``) and carrying a localized message.

Two surfaces are provided:
- ``validate(doc, validator, i18n)`` / ``validate_bytes(data, validator, i18n)``
  returning a plain ``(ok, violations)`` tuple
- ``ValidationEngine``, a reusable wrapper around one Validator returning a
  ``ValidationResult``

Per object the engine:
1. skips the object unless the Validator's when_conditions hold
2. overlays the conditional variants whose conditions hold
3. checks each property (in declared order, or by (order, name))
4. runs the object-level constraints
5. reports properties the schema does not know about

A bad document never raises; only a malformed schema does, and that is
detected when the schema is built.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from bodyguard import messages
from bodyguard.constraints import (
    ArrayConditionalConstraint,
    CheckResult,
    ConditionalConstraint,
    failure_message,
    is_applicable,
)
from bodyguard.context import ValidatorContext, new_context
from bodyguard.errors import SchemaError, Violation
from bodyguard.i18n import I18nContext, I18nProvider, get_default_i18n_provider
from bodyguard.schema import ConditionalVariant, PropertyValidator, Validator
from bodyguard.types import JsonType, ViolationCode, check_json_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariablePropertyConstraint:
    """Validates properties whose names are not known in advance.

    Every property of the object that is not declared in the Validator and
    whose name matches ``name_pattern`` (all undeclared names when it is
    None) is claimed by this constraint: it is checked against
    ``property_validator`` and is not reported as unknown. Claimed names are
    also checked against ``name_constraints``; a failing name is reported as
    an invalid property name and its value is not checked.

    Used as an object-level constraint (Validator.constraints).

    Attributes:
        property_validator: Validator applied to each claimed property value
        name_pattern: Regular expression a name must fully match to be claimed
        name_constraints: Constraints checked against each claimed name

    Raises:
        SchemaError: If name_pattern does not compile
    """
    property_validator: PropertyValidator = field(default_factory=PropertyValidator)
    name_pattern: Optional[str] = None
    name_constraints: List[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.name_pattern is not None:
            try:
                re.compile(self.name_pattern)
            except re.error as e:
                raise SchemaError(f"Invalid property name pattern {self.name_pattern!r}: {e}") from e

    def claims(self, name: str) -> bool:
        return self.name_pattern is None or re.fullmatch(self.name_pattern, name) is not None

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, dict):
            declared = ctx.declared_properties if value is ctx.current_object else ()
            self.check_properties(value, ctx, declared)
        return True, ""

    def check_properties(self, obj: Dict[str, Any], ctx: ValidatorContext, declared: Iterable[str]) -> None:
        declared = set(declared)
        for name, value in list(obj.items()):
            if name in declared or not self.claims(name):
                continue
            if self._name_ok(name, ctx):
                _check_present_property(name, self.property_validator, value, ctx)
            if not ctx.continue_all:
                return

    def _name_ok(self, name: str, ctx: ValidatorContext) -> bool:
        for constraint in self.name_constraints:
            if not is_applicable(constraint, ctx):
                continue
            passed, msg = constraint.check(name, ctx)
            if not passed:
                if not msg:
                    msg = ctx.translate_message(messages.MSG_INVALID_PROPERTY_NAME)
                ctx.add_violation_property_for_current(name, msg, code=ViolationCode.INVALID_PROPERTY_NAME)
                return False
        return True

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        return ""


# -- constraints ----------------------------------------------------------------

def _run_constraints(constraints: Iterable[Any], ctx: ValidatorContext) -> None:
    """Check constraints against the current value until one ceases further checks."""
    for constraint in constraints:
        if not ctx.continuing:
            return
        try:
            if not is_applicable(constraint, ctx):
                continue
            passed, msg = constraint.check(ctx.current_value, ctx)
        except Exception:
            logger.warning(
                "Constraint %s raised while checking %r",
                type(constraint).__name__, ctx.current_full_path, exc_info=True,
            )
            ctx.add_violation_for_current(
                ctx.translate_message(messages.MSG_FAILURE), code=ViolationCode.CONSTRAINT_ERROR,
            )
            ctx.stop()
            return
        if not passed:
            ctx.add_violation_for_current(failure_message(constraint, msg, ctx), code=ViolationCode.CONSTRAINT_FAILED)


# -- properties ------------------------------------------------------------------

def _missing(name: str, message: str, ctx: ValidatorContext) -> None:
    ctx.add_violation_property_for_current(name, ctx.translate_message(message), code=ViolationCode.MISSING_PROPERTY)


def _unwanted(name: str, message: str, ctx: ValidatorContext) -> None:
    ctx.add_violation_property_for_current(name, ctx.translate_message(message), code=ViolationCode.UNWANTED_PROPERTY)


def _check_property(name: str, pv: PropertyValidator, obj: Dict[str, Any], ctx: ValidatorContext) -> None:
    if not ctx.meets_when_conditions(pv.when_conditions):
        return
    if name not in obj:
        if pv.mandatory or ctx.meets_unwanted_conditions(pv.mandatory_when):
            _missing(name, messages.MSG_MISSING_PROPERTY, ctx)
        elif pv.required_with is not None and pv.required_with.evaluate(ctx):
            _missing(name, pv.required_with_message or messages.MSG_PROPERTY_REQUIRED_WHEN, ctx)
        return
    if ctx.meets_unwanted_conditions(pv.unwanted_conditions):
        _unwanted(name, messages.MSG_UNWANTED_PROPERTY, ctx)
        return
    if pv.unwanted_with is not None and pv.unwanted_with.evaluate(ctx):
        _unwanted(name, pv.unwanted_with_message or messages.MSG_PROPERTY_UNWANTED_WHEN, ctx)
        return
    _check_present_property(name, pv, obj[name], ctx)


def _check_present_property(name: str, pv: PropertyValidator, value: Any, ctx: ValidatorContext) -> None:
    ctx.push_property(name, value, pv)
    try:
        if value is None:
            if pv.not_null:
                ctx.add_violation_for_current(
                    ctx.translate_message(messages.MSG_VALUE_CANNOT_BE_NULL), code=ViolationCode.NULL_VALUE,
                )
            return
        if not check_json_type(value, pv.type):
            ctx.add_violation_for_current(
                ctx.translate_format(messages.FMT_VALUE_EXPECTED_TYPE, ctx.translate_token(pv.type.value)),
                code=ViolationCode.TYPE_MISMATCH,
            )
            return
        _run_constraints(pv.constraints, ctx)
        if ctx.continuing and pv.object_validator is not None:
            _check_nested(pv, ctx.current_value, ctx)
    finally:
        ctx.pop()


def _check_nested(pv: PropertyValidator, value: Any, ctx: ValidatorContext) -> None:
    """Recurse into an object (or array of objects) value with the property's object validator."""
    ov = pv.object_validator
    allow_array = ov.allow_array or pv.type == JsonType.ARRAY
    allow_object = not ov.disallow_object
    if not allow_array and not allow_object:
        ctx.add_violation_for_current(
            ctx.translate_message(messages.MSG_PROPERTY_OBJECT_VALIDATOR_ERROR),
            code=ViolationCode.OBJECT_VALIDATOR_MISCONFIGURED,
        )
        ctx.stop_all()
    elif isinstance(value, dict) and allow_object:
        _validate_object(ov, value, ctx)
    elif isinstance(value, list) and allow_array:
        _validate_elements(ov, value, ctx)
    elif allow_array and allow_object:
        ctx.add_violation_for_current(
            ctx.translate_message(messages.MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY),
            code=ViolationCode.VALUE_MUST_BE_OBJECT_OR_ARRAY,
        )
    elif allow_array:
        ctx.add_violation_for_current(
            ctx.translate_message(messages.MSG_VALUE_MUST_BE_ARRAY), code=ViolationCode.VALUE_MUST_BE_ARRAY,
        )
    else:
        ctx.add_violation_for_current(
            ctx.translate_message(messages.MSG_VALUE_MUST_BE_OBJECT), code=ViolationCode.VALUE_MUST_BE_OBJECT,
        )


# -- objects and arrays ----------------------------------------------------------

def _overlay(
    variants: Iterable[ConditionalVariant],
    properties: Dict[str, PropertyValidator],
    constraints: List[Any],
    ctx: ValidatorContext,
) -> None:
    for variant in variants:
        if ctx.meets_when_conditions(variant.when_conditions):
            properties.update(variant.properties)
            constraints.extend(variant.constraints)
            _overlay(variant.conditional_variants, properties, constraints, ctx)


def _ordered(properties: Dict[str, PropertyValidator], by_order: bool) -> List[Tuple[str, PropertyValidator]]:
    items = list(properties.items())
    if by_order:
        items.sort(key=lambda item: (item[1].order, item[0]))
    return items


def _variable_property_constraints(
    constraints: Iterable[Any], ctx: ValidatorContext,
) -> List[VariablePropertyConstraint]:
    """The VariablePropertyConstraints in effect, looking through applicable conditional wrappers."""
    found = []
    for constraint in constraints:
        while isinstance(constraint, (ConditionalConstraint, ArrayConditionalConstraint)):
            if not is_applicable(constraint, ctx):
                break
            constraint = constraint.constraint
        if isinstance(constraint, VariablePropertyConstraint):
            found.append(constraint)
    return found


def _validate_object(validator: Validator, obj: Dict[str, Any], ctx: ValidatorContext) -> None:
    if not ctx.meets_when_conditions(validator.when_conditions):
        return
    properties = dict(validator.properties)
    constraints = list(validator.constraints)
    _overlay(validator.conditional_variants, properties, constraints, ctx)

    ctx.push_object(obj, properties)
    try:
        for name, pv in _ordered(properties, validator.ordered_property_checks):
            _check_property(name, pv, obj, ctx)
            if not ctx.continue_all:
                return

        _run_constraints(constraints, ctx)
        ctx.resume()
        if not ctx.continue_all:
            return

        if not validator.ignore_unknown_properties:
            variable = _variable_property_constraints(constraints, ctx)
            for name in obj:
                if name in properties or any(c.claims(name) for c in variable):
                    continue
                ctx.add_violation_property_for_current(
                    name, ctx.translate_message(messages.MSG_UNKNOWN_PROPERTY), code=ViolationCode.UNKNOWN_PROPERTY,
                )
                if not ctx.continue_all:
                    return
    finally:
        ctx.pop_object()


def _validate_elements(validator: Validator, items: List[Any], ctx: ValidatorContext) -> None:
    for i, item in enumerate(items):
        ctx.push_index(i, item)
        try:
            if item is None:
                if not validator.allow_null_items:
                    ctx.add_violation_for_current(
                        ctx.translate_message(messages.MSG_ARRAY_ELEMENT_MUST_NOT_BE_NULL),
                        code=ViolationCode.NULL_ARRAY_ELEMENT,
                    )
            elif isinstance(item, dict):
                _validate_object(validator, item, ctx)
            else:
                ctx.add_violation_for_current(
                    ctx.translate_message(messages.MSG_ARRAY_ELEMENT_MUST_BE_OBJECT),
                    code=ViolationCode.ARRAY_ELEMENT_MUST_BE_OBJECT,
                )
        finally:
            ctx.pop()
        if not ctx.continue_all:
            return


def _structural(ctx: ValidatorContext, message: str, code: ViolationCode) -> None:
    ctx.add_violation(Violation(message=ctx.translate_message(message), bad_request=True, code=code))


def _validate_root(validator: Validator, doc: Any, ctx: ValidatorContext) -> None:
    if doc is None:
        if not validator.allow_null_json:
            _structural(ctx, messages.MSG_NOT_JSON_NULL, ViolationCode.NOT_JSON_NULL)
    elif isinstance(doc, list):
        if validator.allow_array:
            _validate_elements(validator, doc, ctx)
        else:
            _structural(ctx, messages.MSG_NOT_JSON_ARRAY, ViolationCode.NOT_JSON_ARRAY)
    elif isinstance(doc, dict):
        if validator.disallow_object and validator.allow_array:
            _structural(ctx, messages.MSG_EXPECTED_JSON_ARRAY, ViolationCode.EXPECTED_JSON_ARRAY)
        elif validator.disallow_object:
            _structural(ctx, messages.MSG_NOT_JSON_OBJECT, ViolationCode.NOT_JSON_OBJECT)
        else:
            _validate_object(validator, doc, ctx)
    elif validator.disallow_object and validator.allow_array:
        _structural(ctx, messages.MSG_EXPECTED_JSON_ARRAY, ViolationCode.EXPECTED_JSON_ARRAY)
    else:
        _structural(ctx, messages.MSG_EXPECTED_JSON_OBJECT, ViolationCode.EXPECTED_JSON_OBJECT)


# -- entry points ----------------------------------------------------------------

def validate_with_context(doc: Any, validator: Validator, ctx: ValidatorContext) -> Tuple[bool, List[Violation]]:
    """Validate doc using a caller-supplied context (e.g. one with conditions already set)."""
    logger.debug("Validating %s against validator with %d properties", type(doc).__name__, len(validator.properties))
    _validate_root(validator, doc, ctx)
    violations = list(ctx.violations)
    logger.debug("Validation finished with %d violation(s)", len(violations))
    return not violations, violations


def validate(doc: Any, validator: Validator, i18n: Optional[I18nContext] = None) -> Tuple[bool, List[Violation]]:
    """Validate an already decoded JSON document.

    Args:
        doc: The decoded document (dict, list, scalar or None); constraints
            that replace values modify it in place
        validator: The schema to validate against
        i18n: Localization context (None means the default provider's default)

    Returns:
        (ok, violations) where ok is True iff violations is empty

    Examples:
        >>> v = Validator(properties={"foo": PropertyValidator(type="string", mandatory=True, not_null=True)})
        >>> ok, violations = validate({}, v)
        >>> ok, violations[0].property, violations[0].message
        (False, 'foo', 'Missing property')
    """
    ctx = new_context(doc, i18n, validator.stop_on_first)
    return validate_with_context(doc, validator, ctx)


def decode(data: Union[bytes, bytearray, str], use_number: bool = False) -> Any:
    """Decode JSON text, keeping non-integral numbers as Decimal when use_number is set.

    Raises:
        ValueError: If data is not a single valid JSON value (including the
            non-standard NaN and Infinity literals)
    """
    if use_number:
        return json.loads(data, parse_float=Decimal, parse_constant=_reject_constant)
    return json.loads(data, parse_constant=_reject_constant)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON literal {name}")


def _undecodable(i18n: Optional[I18nContext]) -> Tuple[bool, List[Violation]]:
    ctx = new_context(None, i18n)
    _structural(ctx, messages.MSG_UNABLE_TO_DECODE, ViolationCode.UNABLE_TO_DECODE)
    return False, list(ctx.violations)


def decode_and_validate(
    data: Union[bytes, bytearray, str],
    validator: Validator,
    i18n: Optional[I18nContext] = None,
) -> Tuple[bool, List[Violation], Any]:
    """Decode then validate, also returning the decoded (and possibly amended) document."""
    try:
        doc = decode(data, validator.use_number)
    except (ValueError, RecursionError) as e:
        logger.debug("Unable to decode document: %s", e)
        ok, violations = _undecodable(i18n)
        return ok, violations, None
    ok, violations = validate(doc, validator, i18n)
    return ok, violations, doc


def validate_bytes(
    data: Union[bytes, bytearray, str],
    validator: Validator,
    i18n: Optional[I18nContext] = None,
) -> Tuple[bool, List[Violation]]:
    """Decode raw JSON (bytes or str) and validate it.

    A document that cannot be decoded produces a single ``bad_request``
    violation. With ``validator.use_number`` non-integral numbers are decoded
    as Decimal so no precision is lost.
    """
    ok, violations, _ = decode_and_validate(data, validator, i18n)
    return ok, violations


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a document.

    Attributes:
        is_valid: Whether the document passed every check
        violations: Violations found (empty if valid)
        data: The decoded document, including any values replaced by
            constraints (None when it could not be decoded)

    Examples:
        >>> engine = ValidationEngine(Validator(properties={"name": PropertyValidator(type="string")}))
        >>> result = engine.validate({"name": "test"})
        >>> result.is_valid
        True
        >>> result.violations
        []
    """
    is_valid: bool
    violations: List[Violation]
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "violations": [v.to_dict() for v in self.violations],
        }
        if self.data is not None:
            result["data"] = self.data
        return result


class ValidationEngine:
    """Reusable validation service for one Validator.

    Attributes:
        validator: The schema documents are validated against
        i18n_provider: Provider of the default localization context

    Examples:
        >>> v = Validator(properties={"age": PropertyValidator(type="integer", mandatory=True)})
        >>> engine = ValidationEngine(v)
        >>> engine.validate({"age": 30}).is_valid
        True
        >>> result = engine.validate_bytes(b'{"age": "thirty"}')
        >>> result.violations[0].message
        'Value expected to be of type integer'
    """

    def __init__(self, validator: Validator, i18n_provider: Optional[I18nProvider] = None) -> None:
        self.validator = validator
        self.i18n_provider = i18n_provider

    def _i18n(self, i18n: Optional[I18nContext]) -> I18nContext:
        if i18n is not None:
            return i18n
        return (self.i18n_provider or get_default_i18n_provider()).default_context()

    def validate(self, doc: Any, i18n: Optional[I18nContext] = None) -> ValidationResult:
        """Validate an already decoded document."""
        ok, violations = validate(doc, self.validator, self._i18n(i18n))
        return ValidationResult(is_valid=ok, violations=violations, data=doc)

    def validate_bytes(self, data: Union[bytes, bytearray, str], i18n: Optional[I18nContext] = None) -> ValidationResult:
        """Decode raw JSON and validate it."""
        ok, violations, doc = decode_and_validate(data, self.validator, self._i18n(i18n))
        return ValidationResult(is_valid=ok, violations=violations, data=doc)

    def validate_request(self, body: Union[bytes, bytearray, str], headers: Dict[str, Any]) -> ValidationResult:
        """Validate a request body, localizing messages from its Accept-Language header."""
        provider = self.i18n_provider or get_default_i18n_provider()
        return self.validate_bytes(body, provider.context_from_headers(headers))


__all__ = [
    "VariablePropertyConstraint",
    "ValidationResult",
    "ValidationEngine",
    "validate",
    "validate_bytes",
    "validate_with_context",
    "decode",
    "decode_and_validate",
]
