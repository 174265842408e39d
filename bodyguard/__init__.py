"""Bodyguard: declarative validation of JSON request bodies.

Describe the expected shape of a document once, as a Validator, then
validate any number of documents against it and get back every violation
found, each with a precise path and a localized message.

    >>> from bodyguard import PropertyValidator, Validator, validate
    >>> from bodyguard.builtin import StringMinLength
    >>> v = Validator(properties={
    ...     "name": PropertyValidator(type="string", mandatory=True, constraints=[StringMinLength(value=3)]),
    ... })
    >>> validate({"name": "Al"}, v)[1][0].message
    'String value length must be at least 3 characters'
"""

from bodyguard.constraints import (
    ArrayConditionalConstraint,
    Conditional,
    ConditionalConstraint,
    Constraint,
    ConstraintSet,
    CustomConstraint,
)
from bodyguard.context import ValidatorContext, new_context
from bodyguard.errors import (
    BodyguardError,
    ExpressionError,
    SchemaError,
    UnknownConstraintError,
    Violation,
)
from bodyguard.expressions import OthersExpr
from bodyguard.i18n import (
    I18nContext,
    I18nProvider,
    Translator,
    get_default_i18n_provider,
    set_default_i18n_provider,
)
from bodyguard.loader import dump_validator, load_validator, loads_validator
from bodyguard.registry import get_constraint_class, register_constraint
from bodyguard.schema import ConditionalVariant, OasInfo, PropertyValidator, Validator
from bodyguard.types import ConditionScope, JsonType, ViolationCode
from bodyguard.validation import (
    ValidationEngine,
    ValidationResult,
    VariablePropertyConstraint,
    validate,
    validate_bytes,
)

__version__ = "0.1.0"
__author__ = "Bodyguard Team"

# Version info
VERSION = (0, 1, 0)

__all__ = [
    "__version__",
    "VERSION",
    # Schema
    "Validator",
    "PropertyValidator",
    "ConditionalVariant",
    "OasInfo",
    "JsonType",
    # Constraints
    "Constraint",
    "Conditional",
    "CustomConstraint",
    "ConstraintSet",
    "ConditionalConstraint",
    "ArrayConditionalConstraint",
    "VariablePropertyConstraint",
    "OthersExpr",
    # Validation
    "validate",
    "validate_bytes",
    "ValidationEngine",
    "ValidationResult",
    "ValidatorContext",
    "new_context",
    "ConditionScope",
    # Violations and errors
    "Violation",
    "ViolationCode",
    "BodyguardError",
    "SchemaError",
    "ExpressionError",
    "UnknownConstraintError",
    # I18n
    "Translator",
    "I18nContext",
    "I18nProvider",
    "get_default_i18n_provider",
    "set_default_i18n_provider",
    # Loader and registry
    "load_validator",
    "loads_validator",
    "dump_validator",
    "register_constraint",
    "get_constraint_class",
]
