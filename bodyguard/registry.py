"""Named constraint registry.

Schema documents refer to constraints by name (``{"name": "StringMinLength",
"fields": {"value": 3}}``). This registry maps those names to constraint
classes. Every built-in constraint and the composition constraints are
registered under their class names when the module is imported; custom
constraint classes can be added with register_constraint().

A registrable class must be constructible from keyword arguments named
after its (snake_case) fields, as dataclasses are.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from bodyguard import builtin
from bodyguard.constraints import ArrayConditionalConstraint, ConditionalConstraint, ConstraintSet
from bodyguard.errors import SchemaError, UnknownConstraintError
from bodyguard.validation import VariablePropertyConstraint

logger = logging.getLogger(__name__)

_registry: Dict[str, Type[Any]] = {}


def register_constraint(name: str, cls: Type[Any], replace: bool = False) -> None:
    """Register a constraint class under a name.

    Args:
        name: Name used in schema documents
        cls: The constraint class
        replace: Allow replacing an existing registration

    Raises:
        SchemaError: If the name is already registered (and replace is False)
            or the class does not provide check/get_message
    """
    if not name:
        raise SchemaError("Constraint name must not be empty")
    if not (callable(getattr(cls, "check", None)) and callable(getattr(cls, "get_message", None))):
        raise SchemaError(f"{cls!r} does not provide check() and get_message()")
    existing = _registry.get(name)
    if existing is not None and existing is not cls and not replace:
        raise SchemaError(f"Constraint name {name!r} is already registered to {existing.__name__}")
    _registry[name] = cls
    logger.debug("Registered constraint %s -> %s", name, cls.__name__)


def unregister_constraint(name: str) -> None:
    _registry.pop(name, None)


def get_constraint_class(name: str) -> Type[Any]:
    """Look up a constraint class by name.

    Raises:
        UnknownConstraintError: If no class is registered under name
    """
    try:
        return _registry[name]
    except KeyError:
        raise UnknownConstraintError(name) from None


def constraint_name(constraint: Any) -> Optional[str]:
    """The registered name of a constraint instance's class (None if unregistered)."""
    cls = type(constraint)
    if _registry.get(cls.__name__) is cls:
        return cls.__name__
    for name, registered in _registry.items():
        if registered is cls:
            return name
    return None


def registered_names() -> List[str]:
    return sorted(_registry)


for _cls in (ConstraintSet, ConditionalConstraint, ArrayConditionalConstraint, VariablePropertyConstraint):
    register_constraint(_cls.__name__, _cls)
for _name in builtin.__all__:
    register_constraint(_name, getattr(builtin, _name))


__all__ = [
    "register_constraint",
    "unregister_constraint",
    "get_constraint_class",
    "constraint_name",
    "registered_names",
]
