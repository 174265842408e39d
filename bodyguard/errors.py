"""Violation records and exception types for bodyguard.

A validation never raises for a bad document: every problem found is
recorded as a Violation and returned to the caller. Exceptions are reserved
for problems with the schema itself (a malformed others-expression, an
unknown constraint name in a schema document, ...) and are raised when the
schema is built, not when a document is validated.

The wire shape of a violation is::

    {"message": ..., "property": ..., "path": ..., "badRequest"?: ..., "metadata"?: ..., "code"?: ...}
"""

import builtins
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from bodyguard.types import ViolationCode


@dataclass(frozen=True)
class Violation:
    """A single recorded validation failure.

    Attributes:
        message: Human-readable, already localized description
        property: Terminal segment of the failing location ("" for the
            document itself or an array element)
        path: Dotted path of the ancestors of the failing location, using
            ``[i]`` for array-index segments (e.g. "items[1]")
        bad_request: True when the document could not be validated at all
            (undecodable, wrong top-level shape), as opposed to a value failure
        metadata: Arbitrary caller- or constraint-attached data
        code: Optional kind of violation

    Examples:
        >>> v = Violation(message="Missing property", property="name", path="items[1]")
        >>> v.location
        'items[1].name'
        >>> v.to_dict()
        {'message': 'Missing property', 'property': 'name', 'path': 'items[1]'}
    """
    message: str
    property: str = ""
    path: str = ""
    bad_request: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
    code: Optional[ViolationCode] = None

    @builtins.property
    def location(self) -> str:
        """Full path of the failing location (path joined with property)."""
        if not self.property:
            return self.path
        if not self.path:
            return self.property
        return f"{self.path}.{self.property}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "message": self.message,
            "property": self.property,
            "path": self.path,
        }
        if self.bad_request:
            result["badRequest"] = True
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        if self.code is not None:
            result["code"] = self.code.value if isinstance(self.code, ViolationCode) else self.code
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Violation":
        """Create Violation from dict."""
        code = data.get("code")
        if isinstance(code, str):
            code = ViolationCode(code)
        return cls(
            message=data["message"],
            property=data.get("property", ""),
            path=data.get("path", ""),
            bad_request=data.get("badRequest", False),
            metadata=dict(data.get("metadata") or {}),
            code=code,
        )


class BodyguardError(Exception):
    """Base class for all errors raised by bodyguard."""


class SchemaError(BodyguardError):
    """Raised when a schema (Validator, constraint or schema document) is malformed.

    Schema errors are detected when the schema is constructed or loaded,
    never while a document is being validated.
    """


class ExpressionError(SchemaError):
    """Raised when an others-expression cannot be parsed.

    Attributes:
        expression: The expression text that failed to parse
        position: Zero-based character position of the problem
    """

    def __init__(self, expression: str, position: int, message: str):
        self.expression = expression
        self.position = position
        super().__init__(f"{message} (at position {position} in {expression!r})")


class UnknownConstraintError(SchemaError):
    """Raised when a schema document names a constraint that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown constraint name {name!r}")


__all__ = [
    "Violation",
    "BodyguardError",
    "SchemaError",
    "ExpressionError",
    "UnknownConstraintError",
]
