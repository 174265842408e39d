"""Constraint contract and the composition constraints.

A constraint is any object providing::

    check(value, ctx) -> (passed, message)
    get_message(i18n) -> str

``check`` returns ``(True, "")`` when the value is acceptable (or the
constraint does not apply to it) and ``(False, message)`` otherwise, where
message is already localized or empty. An empty message is replaced by
``get_message(ctx.i18n)`` when the violation is recorded. A constraint may
call ``ctx.stop()`` to prevent further checks on the current property and
may replace the current value through ``ctx.set_current_value()``.

Constraints that additionally provide ``meets_conditions(ctx) -> bool`` are
*conditional*: when it returns False the constraint is skipped entirely.

This module provides CustomConstraint for ad-hoc predicates, ConstraintSet
(all-of / one-of composition), ConditionalConstraint (gating on condition
tokens and an others-expression) and ArrayConditionalConstraint (gating on
the position within an enclosing array).
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from typing_extensions import Protocol, runtime_checkable

from bodyguard import messages
from bodyguard.context import ValidatorContext
from bodyguard.errors import SchemaError
from bodyguard.expressions import OthersExpr, parse_expression
from bodyguard.i18n import I18nContext

CheckResult = Tuple[bool, str]


@runtime_checkable
class Constraint(Protocol):
    """A predicate over one value plus the message used when it fails."""

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        ...

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        ...


@runtime_checkable
class Conditional(Protocol):
    """Optional capability gating whether a constraint is checked at all."""

    def meets_conditions(self, ctx: ValidatorContext) -> bool:
        ...


def is_applicable(constraint: Any, ctx: ValidatorContext) -> bool:
    """Whether a constraint should be checked (i.e. it is not a conditional that is switched off)."""
    if isinstance(constraint, Conditional):
        return constraint.meets_conditions(ctx)
    return True


def default_message(i18n: Optional[I18nContext], message: str, fallback: str) -> str:
    """Localize message, or fallback when message is empty."""
    text = message or fallback
    if i18n is None:
        return text
    return i18n.translate_message(text)


def failure_message(constraint: Any, message: str, ctx: ValidatorContext) -> str:
    """The message for a failed check: the returned one, else the constraint's default."""
    if message:
        return message
    return constraint.get_message(ctx.i18n)


CheckFunc = Callable[[Any, ValidatorContext, "CustomConstraint"], CheckResult]


@dataclass(frozen=True)
class CustomConstraint:
    """A constraint whose check is an arbitrary function.

    The function receives ``(value, ctx, constraint)`` and returns
    ``(passed, message)``.

    Attributes:
        check_fn: The predicate
        message: Message used when the predicate fails without one

    Examples:
        >>> even = CustomConstraint(lambda v, ctx, c: (v % 2 == 0, ""), "Value must be even")
        >>> even.get_message(None)
        'Value must be even'
    """
    check_fn: CheckFunc
    message: str = ""

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        return self.check_fn(value, ctx, self)

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, self.message, messages.MSG_FAILURE)


@dataclass(frozen=True)
class ConstraintSet:
    """A group of constraints with all-of or one-of semantics.

    With ``one_of=False`` every (applicable) child must pass; the first
    failing child ends the check and its message is reported unless the set
    has its own. With ``one_of=True`` at least one applicable child must
    pass; child messages are never surfaced and children that are switched
    off by their conditions do not count. A one-of set whose children are
    all switched off passes.

    Attributes:
        constraints: Child constraints, checked in order
        one_of: One-of instead of all-of semantics
        message: Message reported instead of the child's (or the generic one)
        stop: Cease further checks on the property when the set fails
    """
    constraints: List[Any] = field(default_factory=list)
    one_of: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.one_of:
            return self._check_one_of(value, ctx)
        return self._check_all_of(value, ctx)

    def _check_all_of(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        start = ctx.current_value
        for constraint in self.constraints:
            if not is_applicable(constraint, ctx):
                continue
            passed, msg = constraint.check(value, ctx)
            if not passed:
                if self.stop:
                    ctx.stop()
                if self.message:
                    return False, self.get_message(ctx.i18n)
                return False, failure_message(constraint, msg, ctx)
            if ctx.current_value is not start:
                # a child replaced the value; later children see the new one
                start = value = ctx.current_value
            if not ctx.continuing:
                break
        return True, ""

    def _check_one_of(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        tried = 0
        for constraint in self.constraints:
            if not is_applicable(constraint, ctx):
                continue
            tried += 1
            was_stopped = ctx.stopped
            passed, _ = constraint.check(value, ctx)
            if not was_stopped:
                ctx.resume()
            if passed:
                return True, ""
        if tried == 0:
            return True, ""
        if self.stop:
            ctx.stop()
        return False, self.get_message(ctx.i18n)

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        if self.message:
            return default_message(i18n, self.message, "")
        fmt = messages.FMT_CONSTRAINT_SET_ONE_OF if self.one_of else messages.FMT_CONSTRAINT_SET_ALL_OF
        if i18n is None:
            return fmt.format(len(self.constraints))
        return i18n.translate_format(fmt, len(self.constraints))


@dataclass(frozen=True)
class ConditionalConstraint:
    """Wraps a constraint so it is only checked under certain conditions.

    Attributes:
        constraint: The wrapped constraint
        when: Condition tokens that must all hold (``!tok`` requires absence)
        others: Others-expression that must hold over the current object
            (text is parsed on construction)

    Raises:
        ExpressionError: If ``others`` is not a well-formed expression
    """
    constraint: Any
    when: List[str] = field(default_factory=list)
    others: Optional[OthersExpr] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "others", parse_expression(self.others))
        object.__setattr__(self, "when", list(self.when or []))

    def meets_conditions(self, ctx: ValidatorContext) -> bool:
        if not ctx.meets_when_conditions(self.when):
            return False
        return self.others is None or self.others.evaluate(ctx)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not is_applicable(self.constraint, ctx):
            return True, ""
        passed, msg = self.constraint.check(value, ctx)
        if passed:
            return True, ""
        return False, failure_message(self.constraint, msg, ctx)

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        return self.constraint.get_message(i18n)


_INDEX_PREDICATE = re.compile(r"^(!?)(first|last|[<>%]?\d+)$")


@dataclass(frozen=True)
class ArrayConditionalConstraint:
    """Wraps a constraint so it is only checked at certain array positions.

    ``when`` is one of ``first``, ``last``, ``>N``, ``<N``, ``%N`` (every
    Nth element, counting from 0) or an exact index ``N``; a leading ``!``
    inverts it. ``ancestry`` selects which enclosing array element to look
    at (0 = the innermost).

    Raises:
        SchemaError: If ``when`` is not a recognised predicate
    """
    when: str
    constraint: Any
    ancestry: int = 0

    def __post_init__(self) -> None:
        match = _INDEX_PREDICATE.match(self.when or "")
        if match is None:
            raise SchemaError(f"Invalid array condition {self.when!r}")
        body = match.group(2)
        if body.startswith("%") and int(body[1:]) == 0:
            raise SchemaError(f"Invalid array condition {self.when!r} - modulus must not be zero")
        if self.ancestry < 0:
            raise SchemaError("Array condition ancestry must not be negative")

    def _matches(self, index: int, size: int) -> bool:
        body = self.when.lstrip("!")
        if body == "first":
            return index == 0
        if body == "last":
            return index == size - 1
        if body[0] == ">":
            return index > int(body[1:])
        if body[0] == "<":
            return index < int(body[1:])
        if body[0] == "%":
            return index % int(body[1:]) == 0
        return index == int(body)

    def meets_conditions(self, ctx: ValidatorContext) -> bool:
        index, size, ok = ctx.ancestry_index(self.ancestry)
        if not ok:
            return False
        result = self._matches(index, size)
        return not result if self.when.startswith("!") else result

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not is_applicable(self.constraint, ctx):
            return True, ""
        passed, msg = self.constraint.check(value, ctx)
        if passed:
            return True, ""
        return False, failure_message(self.constraint, msg, ctx)

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        return self.constraint.get_message(i18n)


__all__ = [
    "CheckResult",
    "Constraint",
    "Conditional",
    "is_applicable",
    "default_message",
    "failure_message",
    "CustomConstraint",
    "ConstraintSet",
    "ConditionalConstraint",
    "ArrayConditionalConstraint",
]
