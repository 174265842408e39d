"""Validator context: the state threaded through one validation walk.

A ValidatorContext owns:
- the path stack, one frame per property name or array index entered
  (frame 0 is the document root and is never popped);
- the stack of objects being walked, used by others-expressions and
  cross-property lookups;
- the condition tokens set during the walk, each owned by the frame depth
  at which it stops being visible;
- the accumulating violation list and the stop flags;
- the I18nContext used to localize messages.

A context lives for exactly one validation call and is not shared between
threads.

Ancestor indexes count outward from the current frame: 0 is the immediate
parent, and the root document sits at index ``current_depth - 1``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from bodyguard.errors import Violation
from bodyguard.i18n import I18nContext, resolve_i18n
from bodyguard.types import ConditionScope, ViolationCode

logger = logging.getLogger(__name__)

PathSegment = Union[str, int, None]

_GLOBAL_OWNER = -1


@dataclass
class _Frame:
    property: PathSegment
    value: Any
    path: str
    full_path: str
    property_validator: Any = None
    ceased: bool = False


@dataclass
class _ConditionEntry:
    token: str
    negated: bool
    owner: int


def _split_token(token: str) -> Tuple[str, bool]:
    if token.startswith("!"):
        return token[1:], True
    return token, False


class ValidatorContext:
    """State of a single validation walk.

    Args:
        root: The decoded document being validated
        i18n: Localization context (None means the default provider's default)
        stop_on_first: Stop the whole walk at the first violation

    Examples:
        >>> ctx = ValidatorContext({"foo": {"bar": 1}})
        >>> ctx.push_property("foo", {"bar": 1})
        >>> ctx.push_property("bar", 1)
        >>> ctx.current_path, ctx.current_property, ctx.current_depth
        ('foo', 'bar', 2)
    """

    def __init__(self, root: Any, i18n: Optional[I18nContext] = None, stop_on_first: bool = False) -> None:
        self.root = root
        self.i18n = resolve_i18n(i18n)
        self.stop_on_first = stop_on_first
        self.violations: List[Violation] = []
        self._continue_all = True
        self._frames: List[_Frame] = [_Frame(None, root, "", "")]
        self._objects: List[Any] = []
        self._declared: List[FrozenSet[str]] = []
        self._conditions: List[_ConditionEntry] = []

    # -- violations and flow control -------------------------------------

    def add_violation(self, violation: Violation) -> None:
        self.violations.append(violation)
        if self.stop_on_first:
            self._continue_all = False

    def add_violation_for_current(
        self,
        message: str,
        *,
        code: Optional[ViolationCode] = None,
        bad_request: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a violation located at the current frame."""
        frame = self._frames[-1]
        if isinstance(frame.property, str):
            prop, path = frame.property, frame.path
        else:
            prop, path = "", frame.full_path
        self.add_violation(Violation(
            message=message,
            property=prop,
            path=path,
            bad_request=bad_request,
            metadata=dict(metadata or {}),
            code=code,
        ))

    def add_violation_property_for_current(
        self,
        property_name: str,
        message: str,
        *,
        code: Optional[ViolationCode] = None,
        bad_request: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a violation for a named property of the current value (e.g. a missing one)."""
        self.add_violation(Violation(
            message=message,
            property=property_name,
            path=self._frames[-1].full_path,
            bad_request=bad_request,
            metadata=dict(metadata or {}),
            code=code,
        ))

    def stop(self) -> None:
        """Cease further checks on the current property."""
        self._frames[-1].ceased = True

    def resume(self) -> None:
        """Clear a cease set by stop() on the current property."""
        self._frames[-1].ceased = False

    def stop_all(self) -> None:
        """Abandon the rest of the walk."""
        self._continue_all = False

    @property
    def stopped(self) -> bool:
        """Whether checks on the current property have been ceased."""
        return self._frames[-1].ceased

    @property
    def continue_all(self) -> bool:
        return self._continue_all

    @property
    def continuing(self) -> bool:
        """Whether further checks on the current property may run."""
        return self._continue_all and not self._frames[-1].ceased

    # -- path stack --------------------------------------------------------

    def push_property(self, name: str, value: Any, property_validator: Any = None) -> None:
        parent = self._frames[-1]
        full_path = f"{parent.full_path}.{name}" if parent.full_path else name
        self._frames.append(_Frame(name, value, parent.full_path, full_path, property_validator))

    def push_index(self, index: int, value: Any, property_validator: Any = None) -> None:
        parent = self._frames[-1]
        self._frames.append(_Frame(index, value, parent.full_path, f"{parent.full_path}[{index}]", property_validator))

    def pop(self) -> None:
        """Pop the current frame, dropping the conditions it owned. The root frame is never popped."""
        depth = len(self._frames) - 1
        if depth == 0:
            return
        self._frames.pop()
        self._conditions = [c for c in self._conditions if c.owner < depth]

    def push_object(self, obj: Any, declared: Iterable[str] = ()) -> None:
        self._objects.append(obj)
        self._declared.append(frozenset(declared))

    def pop_object(self) -> None:
        if self._objects:
            self._objects.pop()
            self._declared.pop()

    @property
    def declared_properties(self) -> FrozenSet[str]:
        """Property names the schema declares for the current object (variants included)."""
        return self._declared[-1] if self._declared else frozenset()

    def ancestor_object(self, level: int) -> Optional[Any]:
        """The object being walked ``level`` steps out (0 = current object)."""
        if level < 0 or level >= len(self._objects):
            return None
        return self._objects[len(self._objects) - 1 - level]

    @property
    def current_object(self) -> Optional[Any]:
        return self.ancestor_object(0)

    @property
    def current_depth(self) -> int:
        return len(self._frames) - 1

    @property
    def current_value(self) -> Any:
        return self._frames[-1].value

    @property
    def current_property(self) -> PathSegment:
        return self._frames[-1].property

    @property
    def current_property_name(self) -> Optional[str]:
        prop = self._frames[-1].property
        return prop if isinstance(prop, str) else None

    @property
    def current_array_index(self) -> Optional[int]:
        prop = self._frames[-1].property
        return prop if isinstance(prop, int) else None

    @property
    def current_path(self) -> str:
        """Dotted path of the ancestors of the current frame."""
        return self._frames[-1].path

    @property
    def current_full_path(self) -> str:
        """Dotted path of the current frame itself."""
        return self._frames[-1].full_path

    @property
    def current_property_validator(self) -> Any:
        return self._frames[-1].property_validator

    def set_current_value(self, value: Any) -> bool:
        """Replace the current value, in the frame and in the document.

        Returns:
            False when the current frame is the document root (which cannot be replaced)
        """
        if len(self._frames) < 2:
            return False
        frame = self._frames[-1]
        container = self._frames[-2].value
        try:
            container[frame.property] = value
        except (TypeError, KeyError, IndexError):
            logger.debug("Cannot set value at %s", frame.full_path)
            return False
        frame.value = value
        return True

    def _ancestor(self, n: int) -> Optional[_Frame]:
        i = len(self._frames) - 2 - n
        if n < 0 or i < 0:
            return None
        return self._frames[i]

    def ancestor_value(self, n: int) -> Tuple[Any, bool]:
        frame = self._ancestor(n)
        return (frame.value, True) if frame is not None else (None, False)

    def ancestor_property(self, n: int) -> Tuple[PathSegment, bool]:
        frame = self._ancestor(n)
        return (frame.property, True) if frame is not None else (None, False)

    def ancestor_property_name(self, n: int) -> Tuple[Optional[str], bool]:
        frame = self._ancestor(n)
        if frame is not None and isinstance(frame.property, str):
            return frame.property, True
        return None, False

    def ancestor_array_index(self, n: int) -> Tuple[Optional[int], bool]:
        frame = self._ancestor(n)
        if frame is not None and isinstance(frame.property, int):
            return frame.property, True
        return None, False

    def ancestor_path(self, n: int) -> Tuple[Optional[str], bool]:
        frame = self._ancestor(n)
        return (frame.path, True) if frame is not None else (None, False)

    def ancestry_index(self, n: int) -> Tuple[int, int, bool]:
        """The index and array size of the nth enclosing array element (0 = innermost).

        The current frame itself counts when it is an array element.
        """
        seen = 0
        for i in range(len(self._frames) - 1, 0, -1):
            frame = self._frames[i]
            if isinstance(frame.property, int):
                if seen == n:
                    container = self._frames[i - 1].value
                    size = len(container) if isinstance(container, list) else 0
                    return frame.property, size, True
                seen += 1
        return -1, -1, False

    def values_ancestry(self) -> List[Any]:
        """Values of every enclosing frame, innermost first, ending with the root."""
        return [f.value for f in reversed(self._frames[:-1])]

    def other_property(self, path: str) -> Tuple[Any, bool]:
        """Resolve a property relative to the current object.

        A single (or no) leading dot starts at the current object; each further
        dot climbs one enclosing object. Remaining dotted segments descend into
        nested objects.

        Examples:
            >>> ctx = ValidatorContext({"a": 1, "b": {"c": 2}})
            >>> ctx.push_object(ctx.root)
            >>> ctx.other_property("b.c")
            (2, True)
        """
        dots = len(path) - len(path.lstrip("."))
        obj = self.ancestor_object(max(dots - 1, 0))
        names = path[dots:].split(".")
        for name in names:
            if not isinstance(obj, dict) or name not in obj:
                return None, False
            obj = obj[name]
        return obj, True

    # -- conditions --------------------------------------------------------

    def set_condition(self, token: str) -> None:
        """Set a token visible until the current frame is popped."""
        self._add_condition(token, self.current_depth)

    def set_parent_condition(self, token: str) -> None:
        """Set a token visible until the parent frame is popped."""
        self._add_condition(token, max(self.current_depth - 1, 0))

    def set_global_condition(self, token: str) -> None:
        """Set a token visible for the rest of the walk."""
        self._add_condition(token, _GLOBAL_OWNER)

    def set_condition_in_scope(self, token: str, scope: ConditionScope) -> None:
        if scope == ConditionScope.GLOBAL:
            self.set_global_condition(token)
        elif scope == ConditionScope.PARENT:
            self.set_parent_condition(token)
        else:
            self.set_condition(token)

    def clear_condition(self, token: str) -> None:
        """Set the negation of a token at the current frame."""
        name, negated = _split_token(token)
        self._add_condition(name if negated else "!" + name, self.current_depth)

    def _add_condition(self, token: str, owner: int) -> None:
        name, negated = _split_token(token)
        if name:
            self._conditions.append(_ConditionEntry(name, negated, owner))

    def is_condition(self, token: str) -> bool:
        """Whether a token is set (and not negated more recently).

        A ``!`` prefixed query asks the opposite question.
        """
        name, negated = _split_token(token)
        for entry in reversed(self._conditions):
            if entry.token == name:
                return entry.negated == negated
        return negated

    def meets_when_conditions(self, tokens: Optional[List[str]]) -> bool:
        """True iff every token holds (``!tok`` requires tok to be absent)."""
        return all(self.is_condition(t) for t in tokens or ())

    def meets_unwanted_conditions(self, tokens: Optional[List[str]]) -> bool:
        """True iff any positive token is present or any negated token is absent."""
        return any(self.is_condition(t) for t in tokens or ())

    @property
    def conditions(self) -> List[str]:
        """Currently set (non-negated) tokens, oldest first."""
        result: List[str] = []
        for entry in self._conditions:
            if entry.token not in result and self.is_condition(entry.token):
                result.append(entry.token)
        return result

    # -- i18n --------------------------------------------------------------

    def translate_message(self, message: str) -> str:
        return self.i18n.translate_message(message)

    def translate_format(self, fmt: str, *args: Any) -> str:
        return self.i18n.translate_format(fmt, *args)

    def translate_token(self, token: str) -> str:
        return self.i18n.translate_token(token)


def new_context(root: Any, i18n: Optional[I18nContext] = None, stop_on_first: bool = False) -> ValidatorContext:
    """Create a context for validating root."""
    return ValidatorContext(root, i18n=i18n, stop_on_first=stop_on_first)


__all__ = [
    "ValidatorContext",
    "new_context",
]
