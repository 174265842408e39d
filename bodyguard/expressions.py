"""Others-expressions: boolean expressions over property presence.

An others-expression is evaluated relative to the object currently being
walked and answers questions such as "is ``foo`` present and ``baz``
absent?". It is used by ``PropertyValidator.required_with`` /
``unwanted_with`` and by ``ConditionalConstraint.others``.

Grammar (``!`` binds tightest, then ``&&``, ``^^`` and ``||``)::

    expr   := xor ('||' xor)*
    xor    := and ('^^' and)*
    and    := unary ('&&' unary)*
    unary  := '!' unary | '(' expr ')' | ref
    ref    := '~' name | '.'* name ('.' name)*
    name   := [A-Za-z0-9_$@~-]+ | quoted

A reference with one (or no) leading dot starts at the current object; each
additional dot climbs one enclosing object. Inner segments traverse nested
objects and the final segment is true iff that key exists (its value may be
null). A ``~`` reference tests a condition token instead. Anything that
cannot be resolved evaluates to false.

Expressions are parsed once, when the schema is built; a malformed
expression raises ExpressionError there and never during validation.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from typing_extensions import Protocol

from bodyguard.errors import ExpressionError

_NAME_CHARS = re.compile(r"[A-Za-z0-9_$@~\-]")
_CONDITION_CHARS = re.compile(r"[A-Za-z0-9_$@~\-:]")
_PLAIN_NAME = re.compile(r"[A-Za-z0-9_$@\-][A-Za-z0-9_$@~\-]*")
_PLAIN_TOKEN = re.compile(r"[A-Za-z0-9_$@~\-:]+")

_PREC_OR = 1
_PREC_XOR = 2
_PREC_AND = 3
_PREC_UNARY = 4


class ExpressionScope(Protocol):
    """What an expression needs from the walk to evaluate itself."""

    def ancestor_object(self, level: int) -> Optional[Any]:
        """The enclosing object ``level`` steps out (0 = the current object)."""

    def is_condition(self, token: str) -> bool:
        """Whether a condition token is currently set."""


def _quote(name: str, plain: "re.Pattern[str]") -> str:
    if plain.fullmatch(name):
        return name
    if "'" in name:
        return '"' + name + '"'
    return "'" + name + "'"


class Node:
    """Base class of expression AST nodes."""

    precedence = _PREC_UNARY

    def evaluate(self, scope: ExpressionScope) -> bool:
        raise NotImplementedError

    def render(self) -> str:
        raise NotImplementedError

    def _render_operand(self, operand: "Node") -> str:
        text = operand.render()
        if operand.precedence < self.precedence:
            return f"({text})"
        return text


@dataclass(frozen=True)
class PropertyRef(Node):
    """Presence test of a (possibly nested) property.

    Attributes:
        up: Number of enclosing objects to climb before resolving
        path: Property names; all but the last must resolve to objects
    """
    up: int
    path: Tuple[str, ...]

    def evaluate(self, scope: ExpressionScope) -> bool:
        obj = scope.ancestor_object(self.up)
        for name in self.path[:-1]:
            if not isinstance(obj, dict):
                return False
            obj = obj.get(name)
        return isinstance(obj, dict) and self.path[-1] in obj

    def render(self) -> str:
        return "." * (self.up + 1) + ".".join(_quote(n, _PLAIN_NAME) for n in self.path)


@dataclass(frozen=True)
class ConditionRef(Node):
    """Test of a condition token (``~token``)."""
    token: str

    def evaluate(self, scope: ExpressionScope) -> bool:
        return scope.is_condition(self.token)

    def render(self) -> str:
        return "~" + _quote(self.token, _PLAIN_TOKEN)


@dataclass(frozen=True)
class Not(Node):
    operand: Node

    def evaluate(self, scope: ExpressionScope) -> bool:
        return not self.operand.evaluate(scope)

    def render(self) -> str:
        return "!" + self._render_operand(self.operand)


@dataclass(frozen=True)
class And(Node):
    operands: Tuple[Node, ...]
    precedence = _PREC_AND

    def evaluate(self, scope: ExpressionScope) -> bool:
        return all(op.evaluate(scope) for op in self.operands)

    def render(self) -> str:
        return " && ".join(self._render_operand(op) for op in self.operands)


@dataclass(frozen=True)
class Xor(Node):
    operands: Tuple[Node, ...]
    precedence = _PREC_XOR

    def evaluate(self, scope: ExpressionScope) -> bool:
        result = False
        for op in self.operands:
            result ^= op.evaluate(scope)
        return result

    def render(self) -> str:
        return " ^^ ".join(self._render_operand(op) for op in self.operands)


@dataclass(frozen=True)
class Or(Node):
    operands: Tuple[Node, ...]
    precedence = _PREC_OR

    def evaluate(self, scope: ExpressionScope) -> bool:
        return any(op.evaluate(scope) for op in self.operands)

    def render(self) -> str:
        return " || ".join(self._render_operand(op) for op in self.operands)


class _Parser:
    """Recursive-descent parser over the raw expression text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def fail(self, message: str, position: Optional[int] = None) -> ExpressionError:
        return ExpressionError(self.text, self.pos if position is None else position, message)

    def skip_spaces(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self, token: str) -> bool:
        self.skip_spaces()
        return self.text.startswith(token, self.pos)

    def accept(self, token: str) -> bool:
        if self.peek(token):
            self.pos += len(token)
            return True
        return False

    def parse(self) -> Node:
        self.skip_spaces()
        if self.pos >= len(self.text):
            raise self.fail("Empty expression")
        node = self.parse_or()
        self.skip_spaces()
        if self.pos < len(self.text):
            raise self.fail(f"Unexpected {self.text[self.pos]!r}")
        return node

    def parse_or(self) -> Node:
        operands = [self.parse_xor()]
        while self.accept("||"):
            operands.append(self.parse_xor())
        return operands[0] if len(operands) == 1 else Or(tuple(operands))

    def parse_xor(self) -> Node:
        operands = [self.parse_and()]
        while self.accept("^^"):
            operands.append(self.parse_and())
        return operands[0] if len(operands) == 1 else Xor(tuple(operands))

    def parse_and(self) -> Node:
        operands = [self.parse_unary()]
        while self.accept("&&"):
            operands.append(self.parse_unary())
        return operands[0] if len(operands) == 1 else And(tuple(operands))

    def parse_unary(self) -> Node:
        self.skip_spaces()
        if self.pos >= len(self.text):
            raise self.fail("Unexpected end of expression")
        if self.accept("!"):
            return Not(self.parse_unary())
        if self.accept("("):
            start = self.pos - 1
            node = self.parse_or()
            if not self.accept(")"):
                raise self.fail("Unclosed parenthesis", start)
            return node
        if self.text[self.pos] == "~":
            self.pos += 1
            return ConditionRef(self.parse_name(_CONDITION_CHARS))
        return self.parse_property_ref()

    def parse_property_ref(self) -> Node:
        dots = 0
        while self.pos < len(self.text) and self.text[self.pos] == ".":
            dots += 1
            self.pos += 1
        path: List[str] = [self.parse_name(_NAME_CHARS)]
        while self.pos < len(self.text) and self.text[self.pos] == ".":
            self.pos += 1
            path.append(self.parse_name(_NAME_CHARS))
        return PropertyRef(max(dots - 1, 0), tuple(path))

    def parse_name(self, chars: "re.Pattern[str]") -> str:
        start = self.pos
        if self.pos < len(self.text) and self.text[self.pos] in "'\"":
            quote = self.text[self.pos]
            end = self.text.find(quote, self.pos + 1)
            if end < 0:
                raise self.fail("Unterminated quoted name", start)
            name = self.text[self.pos + 1:end]
            if not name:
                raise self.fail("Empty quoted name", start)
            self.pos = end + 1
            return name
        while self.pos < len(self.text) and chars.match(self.text[self.pos]):
            self.pos += 1
        if self.pos == start:
            found = self.text[self.pos] if self.pos < len(self.text) else "end of expression"
            raise self.fail(f"Expected property name but found {found!r}")
        return self.text[start:self.pos]


class OthersExpr:
    """A parsed others-expression.

    Attributes:
        text: The expression as originally written
        root: The root AST node

    Examples:
        >>> expr = OthersExpr.parse(".foo && !.baz")
        >>> str(expr)
        '.foo && !.baz'
        >>> str(OthersExpr.parse("(a || b) && c"))
        '(.a || .b) && .c'
    """

    def __init__(self, text: str, root: Node) -> None:
        self.text = text
        self.root = root

    @classmethod
    def parse(cls, text: str) -> "OthersExpr":
        """Parse expression text.

        Raises:
            ExpressionError: If the text is not a well-formed expression
        """
        if not isinstance(text, str):
            raise ExpressionError(repr(text), 0, "Expression must be a string")
        return cls(text, _Parser(text).parse())

    def evaluate(self, scope: ExpressionScope) -> bool:
        return self.root.evaluate(scope)

    def __str__(self) -> str:
        return self.root.render()

    def __repr__(self) -> str:
        return f"OthersExpr({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, OthersExpr) and self.root == other.root

    def __hash__(self) -> int:
        return hash(self.root)


def parse_expression(text: Any) -> Optional[OthersExpr]:
    """Coerce text (or an already parsed expression, or None) into an OthersExpr."""
    if text is None or isinstance(text, OthersExpr):
        return text
    return OthersExpr.parse(text)


__all__ = [
    "ExpressionScope",
    "Node",
    "PropertyRef",
    "ConditionRef",
    "Not",
    "And",
    "Xor",
    "Or",
    "OthersExpr",
    "parse_expression",
]
