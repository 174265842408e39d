"""Built-in leaf constraints.

A representative catalog of ready-made constraints. Each is a frozen
dataclass whose fields are its parameters, plus:

- ``message``: replaces the default violation message when non-empty
- ``stop``: when True a failure ceases further checks on the property

String constraints pass values that are not strings unless ``strict`` is
set, numeric constraints likewise pass non-numbers. Numeric comparisons
accept ints, floats and Decimals interchangeably.

StringTrim, StringNormalizeUnicode, SetConditionFrom and
SetConditionProperty never fail; the first two replace the current value
(later constraints on the property see the replaced value), the last two
set condition tokens.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional, Pattern

from dateutil import parser as date_parser
from dateutil import tz

from bodyguard import messages
from bodyguard.constraints import CheckResult, default_message
from bodyguard.context import ValidatorContext
from bodyguard.errors import SchemaError
from bodyguard.i18n import I18nContext
from bodyguard.types import ConditionScope, is_json_number


class _Leaf:
    """Shared behaviour of leaf constraints (message override and stop)."""

    message: str
    stop: bool

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_FAILURE)

    def get_message(self, i18n: Optional[I18nContext]) -> str:
        if self.message:
            return default_message(i18n, self.message, "")
        return self.default_message(i18n)

    def fail(self, ctx: ValidatorContext) -> CheckResult:
        if self.stop:
            ctx.stop()
        return False, self.get_message(ctx.i18n)


def _format(i18n: Optional[I18nContext], fmt: str, *args: Any) -> str:
    if i18n is None:
        return fmt.format(*args)
    return i18n.translate_format(fmt, *args)


def _token(i18n: Optional[I18nContext], token: str) -> str:
    if i18n is None:
        return token
    return i18n.translate_token(token)


def _inclusivity(i18n: Optional[I18nContext], exclusive: bool) -> str:
    return _token(i18n, messages.TOKEN_EXCLUSIVE if exclusive else messages.TOKEN_INCLUSIVE)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise SchemaError(f"Invalid regular expression {pattern!r}: {e}") from e


# -- strings ----------------------------------------------------------------

@dataclass(frozen=True)
class StringNotEmpty(_Leaf):
    """String value must not be empty."""
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if value == "":
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_NOT_EMPTY_STRING)


@dataclass(frozen=True)
class StringNotBlank(_Leaf):
    """String value must contain something other than whitespace."""
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if value.strip() == "":
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_NOT_BLANK_STRING)


@dataclass(frozen=True)
class StringMinLength(_Leaf):
    value: int = 0
    exclusive_min: bool = False
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            length = len(value)
            if length < self.value or (self.exclusive_min and length == self.value):
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(i18n, messages.FMT_STRING_MIN_LEN, self.value + 1 if self.exclusive_min else self.value)


@dataclass(frozen=True)
class StringMaxLength(_Leaf):
    value: int = 0
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            length = len(value)
            if length > self.value or (self.exclusive_max and length == self.value):
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(i18n, messages.FMT_STRING_MAX_LEN, self.value - 1 if self.exclusive_max else self.value)


@dataclass(frozen=True)
class StringLength(_Leaf):
    """String length must lie between minimum and maximum (a maximum of 0 means unbounded)."""
    minimum: int = 0
    maximum: int = 0
    exclusive_min: bool = False
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if not _length_within(len(value), self.minimum, self.maximum, self.exclusive_min, self.exclusive_max):
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        if self.maximum > 0:
            return _format(
                i18n, messages.FMT_STRING_MIN_MAX_LEN,
                self.minimum, _inclusivity(i18n, self.exclusive_min),
                self.maximum, _inclusivity(i18n, self.exclusive_max),
            )
        return _format(i18n, messages.FMT_STRING_MIN_LEN, self.minimum + 1 if self.exclusive_min else self.minimum)


def _length_within(length: int, minimum: int, maximum: int, exclusive_min: bool, exclusive_max: bool) -> bool:
    if length < minimum or (exclusive_min and length == minimum):
        return False
    if maximum > 0 and (length > maximum or (exclusive_max and length == maximum)):
        return False
    return True


@dataclass(frozen=True)
class StringPattern(_Leaf):
    """String value must match a regular expression (searched, so anchor it as required).

    Raises:
        SchemaError: If regex does not compile
    """
    regex: str = ""
    message: str = ""
    stop: bool = False
    strict: bool = False

    def __post_init__(self) -> None:
        _compile(self.regex)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if _compile(self.regex).search(value) is None:
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_VALID_PATTERN)


@dataclass(frozen=True)
class StringValidToken(_Leaf):
    """String value must be one of a fixed set of tokens."""
    tokens: List[str] = field(default_factory=list)
    ignore_case: bool = False
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if self.ignore_case:
                found = value.lower() in {t.lower() for t in self.tokens}
            else:
                found = value in self.tokens
            if not found:
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(i18n, messages.FMT_VALID_TOKEN, ", ".join(f'"{t}"' for t in self.tokens))


_UUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-([0-9a-fA-F])[0-9a-fA-F]{3}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


@dataclass(frozen=True)
class StringValidUuid(_Leaf):
    """String value must be a UUID, optionally of a minimum or specific version."""
    min_version: int = 0
    specific_version: int = 0
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            match = _UUID_PATTERN.match(value)
            if match is None:
                return self.fail(ctx)
            version = int(match.group(1), 16)
            if self.specific_version and version != self.specific_version:
                return self.fail(ctx)
            if version < self.min_version:
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        if self.specific_version:
            return _format(i18n, messages.FMT_UUID_CORRECT_VERSION, self.specific_version)
        return default_message(i18n, "", messages.MSG_VALID_UUID)


_ISO_DATETIME_FULL = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(([+-]\d{2}:\d{2})|Z)?$")
_ISO_DATETIME_NO_OFFSET = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?$")
_ISO_DATETIME_NO_MILLIS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(([+-]\d{2}:\d{2})|Z)?$")
_ISO_DATETIME_MIN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_iso(value: str) -> Optional[datetime]:
    try:
        return date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class StringValidISODatetime(_Leaf):
    """String value must be an ISO-8601 date/time (``YYYY-MM-DDThh:mm:ss[.sss][Z|+-hh:mm]``)."""
    no_offset: bool = False
    no_millis: bool = False
    message: str = ""
    stop: bool = False
    strict: bool = False

    def _pattern(self) -> Pattern[str]:
        if self.no_offset and self.no_millis:
            return _ISO_DATETIME_MIN
        if self.no_offset:
            return _ISO_DATETIME_NO_OFFSET
        if self.no_millis:
            return _ISO_DATETIME_NO_MILLIS
        return _ISO_DATETIME_FULL

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if not self._pattern().match(value) or _parse_iso(value) is None:
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        if self.no_offset and self.no_millis:
            return default_message(i18n, "", messages.MSG_VALID_ISO_DATETIME_MIN)
        if self.no_offset:
            return default_message(i18n, "", messages.MSG_VALID_ISO_DATETIME_NO_OFFSET)
        if self.no_millis:
            return default_message(i18n, "", messages.MSG_VALID_ISO_DATETIME_NO_MILLIS)
        return default_message(i18n, "", messages.MSG_VALID_ISO_DATETIME)


@dataclass(frozen=True)
class StringValidISODate(_Leaf):
    message: str = ""
    stop: bool = False
    strict: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            if not _ISO_DATE.match(value) or _parse_iso(value) is None:
                return self.fail(ctx)
        elif self.strict:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_VALID_ISO_DATE)


def _to_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    parsed = _parse_iso(value)
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.tzutc())
    return parsed


@dataclass(frozen=True)
class DatetimeFuture(_Leaf):
    """Value must be an ISO date/time after now (values without an offset are taken as UTC)."""
    exclude_time: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        dt = _to_datetime(value)
        if dt is None:
            return self.fail(ctx)
        now = datetime.now(tz.tzutc())
        if self.exclude_time:
            passed = dt.astimezone(tz.tzutc()).date() > now.date()
        else:
            passed = dt > now
        return (True, "") if passed else self.fail(ctx)

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_DATETIME_FUTURE)


@dataclass(frozen=True)
class DatetimePast(_Leaf):
    """Value must be an ISO date/time before now (values without an offset are taken as UTC)."""
    exclude_time: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        dt = _to_datetime(value)
        if dt is None:
            return self.fail(ctx)
        now = datetime.now(tz.tzutc())
        if self.exclude_time:
            passed = dt.astimezone(tz.tzutc()).date() < now.date()
        else:
            passed = dt < now
        return (True, "") if passed else self.fail(ctx)

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_DATETIME_PAST)


# -- numbers ----------------------------------------------------------------

@dataclass(frozen=True)
class Positive(_Leaf):
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_json_number(value) and not value > 0:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_POSITIVE)


@dataclass(frozen=True)
class PositiveOrZero(_Leaf):
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_json_number(value) and not value >= 0:
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_POSITIVE_OR_ZERO)


@dataclass(frozen=True)
class Minimum(_Leaf):
    value: float = 0
    exclusive_min: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_json_number(value):
            if value < self.value or (self.exclusive_min and value == self.value):
                return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(i18n, messages.FMT_GT if self.exclusive_min else messages.FMT_GTE, self.value)


@dataclass(frozen=True)
class Maximum(_Leaf):
    value: float = 0
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_json_number(value):
            if value > self.value or (self.exclusive_max and value == self.value):
                return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(i18n, messages.FMT_LT if self.exclusive_max else messages.FMT_LTE, self.value)


@dataclass(frozen=True)
class Range(_Leaf):
    minimum: float = 0
    maximum: float = 0
    exclusive_min: bool = False
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if is_json_number(value):
            if value < self.minimum or (self.exclusive_min and value == self.minimum):
                return self.fail(ctx)
            if value > self.maximum or (self.exclusive_max and value == self.maximum):
                return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(
            i18n, messages.FMT_RANGE,
            self.minimum, _inclusivity(i18n, self.exclusive_min),
            self.maximum, _inclusivity(i18n, self.exclusive_max),
        )


# -- arrays, objects and cross-property ----------------------------------------

@dataclass(frozen=True)
class Length(_Leaf):
    """Length of a string, array or object must lie between minimum and maximum (0 = unbounded)."""
    minimum: int = 0
    maximum: int = 0
    exclusive_min: bool = False
    exclusive_max: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, (str, list, dict)):
            if not _length_within(len(value), self.minimum, self.maximum, self.exclusive_min, self.exclusive_max):
                return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(
            i18n, messages.FMT_MIN_MAX_LEN,
            self.minimum, _inclusivity(i18n, self.exclusive_min),
            self.maximum, _inclusivity(i18n, self.exclusive_max),
        )


def _unique_key(item: Any, ignore_case: bool = False) -> Any:
    # Tagged by JSON kind so 1.5 and "1.5" differ while 1, 1.0 and Decimal("1.0") agree.
    if item is None:
        return ("null",)
    if isinstance(item, bool):
        return ("bool", item)
    if is_json_number(item):
        return ("number", item)
    if isinstance(item, str):
        return ("string", item.lower() if ignore_case else item)
    if isinstance(item, list):
        return ("array", tuple(_unique_key(i) for i in item))
    if isinstance(item, dict):
        return ("object", tuple(sorted((k, _unique_key(v)) for k, v in item.items())))
    return ("other", repr(item))


@dataclass(frozen=True)
class ArrayUnique(_Leaf):
    """Array elements must be distinct (compared by JSON value; numbers compare numerically)."""
    ignore_nulls: bool = False
    ignore_case: bool = False
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, list):
            seen = set()
            for item in value:
                if item is None and self.ignore_nulls:
                    continue
                key = _unique_key(item, self.ignore_case)
                if key in seen:
                    return self.fail(ctx)
                seen.add(key)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return default_message(i18n, "", messages.MSG_ARRAY_UNIQUE)


@dataclass(frozen=True)
class EqualsOther(_Leaf):
    """Value must equal another property of the current object.

    ``property`` is resolved relative to the current object: leading dots
    beyond the first climb enclosing objects (``..total``), inner dots descend
    (``totals.net``). A missing other property fails.
    """
    property: str = ""
    message: str = ""
    stop: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        other, ok = ctx.other_property(self.property)
        if not ok or other != value or isinstance(other, bool) != isinstance(value, bool):
            return self.fail(ctx)
        return True, ""

    def default_message(self, i18n: Optional[I18nContext]) -> str:
        return _format(i18n, messages.FMT_EQUALS_OTHER, self.property)


# -- utility ------------------------------------------------------------------

@dataclass(frozen=True)
class FailingConstraint(_Leaf):
    """Always fails; ``stop_all`` abandons the whole validation."""
    message: str = ""
    stop: bool = False
    stop_all: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if self.stop_all:
            ctx.stop_all()
        return self.fail(ctx)


@dataclass(frozen=True)
class FailWhen(_Leaf):
    """Fails when all of the given condition tokens hold."""
    conditions: List[str] = field(default_factory=list)
    message: str = ""
    stop: bool = False
    stop_all: bool = False

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if not ctx.meets_when_conditions(self.conditions):
            return True, ""
        if self.stop_all:
            ctx.stop_all()
        return self.fail(ctx)


class _NoMessage:
    def get_message(self, i18n: Optional[I18nContext]) -> str:
        return ""


@dataclass(frozen=True)
class StringTrim(_NoMessage):
    """Replaces a string value with its trimmed form.

    ``cutset`` lists the characters to strip; empty strips all leading and
    trailing whitespace.
    """
    cutset: str = ""

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            ctx.set_current_value(value.strip(self.cutset) if self.cutset else value.strip())
        return True, ""


@dataclass(frozen=True)
class StringNormalizeUnicode(_NoMessage):
    """Replaces a string value with its unicode normalized form (NFC, NFD, NFKC or NFKD)."""
    form: str = "NFC"

    def __post_init__(self) -> None:
        if self.form not in ("NFC", "NFD", "NFKC", "NFKD"):
            raise SchemaError(f"Unknown unicode normalization form {self.form!r}")

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            ctx.set_current_value(unicodedata.normalize(self.form, value))
        return True, ""


@dataclass(frozen=True)
class SetConditionFrom(_NoMessage):
    """Sets a condition token from a string value (optionally prefixed and mapped)."""
    scope: ConditionScope = ConditionScope.LOCAL
    prefix: str = ""
    mapping: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scope", ConditionScope(self.scope))

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, str):
            ctx.set_condition_in_scope(self.prefix + self.mapping.get(value, value), self.scope)
        return True, ""


@dataclass(frozen=True)
class SetConditionProperty(_NoMessage):
    """Sets a condition token from a string property of the object being checked.

    Placed on the property holding the object, the token is visible while
    that object (including its conditional variants) is validated.
    """
    property_name: str = ""
    prefix: str = ""
    mapping: Dict[str, str] = field(default_factory=dict)

    def check(self, value: Any, ctx: ValidatorContext) -> CheckResult:
        if isinstance(value, dict):
            raw = value.get(self.property_name)
            if isinstance(raw, str):
                ctx.set_condition(self.prefix + self.mapping.get(raw, raw))
        return True, ""


__all__ = [
    "StringNotEmpty",
    "StringNotBlank",
    "StringMinLength",
    "StringMaxLength",
    "StringLength",
    "StringPattern",
    "StringValidToken",
    "StringValidUuid",
    "StringValidISODatetime",
    "StringValidISODate",
    "DatetimeFuture",
    "DatetimePast",
    "Positive",
    "PositiveOrZero",
    "Minimum",
    "Maximum",
    "Range",
    "Length",
    "ArrayUnique",
    "EqualsOther",
    "FailingConstraint",
    "FailWhen",
    "StringTrim",
    "StringNormalizeUnicode",
    "SetConditionFrom",
    "SetConditionProperty",
]
