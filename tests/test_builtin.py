"""Unit tests for the built-in constraints.

Tests cover:
- String length, pattern, token, UUID and date/time checks
- Numeric comparisons over ints, floats and Decimals
- Array uniqueness, generic length and cross-property equality
- Value-replacing and condition-setting constraints
- Message overrides and stop flags
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bodyguard.builtin import (
    ArrayUnique,
    DatetimeFuture,
    DatetimePast,
    EqualsOther,
    FailingConstraint,
    FailWhen,
    Length,
    Maximum,
    Minimum,
    Positive,
    PositiveOrZero,
    Range,
    SetConditionFrom,
    SetConditionProperty,
    StringLength,
    StringMaxLength,
    StringMinLength,
    StringNormalizeUnicode,
    StringNotBlank,
    StringNotEmpty,
    StringPattern,
    StringTrim,
    StringValidISODate,
    StringValidISODatetime,
    StringValidToken,
    StringValidUuid,
)
from bodyguard.context import new_context
from bodyguard.errors import SchemaError
from bodyguard.types import ConditionScope


def _ctx(value=None):
    """Context positioned at property "v" holding value."""
    doc = {"v": value}
    ctx = new_context(doc)
    ctx.push_object(doc)
    ctx.push_property("v", value)
    return ctx


def _passes(constraint, value):
    passed, _ = constraint.check(value, _ctx(value))
    return passed


class TestStringConstraints:
    """Test string constraints."""

    def test_not_empty_and_not_blank(self):
        """Should reject empty and whitespace-only strings."""
        assert _passes(StringNotEmpty(), "") is False
        assert _passes(StringNotEmpty(), " ") is True
        assert _passes(StringNotBlank(), " \t") is False
        assert _passes(StringNotBlank(), " x ") is True

    def test_non_strings_pass_unless_strict(self):
        """Should ignore non-strings unless strict."""
        assert _passes(StringNotEmpty(), 5) is True
        assert _passes(StringNotEmpty(strict=True), 5) is False
        assert _passes(StringMinLength(value=3, strict=True), None) is False

    def test_min_length(self):
        """Should enforce the minimum length, optionally exclusive."""
        assert _passes(StringMinLength(value=3), "ab") is False
        assert _passes(StringMinLength(value=3), "abc") is True
        assert _passes(StringMinLength(value=3, exclusive_min=True), "abc") is False

    def test_min_length_message(self):
        """Should state the effective minimum."""
        assert StringMinLength(value=3).get_message(None) == "String value length must be at least 3 characters"
        assert StringMinLength(value=3, exclusive_min=True).get_message(None) == (
            "String value length must be at least 4 characters")

    def test_max_length(self):
        """Should enforce the maximum length, optionally exclusive."""
        assert _passes(StringMaxLength(value=3), "abcd") is False
        assert _passes(StringMaxLength(value=3), "abc") is True
        assert _passes(StringMaxLength(value=3, exclusive_max=True), "abc") is False
        assert StringMaxLength(value=3).get_message(None) == "String value length must not exceed 3 characters"

    def test_length_range(self):
        """Should enforce both bounds, treating a zero maximum as unbounded."""
        c = StringLength(minimum=2, maximum=4)
        assert [_passes(c, s) for s in ("a", "ab", "abcd", "abcde")] == [False, True, True, False]
        assert _passes(StringLength(minimum=2), "x" * 100) is True
        assert c.get_message(None) == "String value length must be between 2 (inclusive) and 4 (inclusive)"

    def test_pattern(self):
        """Should search the value for the pattern."""
        c = StringPattern(regex=r"^[a-z]+$")
        assert _passes(c, "abc") is True
        assert _passes(c, "abc1") is False
        assert _passes(StringPattern(regex=r"\d"), "a1b") is True

    def test_invalid_pattern(self):
        """Should reject a regex that does not compile."""
        with pytest.raises(SchemaError):
            StringPattern(regex="(")

    def test_valid_token(self):
        """Should accept only listed tokens."""
        c = StringValidToken(tokens=["red", "green"])
        assert _passes(c, "red") is True
        assert _passes(c, "Red") is False
        assert _passes(StringValidToken(tokens=["red"], ignore_case=True), "RED") is True
        assert c.get_message(None) == 'String value must be valid token - "red", "green"'

    def test_uuid(self):
        """Should check UUID shape and version."""
        v4 = "123e4567-e89b-42d3-a456-426614174000"
        v1 = "123e4567-e89b-12d3-a456-426614174000"
        assert _passes(StringValidUuid(), v4) is True
        assert _passes(StringValidUuid(), "not-a-uuid") is False
        assert _passes(StringValidUuid(min_version=4), v1) is False
        assert _passes(StringValidUuid(specific_version=1), v1) is True
        assert _passes(StringValidUuid(specific_version=1), v4) is False
        assert StringValidUuid(specific_version=4).get_message(None) == "Value must be a valid UUID (version 4)"


class TestDateConstraints:
    """Test date and date/time constraints."""

    def test_iso_datetime(self):
        """Should accept full ISO date/times."""
        c = StringValidISODatetime()
        assert _passes(c, "2024-01-31T10:20:30Z") is True
        assert _passes(c, "2024-01-31T10:20:30.123+02:00") is True
        assert _passes(c, "2024-01-31") is False
        assert _passes(c, "2024-02-31T10:20:30Z") is False

    def test_iso_datetime_variants(self):
        """Should restrict offsets and fractions when asked."""
        assert _passes(StringValidISODatetime(no_offset=True), "2024-01-31T10:20:30Z") is False
        assert _passes(StringValidISODatetime(no_offset=True), "2024-01-31T10:20:30.5") is True
        assert _passes(StringValidISODatetime(no_millis=True), "2024-01-31T10:20:30.5Z") is False
        assert _passes(StringValidISODatetime(no_offset=True, no_millis=True), "2024-01-31T10:20:30") is True

    def test_iso_date(self):
        """Should accept real calendar dates only."""
        assert _passes(StringValidISODate(), "2024-02-29") is True
        assert _passes(StringValidISODate(), "2023-02-29") is False
        assert _passes(StringValidISODate(), "2024-1-1") is False

    def test_future_and_past(self):
        """Should compare against the current time."""
        future = (datetime.now(timezone.utc) + timedelta(days=3)).strftime("%Y-%m-%dT%H:%M:%SZ")
        past = (datetime.now(timezone.utc) - timedelta(days=3)).strftime("%Y-%m-%dT%H:%M:%SZ")
        assert _passes(DatetimeFuture(), future) is True
        assert _passes(DatetimeFuture(), past) is False
        assert _passes(DatetimePast(), past) is True
        assert _passes(DatetimePast(exclude_time=True), past) is True
        assert _passes(DatetimePast(), "not a date") is False
        assert _passes(DatetimeFuture(), 123) is False


class TestNumericConstraints:
    """Test numeric constraints."""

    def test_positive(self):
        """Should reject zero and negatives."""
        assert _passes(Positive(), 1) is True
        assert _passes(Positive(), 0) is False
        assert _passes(PositiveOrZero(), 0) is True
        assert _passes(PositiveOrZero(), -0.5) is False
        assert _passes(Positive(), "text") is True

    def test_minimum_maximum(self):
        """Should compare ints, floats and Decimals alike."""
        assert _passes(Minimum(value=5), Decimal("5")) is True
        assert _passes(Minimum(value=5, exclusive_min=True), 5.0) is False
        assert _passes(Maximum(value=5), 6) is False
        assert _passes(Maximum(value=5, exclusive_max=True), Decimal("4.99")) is True

    def test_min_max_messages(self):
        """Should pick the comparison wording from exclusivity."""
        assert Minimum(value=5).get_message(None) == "Value must be greater than or equal to 5"
        assert Minimum(value=5, exclusive_min=True).get_message(None) == "Value must be greater than 5"
        assert Maximum(value=5, exclusive_max=True).get_message(None) == "Value must be less than 5"

    def test_range(self):
        """Should enforce both bounds."""
        c = Range(minimum=1, maximum=3, exclusive_max=True)
        assert [_passes(c, n) for n in (0, 1, 2.5, 3)] == [False, True, True, False]
        assert c.get_message(None) == "Value must be between 1 (inclusive) and 3 (exclusive)"

    def test_booleans_are_not_numbers(self):
        """Should not treat booleans as numbers."""
        assert _passes(Positive(), False) is True


class TestCollectionConstraints:
    """Test length, uniqueness and cross-property checks."""

    def test_length(self):
        """Should measure strings, arrays and objects."""
        c = Length(minimum=1, maximum=2)
        assert _passes(c, []) is False
        assert _passes(c, [1, 2]) is True
        assert _passes(c, {"a": 1, "b": 2, "c": 3}) is False
        assert _passes(c, 42) is True

    def test_array_unique(self):
        """Should detect duplicate elements, including objects."""
        assert _passes(ArrayUnique(), [1, 2, 3]) is True
        assert _passes(ArrayUnique(), [{"a": 1, "b": 2}, {"b": 2, "a": 1}]) is False
        assert _passes(ArrayUnique(), ["a", "A"]) is True
        assert _passes(ArrayUnique(ignore_case=True), ["a", "A"]) is False
        assert _passes(ArrayUnique(), [None, None]) is False
        assert _passes(ArrayUnique(ignore_nulls=True), [None, None]) is True

    def test_array_unique_by_kind(self):
        """Should compare numbers numerically and never equate a number with a string."""
        assert _passes(ArrayUnique(), [Decimal("1.5"), "1.5"]) is True
        assert _passes(ArrayUnique(), [1.5, "1.5"]) is True
        assert _passes(ArrayUnique(), [1, Decimal("1.0")]) is False
        assert _passes(ArrayUnique(), [True, 1]) is True
        assert _passes(ArrayUnique(), [[1, "a"], [1, "a"]]) is False
        assert _passes(ArrayUnique(), [{"a": 1}, {"a": "1"}]) is True

    def test_equals_other(self):
        """Should compare with a sibling property."""
        doc = {"password": "s3cret", "confirm": "s3cret"}
        ctx = new_context(doc)
        ctx.push_object(doc)
        ctx.push_property("confirm", "s3cret")
        assert EqualsOther(property="password").check("s3cret", ctx) == (True, "")
        passed, msg = EqualsOther(property="password").check("other", ctx)
        assert passed is False
        assert msg == "Value must equal the value of property 'password'"
        assert EqualsOther(property="missing").check("s3cret", ctx)[0] is False

    def test_equals_other_bool_vs_int(self):
        """Should not treat true as equal to 1."""
        doc = {"a": 1, "b": True}
        ctx = new_context(doc)
        ctx.push_object(doc)
        ctx.push_property("b", True)
        assert EqualsOther(property="a").check(True, ctx)[0] is False


class TestUtilityConstraints:
    """Test failing, replacing and condition-setting constraints."""

    def test_failing_constraint(self):
        """Should always fail, optionally stopping the walk."""
        ctx = _ctx(1)
        assert FailingConstraint(message="nope").check(1, ctx) == (False, "nope")
        assert ctx.continue_all is True
        FailingConstraint(stop_all=True).check(1, ctx)
        assert ctx.continue_all is False

    def test_fail_when(self):
        """Should fail only when its conditions hold."""
        ctx = _ctx(1)
        c = FailWhen(conditions=["locked"], message="Locked")
        assert c.check(1, ctx) == (True, "")
        ctx.set_condition("locked")
        assert c.check(1, ctx) == (False, "Locked")

    def test_stop_flag(self):
        """Should stop the property on failure when stop is set."""
        ctx = _ctx("")
        StringNotEmpty(stop=True).check("", ctx)
        assert ctx.stopped is True

    def test_trim(self):
        """Should replace the value with its trimmed form."""
        doc = {"v": " \tabc \t"}
        ctx = new_context(doc)
        ctx.push_property("v", doc["v"])
        assert StringTrim().check(doc["v"], ctx) == (True, "")
        assert doc["v"] == "abc"
        assert ctx.current_value == "abc"

    def test_trim_cutset(self):
        """Should strip only the given characters."""
        doc = {"v": "--abc- "}
        ctx = new_context(doc)
        ctx.push_property("v", doc["v"])
        StringTrim(cutset="-").check(doc["v"], ctx)
        assert doc["v"] == "abc- "

    def test_trim_all_whitespace(self):
        """Should strip newlines and other whitespace when no cutset is given."""
        doc = {"v": "\n\u00a0abc\r\n"}
        ctx = new_context(doc)
        ctx.push_property("v", doc["v"])
        StringTrim().check(doc["v"], ctx)
        assert doc["v"] == "abc"

    def test_normalize_unicode(self):
        """Should replace the value with its normalized form."""
        decomposed = "e\u0301"
        doc = {"v": decomposed}
        ctx = new_context(doc)
        ctx.push_property("v", decomposed)
        StringNormalizeUnicode().check(decomposed, ctx)
        assert doc["v"] == "\u00e9"

    def test_normalize_unicode_bad_form(self):
        """Should reject unknown forms."""
        with pytest.raises(SchemaError):
            StringNormalizeUnicode(form="XYZ")

    def test_set_condition_from(self):
        """Should set a token from the value, mapped and prefixed."""
        ctx = _ctx("pro")
        SetConditionFrom(prefix="plan_", mapping={"pro": "paid"}).check("pro", ctx)
        assert ctx.is_condition("plan_paid") is True
        ctx.pop()
        assert ctx.is_condition("plan_paid") is False

    def test_set_condition_from_scope(self):
        """Should honour the requested scope."""
        ctx = _ctx("x")
        SetConditionFrom(scope="global").check("x", ctx)
        assert SetConditionFrom(scope="global").scope == ConditionScope.GLOBAL
        ctx.pop()
        assert ctx.is_condition("x") is True

    def test_set_condition_property(self):
        """Should set a token from a property of the object."""
        ctx = new_context({"kind": "car"})
        SetConditionProperty(property_name="kind", prefix="is_").check({"kind": "car"}, ctx)
        assert ctx.is_condition("is_car") is True

    def test_message_override(self):
        """Should prefer an explicit message."""
        assert StringNotEmpty(message="Name required").get_message(None) == "Name required"
        assert StringNotEmpty().get_message(None) == "String value must not be an empty string"
