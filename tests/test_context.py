"""Unit tests for ValidatorContext.

Tests cover:
- Path bookkeeping for property and index frames
- Ancestry lookups (values, names, indexes, array positions)
- Condition scoping (local, parent, global) and negation
- Replacing the current value in the document
- Violation placement and stop flags
"""

from bodyguard.context import ValidatorContext, new_context
from bodyguard.types import ConditionScope, ViolationCode


def _walk(ctx, *segments):
    """Push a sequence of names/indexes, following the document."""
    for seg in segments:
        container = ctx.current_value
        value = container[seg]
        if isinstance(seg, int):
            ctx.push_index(seg, value)
        else:
            ctx.push_property(seg, value)


class TestPaths:
    """Test path bookkeeping."""

    def test_root(self):
        """Should start at the root with empty paths."""
        ctx = new_context({"foo": 1})
        assert ctx.current_depth == 0
        assert ctx.current_path == ""
        assert ctx.current_full_path == ""
        assert ctx.current_property is None
        assert ctx.current_value == {"foo": 1}

    def test_nested_properties(self):
        """Should build dotted paths for nested properties."""
        ctx = new_context({"foo": {"bar": {"baz": 1}}})
        _walk(ctx, "foo", "bar", "baz")
        assert ctx.current_depth == 3
        assert ctx.current_property_name == "baz"
        assert ctx.current_path == "foo.bar"
        assert ctx.current_full_path == "foo.bar.baz"
        assert ctx.current_value == 1

    def test_array_indexes(self):
        """Should render index segments with brackets."""
        ctx = new_context({"items": [{"name": "a"}, {"name": "b"}]})
        _walk(ctx, "items", 1)
        assert ctx.current_array_index == 1
        assert ctx.current_property_name is None
        assert ctx.current_path == "items"
        assert ctx.current_full_path == "items[1]"
        _walk(ctx, "name")
        assert ctx.current_path == "items[1]"
        assert ctx.current_full_path == "items[1].name"

    def test_top_level_array(self):
        """Should render a root array element as [i]."""
        ctx = new_context([{"a": 1}, {"a": 2}])
        _walk(ctx, 0)
        assert ctx.current_full_path == "[0]"
        _walk(ctx, "a")
        assert ctx.current_full_path == "[0].a"

    def test_pop_restores_previous_frame(self):
        """Should return to the parent frame on pop."""
        ctx = new_context({"foo": {"bar": 1}})
        _walk(ctx, "foo", "bar")
        ctx.pop()
        assert ctx.current_property == "foo"
        assert ctx.current_depth == 1

    def test_root_is_never_popped(self):
        """Should ignore pops at the root."""
        ctx = new_context({})
        ctx.pop()
        ctx.pop()
        assert ctx.current_depth == 0
        assert ctx.current_value == {}


class TestAncestry:
    """Test ancestor lookups."""

    def test_ancestor_values(self):
        """Should count ancestors outward from the immediate parent."""
        doc = {"foo": {"bar": {"baz": "x"}}}
        ctx = new_context(doc)
        _walk(ctx, "foo", "bar", "baz")
        assert ctx.ancestor_value(0) == ({"baz": "x"}, True)
        assert ctx.ancestor_value(1) == ({"bar": {"baz": "x"}}, True)
        # root sits at current_depth - 1
        assert ctx.ancestor_value(ctx.current_depth - 1) == (doc, True)
        assert ctx.ancestor_value(ctx.current_depth) == (None, False)

    def test_ancestor_names_and_indexes(self):
        """Should distinguish name and index ancestors."""
        ctx = new_context({"items": [{"name": "a"}]})
        _walk(ctx, "items", 0, "name")
        assert ctx.ancestor_array_index(0) == (0, True)
        assert ctx.ancestor_property_name(0) == (None, False)
        assert ctx.ancestor_property_name(1) == ("items", True)
        assert ctx.ancestor_array_index(1) == (None, False)
        assert ctx.ancestor_property(0) == (0, True)
        assert ctx.ancestor_path(0) == ("items", True)

    def test_negative_ancestor(self):
        """Should report negative levels as absent."""
        ctx = new_context({"a": 1})
        _walk(ctx, "a")
        assert ctx.ancestor_value(-1) == (None, False)

    def test_ancestry_index(self):
        """Should report index and size of enclosing array elements."""
        ctx = new_context({"rows": [[1, 2, 3], [4, 5]]})
        _walk(ctx, "rows", 1, 0)
        assert ctx.ancestry_index(0) == (0, 2, True)
        assert ctx.ancestry_index(1) == (1, 2, True)
        assert ctx.ancestry_index(2) == (-1, -1, False)

    def test_values_ancestry(self):
        """Should list enclosing values innermost first."""
        doc = {"a": {"b": 1}}
        ctx = new_context(doc)
        _walk(ctx, "a", "b")
        assert ctx.values_ancestry() == [{"b": 1}, doc]

    def test_other_property(self):
        """Should resolve siblings and ancestors through the object stack."""
        doc = {"top": 1, "child": {"x": 2, "deep": {"y": 3}}}
        ctx = new_context(doc)
        ctx.push_object(doc)
        ctx.push_object(doc["child"])
        assert ctx.other_property("x") == (2, True)
        assert ctx.other_property(".x") == (2, True)
        assert ctx.other_property("deep.y") == (3, True)
        assert ctx.other_property("..top") == (1, True)
        assert ctx.other_property("missing") == (None, False)
        assert ctx.other_property("...top") == (None, False)


class TestConditions:
    """Test condition scoping."""

    def test_local_condition_dropped_on_pop(self):
        """Should forget a local condition when its frame is popped."""
        ctx = new_context({"a": {"b": 1}})
        _walk(ctx, "a")
        ctx.set_condition("seen")
        _walk(ctx, "b")
        assert ctx.is_condition("seen") is True
        ctx.pop()
        assert ctx.is_condition("seen") is True
        ctx.pop()
        assert ctx.is_condition("seen") is False

    def test_parent_condition(self):
        """Should keep a parent condition until the parent frame is popped."""
        ctx = new_context({"a": {"b": 1}})
        _walk(ctx, "a", "b")
        ctx.set_parent_condition("p")
        ctx.pop()
        assert ctx.is_condition("p") is True
        ctx.pop()
        assert ctx.is_condition("p") is False

    def test_global_condition(self):
        """Should keep a global condition for the whole walk."""
        ctx = new_context({"a": {"b": 1}})
        _walk(ctx, "a", "b")
        ctx.set_global_condition("g")
        ctx.pop()
        ctx.pop()
        assert ctx.is_condition("g") is True

    def test_set_condition_in_scope(self):
        """Should dispatch on ConditionScope."""
        ctx = new_context({"a": 1})
        _walk(ctx, "a")
        ctx.set_condition_in_scope("l", ConditionScope.LOCAL)
        ctx.set_condition_in_scope("g", ConditionScope.GLOBAL)
        ctx.pop()
        assert ctx.is_condition("l") is False
        assert ctx.is_condition("g") is True

    def test_negated_query(self):
        """Should answer !tok as the opposite of tok."""
        ctx = new_context({})
        assert ctx.is_condition("!x") is True
        ctx.set_condition("x")
        assert ctx.is_condition("!x") is False

    def test_clear_condition(self):
        """Should mask a token for the current frame only."""
        ctx = new_context({"a": 1})
        ctx.set_condition("x")
        _walk(ctx, "a")
        ctx.clear_condition("x")
        assert ctx.is_condition("x") is False
        ctx.pop()
        assert ctx.is_condition("x") is True

    def test_when_and_unwanted(self):
        """Should combine tokens with all/any semantics."""
        ctx = new_context({})
        ctx.set_condition("a")
        assert ctx.meets_when_conditions(["a", "!b"]) is True
        assert ctx.meets_when_conditions(["a", "b"]) is False
        assert ctx.meets_when_conditions([]) is True
        assert ctx.meets_unwanted_conditions(["b", "a"]) is True
        assert ctx.meets_unwanted_conditions(["b"]) is False
        assert ctx.meets_unwanted_conditions(["!b"]) is True

    def test_conditions_listing(self):
        """Should list the currently set tokens once each."""
        ctx = new_context({})
        ctx.set_condition("a")
        ctx.set_global_condition("b")
        ctx.set_condition("a")
        assert ctx.conditions == ["a", "b"]


class TestCurrentValue:
    """Test value replacement."""

    def test_set_current_value_updates_document(self):
        """Should write the replacement into the containing object."""
        doc = {"name": "  x  "}
        ctx = new_context(doc)
        _walk(ctx, "name")
        assert ctx.set_current_value("x") is True
        assert ctx.current_value == "x"
        assert doc["name"] == "x"

    def test_set_current_value_in_array(self):
        """Should write the replacement into the containing array."""
        doc = {"tags": ["a", "b"]}
        ctx = new_context(doc)
        _walk(ctx, "tags", 1)
        assert ctx.set_current_value("B") is True
        assert doc["tags"] == ["a", "B"]

    def test_root_cannot_be_replaced(self):
        """Should refuse to replace the root."""
        ctx = new_context({"a": 1})
        assert ctx.set_current_value({}) is False
        assert ctx.root == {"a": 1}


class TestViolations:
    """Test violation placement and stop flags."""

    def test_violation_for_named_frame(self):
        """Should split the location into property and path."""
        ctx = new_context({"foo": {"bar": 1}})
        _walk(ctx, "foo", "bar")
        ctx.add_violation_for_current("bad", code=ViolationCode.CONSTRAINT_FAILED)
        v = ctx.violations[0]
        assert (v.property, v.path) == ("bar", "foo")
        assert v.code == ViolationCode.CONSTRAINT_FAILED

    def test_violation_for_index_frame(self):
        """Should put an element's full path into path."""
        ctx = new_context({"items": [1]})
        _walk(ctx, "items", 0)
        ctx.add_violation_for_current("bad")
        v = ctx.violations[0]
        assert (v.property, v.path) == ("", "items[0]")

    def test_violation_for_named_child(self):
        """Should place a named child under the current full path."""
        ctx = new_context({"foo": {}})
        _walk(ctx, "foo")
        ctx.add_violation_property_for_current("bar", "Missing property")
        v = ctx.violations[0]
        assert (v.property, v.path) == ("bar", "foo")

    def test_stop_and_resume(self):
        """Should cease checks on the current frame only."""
        ctx = new_context({"a": 1})
        _walk(ctx, "a")
        ctx.stop()
        assert ctx.stopped is True
        assert ctx.continuing is False
        ctx.pop()
        assert ctx.continuing is True
        _walk(ctx, "a")
        ctx.stop()
        ctx.resume()
        assert ctx.continuing is True

    def test_stop_all(self):
        """Should abandon the walk."""
        ctx = new_context({})
        ctx.stop_all()
        assert ctx.continue_all is False
        assert ctx.continuing is False

    def test_stop_on_first(self):
        """Should stop the walk after the first violation."""
        ctx = ValidatorContext({}, stop_on_first=True)
        ctx.add_violation_for_current("bad")
        assert ctx.continue_all is False
