"""
Tests for temporarily rebinding variables.
"""

import pytest

from ppm.engine.scoping import ShadowedVariable, evaluate_each, sort_by_computed_key


class TestShadowedVariable:
    """Tests for ShadowedVariable."""

    def test_restores_previous_value(self):
        """A shadowed variable gets its old value back."""
        variables = {"i": "outer"}
        with ShadowedVariable(variables, "i") as scope:
            assert "i" not in variables
            scope.bind("inner")
            assert variables["i"] == "inner"
        assert variables == {"i": "outer"}

    def test_removes_new_variable(self):
        """A variable that did not exist is removed again."""
        variables = {}
        with ShadowedVariable(variables, "i") as scope:
            scope.bind("1")
        assert variables == {}

    def test_restores_on_exception(self):
        """The binding is undone when an exception escapes."""
        variables = {"i": "outer"}
        with pytest.raises(RuntimeError):
            with ShadowedVariable(variables, "i") as scope:
                scope.bind("inner")
                raise RuntimeError("stop")
        assert variables == {"i": "outer"}

    def test_other_variables_untouched(self):
        """Only the shadowed name is affected."""
        variables = {"a": "1", "i": "2"}
        with ShadowedVariable(variables, "i") as scope:
            scope.bind("x")
            variables["a"] = "changed"
        assert variables == {"a": "changed", "i": "2"}


class TestEvaluateEach:
    """Tests for evaluate_each."""

    def test_binds_in_order(self):
        """Each item is bound before evaluating."""
        variables = {}
        with ShadowedVariable(variables, "i") as scope:
            results = evaluate_each(range(3), scope, lambda: f"<{variables['i']}>")
        assert results == ["<0>", "<1>", "<2>"]


class TestSortByComputedKey:
    """Tests for sort_by_computed_key."""

    def test_ascending(self):
        """Items are ordered by their computed key."""
        variables = {}
        with ShadowedVariable(variables, "x") as scope:
            result = sort_by_computed_key(["bb", "a", "ccc"], scope, lambda: variables["x"][::-1])
        assert result == ["a", "bb", "ccc"]

    def test_descending_is_stable(self):
        """Equal keys keep their original order when descending."""
        variables = {}
        with ShadowedVariable(variables, "x") as scope:
            result = sort_by_computed_key(
                ["a1", "b2", "a3", "b4"], scope, lambda: variables["x"][0], descending=True
            )
        assert result == ["b2", "b4", "a1", "a3"]

    def test_key_computed_once_per_item(self):
        """The key expression runs exactly once for every item."""
        variables = {}
        calls = []

        def compute_key():
            calls.append(variables["x"])
            return variables["x"]

        with ShadowedVariable(variables, "x") as scope:
            sort_by_computed_key(["c", "a", "b"], scope, compute_key)
        assert calls == ["c", "a", "b"]
