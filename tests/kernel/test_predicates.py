"""Tests for the value predicates (shapey_kernel/domain/predicates.py)."""

from collections import OrderedDict
from decimal import Decimal
from fractions import Fraction

import pytest

from shapey_kernel.domain.predicates import (
    CONTROL_FIELDS,
    always_function,
    is_array,
    is_control_field,
    is_empty_container,
    is_number,
    is_plain_mapping,
    is_transform,
    objectify,
)


class TestPlainMapping:
    """Only an exact dict counts as a plain mapping."""

    def test_dict_is_plain_mapping(self):
        assert is_plain_mapping({})
        assert is_plain_mapping({"a": 1})

    @pytest.mark.parametrize(
        "value",
        [OrderedDict(a=1), [], (), "abc", None, 3, len, lambda: None],
    )
    def test_other_values_are_not(self, value):
        assert not is_plain_mapping(value)

    def test_objectify_passes_dicts_through(self):
        d = {"a": 1}
        assert objectify(d) is d

    @pytest.mark.parametrize("value", [None, [1, 2], "abc", 42, OrderedDict(a=1)])
    def test_objectify_coerces_everything_else_to_empty(self, value):
        assert objectify(value) == {}


class TestArray:
    def test_list_is_array(self):
        assert is_array([])
        assert is_array([1, 2])

    @pytest.mark.parametrize("value", [(), {}, "ab", None, range(3)])
    def test_other_sequences_are_not(self, value):
        assert not is_array(value)


class TestNumber:
    @pytest.mark.parametrize("value", [0, 1, -3, 2.5, Decimal("1.5"), Fraction(1, 3)])
    def test_numbers(self, value):
        assert is_number(value)

    def test_bool_is_not_a_number(self):
        """True + False must never be summed by combine."""
        assert not is_number(True)
        assert not is_number(False)

    @pytest.mark.parametrize("value", ["1", None, [1]])
    def test_non_numbers(self, value):
        assert not is_number(value)


class TestTransformAndEmpty:
    def test_callables_are_transforms(self):
        assert is_transform(len)
        assert is_transform(str.upper)
        assert is_transform(lambda x: x)

    def test_values_are_not_transforms(self):
        assert not is_transform("upper")
        assert not is_transform({"a": len})

    @pytest.mark.parametrize("value", [{}, [], (), ""])
    def test_empty_containers(self, value):
        assert is_empty_container(value)

    @pytest.mark.parametrize("value", [{"a": 1}, [0], (0,), "x", 0, None])
    def test_non_empty_or_non_container(self, value):
        assert not is_empty_container(value)


class TestControlFields:
    def test_exactly_three_control_fields(self):
        assert CONTROL_FIELDS == ("shapeyMode", "shapeyTransforms", "shapeyDebug")

    def test_exact_case_match(self):
        assert is_control_field("shapeyMode")
        assert not is_control_field("shapeymode")
        assert not is_control_field("shapeyOther")


class TestConstantFunctions:
    def test_always_function_returns_callables_unchanged(self):
        assert always_function(len) is len

    def test_always_function_wraps_values(self):
        fn = always_function("james")
        assert fn() == "james"
        assert fn({"any": "input"}) == "james"
        assert fn(1, 2, 3) == "james"
