"""Tests for the prop-level applicators (shapey_engines/evolve.py)."""

import pytest

from shapey_engines import always_evolve, evolve_spec


class TestEvolveSpec:
    """evolve_spec walks the input's keys."""

    def test_transforms_and_literals_at_prop_level(self):
        spec = {"lebron": "james", "parsons": lambda s: s[:3]}
        assert evolve_spec(spec)({"parsons": "jimmy", "lebron": "jim", "dammit": "jim"}) == {
            "parsons": "jim",
            "lebron": "james",
            "dammit": "jim",
        }

    def test_never_adds_keys(self):
        spec = {"carrey": "jim", "stewart": "jimmy", "jones": lambda s: s + " earl"}
        result = evolve_spec(
            spec,
            {
                "arness": "james",
                "cagney": "james",
                "dean": "james",
                "jones": "james",
                "garner": "james",
                "mason": "james",
                "stewart": "james",
            },
        )
        assert result == {
            "arness": "james",
            "cagney": "james",
            "dean": "james",
            "jones": "james earl",
            "garner": "james",
            "mason": "james",
            "stewart": "jimmy",
        }
        assert "carrey" not in result

    @pytest.mark.parametrize("value", [None, [1, 2], "jim", 3])
    def test_non_mapping_input_is_empty(self, value):
        assert evolve_spec({"lebron": "james", "parsons": lambda s: s[:3]}, value) == {}

    def test_nested_specs_recurse(self):
        spec = {"address": {"zip": str, "state": str.upper}}
        value = {"address": {"zip": 97403, "state": "or", "city": "Springfield"}, "id": 7}
        assert evolve_spec(spec, value) == {
            "address": {"zip": "97403", "state": "OR", "city": "Springfield"},
            "id": 7,
        }

    def test_nested_spec_on_non_mapping_value(self):
        assert evolve_spec({"address": {"zip": str}}, {"address": None}) == {"address": {}}

    def test_failing_transform_isolated(self):
        spec = {"age": int, "name": str.upper}
        assert evolve_spec(spec, {"age": "forty", "name": "jim"}) == {
            "age": None,
            "name": "JIM",
        }

    def test_input_not_mutated(self):
        value = {"name": "jim"}
        evolve_spec({"name": str.upper}, value)
        assert value == {"name": "jim"}


class TestAlwaysEvolve:
    """always_evolve walks the spec's keys."""

    def test_absent_keys_receive_none(self):
        assert always_evolve({"bag": lambda v: "gym" if v is None else v})({"bo": "jim"}) == {
            "bag": "gym"
        }

    def test_zero_argument_transforms(self):
        assert always_evolve({"bo": lambda x: x, "bag": lambda: "gym"}, None) == {
            "bo": None,
            "bag": "gym",
        }

    def test_literals_override(self):
        value = {"beam": "jim", "belushi": "jim", "brown": "jim", "bowie": "jim"}
        assert always_evolve({"brown": "james"}, value) == {"brown": "james"}

    def test_output_keys_are_spec_keys(self):
        spec = {"a": len, "b": "x", "c": {"d": lambda v: v}}
        result = always_evolve(spec, {"a": [1, 2], "z": 0})
        assert result == {"a": 2, "b": "x", "c": {"d": None}}

    def test_nested_recurses_into_value(self):
        spec = {"address": {"zip": str}}
        assert always_evolve(spec, {"address": {"zip": 1, "city": "x"}}) == {
            "address": {"zip": "1"}
        }

    def test_partial_application_reuses_spec(self):
        counter = always_evolve({"pass": lambda v: 1 if v is None else v + 1})
        assert counter({}) == {"pass": 1}
        assert counter({"pass": 1}) == {"pass": 2}
