"""Tests for mode-driven strategy selection (shapey_engines/dispatcher.py)."""

import pytest

from shapey_config import ShapeySettings
from shapey_engines import Shaper, make_shaper
from shapey_kernel.domain.spec_types import ShapeyMode, TransformsMode


def _my(s):
    return s + "my"


class TestNonMappingSpecs:
    def test_callable_spec_applied_directly(self, numbers):
        assert make_shaper(len, numbers) == 12

    def test_callable_spec_exceptions_propagate(self):
        """A bare function is caller code, not a spec transform."""

        def explode(value):
            raise ZeroDivisionError

        with pytest.raises(ZeroDivisionError):
            make_shaper(explode, 1)

    @pytest.mark.parametrize("constant", [42, "fixed", None, [1, 2]])
    def test_other_specs_are_constants(self, constant):
        assert make_shaper(constant, {"ignored": True}) == constant


class TestShapeyMode:
    """shapeyMode selects which fields survive."""

    def test_remove_mode(self):
        spec = {
            "shapeyMode": "remove",
            "duggar": True,
            "jones": True,
            "page": _my,
            "buffet": _my,
            "keenan": _my,
        }
        value = {
            "duggar": "james",
            "jones": "jim",
            "page": "jim",
            "morrison": "jim",
            "buffet": "jim",
            "keenan": "jim",
            "james": "jim",
        }
        assert make_shaper(spec, value) == {
            "page": "jimmy",
            "morrison": "jim",
            "buffet": "jimmy",
            "keenan": "jimmy",
            "james": "jim",
        }

    def test_keep_mode(self):
        spec = {
            "shapeyMode": "keep",
            "broadbent": True,
            "mcmanus": True,
            "norton": True,
            "payton": True,
            "phelps": True,
            "tavare": True,
            "gardner": _my,
        }
        value = {
            "broadbent": "jim",
            "carrey": "jim",
            "carr": "jim",
            "gaffigan": "jim",
            "phelps": "james",
            "payton": "james",
            "mcmanus": "jim",
            "norton": "jim",
            "gardner": "jim",
            "tavare": "jim",
        }
        assert make_shaper(spec, value) == {
            "broadbent": "jim",
            "phelps": "james",
            "payton": "james",
            "mcmanus": "jim",
            "norton": "jim",
            "gardner": "jimmy",
            "tavare": "jim",
        }

    def test_strict_mode(self, jims):
        spec = {"shapeyMode": "strict", "carter": _my}
        assert make_shaper(spec, jims) == {"carter": "jimmy"}

    def test_super_strict_mode(self):
        spec = {"shapeyMode": "Super Strict", "name": lambda v: v, "kind": "user"}
        assert make_shaper(spec, {"extra": 1}) == {"name": None, "kind": "user"}

    def test_super_loose_mode(self):
        spec = {"shapeyMode": "superLoose", "a": lambda whole: len(whole)}
        assert make_shaper(spec, {"a": 1, "b": 2}) == {"a": 2}

    @pytest.mark.parametrize("mode", [None, "loose", "unheard of", 17])
    def test_loose_is_default(self, mode, jims):
        spec = {"shapeyMode": mode, "carter": _my}
        assert make_shaper(spec, jims) == {**jims, "carter": "jimmy"}


class TestShapeyTransforms:
    """shapeyTransforms decides how transform fields are computed."""

    @pytest.fixture
    def prop_level_spec(self):
        return {
            "shapeyTransforms": "prop",
            "summarized": sum,
            "pass": lambda v: 1 if v is None else v + 1,
        }

    def test_prop_level(self, prop_level_spec):
        value = {"summarized": [13, 14, 19, 23, 38, 212, 331, 844, 2922, 9333]}
        assert make_shaper(prop_level_spec, value) == {"summarized": 13749, "pass": 1}

    def test_prop_level_second_pass(self, prop_level_spec):
        value = {"pass": 1, "summarized": [13749, 23, 3857]}
        assert make_shaper(prop_level_spec, value) == {"summarized": 17629, "pass": 2}

    def test_whole_object(self):
        def pick(keys):
            return lambda whole: {k: whole[k] for k in keys if k in whole}

        jimmies = pick(["carter", "fallon", "kimmel", "page", "buffet"])
        spec = {
            "shapeyTransforms": "whole",
            "jimmy": lambda whole: {k: v + "my" for k, v in jimmies(whole).items()},
            "jim": pick(["kirk", "parsons", "henson", "thorpe", "buffet"]),
        }
        value = {
            name: "jim"
            for name in (
                "parsons", "kirk", "kimmel", "fallon", "carter", "morrison", "buffet",
                "page", "henson", "thorpe", "curtis", "dean",
            )
        }
        value["jimmy"] = "john"

        assert make_shaper(spec, value) == {
            "jim": {
                "kirk": "jim",
                "parsons": "jim",
                "henson": "jim",
                "thorpe": "jim",
                "buffet": "jim",
            },
            "jimmy": {
                "carter": "jimmy",
                "fallon": "jimmy",
                "kimmel": "jimmy",
                "page": "jimmy",
                "buffet": "jimmy",
            },
        }

    def test_prop_level_with_keep(self):
        spec = {
            "shapeyMode": "keep",
            "shapeyTransforms": "prop",
            "id": True,
            "missing": lambda v: "filled" if v is None else v,
        }
        assert make_shaper(spec, {"id": 1, "other": 2}) == {"id": 1, "missing": "filled"}

    def test_whole_object_with_remove(self):
        spec = {
            "shapeyMode": "remove",
            "shapeyTransforms": "whole",
            "secret": True,
            "count": len,
        }
        assert make_shaper(spec, {"secret": "x", "a": 2}) == {"a": 2, "count": 2}


class TestControlFieldStripping:
    def test_control_fields_from_input_removed(self):
        value = {"a": 1, "shapeyMode": "strict", "shapeyDebug": True}
        assert make_shaper({}, value) == {"a": 1}

    def test_non_mapping_results_untouched(self):
        assert make_shaper(lambda d: sorted(d), {"shapeyMode": 1, "a": 2}) == ["a", "shapeyMode"]

    def test_callable_spec_mapping_result_stripped(self):
        value = {"shapeyMode": "strict", "shapeyTransforms": "whole", "k": 1}
        assert make_shaper(lambda d: d, value) == {"k": 1}
        assert value == {"shapeyMode": "strict", "shapeyTransforms": "whole", "k": 1}

    def test_control_fields_added_by_callable_stripped(self):
        shaper = Shaper(lambda d: {**d, "shapeyDebug": "skip"})
        assert shaper({"k": 1}) == {"k": 1}

    def test_whole_object_on_list_input(self, numbers):
        assert make_shaper({"shapeyTransforms": "whole", "n": len}, numbers) == {"n": 12}


class TestErrorPolicies:
    def test_default_policy_substitutes_none(self):
        spec = {"age": int, "name": str.upper}
        assert make_shaper(spec, {"age": "x", "name": "jim"}) == {"age": None, "name": "JIM"}

    def test_skip_policy_keeps_input_value(self):
        spec = {"age": int, "shapeyDebug": "skip"}
        assert make_shaper(spec, {"age": "x"}) == {"age": "x"}

    def test_handler_policy(self):
        spec = {"age": int, "shapeyDebug": lambda exc, field, value: f"{field}:{value}"}
        assert make_shaper(spec, {"age": "x"}) == {"age": "age:x"}

    def test_logging_policy(self, json_logs):
        spec = {"age": int, "shapeyDebug": True}
        assert make_shaper(spec, {"age": "x"}) == {"age": None}

        errors = [r for r in json_logs.records if r["level"] == "ERROR"]
        assert len(errors) == 1
        assert errors[0]["failed_field"] == "age"
        assert errors[0]["shaper_mode"] == "loose/default"


class TestShaper:
    def test_make_shaper_without_value_returns_shaper(self, jims):
        shaper = make_shaper({"carter": _my})
        assert isinstance(shaper, Shaper)
        assert shaper(jims) == {**jims, "carter": "jimmy"}
        assert shaper({"carter": "jimmy"}) == {"carter": "jimmymy"}

    def test_spec_normalised_once(self):
        shaper = Shaper({"a": len, "shapeyMode": "strict"})
        assert shaper.spec.mode is ShapeyMode.STRICT
        assert shaper.mode_label == "strict/default"

    def test_labels(self):
        assert Shaper(len).mode_label == "function"
        assert Shaper(3).mode_label == "constant"


class TestSettings:
    def test_settings_supply_defaults(self, jims):
        settings = ShapeySettings(default_mode=ShapeyMode.STRICT)
        assert make_shaper({"carter": _my}, jims, settings=settings) == {"carter": "jimmy"}

    def test_spec_control_fields_win_over_settings(self, jims):
        settings = ShapeySettings(default_mode=ShapeyMode.STRICT)
        spec = {"shapeyMode": "loose", "carter": _my}
        assert make_shaper(spec, jims, settings=settings) == {**jims, "carter": "jimmy"}

    def test_settings_transforms_and_debug(self):
        settings = ShapeySettings(default_transforms=TransformsMode.PROP, debug="skip")
        spec = {"age": int, "bag": lambda v: "gym"}
        assert make_shaper(spec, {"age": "x", "other": 1}, settings=settings) == {
            "age": "x",
            "bag": "gym",
        }
