# tests/test_value_range.py

import pytest

from calrule.chrono import iso
from calrule.core.errors import FieldOutOfRangeError, InvalidFieldRuleError
from calrule.fields import value_range
from calrule.fields.rule import FieldRule

from conftest import make_rule


@pytest.mark.parametrize("value", [-1, 0, 1, 58, 59, 60, 2 ** 31, -(2 ** 40), 2 ** 63])
def test_is_valid_matches_bounds(value):
    rule = make_rule(minimum=0, maximum=59)
    assert rule.is_valid_value(value) == (0 <= value <= 59)
    if rule.is_valid_value(value):
        assert rule.check_value(value) == value
    else:
        with pytest.raises(FieldOutOfRangeError):
            rule.check_value(value)


def test_out_of_range_error_carries_details():
    rule = make_rule(name="MinuteOfHour", minimum=0, maximum=59)
    with pytest.raises(FieldOutOfRangeError) as exc:
        rule.check_value(60)
    err = exc.value
    assert err.rule is rule
    assert (err.value, err.minimum, err.maximum) == (60, 0, 59)
    assert "MinuteOfHour" in str(err)
    assert isinstance(err, ValueError)


def test_check_value_narrows_to_int():
    rule = make_rule(minimum=0, maximum=59)
    result = rule.check_value(True)
    assert result == 1 and type(result) is int


def test_fixed_value_set():
    assert make_rule().is_fixed_value_set()
    assert iso.DAY_OF_WEEK.is_fixed_value_set()
    assert not iso.DAY_OF_MONTH.is_fixed_value_set()


def test_fixed_value_set_follows_overridden_bounds():
    class LateStart(FieldRule):
        def get_largest_minimum_value(self) -> int:
            return 1

    rule = LateStart("Test", "LateStart", iso.DAYS, iso.YEARS, 0, 10)
    assert not rule.is_fixed_value_set()


def test_context_bounds_default_to_absolute():
    rule = make_rule(minimum=3, maximum=9)
    assert rule.get_minimum_value() == rule.get_minimum_value(object()) == 3
    assert rule.get_maximum_value() == rule.get_maximum_value(object()) == 9
    assert rule.get_largest_minimum_value() == 3
    assert rule.get_smallest_maximum_value() == 9


@pytest.mark.parametrize(
    "minimum, maximum",
    [(5, 4), (value_range.INT32_MIN - 1, 0), (0, value_range.INT32_MAX + 1)],
)
def test_invalid_bounds_rejected(minimum, maximum):
    with pytest.raises(InvalidFieldRuleError):
        make_rule(minimum=minimum, maximum=maximum)


def test_single_value_range_is_allowed():
    rule = make_rule(minimum=4, maximum=4)
    assert rule.check_value(4) == 4
    assert not rule.is_valid_value(5)


def test_pure_functions():
    assert value_range.is_valid(5, 5, 5)
    assert not value_range.is_valid(6, 5, 5)
    assert value_range.is_fixed(0, 10, 0, 10)
    assert not value_range.is_fixed(1, 31, 1, 28)
