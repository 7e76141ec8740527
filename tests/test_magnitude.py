"""Tests for MagnitudeValue creation, ordering and formatting."""

import math

import pytest

from dpsbot.utils.dps_exceptions import InvalidUnitError, MalformedInputError
from dpsbot.utils.magnitude import Comparison, MagnitudeValue, compare, format_mantissa
from dpsbot.utils.units import UnitRegistry


def value(mantissa, unit):
    return MagnitudeValue.create(mantissa, unit)


class TestCreate:
    def test_stores_registry_spelling(self):
        v = value(12345, "qi")
        assert v.unit == "Qi"
        assert v.exponent == 18
        assert v.mantissa == 12345.0

    def test_small_fractional_zero_and_negative_mantissas_are_allowed(self):
        assert value(1.0, "Uc").mantissa == 1.0
        assert value(0.001, "K").mantissa == 0.001
        assert value(0, "K").mantissa == 0
        assert value(-5, "M").mantissa == -5

    def test_unknown_unit(self):
        with pytest.raises(InvalidUnitError):
            value(1, "Zz")

    @pytest.mark.parametrize("mantissa", [math.nan, math.inf, -math.inf, "abc", None, True])
    def test_rejects_non_finite_or_non_numeric(self, mantissa):
        with pytest.raises(MalformedInputError):
            value(mantissa, "K")

    def test_uses_given_registry(self):
        registry = UnitRegistry([(2, "H")])
        assert MagnitudeValue.create(3, "h", registry).exponent == 2
        with pytest.raises(InvalidUnitError):
            MagnitudeValue.create(3, "K", registry)


class TestCompare:
    def test_higher_unit_wins_despite_smaller_mantissa(self):
        small_unit = value(1.0, "Uc")
        big_unit = value(999, "Dc")
        assert compare(small_unit, big_unit) is Comparison.LESS
        assert compare(big_unit, small_unit) is Comparison.GREATER
        assert big_unit > small_unit

    def test_larger_mantissa_can_beat_higher_unit(self):
        assert compare(value(5000, "K"), value(1, "M")) is Comparison.GREATER

    def test_equal_across_units(self):
        a = value(1000, "K")
        b = value(1, "M")
        assert a.compare(b) is Comparison.EQUAL
        assert a == b
        assert hash(a) == hash(b)
        assert a.format() != b.format()

    def test_no_overflow_at_top_of_table(self):
        # 1e300 * 1e306 is far beyond float range
        a = value(1e300, "Dc")
        b = value(2e300, "Dc")
        assert a < b
        assert a.absolute_magnitude > value(999, "Dc").absolute_magnitude

    def test_negative_and_zero_order(self):
        assert value(-1, "Dc") < value(0, "K") < value(0.5, "K")

    def test_sorting(self):
        values = [value(2, "M"), value(999, "K"), value(1, "B"), value(1500, "K")]
        assert [v.format() for v in sorted(values)] == ["999K", "1500K", "2M", "1B"]

    def test_not_comparable_with_other_types(self):
        assert value(1, "K") != 1000
        with pytest.raises(TypeError):
            value(1, "K") < 1000


class TestFormat:
    def test_concatenates_mantissa_and_unit(self):
        assert value(12345, "Qi").format() == "12345Qi"
        assert str(value(1.5, "k")) == "1.5K"

    def test_whole_numbers_drop_decimal_point(self):
        assert format_mantissa(2.0) == "2"
        assert format_mantissa(-7.0) == "-7"

    def test_fractions_keep_shortest_repr(self):
        assert format_mantissa(0.1) == "0.1"
        assert format_mantissa(123.456) == "123.456"

    def test_huge_mantissa_uses_repr(self):
        assert format_mantissa(1e20) == "1e+20"


def test_compare_is_reflexive_and_antisymmetric():
    values = [value(1, "K"), value(0.5, "Dc"), value(-3, "Qi"), value(1000, "K")]
    for a in values:
        assert compare(a, a) is Comparison.EQUAL
        assert a.format() == a.format()
        for b in values:
            assert compare(a, b).value == -compare(b, a).value
