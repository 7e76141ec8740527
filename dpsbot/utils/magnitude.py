"""
Arbitrary-magnitude DPS values.

A score is kept as the mantissa the member typed plus a unit symbol. The
pair is authoritative; the absolute value is only ever derived for
comparisons, and is computed exactly because units reach 10^306.
"""

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from functools import total_ordering

from dpsbot.utils.dps_exceptions import MalformedInputError
from dpsbot.utils.units import UnitRegistry, DEFAULT_UNIT_REGISTRY


class Comparison(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@total_ordering
@dataclass(frozen=True, eq=False)
class MagnitudeValue:
    """Immutable (mantissa, unit) pair ordered by absolute magnitude.

    Build instances with create(); the constructor trusts its arguments.
    """

    mantissa: float
    unit: str
    exponent: int

    @classmethod
    def create(cls, mantissa, unit_symbol: str, registry: UnitRegistry = DEFAULT_UNIT_REGISTRY) -> "MagnitudeValue":
        """
        Validate user input and build a value.

        Args:
            mantissa: Finite number; fractional, zero and negative values are allowed
            unit_symbol: Unit symbol, matched case-insensitively
            registry: Unit table to validate against

        Returns:
            New MagnitudeValue with the unit in registry spelling

        Raises:
            InvalidUnitError: If the unit is not registered
            MalformedInputError: If the mantissa is not a finite number
        """
        if isinstance(mantissa, bool):
            raise MalformedInputError(str(mantissa), "DPS value must be a number.")
        try:
            value = float(mantissa)
        except (TypeError, ValueError):
            raise MalformedInputError(str(mantissa), "DPS value must be a number.")
        if math.isnan(value) or math.isinf(value):
            raise MalformedInputError(str(mantissa), "DPS value must be a finite number.")

        exponent = registry.lookup(unit_symbol)
        return cls(value, registry.canonical_symbol(unit_symbol), exponent)

    @property
    def absolute_magnitude(self) -> Fraction:
        """Exact mantissa * 10^exponent. Used for ordering only."""
        return Fraction(self.mantissa) * (10 ** self.exponent)

    def compare(self, other: "MagnitudeValue") -> Comparison:
        return compare(self, other)

    def format(self) -> str:
        """Render as mantissa and unit with no separator, e.g. ``12345Qi``."""
        return f"{format_mantissa(self.mantissa)}{self.unit}"

    def __str__(self) -> str:
        return self.format()

    def __eq__(self, other):
        if not isinstance(other, MagnitudeValue):
            return NotImplemented
        return self.absolute_magnitude == other.absolute_magnitude

    def __lt__(self, other):
        if not isinstance(other, MagnitudeValue):
            return NotImplemented
        return self.absolute_magnitude < other.absolute_magnitude

    def __hash__(self):
        return hash(self.absolute_magnitude)


def compare(a: MagnitudeValue, b: MagnitudeValue) -> Comparison:
    """Total order by absolute magnitude; different units may compare EQUAL."""
    left = a.absolute_magnitude
    right = b.absolute_magnitude
    if left < right:
        return Comparison.LESS
    if left > right:
        return Comparison.GREATER
    return Comparison.EQUAL


def format_mantissa(mantissa: float) -> str:
    """
    Format a mantissa the way members typed it.

    Whole numbers drop the trailing ``.0``; anything else uses the shortest
    repr that round-trips.
    """
    if mantissa.is_integer() and abs(mantissa) < 1e16:
        return str(int(mantissa))
    return repr(mantissa)
