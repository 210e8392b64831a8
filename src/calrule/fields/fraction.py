"""
calrule.fields.fraction
-----------------------
Converts field values to and from a decimal fraction of the field's range.

Only fields with a fixed, zero-based range qualify. A value v of a field
with maximum m maps to v / (m + 1), floored to 9 significant digits, so the
result is always in [0, 1). Second-of-minute 15 is 0.25.

The reverse direction accepts a fraction f when f * (m + 1) is an exact
integer, or when f is precisely the floored fraction of some value. The
second case is what makes values whose fraction does not terminate (1/60)
survive a round trip.
"""

from __future__ import annotations

import math
from decimal import ROUND_FLOOR, Context, Decimal, InvalidOperation
from fractions import Fraction
from typing import TYPE_CHECKING, Union

from calrule.core.errors import MalformedFractionError, UnsupportedFieldError

if TYPE_CHECKING:
    from calrule.fields.rule import FieldRule

FRACTION_CONTEXT = Context(prec=9, rounding=ROUND_FLOOR)
FractionLike = Union[Decimal, int, str]


def _require_convertible(rule: "FieldRule", action: str) -> None:
    if not rule.is_fixed_value_set():
        raise UnsupportedFieldError(
            rule, f"The fractional value of {rule.name} cannot be {action} as the range is not fixed"
        )
    if rule.get_minimum_value() != 0:
        raise UnsupportedFieldError(
            rule,
            f"The fractional value of {rule.name} cannot be {action} as the minimum field value is not zero",
        )


def value_to_fraction(rule: "FieldRule", value: int) -> Decimal:
    _require_convertible(rule, "obtained")
    rule.check_value(value)
    span = Decimal(rule.get_maximum_value() + 1)
    return FRACTION_CONTEXT.divide(Decimal(value), span)


def fraction_to_value(rule: "FieldRule", fraction: FractionLike) -> int:
    _require_convertible(rule, "converted")
    minimum, maximum = rule.get_minimum_value(), rule.get_maximum_value()
    try:
        f = fraction if isinstance(fraction, Decimal) else Decimal(str(fraction))
        if not f.is_finite():
            raise InvalidOperation
    except InvalidOperation:
        raise MalformedFractionError(rule, fraction, minimum, maximum) from None
    # the smallest non-zero fraction of a 32-bit span is about 4.7e-10
    if not 0 <= f < 1 or (f != 0 and f.adjusted() < -20):
        raise MalformedFractionError(rule, fraction, minimum, maximum)

    product = Fraction(f) * (maximum + 1)
    if product.denominator == 1:
        value = int(product)
    else:
        value = math.ceil(product)
        if not (rule.is_valid_value(value) and value_to_fraction(rule, value) == f):
            raise MalformedFractionError(rule, fraction, minimum, maximum)
    if not rule.is_valid_value(value):
        raise MalformedFractionError(rule, fraction, minimum, maximum)
    return value
