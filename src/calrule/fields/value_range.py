from __future__ import annotations

from typing import Any

from calrule.core.errors import FieldOutOfRangeError, InvalidFieldRuleError

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def is_valid(value: int, minimum: int, maximum: int) -> bool:
    return minimum <= value <= maximum


def check_value(rule: Any, value: int, minimum: int, maximum: int) -> int:
    """Returns ``value`` as an int, or raises FieldOutOfRangeError."""
    if not is_valid(value, minimum, maximum):
        raise FieldOutOfRangeError(rule, value, minimum, maximum)
    return int(value)


def check_bounds(name: str, minimum: int, maximum: int) -> None:
    if not (INT32_MIN <= minimum <= INT32_MAX and INT32_MIN <= maximum <= INT32_MAX):
        raise InvalidFieldRuleError(f"Bounds of {name} must fit in a signed 32-bit integer")
    if minimum > maximum:
        raise InvalidFieldRuleError(
            f"Minimum of {name} ({minimum}) must not exceed its maximum ({maximum})"
        )


def is_fixed(minimum: int, maximum: int, largest_minimum: int, smallest_maximum: int) -> bool:
    return maximum == smallest_maximum and minimum == largest_minimum
