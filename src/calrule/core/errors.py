from __future__ import annotations

from typing import Any, Optional


class CalruleError(Exception):
    """Base error."""


class FieldOutOfRangeError(CalruleError, ValueError):
    """Raised when a value lies outside the range a field rule allows."""

    def __init__(
        self,
        rule: Any,
        value: Optional[int],
        minimum: int,
        maximum: int,
        message: Optional[str] = None,
    ) -> None:
        self.rule = rule
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        if message is None:
            message = (
                f"Illegal value for {_rule_name(rule)} field, value {value} "
                f"is not in the range {minimum} to {maximum}"
            )
        super().__init__(message)


class MalformedFractionError(FieldOutOfRangeError):
    """Raised when a fraction does not land exactly on an in-range value."""

    def __init__(self, rule: Any, fraction: Any, minimum: int, maximum: int) -> None:
        self.fraction = str(fraction)
        super().__init__(
            rule,
            None,
            minimum,
            maximum,
            message=(
                f"The fractional value {self.fraction} of {_rule_name(rule)} cannot be "
                "converted as it is not in the range 0 (inclusive) to 1 (exclusive)"
            ),
        )


class UnsupportedFieldError(CalruleError):
    """Raised when an operation is not meaningful for a rule's configuration."""

    def __init__(self, rule: Any, message: Optional[str] = None) -> None:
        self.rule = rule
        if message is None:
            message = f"The field {_rule_name(rule)} cannot be obtained"
        super().__init__(message)


class InvalidTextStoreError(CalruleError, ValueError):
    """Raised when a text store is built from a missing locale or bad text."""


class InvalidFieldRuleError(CalruleError, ValueError):
    """Raised when a field rule is constructed with inconsistent metadata."""


class DuplicateRuleError(CalruleError, ValueError):
    """Raised when a second rule tries to claim an already registered id."""


class UnknownRuleError(CalruleError, KeyError):
    """Raised when looking up a rule id that was never registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class CalendricalMergeError(CalruleError):
    """Raised when merging produces two different values for one field."""


def _rule_name(rule: Any) -> str:
    return getattr(rule, "name", None) or str(rule)
