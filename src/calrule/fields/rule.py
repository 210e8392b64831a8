"""
calrule.fields.rule
-------------------
The rule defining how one measurable field of time operates.

A field rule (day-of-week, hour-of-day, ...) knows its name, the unit it
counts, the range it cycles within and its outer value bounds. Concrete rules
subclass ``FieldRule`` and override the hooks they need:

  * ``date_time_value``   derive the value from a date and/or time
  * ``derive_value``      derive the value from other fields in a container
  * ``merge_fields``      combine with sibling fields into a coarser field
  * ``merge_date_time``   combine with sibling fields into a date or time
  * ``create_text_stores`` supply localized text (requires ``has_text=True``)
  * ``get_largest_minimum_value`` / ``get_smallest_maximum_value`` and the
    context-aware ``get_minimum_value`` / ``get_maximum_value`` for fields
    whose range varies

Rules are immutable after construction and are compared for equality by
identity. The text cache is the only mutable state a rule carries.
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any, Mapping, Optional

from calrule.core.errors import InvalidFieldRuleError, UnsupportedFieldError
from calrule.core.interfaces import CalendricalProvider, FieldValueMap, Merger
from calrule.core.softref import SoftReferencePool
from calrule.core.types import PeriodUnit, TextMatch, TextStyle
from calrule.fields import fraction as _fraction
from calrule.fields import value_range as _range
from calrule.fields.text_cache import TextStoreCache
from calrule.fields.text_store import TextStore


class FieldRule:
    def __init__(
        self,
        chronology: str,
        name: str,
        period_unit: Optional[PeriodUnit],
        period_range: Optional[PeriodUnit],
        minimum_value: int,
        maximum_value: int,
        *,
        has_text: bool = False,
        text_pool: Optional[SoftReferencePool] = None,
    ) -> None:
        if not chronology:
            raise InvalidFieldRuleError("The chronology must not be empty")
        if not name:
            raise InvalidFieldRuleError("The name must not be empty")
        _range.check_bounds(name, minimum_value, maximum_value)
        self._chronology = chronology
        self._name = name
        self._id = f"{chronology}.{name}"
        self._period_unit = period_unit
        self._period_range = period_range
        self._minimum = minimum_value
        self._maximum = maximum_value
        self._text_cache = (
            TextStoreCache(self._id, self.create_text_stores, text_pool) if has_text else None
        )

    # ---------------------------------------------------------
    # Identity
    # ---------------------------------------------------------

    @property
    def id(self) -> str:
        """Of the form 'Chronology.FieldName'; unique across the registry."""
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def chronology(self) -> str:
        return self._chronology

    @property
    def period_unit(self) -> Optional[PeriodUnit]:
        """In 'hour of day', the hour."""
        return self._period_unit

    @property
    def period_range(self) -> Optional[PeriodUnit]:
        """In 'hour of day', the day. None if unbounded."""
        return self._period_range

    @property
    def has_text(self) -> bool:
        return self._text_cache is not None

    # ---------------------------------------------------------
    # Values
    # ---------------------------------------------------------

    def get_value(self, provider: CalendricalProvider) -> int:
        """
        The checked value of this field.
        Raises UnsupportedFieldError if it cannot be obtained and
        FieldOutOfRangeError if it is outside the outer range.
        """
        value = provider.to_calendrical().derive_value(self)
        return self.check_value(value)

    def get_value_quiet(self, field_map: FieldValueMap) -> Optional[int]:
        """The stored value of this field, else a derived value, else None."""
        value = field_map.get_quiet(self)
        return self.derive_value(field_map) if value is None else value

    def derive_value(self, field_map: FieldValueMap) -> Optional[int]:
        """
        Derives the value of this field from other fields in ``field_map``.

        Implementations query the rules they depend on with
        ``get_value_quiet`` (derivation may recurse down the field hierarchy)
        and must not look up this rule's own value in the map.
        """
        return None

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        """The value of this field in the date and/or time given, None if not derivable."""
        return None

    def is_supported(self, d: Optional[date], t: Optional[time]) -> bool:
        return self.date_time_value(d, t) is not None

    def get_date_time_value(self, d: Optional[date], t: Optional[time]) -> int:
        value = self.date_time_value(d, t)
        if value is None:
            raise UnsupportedFieldError(self)
        return value

    # ---------------------------------------------------------
    # Merging
    # ---------------------------------------------------------

    def merge_fields(self, merger: Merger) -> None:
        """
        Merges this field with others into a more significant field.

        Only called when this field has a value in ``merger``. On success the
        override stores the result with ``record_merged_field`` and calls
        ``mark_processed`` for every field used, this one included.
        """

    def merge_date_time(self, merger: Merger) -> None:
        """
        Merges this field with others into a date or a time.

        Same contract as ``merge_fields``, recording the result with
        ``record_merged_date`` or ``record_merged_time``.
        """

    # ---------------------------------------------------------
    # Range
    # ---------------------------------------------------------

    def is_valid_value(self, value: int) -> bool:
        """Checks the outer range only, with no knowledge of other fields."""
        return _range.is_valid(value, self.get_minimum_value(), self.get_maximum_value())

    def check_value(self, value: int) -> int:
        return _range.check_value(self, value, self.get_minimum_value(), self.get_maximum_value())

    def is_fixed_value_set(self) -> bool:
        return _range.is_fixed(
            self.get_minimum_value(),
            self.get_maximum_value(),
            self.get_largest_minimum_value(),
            self.get_smallest_maximum_value(),
        )

    def get_minimum_value(self, context: Optional[FieldValueMap] = None) -> int:
        """
        The minimum value, refined by ``context`` where subclasses know how.
        Without enough information in the context this is the outer minimum.
        """
        return self._minimum

    def get_largest_minimum_value(self) -> int:
        return self._minimum

    def get_maximum_value(self, context: Optional[FieldValueMap] = None) -> int:
        """
        The maximum value, refined by ``context`` where subclasses know how.
        Without enough information in the context this is the outer maximum.
        """
        return self._maximum

    def get_smallest_maximum_value(self) -> int:
        return self._maximum

    # ---------------------------------------------------------
    # Text
    # ---------------------------------------------------------

    def get_text(self, value: int, locale: str, style: TextStyle = TextStyle.FULL) -> str:
        """Localized text for ``value``, or its decimal form when there is none."""
        store = self.get_text_store(locale, style)
        text = store.text_for(value) if store is not None else None
        return str(value) if text is None else text

    def get_text_store(self, locale: str, style: TextStyle = TextStyle.FULL) -> Optional[TextStore]:
        if self._text_cache is None:
            return None
        return self._text_cache.store_for(locale, style)

    def match_text(
        self, locale: str, style: TextStyle, parse_text: str, ignore_case: bool = False
    ) -> TextMatch:
        store = self.get_text_store(locale, style)
        if store is None:
            return TextMatch.UNSUPPORTED
        return store.match_text(ignore_case, parse_text)

    def clear_text_cache(self, locale: Optional[str] = None) -> None:
        """Drops cached text stores so the next lookup rebuilds them."""
        if self._text_cache is not None:
            self._text_cache.invalidate(locale)

    def create_text_stores(self, locale: str) -> Mapping[TextStyle, Mapping[int, str]]:
        """
        Returns fresh value-to-text tables for each style this field has text
        for. Results are cached per locale by ``get_text_store``.
        """
        return {}

    # ---------------------------------------------------------
    # Fractions
    # ---------------------------------------------------------

    def convert_value_to_fraction(self, value: int) -> Decimal:
        """
        Fraction in [0, 1) of the range, floored to 9 significant digits.
        Second-of-minute 15 gives 0.25.
        """
        return _fraction.value_to_fraction(self, value)

    def convert_fraction_to_value(self, fraction: _fraction.FractionLike) -> int:
        return _fraction.fraction_to_value(self, fraction)

    # ---------------------------------------------------------
    # Ordering
    # ---------------------------------------------------------

    def compare_to(self, other: "FieldRule") -> int:
        """
        Orders by period unit, then period range (unbounded last), then
        chronology name. MinuteOfHour < HourOfDay < DayOfWeek, and
        DayOfWeek < DayOfMonth < DayOfYear.
        """
        cmp = _compare_optional(self._period_unit, other._period_unit)
        if cmp != 0:
            return cmp
        cmp = _compare_optional(self._period_range, other._period_range)
        if cmp != 0:
            return cmp
        return _cmp(self._chronology, other._chronology)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, FieldRule):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, FieldRule):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, FieldRule):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, FieldRule):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __str__(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id!r})"


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _compare_optional(a: Optional[PeriodUnit], b: Optional[PeriodUnit]) -> int:
    # None sorts after any unit
    if a == b:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    return _cmp(a, b)
