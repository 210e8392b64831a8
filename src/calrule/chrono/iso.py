"""
calrule.chrono.iso
------------------
ISO-8601 period units and a reference set of ISO field rules.

Derivation chains (no cycles):
  HourOfDay   -> HourOfAmPm, AmPmOfDay
  MonthOfYear -> QuarterOfYear

Merges:
  AmPmOfDay + HourOfAmPm                  -> HourOfDay
  HourOfDay [+ MinuteOfHour [+ SecondOfMinute]] -> time
  ClockHourOfDay [+ ...]                  -> time (24 rolls into the next day)
  Year + MonthOfYear + DayOfMonth         -> date

Localized text is read from a pluggable ``TextProvider``. The default one
knows English only; any other locale falls back to decimal text.
"""

from __future__ import annotations

import calendar
from datetime import date, time
from typing import Dict, Mapping, Optional, Tuple

from calrule.core.errors import FieldOutOfRangeError
from calrule.core.interfaces import FieldValueMap, Merger, TextProvider
from calrule.core.locale import language
from calrule.core.types import PeriodUnit, TextStyle
from calrule.fields.rule import FieldRule

CHRONOLOGY = "ISO"

# ============================================================
# PERIOD UNITS (estimated length in seconds)
# ============================================================

SECONDS = PeriodUnit(1, "Seconds")
MINUTES = PeriodUnit(60, "Minutes")
HOURS = PeriodUnit(3600, "Hours")
HALF_DAYS = PeriodUnit(43200, "HalfDays")
DAYS = PeriodUnit(86400, "Days")
WEEKS = PeriodUnit(604800, "Weeks")
MONTHS = PeriodUnit(2629746, "Months")      # 365.2425 / 12 days
QUARTERS = PeriodUnit(7889238, "Quarters")
YEARS = PeriodUnit(31556952, "Years")

# Month lengths when the year is unknown (February may be a leap month)
_MAX_DAYS_IN_MONTH = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# ============================================================
# TEXT
# ============================================================

_EN_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_EN_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _styles(full: Tuple[str, ...], start: int) -> Dict[TextStyle, Dict[int, str]]:
    return {
        TextStyle.FULL: {start + i: s for i, s in enumerate(full)},
        TextStyle.SHORT: {start + i: s[:3] for i, s in enumerate(full)},
        TextStyle.NARROW: {start + i: s[0] for i, s in enumerate(full)},
    }


class EnglishTextProvider:
    """Built-in English names for day-of-week, month-of-year and AM/PM."""

    _TABLES: Dict[str, Dict[TextStyle, Dict[int, str]]] = {
        "DayOfWeek": _styles(_EN_DAYS, 1),
        "MonthOfYear": _styles(_EN_MONTHS, 1),
        "AmPmOfDay": {
            TextStyle.FULL: {0: "AM", 1: "PM"},
            TextStyle.SHORT: {0: "AM", 1: "PM"},
            TextStyle.NARROW: {0: "a", 1: "p"},
        },
    }

    def texts(self, rule: FieldRule, locale: str) -> Mapping[TextStyle, Mapping[int, str]]:
        if language(locale) != "en":
            return {}
        tables = self._TABLES.get(rule.name, {})
        return {style: dict(values) for style, values in tables.items()}


_text_provider: TextProvider = EnglishTextProvider()


def set_text_provider(provider: TextProvider) -> None:
    """Installs ``provider`` and drops every ISO text store built from the old one."""
    global _text_provider
    _text_provider = provider
    for rule in ALL_RULES:
        rule.clear_text_cache()


def get_text_provider() -> TextProvider:
    return _text_provider


class _ISORule(FieldRule):
    def __init__(
        self,
        name: str,
        unit: Optional[PeriodUnit],
        range_: Optional[PeriodUnit],
        minimum: int,
        maximum: int,
        *,
        has_text: bool = False,
    ) -> None:
        super().__init__(CHRONOLOGY, name, unit, range_, minimum, maximum, has_text=has_text)

    def create_text_stores(self, locale: str) -> Mapping[TextStyle, Mapping[int, str]]:
        return _text_provider.texts(self, locale)


# ============================================================
# TIME FIELDS
# ============================================================

class SecondOfMinuteRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("SecondOfMinute", SECONDS, MINUTES, 0, 59)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if t is None else t.second


class MinuteOfHourRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("MinuteOfHour", MINUTES, HOURS, 0, 59)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if t is None else t.minute


def _merge_time(rule: FieldRule, merger: Merger, hour: int, overflow_days: int = 0) -> None:
    minute = merger.get_value(MINUTE_OF_HOUR)
    second = merger.get_value(SECOND_OF_MINUTE)
    if minute is None and second is not None:
        return  # a second without its minute cannot be placed
    if minute is not None:
        MINUTE_OF_HOUR.check_value(minute)
    if second is not None:
        SECOND_OF_MINUTE.check_value(second)
    merger.record_merged_time(time(hour, minute or 0, second or 0), overflow_days)
    merger.mark_processed(rule)
    if minute is not None:
        merger.mark_processed(MINUTE_OF_HOUR)
    if second is not None:
        merger.mark_processed(SECOND_OF_MINUTE)


class HourOfDayRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("HourOfDay", HOURS, DAYS, 0, 23)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if t is None else t.hour

    def merge_date_time(self, merger: Merger) -> None:
        _merge_time(self, merger, self.check_value(merger.get_value_int(self)))


class ClockHourOfDayRule(_ISORule):
    """Hour of day counted 1-24, where 24 is midnight at the end of the day."""

    def __init__(self) -> None:
        super().__init__("ClockHourOfDay", HOURS, DAYS, 1, 24)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        if t is None:
            return None
        return 24 if t.hour == 0 else t.hour

    def merge_date_time(self, merger: Merger) -> None:
        value = self.check_value(merger.get_value_int(self))
        _merge_time(self, merger, value % 24, 1 if value == 24 else 0)


class HourOfAmPmRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("HourOfAmPm", HOURS, HALF_DAYS, 0, 11)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if t is None else t.hour % 12

    def derive_value(self, field_map: FieldValueMap) -> Optional[int]:
        hod = HOUR_OF_DAY.get_value_quiet(field_map)
        return None if hod is None else hod % 12


class AmPmOfDayRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("AmPmOfDay", HALF_DAYS, DAYS, 0, 1, has_text=True)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if t is None else t.hour // 12

    def derive_value(self, field_map: FieldValueMap) -> Optional[int]:
        hod = HOUR_OF_DAY.get_value_quiet(field_map)
        return None if hod is None else hod // 12

    def merge_fields(self, merger: Merger) -> None:
        hap = merger.get_value(HOUR_OF_AMPM)
        if hap is None:
            return
        am_pm = self.check_value(merger.get_value_int(self))
        merger.record_merged_field(HOUR_OF_DAY, am_pm * 12 + HOUR_OF_AMPM.check_value(hap))
        merger.mark_processed(self)
        merger.mark_processed(HOUR_OF_AMPM)


# ============================================================
# DATE FIELDS
# ============================================================

class DayOfWeekRule(_ISORule):
    """Monday is 1, Sunday is 7."""

    def __init__(self) -> None:
        super().__init__("DayOfWeek", DAYS, WEEKS, 1, 7, has_text=True)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if d is None else d.isoweekday()


class DayOfMonthRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("DayOfMonth", DAYS, MONTHS, 1, 31)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if d is None else d.day

    def get_smallest_maximum_value(self) -> int:
        return 28

    def get_maximum_value(self, context: Optional[FieldValueMap] = None) -> int:
        if context is None:
            return super().get_maximum_value()
        moy = MONTH_OF_YEAR.get_value_quiet(context)
        if moy is None or not MONTH_OF_YEAR.is_valid_value(moy):
            return super().get_maximum_value()
        year = YEAR.get_value_quiet(context)
        if year is None or not YEAR.is_valid_value(year):
            return _MAX_DAYS_IN_MONTH[moy - 1]
        return calendar.monthrange(year, moy)[1]


class MonthOfYearRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("MonthOfYear", MONTHS, YEARS, 1, 12, has_text=True)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if d is None else d.month


class QuarterOfYearRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("QuarterOfYear", QUARTERS, YEARS, 1, 4)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if d is None else (d.month - 1) // 3 + 1

    def derive_value(self, field_map: FieldValueMap) -> Optional[int]:
        moy = MONTH_OF_YEAR.get_value_quiet(field_map)
        return None if moy is None else (moy - 1) // 3 + 1


class YearRule(_ISORule):
    def __init__(self) -> None:
        super().__init__("Year", YEARS, None, 1, 9999)

    def date_time_value(self, d: Optional[date], t: Optional[time]) -> Optional[int]:
        return None if d is None else d.year

    def merge_date_time(self, merger: Merger) -> None:
        moy = merger.get_value(MONTH_OF_YEAR)
        dom = merger.get_value(DAY_OF_MONTH)
        if moy is None or dom is None:
            return
        year = merger.get_value_int(self)
        MONTH_OF_YEAR.check_value(moy)
        max_dom = calendar.monthrange(self.check_value(year), moy)[1]
        if not 1 <= dom <= max_dom:
            raise FieldOutOfRangeError(DAY_OF_MONTH, dom, 1, max_dom)
        merger.record_merged_date(date(year, moy, dom))
        merger.mark_processed(self)
        merger.mark_processed(MONTH_OF_YEAR)
        merger.mark_processed(DAY_OF_MONTH)


SECOND_OF_MINUTE = SecondOfMinuteRule()
MINUTE_OF_HOUR = MinuteOfHourRule()
HOUR_OF_DAY = HourOfDayRule()
CLOCK_HOUR_OF_DAY = ClockHourOfDayRule()
HOUR_OF_AMPM = HourOfAmPmRule()
AMPM_OF_DAY = AmPmOfDayRule()
DAY_OF_WEEK = DayOfWeekRule()
DAY_OF_MONTH = DayOfMonthRule()
MONTH_OF_YEAR = MonthOfYearRule()
QUARTER_OF_YEAR = QuarterOfYearRule()
YEAR = YearRule()

ALL_RULES: Tuple[FieldRule, ...] = (
    SECOND_OF_MINUTE,
    MINUTE_OF_HOUR,
    HOUR_OF_DAY,
    CLOCK_HOUR_OF_DAY,
    HOUR_OF_AMPM,
    AMPM_OF_DAY,
    DAY_OF_WEEK,
    DAY_OF_MONTH,
    MONTH_OF_YEAR,
    QUARTER_OF_YEAR,
    YEAR,
)
