"""
calrule.chrono.calendrical
--------------------------
Plain implementations of the collaborator contracts in
``calrule.core.interfaces``: a field-value container and a merge driver.
"""

from __future__ import annotations

import logging
from datetime import date, time, timedelta
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Set

from calrule.core.errors import CalendricalMergeError, UnsupportedFieldError
from calrule.fields.rule import FieldRule

logger = logging.getLogger(__name__)


class Calendrical:
    """
    Explicit field values plus an optional date and time.

    ``get_quiet`` answers from the explicit values first, then from the
    date/time; it never derives across fields. ``overflow_days`` holds days a
    merged time rolled past midnight when there was no date to add them to.
    """

    def __init__(
        self,
        fields: Optional[Mapping[FieldRule, int]] = None,
        *,
        date: Optional[date] = None,
        time: Optional[time] = None,
        overflow_days: int = 0,
    ) -> None:
        self._fields: Dict[FieldRule, int] = dict(fields or {})
        self._date = date
        self._time = time
        self._overflow_days = overflow_days

    @property
    def date(self) -> Optional[date]:
        return self._date

    @property
    def time(self) -> Optional[time]:
        return self._time

    @property
    def overflow_days(self) -> int:
        return self._overflow_days

    @property
    def fields(self) -> Mapping[FieldRule, int]:
        return MappingProxyType(self._fields)

    def with_field(self, rule: FieldRule, value: int) -> "Calendrical":
        fields = dict(self._fields)
        fields[rule] = value
        return Calendrical(
            fields, date=self._date, time=self._time, overflow_days=self._overflow_days
        )

    def get_quiet(self, rule: FieldRule) -> Optional[int]:
        value = self._fields.get(rule)
        if value is None and (self._date is not None or self._time is not None):
            value = rule.date_time_value(self._date, self._time)
        return value

    def derive_value(self, rule: FieldRule) -> int:
        value = rule.get_value_quiet(self)
        if value is None:
            raise UnsupportedFieldError(rule)
        return value

    def to_calendrical(self) -> "Calendrical":
        return self

    def __repr__(self) -> str:
        fields = {str(r): v for r, v in self._fields.items()}
        return (
            f"Calendrical(fields={fields!r}, date={self._date!r}, time={self._time!r}, "
            f"overflow_days={self._overflow_days})"
        )


class FieldMerger:
    """
    Resolves a set of field values into a date, a time and leftover fields.

    Fields are merged in rule order: repeated ``merge_fields`` passes until no
    new field appears (each rule is offered once), then one
    ``merge_date_time`` pass over whatever is still unprocessed.
    """

    def __init__(self, fields: Mapping[FieldRule, int], context: Any = None) -> None:
        self._values: Dict[FieldRule, int] = dict(fields)
        self._processed: Set[FieldRule] = set()
        self._context = context
        self._date: Optional[date] = None
        self._time: Optional[time] = None
        self._overflow_days = 0

    @property
    def context(self) -> Any:
        return self._context

    @property
    def overflow_days(self) -> int:
        return self._overflow_days

    def get_value(self, rule: FieldRule) -> Optional[int]:
        return self._values.get(rule)

    def get_value_int(self, rule: FieldRule) -> int:
        value = self._values.get(rule)
        if value is None:
            raise UnsupportedFieldError(rule)
        return value

    def record_merged_field(self, rule: FieldRule, value: int) -> None:
        rule.check_value(value)
        existing = self._values.get(rule)
        if existing is not None and existing != value:
            raise CalendricalMergeError(
                f"Merge of {rule.name} produced {value}, which conflicts with {existing}"
            )
        self._values[rule] = value

    def record_merged_date(self, merged: date) -> None:
        if self._date is not None and self._date != merged:
            raise CalendricalMergeError(f"Merged date {merged} conflicts with {self._date}")
        self._date = merged

    def record_merged_time(self, merged: time, overflow_days: int = 0) -> None:
        if self._time is not None and (self._time, self._overflow_days) != (merged, overflow_days):
            raise CalendricalMergeError(f"Merged time {merged} conflicts with {self._time}")
        self._time = merged
        self._overflow_days = overflow_days

    def mark_processed(self, rule: FieldRule) -> None:
        self._processed.add(rule)

    def unprocessed(self) -> List[FieldRule]:
        return sorted(r for r in self._values if r not in self._processed)

    def merge(self) -> Calendrical:
        offered: Set[FieldRule] = set()
        while True:
            pending = [r for r in self.unprocessed() if r not in offered]
            if not pending:
                break
            for rule in pending:
                offered.add(rule)
                if rule not in self._processed:
                    rule.merge_fields(self)

        for rule in self.unprocessed():
            if rule not in self._processed:
                rule.merge_date_time(self)

        merged_date, overflow = self._date, self._overflow_days
        if merged_date is not None and overflow:
            merged_date, overflow = merged_date + timedelta(days=overflow), 0
        leftover = {r: self._values[r] for r in self.unprocessed()}
        logger.debug(
            "Merged to date=%s time=%s, unresolved: %s",
            merged_date,
            self._time,
            [str(r) for r in leftover],
        )
        return Calendrical(leftover, date=merged_date, time=self._time, overflow_days=overflow)
