"""
calrule.core.interfaces
-----------------------
The contracts field rules expect from their collaborators.

Field rules never own date/time values. They are handed a field-value
container to derive from, a calendrical context to refine ranges with, and a
merger to record merge results into. Anything satisfying these protocols
will do; ``calrule.chrono.calendrical`` ships straightforward implementations.
"""

from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol

if TYPE_CHECKING:
    from calrule.core.types import TextStyle
    from calrule.fields.rule import FieldRule


class FieldValueMap(Protocol):
    def get_quiet(self, rule: "FieldRule") -> Optional[int]:
        """The value held for ``rule``, or None. Must not derive."""
        ...


class Calendrical(FieldValueMap, Protocol):
    @property
    def date(self) -> Optional[date]:
        ...

    @property
    def time(self) -> Optional[time]:
        ...

    def derive_value(self, rule: "FieldRule") -> int:
        """
        Returns the value of ``rule`` from this calendrical, deriving it from
        other fields if needed.
        Raises UnsupportedFieldError if no value can be obtained.
        """
        ...


class CalendricalProvider(Protocol):
    def to_calendrical(self) -> Calendrical:
        ...


class Merger(Protocol):
    """
    Mutable state of one merge run.

    A rule's merge hook is only invoked when the value of that rule is present,
    so ``get_value_int(self_rule)`` is always safe inside the hook.
    """
    @property
    def context(self) -> Any:
        ...

    def get_value(self, rule: "FieldRule") -> Optional[int]:
        ...

    def get_value_int(self, rule: "FieldRule") -> int:
        ...

    def record_merged_field(self, rule: "FieldRule", value: int) -> None:
        ...

    def record_merged_date(self, merged: date) -> None:
        ...

    def record_merged_time(self, merged: time, overflow_days: int = 0) -> None:
        ...

    def mark_processed(self, rule: "FieldRule") -> None:
        ...


class TextProvider(Protocol):
    """Supplies raw value-to-text tables for a rule in one locale, by style."""
    def texts(self, rule: "FieldRule", locale: str) -> Mapping["TextStyle", Mapping[int, str]]:
        ...
