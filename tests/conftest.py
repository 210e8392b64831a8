# tests/conftest.py

import logging
from typing import Dict, Mapping, Optional

import pytest

from calrule.chrono import iso
from calrule.core.softref import SoftReferencePool
from calrule.core.types import PeriodUnit, TextStyle
from calrule.fields.rule import FieldRule

WEEKDAYS = {1: "Mon", 2: "Tue", 3: "Wed", 4: "Thu", 5: "Fri", 6: "Sat", 7: "Sun"}


class TextRule(FieldRule):
    """A field rule whose text tables are supplied per test, counting populations."""

    def __init__(
        self,
        tables: Mapping[str, Mapping[TextStyle, Mapping[int, str]]],
        pool: SoftReferencePool,
        name: str = "TextField",
    ) -> None:
        self.tables = tables
        self.populate_calls = 0
        super().__init__(
            "Test", name, iso.DAYS, iso.WEEKS, 1, 7, has_text=True, text_pool=pool
        )

    def create_text_stores(self, locale: str) -> Mapping[TextStyle, Mapping[int, str]]:
        self.populate_calls += 1
        return self.tables.get(locale.split("_")[0], {})


def make_rule(
    name: str = "Field",
    unit: Optional[PeriodUnit] = iso.MINUTES,
    range_: Optional[PeriodUnit] = iso.HOURS,
    minimum: int = 0,
    maximum: int = 59,
    chronology: str = "Test",
    **kwargs,
) -> FieldRule:
    return FieldRule(chronology, name, unit, range_, minimum, maximum, **kwargs)


@pytest.fixture
def pool() -> SoftReferencePool:
    return SoftReferencePool(8)


@pytest.fixture
def weekday_rule(pool: SoftReferencePool) -> TextRule:
    tables: Dict[str, Dict[TextStyle, Dict[int, str]]] = {
        "en": {
            TextStyle.SHORT: dict(WEEKDAYS),
            TextStyle.NARROW: {k: v[0] for k, v in WEEKDAYS.items()},
        },
    }
    return TextRule(tables, pool)


@pytest.fixture(autouse=True)
def _restore_logging():
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("calrule")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
