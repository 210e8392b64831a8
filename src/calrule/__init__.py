"""calrule public API.

Field rules describe one calendar field each: its range, how it derives from
and merges with other fields, its fraction form and its localized text.
Most callers only need the functions and ISO rules re-exported here.
"""

from .api import (
    set_registry,
    list_rules,
    ordered_rules,
    get_rule,
    register_rule,
    unregister_rule,
    get_text,
    parse_text,
    value_to_fraction,
    fraction_to_value,
)
from .bootstrap import build_registry
from .chrono import iso
from .chrono.calendrical import Calendrical, FieldMerger
from .core.errors import (
    CalruleError,
    FieldOutOfRangeError,
    MalformedFractionError,
    UnsupportedFieldError,
    InvalidTextStoreError,
    InvalidFieldRuleError,
    DuplicateRuleError,
    UnknownRuleError,
    CalendricalMergeError,
)
from .core.types import MatchStatus, PeriodUnit, TextMatch, TextStyle
from .fields.rule import FieldRule
from .fields.registry import RuleRegistry
from .fields.text_store import TextStore

set_registry(build_registry())

__all__ = [
    "list_rules",
    "ordered_rules",
    "get_rule",
    "register_rule",
    "unregister_rule",
    "get_text",
    "parse_text",
    "value_to_fraction",
    "fraction_to_value",
    "iso",
    "Calendrical",
    "FieldMerger",
    "FieldRule",
    "RuleRegistry",
    "TextStore",
    "TextMatch",
    "MatchStatus",
    "TextStyle",
    "PeriodUnit",
    "CalruleError",
    "FieldOutOfRangeError",
    "MalformedFractionError",
    "UnsupportedFieldError",
    "InvalidTextStoreError",
    "InvalidFieldRuleError",
    "DuplicateRuleError",
    "UnknownRuleError",
    "CalendricalMergeError",
]
