from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Union

from .core.types import TextMatch, TextStyle
from .fields.fraction import FractionLike
from .fields.registry import RuleRegistry
from .fields.rule import FieldRule

_registry: Optional[RuleRegistry] = None
RuleRef = Union[str, FieldRule]


def set_registry(reg: RuleRegistry) -> None:
    global _registry
    _registry = reg


def _reg() -> RuleRegistry:
    if _registry is None:
        raise RuntimeError("Rule registry not initialized")
    return _registry


def _rule(rule: RuleRef) -> FieldRule:
    if isinstance(rule, FieldRule):
        return rule
    if "." not in rule:
        rule = f"ISO.{rule}"
    return _reg().get(rule)


def list_rules() -> List[str]:
    return _reg().list()


def ordered_rules() -> List[FieldRule]:
    return _reg().rules()


def get_rule(rule_id: str) -> FieldRule:
    """Looks up a rule by id. A bare name is taken to be an ISO field."""
    return _rule(rule_id)


def register_rule(rule: FieldRule) -> FieldRule:
    return _reg().register(rule)


def unregister_rule(rule_id: str) -> None:
    _reg().unregister(rule_id)


def get_text(rule: RuleRef, value: int, *, locale: str = "en", style: TextStyle = TextStyle.FULL) -> str:
    r = _rule(rule)
    return r.get_text(r.check_value(value), locale, style)


def parse_text(
    rule: RuleRef,
    text: str,
    *,
    locale: str = "en",
    style: TextStyle = TextStyle.FULL,
    ignore_case: bool = False,
) -> TextMatch:
    return _rule(rule).match_text(locale, style, text, ignore_case)


def value_to_fraction(rule: RuleRef, value: int) -> Decimal:
    return _rule(rule).convert_value_to_fraction(value)


def fraction_to_value(rule: RuleRef, fraction: FractionLike) -> int:
    return _rule(rule).convert_fraction_to_value(fraction)
