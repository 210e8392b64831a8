from __future__ import annotations
import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, List

from calrule.core.errors import DuplicateRuleError, UnknownRuleError
from calrule.fields.rule import FieldRule

logger = logging.getLogger(__name__)


@dataclass
class RuleRegistry:
    _rules: Dict[str, FieldRule] = field(default_factory=dict)

    def get(self, rule_id: str) -> FieldRule:
        if rule_id not in self._rules:
            raise UnknownRuleError(f"Unknown rule '{rule_id}'. Available: {sorted(self._rules)}")
        return self._rules[rule_id]

    def list(self) -> List[str]:
        return sorted(self._rules.keys())

    def rules(self) -> List[FieldRule]:
        """Registered rules in field order."""
        return sorted(self._rules.values(), key=cmp_to_key(FieldRule.compare_to))

    def register(self, rule: FieldRule) -> FieldRule:
        existing = self._rules.get(rule.id)
        if existing is rule:
            return rule
        if existing is not None:
            raise DuplicateRuleError(f"Rule id '{rule.id}' is already registered by {existing!r}")
        self._rules[rule.id] = rule
        logger.debug("Registered rule: %s", rule.id)
        return rule

    def unregister(self, rule_id: str) -> None:
        self._rules.pop(rule_id, None)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)
