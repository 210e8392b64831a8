from __future__ import annotations
from calrule.chrono.iso import ALL_RULES
from calrule.fields.registry import RuleRegistry

def build_registry() -> RuleRegistry:
    reg = RuleRegistry()
    for rule in ALL_RULES:
        reg.register(rule)
    return reg
