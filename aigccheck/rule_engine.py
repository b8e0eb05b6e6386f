"""Registry of detection rules and their execution against text."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from aigccheck.config import Config
from aigccheck.models import Rule, RuleResult, RuleType


def _key(rule_type: RuleType | str) -> str:
    return getattr(rule_type, "value", rule_type)


class RuleEngine:
    """Holds one rule per rule type and runs the enabled ones."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._rules: dict[str, Rule] = {}
        self._lock = threading.RLock()

    def register_rule(self, rule: Rule) -> None:
        """Add a rule, replacing any rule of the same type."""
        with self._lock:
            self._rules[_key(rule.rule_type)] = rule

    def unregister_rule(self, rule_type: RuleType | str) -> None:
        with self._lock:
            self._rules.pop(_key(rule_type), None)

    def get_rule(self, rule_type: RuleType | str) -> Rule | None:
        """The registered rule of this type, or None."""
        with self._lock:
            return self._rules.get(_key(rule_type))

    def get_all_rules(self) -> list[Rule]:
        with self._lock:
            return list(self._rules.values())

    def check(self, text: str) -> list[RuleResult]:
        """Run every enabled rule on ``text``."""
        with self._lock:
            selected = [
                rule for key, rule in self._rules.items() if self.config.is_rule_enabled(key)
            ]
        return [rule.check(text) for rule in selected]

    def check_with_rules(
        self, text: str, rule_types: Iterable[RuleType | str]
    ) -> list[RuleResult]:
        """Run the named rules that are registered and enabled."""
        with self._lock:
            selected = []
            for rule_type in rule_types:
                rule = self._rules.get(_key(rule_type))
                if rule is not None and self.config.is_rule_enabled(rule_type):
                    selected.append(rule)
        return [rule.check(text) for rule in selected]

    def get_enabled_rules(self) -> list[Rule]:
        with self._lock:
            return [
                rule for key, rule in self._rules.items() if self.config.is_rule_enabled(key)
            ]

    def count_rules(self) -> int:
        with self._lock:
            return len(self._rules)

    def count_enabled_rules(self) -> int:
        with self._lock:
            return sum(1 for key in self._rules if self.config.is_rule_enabled(key))