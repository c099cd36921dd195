"""Core domain models.

The ruleset document is small and partially typed, so the configuration keeps
plain dicts and lets the reader carry unknown keys through untouched.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

DEFAULT_RULE_KEY = "api-deduplication-check"
DEFAULT_SEVERITY = "error"

DEDUP_MODES = ("audit", "warn", "block")
SEVERITIES = ("error", "warn", "info")


@dataclass
class Configuration:
    """Deduplication settings plus the rule set, as held by an editing session."""

    deduplication: dict[str, Any] = field(default_factory=dict)
    rules: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def rule_key(self) -> str:
        """First rule id, or the default id when no rule exists."""

        return next(iter(self.rules), DEFAULT_RULE_KEY)

    @property
    def rule(self) -> dict[str, Any]:
        return self.rules.get(self.rule_key, {})

    def copy(self) -> Configuration:
        return Configuration(
            deduplication=dict(self.deduplication),
            rules=copy.deepcopy(self.rules),
        )

    def as_dict(self) -> dict[str, Any]:
        return {"deduplication": dict(self.deduplication), "rules": copy.deepcopy(self.rules)}


def default_configuration() -> Configuration:
    """Return the configuration a new editing session starts from."""

    return Configuration(
        deduplication={
            "enabled": True,
            "similarity_threshold": 0.5,
            "high_confidence_threshold": 0.99,
            "mode": "audit",
            "num_hash_functions": 256,
            "num_bands": 32,
            "shingle_size": 5,
        },
        rules={
            DEFAULT_RULE_KEY: {
                "description": "Detects structurally similar APIs using MinHash/LSH algorithm",
                "severity": DEFAULT_SEVERITY,
                "message": (
                    "This API has high structural similarity with existing APIs in the catalog. "
                    "Review for potential duplication or consolidation opportunities."
                ),
            },
        },
    )
