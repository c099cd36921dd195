"""State container for an editing session and its echo suppression."""

from __future__ import annotations

from dataclasses import dataclass, field

from core.models import Configuration, default_configuration


@dataclass
class RulesetState:
    config: Configuration = field(default_factory=default_configuration)
    last_emitted: str = ""
    error: str | None = None
