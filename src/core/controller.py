"""Editing controller for a single ruleset document.

The controller owns the session configuration and the last text it emitted.
External text is parsed only when it differs from that text, so the
controller's own writes never come back as a reload that would drop edits.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from core.lsh import lsh_probability
from core.models import Configuration
from core.ruleset_reader import parse_ruleset
from core.ruleset_writer import render_ruleset
from core.state import RulesetState

LOGGER = logging.getLogger(__name__)


class RulesetController:
    """Keeps a configuration and its textual form in sync."""

    def __init__(
        self,
        on_change: Callable[[str], None],
        config: Optional[Configuration] = None,
    ) -> None:
        self._on_change = on_change
        self.state = RulesetState() if config is None else RulesetState(config=config)

    @property
    def config(self) -> Configuration:
        return self.state.config

    @property
    def rule_key(self) -> str:
        return self.state.config.rule_key

    @property
    def rule(self) -> dict[str, Any]:
        return self.state.config.rule

    def receive(self, text: Optional[str]) -> bool:
        """Apply externally supplied ruleset text.

        Returns True when the held configuration was replaced.
        """

        if not text or text == self.state.last_emitted:
            return False

        try:
            parsed = parse_ruleset(text)
        except Exception:
            LOGGER.warning("Failed to parse ruleset text, keeping current configuration", exc_info=True)
            return False

        changed = False
        if parsed.deduplication:
            current = self.state.config
            self.state.config = Configuration(
                deduplication={**current.deduplication, **parsed.deduplication},
                rules=parsed.rules if parsed.rules else current.rules,
            )
            changed = True
        else:
            LOGGER.debug("Ruleset text has no deduplication section, ignoring it")
        self.state.last_emitted = text
        return changed

    def update_dedup(self, field: str, value: Any) -> None:
        updated = self.state.config.copy()
        updated.deduplication[field] = value
        self.state.config = updated
        self.sync()

    def update_rule(self, field: str, value: Any) -> None:
        updated = self.state.config.copy()
        rule_key = updated.rule_key
        updated.rules[rule_key] = {**updated.rules.get(rule_key, {}), field: value}
        self.state.config = updated
        self.sync()

    def sync(self) -> Optional[str]:
        """Serialize the configuration and hand it to the output callback.

        Returns the emitted text, or None when serialization or delivery failed.
        """

        previous = self.state.last_emitted
        try:
            text = render_ruleset(self.state.config)
            # Recorded before the callback so a synchronous echo is suppressed.
            self.state.last_emitted = text
            self._on_change(text)
        except Exception as exc:
            LOGGER.exception("Error serializing ruleset configuration")
            self.state.last_emitted = previous
            self.state.error = str(exc)
            return None
        self.state.error = None
        return text

    def probability(self) -> Optional[float]:
        """LSH detection probability (percent) at the configured similarity threshold.

        Returns None when the held values cannot be used, since the number is
        only ever displayed.
        """

        dedup = self.state.config.deduplication
        try:
            return lsh_probability(
                dedup["similarity_threshold"],
                dedup["num_hash_functions"],
                dedup["num_bands"],
            )
        except (KeyError, TypeError):
            LOGGER.warning("Cannot compute LSH probability from current settings", exc_info=True)
            return None
