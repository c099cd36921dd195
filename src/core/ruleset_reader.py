"""Restricted reader for deduplication ruleset documents.

Only the known two-section shape is understood:

    deduplication:
      <key>: <scalar>
    rules:
      <rule-id>:
        <key>: <text>
        message: >-
          <folded text>

Anything else (lists, anchors, flow collections, deeper nesting) is ignored
line by line. The reader never raises for unexpected content.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from core.models import Configuration

DEDUP_SECTION = "deduplication"
RULES_SECTION = "rules"

BLOCK_SCALAR_MARKERS = frozenset({">-", ">", "|"})

_DEDUP_FIELD = re.compile(r"([\w_]+):\s*(.*)", re.ASCII)
_RULE_FIELD = re.compile(r"([\w_-]+):\s*(.*)", re.ASCII)
_RULE_FIELD_START = re.compile(r"[\w_-]+:", re.ASCII)
_FLOAT = re.compile(r"\d+\.\d+", re.ASCII)
_INT = re.compile(r"\d+", re.ASCII)


def coerce_scalar(value: str) -> Any:
    """Convert a deduplication value to bool, float or int when it looks like one."""

    if value == "true":
        return True
    if value == "false":
        return False
    if _FLOAT.fullmatch(value):
        return float(value)
    if _INT.fullmatch(value):
        return int(value)
    return value


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


class _RulesetParser:
    """Single-use line state machine behind :func:`parse_ruleset`."""

    def __init__(self) -> None:
        self.result = Configuration()
        self._section: Optional[str] = None
        self._rule: Optional[str] = None
        self._pending_key: Optional[str] = None
        self._pending_value = ""

    def feed(self, line: str) -> None:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            return

        indent = _indent_of(line)
        if indent == 0 and trimmed.endswith(":"):
            self._flush_pending()
            self._section = trimmed[:-1]
            self._rule = None
        elif self._section == DEDUP_SECTION and indent >= 2:
            self._feed_dedup(trimmed)
        elif self._section == RULES_SECTION:
            self._feed_rules(trimmed, indent)

    def finish(self) -> Configuration:
        self._flush_pending()
        return self.result

    def _feed_dedup(self, trimmed: str) -> None:
        match = _DEDUP_FIELD.fullmatch(trimmed)
        if match:
            self.result.deduplication[match.group(1)] = coerce_scalar(match.group(2).strip())

    def _feed_rules(self, trimmed: str, indent: int) -> None:
        # A field-looking line at rule or field depth ends a folded value.
        if self._pending_key and indent <= 4 and _RULE_FIELD_START.match(trimmed):
            self._flush_pending()

        if indent == 2 and trimmed.endswith(":"):
            self._rule = trimmed[:-1]
            self.result.rules[self._rule] = {}
        elif indent >= 4 and self._rule and not self._pending_key:
            match = _RULE_FIELD.fullmatch(trimmed)
            if not match:
                return
            key, value = match.group(1), match.group(2).strip()
            if value in BLOCK_SCALAR_MARKERS:
                self._pending_key = key
                self._pending_value = ""
            else:
                self.result.rules[self._rule][key] = value
        elif self._pending_key and indent >= 6:
            if self._pending_value:
                self._pending_value += " "
            self._pending_value += trimmed

    def _flush_pending(self) -> None:
        if not self._pending_key:
            return
        if self._rule:
            self.result.rules[self._rule][self._pending_key] = self._pending_value
        self._pending_key = None
        self._pending_value = ""


def parse_ruleset(text: Optional[str]) -> Configuration:
    """Parse a ruleset document into a :class:`Configuration`.

    ``None`` or an empty string yields a configuration with empty maps.
    """

    parser = _RulesetParser()
    if not text:
        return parser.result
    for line in text.split("\n"):
        parser.feed(line)
    return parser.finish()
