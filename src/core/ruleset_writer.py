"""Canonical writer for deduplication ruleset documents.

The output always has the same key order and folds the rule message as a
``>-`` block so the reader can round-trip it. Only the first rule is written.
Values are not quoted, so text containing ``:`` or a leading ``#`` is written
as-is.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from core.models import DEFAULT_SEVERITY, Configuration

DEDUP_FIELD_ORDER = (
    "enabled",
    "similarity_threshold",
    "high_confidence_threshold",
    "mode",
    "num_hash_functions",
    "num_bands",
    "shingle_size",
)


def format_scalar(value: Any) -> str:
    """Render a scalar the way the reader coerces it back."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value):
        # Positional notation only; the reader does not accept exponents.
        return f"{Decimal(repr(value)):f}"
    return str(value)


def render_ruleset(config: Configuration) -> str:
    """Serialize ``config`` into the canonical ruleset document."""

    dedup = config.deduplication
    rule_key = config.rule_key
    rule = config.rule

    lines = ["deduplication:"]
    lines.extend(f"  {key}: {format_scalar(dedup.get(key))}" for key in DEDUP_FIELD_ORDER)
    lines.extend(
        [
            "rules:",
            f"  {rule_key}:",
            f"    description: {rule.get('description') or ''}",
            f"    severity: {rule.get('severity') or DEFAULT_SEVERITY}",
            "    message: >-",
            f"      {rule.get('message') or ''}",
            "",
        ]
    )
    return "\n".join(lines)
