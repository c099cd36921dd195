"""Validation helpers for ruleset editing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.models import DEDUP_MODES, SEVERITIES, Configuration

BOOL_FIELDS = ("enabled",)
THRESHOLD_FIELDS = ("similarity_threshold", "high_confidence_threshold")
COUNT_FIELDS = ("num_hash_functions", "num_bands", "shingle_size")
DEDUP_FIELDS = ("enabled", *THRESHOLD_FIELDS, "mode", *COUNT_FIELDS)
RULE_FIELDS = ("description", "severity", "message")

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


@dataclass
class FieldValue:
    value: Any
    error: str | None = None


def coerce_field(field: str, raw_value: str) -> FieldValue:
    """Parse user input for one named deduplication or rule field."""

    raw_value = raw_value.strip()
    if field in BOOL_FIELDS:
        lowered = raw_value.lower()
        if lowered in _TRUE_WORDS:
            return FieldValue(True)
        if lowered in _FALSE_WORDS:
            return FieldValue(False)
        return FieldValue(None, f"{field} must be true or false")

    if field in THRESHOLD_FIELDS:
        try:
            value = float(raw_value)
        except ValueError:
            return FieldValue(None, f"{field} must be a number")
        error = _threshold_error(field, value)
        return FieldValue(None if error else value, error)

    if field in COUNT_FIELDS:
        if not _is_int(raw_value):
            return FieldValue(None, f"{field} must be an integer")
        value = int(raw_value)
        if value <= 0:
            return FieldValue(None, f"{field} must be positive")
        return FieldValue(value)

    if field == "mode":
        if raw_value not in DEDUP_MODES:
            return FieldValue(None, f"mode must be one of: {', '.join(DEDUP_MODES)}")
        return FieldValue(raw_value)

    if field == "severity":
        if raw_value not in SEVERITIES:
            return FieldValue(None, f"severity must be one of: {', '.join(SEVERITIES)}")
        return FieldValue(raw_value)

    if field in RULE_FIELDS:
        # The document format folds the message onto one line.
        return FieldValue(" ".join(raw_value.split()))

    return FieldValue(None, f"Unknown field: {field}")


def validate_configuration(config: Configuration) -> list[str]:
    """Return human-readable problems with ``config``; empty when it is usable."""

    problems: list[str] = []
    dedup = config.deduplication

    for field in DEDUP_FIELDS:
        if field not in dedup:
            problems.append(f"deduplication.{field} is missing")

    if "enabled" in dedup and not isinstance(dedup["enabled"], bool):
        problems.append("deduplication.enabled must be true or false")

    for field in THRESHOLD_FIELDS:
        value = dedup.get(field)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            problems.append(f"deduplication.{field} must be a number")
            continue
        error = _threshold_error(f"deduplication.{field}", value)
        if error:
            problems.append(error)

    counts: dict[str, int] = {}
    for field in COUNT_FIELDS:
        value = dedup.get(field)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            problems.append(f"deduplication.{field} must be an integer")
        elif value <= 0:
            problems.append(f"deduplication.{field} must be positive")
        else:
            counts[field] = value

    hashes = counts.get("num_hash_functions")
    bands = counts.get("num_bands")
    if hashes and bands:
        if bands > hashes:
            problems.append("deduplication.num_bands must not exceed num_hash_functions")
        elif hashes % bands:
            problems.append(
                f"deduplication.num_bands ({bands}) does not evenly divide "
                f"num_hash_functions ({hashes})"
            )

    mode = dedup.get("mode")
    if mode is not None and mode not in DEDUP_MODES:
        problems.append(f"deduplication.mode must be one of: {', '.join(DEDUP_MODES)}")

    if len(config.rules) > 1:
        problems.append(
            f"{len(config.rules)} rules defined; only '{config.rule_key}' is written back"
        )
    severity = config.rule.get("severity")
    if severity and severity not in SEVERITIES:
        problems.append(
            f"rules.{config.rule_key}.severity must be one of: {', '.join(SEVERITIES)}"
        )

    return problems


def _threshold_error(label: str, value: float) -> str | None:
    if not 0.0 <= value <= 1.0:
        return f"{label} must be between 0 and 1"
    return None


def _is_int(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False
    return True
