from __future__ import annotations

import pytest

from core.models import Configuration, default_configuration
from core.ruleset_reader import parse_ruleset
from core.ruleset_writer import format_scalar, render_ruleset


def test_renders_canonical_document() -> None:
    text = render_ruleset(default_configuration())
    assert text == (
        "deduplication:\n"
        "  enabled: true\n"
        "  similarity_threshold: 0.5\n"
        "  high_confidence_threshold: 0.99\n"
        "  mode: audit\n"
        "  num_hash_functions: 256\n"
        "  num_bands: 32\n"
        "  shingle_size: 5\n"
        "rules:\n"
        "  api-deduplication-check:\n"
        "    description: Detects structurally similar APIs using MinHash/LSH algorithm\n"
        "    severity: error\n"
        "    message: >-\n"
        "      This API has high structural similarity with existing APIs in the catalog. "
        "Review for potential duplication or consolidation opportunities.\n"
    )


def test_empty_rules_fall_back_to_default_key_and_severity() -> None:
    config = Configuration(deduplication=dict(default_configuration().deduplication))
    text = render_ruleset(config)
    assert "rules:\n  api-deduplication-check:\n" in text
    assert "    severity: error\n" in text
    assert "    description: \n" in text


def test_writes_only_the_first_rule() -> None:
    config = default_configuration()
    config.rules = {
        "first": {"description": "one", "severity": "info", "message": "m1"},
        "second": {"description": "two", "severity": "warn", "message": "m2"},
    }
    text = render_ruleset(config)
    assert "  first:\n" in text
    assert "second" not in text
    assert "    severity: info\n" in text


def test_format_scalar() -> None:
    assert format_scalar(True) == "true"
    assert format_scalar(False) == "false"
    assert format_scalar(0.5) == "0.5"
    assert format_scalar(1.0) == "1.0"
    assert format_scalar(64) == "64"
    assert format_scalar(None) == ""


def test_round_trip_preserves_written_fields() -> None:
    config = Configuration(
        deduplication={
            "enabled": False,
            "similarity_threshold": 0.83,
            "high_confidence_threshold": 1.0,
            "mode": "block",
            "num_hash_functions": 512,
            "num_bands": 64,
            "shingle_size": 7,
        },
        rules={
            "custom-check": {
                "description": "Custom description",
                "severity": "info",
                "message": "A message that would be folded",
            }
        },
    )
    assert parse_ruleset(render_ruleset(config)) == config


def test_round_trip_of_defaults() -> None:
    config = default_configuration()
    assert parse_ruleset(render_ruleset(config)) == config


def test_rendering_is_stable() -> None:
    text = render_ruleset(default_configuration())
    assert render_ruleset(parse_ruleset(text)) == text


def test_small_floats_are_written_positionally() -> None:
    assert format_scalar(1e-05) == "0.00001"
    assert format_scalar(0.0) == "0.0"


@pytest.mark.parametrize("threshold", [0.0, 1e-05, 1.0])
def test_round_trip_at_threshold_edges(threshold: float) -> None:
    config = default_configuration()
    config.deduplication["similarity_threshold"] = threshold
    config.deduplication["high_confidence_threshold"] = threshold
    restored = parse_ruleset(render_ruleset(config))
    assert restored == config
    assert isinstance(restored.deduplication["similarity_threshold"], float)
