from __future__ import annotations

from core.ruleset_reader import coerce_scalar, parse_ruleset


SAMPLE = """\
# API deduplication ruleset
deduplication:
  enabled: true
  similarity_threshold: 0.75
  high_confidence_threshold: 0.95
  mode: warn
  num_hash_functions: 128
  num_bands: 16
  shingle_size: 3

rules:
  api-deduplication-check:
    description: Detects duplicated APIs
    severity: warn
    message: >-
      First line of the message.
      Second line of the message.
"""


def test_empty_input_yields_empty_shell() -> None:
    assert parse_ruleset("").as_dict() == {"deduplication": {}, "rules": {}}
    assert parse_ruleset(None).as_dict() == {"deduplication": {}, "rules": {}}


def test_parses_full_document() -> None:
    config = parse_ruleset(SAMPLE)
    assert config.deduplication == {
        "enabled": True,
        "similarity_threshold": 0.75,
        "high_confidence_threshold": 0.95,
        "mode": "warn",
        "num_hash_functions": 128,
        "num_bands": 16,
        "shingle_size": 3,
    }
    assert config.rules == {
        "api-deduplication-check": {
            "description": "Detects duplicated APIs",
            "severity": "warn",
            "message": "First line of the message. Second line of the message.",
        }
    }


def test_dedup_value_coercion() -> None:
    config = parse_ruleset(
        "deduplication:\n"
        "  enabled: true\n"
        "  shingle_size: 5\n"
        "  similarity_threshold: 0.5\n"
        "  mode: audit\n"
    )
    dedup = config.deduplication
    assert dedup["enabled"] is True
    assert dedup["shingle_size"] == 5 and isinstance(dedup["shingle_size"], int)
    assert dedup["similarity_threshold"] == 0.5 and isinstance(dedup["similarity_threshold"], float)
    assert dedup["mode"] == "audit"


def test_coerce_scalar_keeps_unrecognised_numbers_as_text() -> None:
    assert coerce_scalar("false") is False
    assert coerce_scalar("True") == "True"
    assert coerce_scalar("1.") == "1."
    assert coerce_scalar(".5") == ".5"
    assert coerce_scalar("-3") == "-3"
    assert coerce_scalar("1e-05") == "1e-05"


def test_multiline_message_is_space_joined() -> None:
    text = (
        "rules:\n"
        "  r1:\n"
        "    message: >-\n"
        "      alpha beta\n"
        "        gamma\n"
    )
    assert parse_ruleset(text).rules["r1"]["message"] == "alpha beta gamma"


def test_block_markers_start_collection() -> None:
    for marker in (">-", ">", "|"):
        text = f"rules:\n  r1:\n    message: {marker}\n      one\n      two\n"
        assert parse_ruleset(text).rules["r1"]["message"] == "one two"


def test_multiline_collection_ends_at_next_field() -> None:
    text = (
        "rules:\n"
        "  r1:\n"
        "    message: >-\n"
        "      folded text\n"
        "    severity: info\n"
    )
    rule = parse_ruleset(text).rules["r1"]
    assert rule == {"message": "folded text", "severity": "info"}


def test_multiline_collection_ends_at_next_rule() -> None:
    text = (
        "rules:\n"
        "  r1:\n"
        "    message: |\n"
        "      first\n"
        "  r2:\n"
        "    severity: error\n"
    )
    rules = parse_ruleset(text).rules
    assert rules["r1"] == {"message": "first"}
    assert rules["r2"] == {"severity": "error"}


def test_multiline_collection_ends_at_new_section() -> None:
    text = (
        "rules:\n"
        "  r1:\n"
        "    message: >-\n"
        "      pending\n"
        "deduplication:\n"
        "  mode: block\n"
    )
    config = parse_ruleset(text)
    assert config.rules["r1"]["message"] == "pending"
    assert config.deduplication == {"mode": "block"}


def test_empty_multiline_value_is_flushed_as_empty_string() -> None:
    text = "rules:\n  r1:\n    message: >-\n      \n"
    assert parse_ruleset(text).rules["r1"] == {"message": ""}


def test_keeps_every_rule() -> None:
    text = (
        "rules:\n"
        "  first:\n"
        "    severity: error\n"
        "  second:\n"
        "    severity: info\n"
    )
    config = parse_ruleset(text)
    assert list(config.rules) == ["first", "second"]
    assert config.rule_key == "first"


def test_ignores_malformed_and_unsupported_lines() -> None:
    text = (
        "deduplication:\n"
        "  - a list item\n"
        "  mode: audit\n"
        "  not a field\n"
        "  tags: [a, b]\n"
        "other:\n"
        "  mode: block\n"
        "rules:\n"
        "   odd-indent:\n"
        "    orphan: value\n"
        "  r1:\n"
        "    severity: warn\n"
        "    bad key!: x\n"
    )
    config = parse_ruleset(text)
    assert config.deduplication == {"mode": "audit", "tags": "[a, b]"}
    assert config.rules == {"r1": {"severity": "warn"}}


def test_comments_and_blank_lines_are_skipped() -> None:
    text = "deduplication:\n\n  # mode: block\n  mode: warn\n   \n"
    assert parse_ruleset(text).deduplication == {"mode": "warn"}


def test_windows_line_endings() -> None:
    text = "deduplication:\r\n  num_bands: 8\r\n  enabled: false\r\n"
    assert parse_ruleset(text).deduplication == {"num_bands": 8, "enabled": False}


def test_rule_field_wins_at_field_indent() -> None:
    text = "rules:\n  r1:\n    rules:\n    severity: info\n"
    assert parse_ruleset(text).rules == {"r1": {"rules": "", "severity": "info"}}
