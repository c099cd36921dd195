"""Console formatting helpers for rulesets and similarity previews.

Keeping formatting here keeps the CLI commands short and the output
consistent between commands.
"""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from core.models import Configuration
from core.ruleset_writer import DEDUP_FIELD_ORDER, format_scalar
from core.similarity import VERDICT_HIGH_CONFIDENCE, VERDICT_NONE, SimilarityPreview

ACCENT = "#2AABEE"

MODE_LABELS = {
    "audit": "Audit - log & alert only",
    "warn": "Warn - log, alert & add warning",
    "block": "Block - reject API creation",
}


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def build_ruleset_table(config: Configuration, probability: float | None) -> Table:
    """Return a two-column table of every field the writer emits."""

    table = Table(title=Text("Deduplication ruleset", style=f"bold {ACCENT}"))
    table.add_column("field", style="bold")
    table.add_column("value")

    dedup = config.deduplication
    for key in DEDUP_FIELD_ORDER:
        value = format_scalar(dedup.get(key))
        if key == "mode" and value in MODE_LABELS:
            value = MODE_LABELS[value]
        table.add_row(key, value)

    rule = config.rule
    table.add_section()
    table.add_row("rule", config.rule_key)
    for key in ("description", "severity", "message"):
        table.add_row(key, str(rule.get(key) or ""))

    if probability is not None:
        table.add_section()
        table.add_row("lsh detection probability", format_percent(probability))
    return table


def format_preview(preview: SimilarityPreview) -> Text:
    """Return a short human-readable summary of a similarity preview."""

    if preview.verdict == VERDICT_HIGH_CONFIDENCE:
        style = "bold red"
    elif preview.verdict == VERDICT_NONE:
        style = "green"
    else:
        style = "yellow"

    lines = [
        f"jaccard: {preview.jaccard:.3f}",
        f"minhash estimate: {preview.estimated_jaccard:.3f}",
        f"lsh candidate: {'yes' if preview.candidate else 'no'}",
    ]
    text = Text("\n".join(lines) + "\n")
    text.append(f"verdict: {preview.verdict}", style=style)
    if preview.action:
        text.append(f" (action: {preview.action})")
    return text
