"""Similarity preview for a configured deduplication ruleset (core domain).

Lets a ruleset author check how two documents would be treated: exact shingle
Jaccard, the MinHash estimate, and whether the banded LSH index would pair
them at all.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from datasketch import MinHash, MinHashLSH

from core.lsh import rows_per_band

LOGGER = logging.getLogger(__name__)

VERDICT_NONE = "none"
VERDICT_SIMILAR = "similar"
VERDICT_HIGH_CONFIDENCE = "high_confidence"


@dataclass(frozen=True)
class SimilarityPreview:
    """Outcome of comparing two documents under one ruleset."""

    jaccard: float
    estimated_jaccard: float
    candidate: bool
    verdict: str
    action: Optional[str]


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_text(text: str) -> str:
    """Normalize text so shingles ignore case and layout."""

    return _collapse_whitespace(text).lower()


def shingles(text: str, size: int) -> set[str]:
    """Character n-grams of the normalized text."""

    cleaned = normalize_text(text)
    if not cleaned:
        return set()
    if len(cleaned) <= size:
        return {cleaned}
    return {cleaned[i : i + size] for i in range(len(cleaned) - size + 1)}


def _signature(tokens: set[str], num_perm: int) -> MinHash:
    mh = MinHash(num_perm=num_perm)
    for token in sorted(tokens):
        mh.update(token.encode("utf-8"))
    return mh


def _verdict(score: float, dedup: Mapping[str, Any]) -> str:
    if score >= dedup["high_confidence_threshold"]:
        return VERDICT_HIGH_CONFIDENCE
    if score >= dedup["similarity_threshold"]:
        return VERDICT_SIMILAR
    return VERDICT_NONE


def preview_similarity(left: str, right: str, dedup: Mapping[str, Any]) -> SimilarityPreview:
    """Compare two documents using the ruleset's shingling and LSH settings."""

    num_perm = dedup["num_hash_functions"]
    num_bands = dedup["num_bands"]
    rows = rows_per_band(num_perm, num_bands)
    if rows < 1:
        raise ValueError(
            f"num_bands ({num_bands}) must not exceed num_hash_functions ({num_perm})"
        )

    left_tokens = shingles(left, dedup["shingle_size"])
    right_tokens = shingles(right, dedup["shingle_size"])
    union = left_tokens | right_tokens
    jaccard = len(left_tokens & right_tokens) / len(union) if union else 0.0

    estimated = 0.0
    candidate = False
    if left_tokens and right_tokens:
        left_sig = _signature(left_tokens, num_perm)
        right_sig = _signature(right_tokens, num_perm)
        estimated = left_sig.jaccard(right_sig)
        lsh = MinHashLSH(num_perm=num_perm, params=(num_bands, rows))
        lsh.insert("left", left_sig)
        candidate = "left" in lsh.query(right_sig)
    else:
        LOGGER.debug("Skipping MinHash estimate for empty document")

    verdict = _verdict(jaccard, dedup)
    action = None
    if verdict != VERDICT_NONE and dedup.get("enabled", True):
        action = dedup.get("mode")
    return SimilarityPreview(
        jaccard=jaccard,
        estimated_jaccard=estimated,
        candidate=candidate,
        verdict=verdict,
        action=action,
    )
