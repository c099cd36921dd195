"""Banded LSH candidate probability.

With ``h`` MinHash permutations split into ``b`` bands of ``r = h // b`` rows,
a pair with Jaccard similarity ``t`` shares at least one band with
probability ``1 - (1 - t**r)**b``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def rows_per_band(num_hash_functions: int, num_bands: int) -> int:
    return num_hash_functions // num_bands


def candidate_probability(threshold: float, num_hash_functions: int, num_bands: int) -> float:
    """Probability in [0, 1] that a pair at ``threshold`` becomes a candidate.

    More bands than hash functions leaves zero rows per band, so every band
    trivially matches and the result is 1.0. Without any band nothing can
    match and the result is 0.0.
    """

    if num_bands <= 0:
        return 0.0
    rows = rows_per_band(num_hash_functions, num_bands)
    return 1 - (1 - threshold**rows) ** num_bands


def lsh_probability(threshold: float, num_hash_functions: int, num_bands: int) -> float:
    """Candidate probability as a percentage with one decimal, for display."""

    percent = Decimal(candidate_probability(threshold, num_hash_functions, num_bands) * 100)
    return float(percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
