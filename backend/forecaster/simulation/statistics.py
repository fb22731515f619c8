"""Percentile and velocity statistics shared by every forecast mode."""
from __future__ import annotations

import math
from typing import Sequence

PERCENTILE_RANKS: tuple[int, ...] = (0, 50, 85, 100)


def percentile_index(rank: float, n: int) -> int:
    """Index into an ascending sample of size ``n`` for a percentile rank.

    index = ceil(rank / 100 * n) - 1, clamped to [0, n - 1]. Rank 0 is the
    minimum and rank 100 the maximum.
    """
    if n <= 0:
        raise ValueError("cannot take a percentile of an empty sample")
    idx = math.ceil(rank / 100.0 * n) - 1
    return min(max(idx, 0), n - 1)


def percentile(values: Sequence[float], rank: float) -> float:
    ordered = sorted(values)
    return ordered[percentile_index(rank, len(ordered))]


def percentile_table(
    values: Sequence[float], ranks: Sequence[int] = PERCENTILE_RANKS,
) -> dict[int, float]:
    """Map each rank to its sample value. Sorts once for all ranks."""
    ordered = sorted(values)
    return {rank: ordered[percentile_index(rank, len(ordered))] for rank in ranks}


def mean(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("cannot take the mean of an empty sample")
    return sum(values) / len(values)
