"""
Scoring — Cross-sectional normalization and ranking.

  score = w_vol * z(dVol15) + w_oi * z(dOI15) + w_price * dPrice15 - w_funding * |funding|

Volume and OI surges are z-scored within the batch so symbols with very
different typical magnitudes become comparable; price adds a small tilt and
absolute funding is penalized as a crowding cost. Statistics live only as
long as one batch.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence
from config import ScoringWeights
from exchange.models import Row
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZScore:
    """Standard-score transform fitted to one batch."""
    mean: float
    stddev: float

    def __call__(self, value: float) -> float:
        return (value - self.mean) / self.stddev


def zscore(values: Sequence[float]) -> ZScore:
    """
    Fit mean and population standard deviation (divisor = batch size).
    A zero deviation, which includes batches of size 0 or 1, is replaced by 1.
    """
    if values and min(values) == max(values):
        # Float summation would leave a residual spread on identical values
        return ZScore(mean=values[0], stddev=1.0)

    n = max(1, len(values))
    mean = sum(values) / n
    variance = sum((v - mean) ** 2 for v in values) / n
    stddev = math.sqrt(variance) or 1.0
    return ZScore(mean=mean, stddev=stddev)


def rank(rows: List[Row], weights: Optional[ScoringWeights] = None) -> List[Row]:
    """Fill in every row's score and return the rows sorted by score, highest first."""
    weights = weights or ScoringWeights()
    z_vol = zscore([r.volume_surge for r in rows])
    z_oi = zscore([r.oi_change for r in rows])

    for row in rows:
        row.score = (
            weights.volume * z_vol(row.volume_surge)
            + weights.open_interest * z_oi(row.oi_change)
            + weights.price * row.price_change
            - weights.funding * abs(row.funding)
        )

    ranked = sorted(rows, key=lambda r: r.score, reverse=True)
    if ranked:
        logger.info(
            f"[RANK] {len(ranked)} rows, vol mean={z_vol.mean:.2f} sd={z_vol.stddev:.2f}, "
            f"oi mean={z_oi.mean:.2f} sd={z_oi.stddev:.2f}. "
            f"Top: {[(r.symbol, round(r.score, 3)) for r in ranked[:3]]}"
        )
    return ranked
