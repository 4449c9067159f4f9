"""
Feature Extractor — Short-horizon deltas per symbol.

At 5-minute granularity "15" means three buckets back:
  dPrice15 = close now vs. close 3 candles earlier
  dVol15   = mean volume of last 3 candles vs. mean of last 60
  dOI15    = latest OI vs. the 4th most recent sample
All denominators clamp to EPSILON instead of raising.
"""

from __future__ import annotations
from typing import List, Sequence
from exchange.models import Candle, Features, OpenInterestPoint

EPSILON = 1e-9
PRICE_LAG = 3           # Candles between "now" and the comparison close
RECENT_VOLUME_WINDOW = 3
BASELINE_VOLUME_WINDOW = 60
OI_LAG = 3              # Samples between latest and comparison OI


def pct_change(new: float, old: float) -> float:
    return (new - old) / max(old, EPSILON) * 100


def price_change(candles: Sequence[Candle]) -> float:
    """Percent change of the last close vs. PRICE_LAG candles earlier (or the first candle)."""
    if not candles:
        return 0.0
    last = candles[-1]
    prev = candles[-(PRICE_LAG + 1)] if len(candles) > PRICE_LAG else candles[0]
    return pct_change(last.close, prev.close)


def volume_surge(candles: Sequence[Candle]) -> float:
    """Recent mean volume relative to the baseline mean, as percent deviation from 1."""
    if not candles:
        return 0.0

    baseline_window = candles[-BASELINE_VOLUME_WINDOW:]
    baseline = (
        sum(c.volume for c in baseline_window) / len(baseline_window)
        if baseline_window else 1.0
    )
    recent_window = candles[-RECENT_VOLUME_WINDOW:]
    recent = sum(c.volume for c in recent_window) / max(1, min(RECENT_VOLUME_WINDOW, len(candles)))

    return (recent / max(baseline, EPSILON) - 1) * 100


def oi_change(points: Sequence[OpenInterestPoint]) -> float:
    if len(points) <= OI_LAG:
        return 0.0
    return pct_change(points[-1].open_interest, points[-(OI_LAG + 1)].open_interest)


def extract_features(
    candles: List[Candle],
    open_interest: List[OpenInterestPoint],
    funding_rate: float,
) -> Features:
    """Four scalar features for one symbol. Series must be oldest-first."""
    return Features(
        price_change=price_change(candles),
        volume_surge=volume_surge(candles),
        oi_change=oi_change(open_interest),
        funding=funding_rate * 100,
    )
