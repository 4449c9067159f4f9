"""
Data models for Rotation Watch.
Plain floats throughout: the pipeline only does statistics, no accounting.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Instrument:
    """One entry of instruments-info."""
    symbol: str
    quote_coin: str
    status: str

    def is_eligible(self, quote_coin: str = "USDT", status: str = "Trading") -> bool:
        return self.quote_coin == quote_coin and self.status == status


@dataclass(frozen=True)
class Candle:
    """Close/volume slice of a kline bucket."""
    timestamp: int          # Unix ms, bucket open
    close: float
    volume: float


@dataclass(frozen=True)
class OpenInterestPoint:
    timestamp: int          # Unix ms
    open_interest: float


@dataclass(frozen=True)
class TickerSnapshot:
    symbol: str
    funding_rate: float     # Fractional, 0.0001 == 0.01%


@dataclass(frozen=True)
class Features:
    """Per-symbol features, all in percent."""
    price_change: float
    volume_surge: float
    oi_change: float
    funding: float


@dataclass
class Row:
    """Output record. Only `score` changes after creation (set by the ranker)."""
    symbol: str
    price_change: float
    volume_surge: float
    oi_change: float
    funding: float
    score: float = 0.0

    @classmethod
    def from_features(cls, symbol: str, features: Features) -> "Row":
        return cls(
            symbol=symbol,
            price_change=features.price_change,
            volume_surge=features.volume_surge,
            oi_change=features.oi_change,
            funding=features.funding,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "dPrice15": self.price_change,
            "dVol15": self.volume_surge,
            "dOI15": self.oi_change,
            "funding": self.funding,
            "score": self.score,
        }


@dataclass
class Snapshot:
    """One invocation's ranked table."""
    ts: int                 # Unix ms, when the ranking finished
    rows: List[Row] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"ts": self.ts, "rows": [r.to_dict() for r in self.rows]}
