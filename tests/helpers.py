"""Canned Bybit V5 payloads and a fake client for tests."""

from __future__ import annotations

from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

T0 = 1_700_000_000_000
STEP = 5 * 60 * 1000


def instrument(symbol: str, quote: str = "USDT", status: str = "Trading") -> Dict:
    return {"symbol": symbol, "quoteCoin": quote, "status": status}


def klines_newest_first(closes: List[float], volumes: List[float]) -> List[List[str]]:
    """Bybit kline rows, newest first, from oldest-first closes/volumes."""
    rows = [
        [str(T0 + i * STEP), "0", "0", "0", str(c), str(v), "0"]
        for i, (c, v) in enumerate(zip(closes, volumes))
    ]
    return list(reversed(rows))


def open_interest_newest_first(values: List[float]) -> List[Dict]:
    rows = [
        {"timestamp": str(T0 + i * STEP), "openInterest": str(v)}
        for i, v in enumerate(values)
    ]
    return list(reversed(rows))


def make_client(
    instruments: List[Dict],
    tickers: Optional[List[Dict]] = None,
    klines: Optional[Dict[str, List]] = None,
    open_interest: Optional[Dict[str, List]] = None,
) -> MagicMock:
    """Mock BybitRestClient backed by per-symbol dicts; unknown symbols get empty series."""
    klines = klines or {}
    open_interest = open_interest or {}

    client = MagicMock()
    client.get_instruments_info = AsyncMock(return_value=instruments)
    client.get_tickers = AsyncMock(return_value=tickers or [])
    client.get_klines = AsyncMock(
        side_effect=lambda symbol, *args, **kwargs: klines.get(symbol, [])
    )
    client.get_open_interest = AsyncMock(
        side_effect=lambda symbol, *args, **kwargs: open_interest.get(symbol, [])
    )
    client.close = AsyncMock()
    return client


