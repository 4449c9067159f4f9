"""
Market Data Fetcher — Candles, open interest and funding for the universe.

Per symbol: open interest first, then candles. Funding comes from a single
batch ticker call per invocation. Fetches run one at a time unless a
concurrency above 1 is configured; output order always follows the input.
"""

from __future__ import annotations
import asyncio
import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING
from exchange.errors import FetchError
from exchange.models import Candle, OpenInterestPoint, TickerSnapshot
import logging

if TYPE_CHECKING:
    from exchange.bybit_rest import BybitRestClient

logger = logging.getLogger(__name__)


@dataclass
class SymbolSeries:
    """Ascending candle and OI series for one symbol."""
    symbol: str
    candles: List[Candle] = field(default_factory=list)
    open_interest: List[OpenInterestPoint] = field(default_factory=list)


def parse_klines(raw_klines: List) -> List[Candle]:
    """Parse raw Bybit kline data into Candles. Reverse to oldest-first, skip bad or non-finite rows."""
    candles = []
    for k in reversed(raw_klines):
        # Bybit V5 kline format: [startTime, open, high, low, close, volume, turnover]
        try:
            close, volume = float(k[4]), float(k[5])
            if not (math.isfinite(close) and math.isfinite(volume)):
                raise ValueError("non-finite close/volume")
            candles.append(Candle(timestamp=int(k[0]), close=close, volume=volume))
        except (IndexError, TypeError, ValueError) as e:
            logger.warning(f"[FETCH] Bad kline data: {k}: {e}")
    return candles


def parse_open_interest(raw: List[Dict]) -> List[OpenInterestPoint]:
    """Parse open-interest samples, sorted ascending by timestamp."""
    points = []
    for x in raw:
        try:
            value = float(x["openInterest"])
            if not math.isfinite(value):
                raise ValueError("non-finite open interest")
            points.append(OpenInterestPoint(timestamp=int(x["timestamp"]), open_interest=value))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"[FETCH] Bad open interest data: {x}: {e}")
    points.sort(key=lambda p: p.timestamp)
    return points


def parse_tickers(raw: List[Dict]) -> Dict[str, TickerSnapshot]:
    """Ticker list to a symbol lookup. Missing, bad or non-finite fundingRate reads as 0."""
    snapshots: Dict[str, TickerSnapshot] = {}
    for t in raw:
        if not isinstance(t, dict) or not t.get("symbol"):
            continue
        try:
            rate = float(t.get("fundingRate") or 0)
        except (TypeError, ValueError):
            rate = 0.0
        if not math.isfinite(rate):
            rate = 0.0
        snapshots[t["symbol"]] = TickerSnapshot(symbol=t["symbol"], funding_rate=rate)
    return snapshots


class MarketDataFetcher:
    """Pulls the raw series the feature extractor works on."""

    def __init__(
        self,
        client: "BybitRestClient",
        category: str = "linear",
        lookback_sec: int = 3600,
        kline_interval: str = "5",
        oi_interval: str = "5min",
        concurrency: int = 1,
        skip_failed: bool = False,
    ):
        self.client = client
        self.category = category
        self.lookback_sec = lookback_sec
        self.kline_interval = kline_interval
        self.oi_interval = oi_interval
        self.concurrency = max(1, concurrency)
        self.skip_failed = skip_failed

    def window(self, now_sec: Optional[int] = None) -> tuple[int, int]:
        """(start_ms, end_ms) of the candle lookback, aligned to whole seconds."""
        now = int(time.time()) if now_sec is None else now_sec
        return (now - self.lookback_sec) * 1000, now * 1000

    async def fetch_funding_rates(self) -> Dict[str, float]:
        raw = await self.client.get_tickers(self.category)
        tickers = parse_tickers(raw)
        return {symbol: t.funding_rate for symbol, t in tickers.items()}

    async def fetch_series(self, symbol: str, start_ms: int, end_ms: int) -> SymbolSeries:
        raw_oi = await self.client.get_open_interest(symbol, self.oi_interval, self.category)
        raw_klines = await self.client.get_klines(
            symbol, self.kline_interval, start_ms, end_ms, self.category,
        )
        return SymbolSeries(
            symbol=symbol,
            candles=parse_klines(raw_klines),
            open_interest=parse_open_interest(raw_oi),
        )

    async def fetch_all(self, symbols: List[str], now_sec: Optional[int] = None) -> List[SymbolSeries]:
        """
        Series for every symbol, in input order.
        With skip_failed off, the first FetchError propagates and nothing is returned.
        """
        start_ms, end_ms = self.window(now_sec)

        if self.concurrency == 1:
            results: List[Optional[SymbolSeries]] = []
            for symbol in symbols:
                results.append(await self._fetch_one(symbol, start_ms, end_ms))
        else:
            sem = asyncio.Semaphore(self.concurrency)

            async def bounded(symbol: str) -> Optional[SymbolSeries]:
                async with sem:
                    return await self._fetch_one(symbol, start_ms, end_ms)

            tasks = [asyncio.ensure_future(bounded(s)) for s in symbols]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                # No sibling fetch may outlive a failed batch
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        series = [r for r in results if r is not None]
        skipped = len(symbols) - len(series)
        if skipped:
            logger.warning(f"[FETCH] Skipped {skipped}/{len(symbols)} symbols after fetch errors")
        if symbols and not series:
            raise FetchError("per-symbol market data", RuntimeError("every symbol failed to fetch"))
        return series

    async def _fetch_one(self, symbol: str, start_ms: int, end_ms: int) -> Optional[SymbolSeries]:
        try:
            return await self.fetch_series(symbol, start_ms, end_ms)
        except FetchError as e:
            if not self.skip_failed:
                raise
            logger.warning(f"[FETCH] {symbol}: dropped from batch: {e}")
            return None
