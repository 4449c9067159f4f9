"""
Rotation Pipeline — One invocation, start to finish.
Resolve universe -> funding snapshot -> per-symbol series -> features -> rank.
Holds no market data between runs.
"""

from __future__ import annotations
import time
from typing import Optional
from config import RotationConfig
from core.features import extract_features
from core.instrument_resolver import InstrumentResolver
from core.market_data import MarketDataFetcher
from core.scoring import rank
from exchange.bybit_rest import BybitRestClient
from exchange.models import Row, Snapshot
import logging

logger = logging.getLogger(__name__)


class RotationPipeline:
    """Computes a ranked Snapshot from live reads."""

    def __init__(self, config: RotationConfig, client: Optional[BybitRestClient] = None):
        self.config = config
        self.client = client or BybitRestClient(
            hosts=config.exchange.hosts,
            timeout_sec=config.exchange.timeout_sec,
            user_agent=config.exchange.user_agent,
        )
        self.resolver = InstrumentResolver(
            symbol_limit=config.universe.symbol_limit,
            quote_coin=config.universe.quote_coin,
            category=config.universe.category,
            trading_status=config.universe.trading_status,
        )
        md = config.market_data
        self.fetcher = MarketDataFetcher(
            client=self.client,
            category=config.universe.category,
            lookback_sec=md.lookback_sec,
            kline_interval=md.kline_interval,
            oi_interval=md.oi_interval,
            concurrency=md.fetch_concurrency,
            skip_failed=md.skip_failed_symbols,
        )

    async def run(self, now_sec: Optional[int] = None) -> Snapshot:
        started = time.monotonic()

        symbols = await self.resolver.resolve(self.client)
        funding = await self.fetcher.fetch_funding_rates()
        series = await self.fetcher.fetch_all(symbols, now_sec=now_sec)

        rows = []
        for s in series:
            features = extract_features(s.candles, s.open_interest, funding.get(s.symbol, 0.0))
            rows.append(Row.from_features(s.symbol, features))

        ranked = rank(rows, self.config.scoring)
        logger.info(f"[PIPELINE] Ranked {len(ranked)} symbols in {time.monotonic() - started:.2f}s")
        return Snapshot(ts=int(time.time() * 1000), rows=ranked)

    async def close(self):
        await self.client.close()
