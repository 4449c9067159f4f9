"""
Rotation Watch — Configuration
All tunable parameters in one place.
"""

import os
from dataclasses import dataclass, field
from typing import List


@dataclass
class UniverseConfig:
    symbol_limit: int = 100             # Cap on instruments considered
    quote_coin: str = "USDT"
    category: str = "linear"            # USDT-margined perpetuals
    trading_status: str = "Trading"


@dataclass
class MarketDataConfig:
    lookback_sec: int = 60 * 60         # 1 hour of candles
    kline_interval: str = "5"           # 5-minute candles (minutes)
    oi_interval: str = "5min"           # Open interest sampling interval
    fetch_concurrency: int = 1          # 1 = strictly sequential
    skip_failed_symbols: bool = False   # False = one failed symbol fails the request


@dataclass
class ScoringWeights:
    volume: float = 0.45
    open_interest: float = 0.45
    price: float = 0.10
    funding: float = 0.10


@dataclass
class ExchangeConfig:
    hosts: List[str] = field(default_factory=lambda: [
        "https://api.bybit.com",
        "https://api.bytick.com",       # Mirror, tried when the primary refuses
    ])
    timeout_sec: float = 10.0           # Per call, shared by all hosts
    user_agent: str = "Mozilla/5.0 RotationWatch"


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    cache_max_age: int = 15             # s-maxage
    cache_swr: int = 30                 # stale-while-revalidate

    @property
    def cache_control(self) -> str:
        return f"s-maxage={self.cache_max_age}, stale-while-revalidate={self.cache_swr}"


@dataclass
class RotationConfig:
    universe: UniverseConfig = field(default_factory=UniverseConfig)
    market_data: MarketDataConfig = field(default_factory=MarketDataConfig)
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    exchange: ExchangeConfig = field(default_factory=ExchangeConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RotationConfig":
        """Load config with environment variable overrides."""
        config = cls()
        config.universe.symbol_limit = int(os.getenv("SYMBOL_LIMIT", "100"))
        config.universe.quote_coin = os.getenv("QUOTE_COIN", "USDT")
        config.market_data.fetch_concurrency = max(1, int(os.getenv("FETCH_CONCURRENCY", "1")))
        config.market_data.skip_failed_symbols = (
            os.getenv("SKIP_FAILED_SYMBOLS", "false").lower() == "true"
        )
        hosts = os.getenv("BYBIT_HOSTS", "")
        if hosts.strip():
            config.exchange.hosts = [h.strip().rstrip("/") for h in hosts.split(",") if h.strip()]
        config.exchange.timeout_sec = float(os.getenv("REQUEST_TIMEOUT_SEC", "10"))
        config.server.host = os.getenv("HOST", "0.0.0.0")
        config.server.port = int(os.getenv("PORT", "8080"))
        config.log_level = os.getenv("LOG_LEVEL", "INFO")
        return config
