"""Shared fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from config import RotationConfig
from tests.helpers import instrument, klines_newest_first, make_client, open_interest_newest_first


@pytest.fixture
def config() -> RotationConfig:
    return RotationConfig()


@pytest.fixture
def five_symbol_client() -> MagicMock:
    """Five eligible symbols with distinct volume/OI/price/funding profiles."""
    symbols = ["BTCUSDT", "ETHUSDT", "SOLUSDT", "XRPUSDT", "DOGEUSDT"]
    flat = [100.0] * 12
    klines = {
        "BTCUSDT": klines_newest_first([100.0] * 9 + [101, 102, 103], flat),
        "ETHUSDT": klines_newest_first([50.0] * 12, [100.0] * 9 + [400, 400, 400]),
        "SOLUSDT": klines_newest_first([20.0] * 9 + [19, 18, 17], flat),
        "XRPUSDT": klines_newest_first([1.0] * 12, [100.0] * 9 + [50, 50, 50]),
        "DOGEUSDT": klines_newest_first([0.1] * 12, flat),
    }
    open_interest = {
        "BTCUSDT": open_interest_newest_first([1000, 1000, 1000, 1010]),
        "ETHUSDT": open_interest_newest_first([500, 500, 500, 600]),
        "SOLUSDT": open_interest_newest_first([300, 300, 300, 270]),
        "XRPUSDT": open_interest_newest_first([100, 100]),
        "DOGEUSDT": open_interest_newest_first([80, 80, 80, 80]),
    }
    tickers = [
        {"symbol": "BTCUSDT", "fundingRate": "0.0001"},
        {"symbol": "ETHUSDT", "fundingRate": "0.0002"},
        {"symbol": "SOLUSDT", "fundingRate": "-0.0005"},
        {"symbol": "XRPUSDT", "fundingRate": ""},
    ]
    return make_client(
        [instrument(s) for s in symbols] + [instrument("BTCPERP", quote="USDC")],
        tickers=tickers,
        klines=klines,
        open_interest=open_interest,
    )
