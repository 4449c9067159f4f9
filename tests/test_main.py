"""One-shot CLI path: run_once prints a snapshot or the error envelope."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

import main
from config import RotationConfig
from core.pipeline import RotationPipeline
from exchange.errors import FetchError
from tests.helpers import instrument, klines_newest_first, make_client, open_interest_newest_first

# ---------------------------------------------------------------------------
# run_once
# ---------------------------------------------------------------------------


class TestRunOnce:
    @pytest.mark.asyncio
    async def test_prints_snapshot(self, config: RotationConfig, capsys) -> None:
        client = make_client(
            [instrument("BTCUSDT")],
            tickers=[{"symbol": "BTCUSDT", "fundingRate": "0.0001"}],
            klines={"BTCUSDT": klines_newest_first([100.0] * 12, [10.0] * 12)},
            open_interest={"BTCUSDT": open_interest_newest_first([5, 5, 5, 5])},
        )

        rc = await main.run_once(config, RotationPipeline(config, client=client))

        assert rc == 0
        out = json.loads(capsys.readouterr().out)
        assert set(out) == {"ts", "rows"}
        assert [r["symbol"] for r in out["rows"]] == ["BTCUSDT"]
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetch_failure_prints_error(self, config: RotationConfig, capsys) -> None:
        client = make_client([instrument("BTCUSDT")])
        client.get_klines = AsyncMock(side_effect=FetchError("/v5/market/kline", RuntimeError("HTTP 403")))

        rc = await main.run_once(config, RotationPipeline(config, client=client))

        assert rc == 1
        out = json.loads(capsys.readouterr().out)
        assert out["error"] is True
        assert "HTTP 403" in out["message"]
        assert "rows" not in out
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_universe_prints_error(self, config: RotationConfig, capsys) -> None:
        client = make_client([instrument("BTCPERP", quote="USDC")])

        rc = await main.run_once(config, RotationPipeline(config, client=client))

        assert rc == 1
        out = json.loads(capsys.readouterr().out)
        assert out == {"error": True, "message": "No symbols resolved from instruments-info"}
        client.close.assert_awaited_once()
