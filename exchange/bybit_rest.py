"""
Bybit V5 REST API Client (public market data only).
Tries each configured host in order, so a mirror can route around
endpoint-level access denials on the primary.
"""

from __future__ import annotations
import asyncio
from typing import Any, Dict, List, Optional, Sequence
import aiohttp
import logging

from exchange.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_HOSTS = ("https://api.bybit.com", "https://api.bytick.com")


def _result_list(data: Dict[str, Any]) -> List[Any]:
    """`result.list` of a V5 response, or [] when the shape is off."""
    result = data.get("result") if isinstance(data, dict) else None
    if not isinstance(result, dict):
        return []
    items = result.get("list")
    return items if isinstance(items, list) else []


class BybitRestClient:
    """Async Bybit V5 market-data wrapper with ordered host fallback."""

    def __init__(
        self,
        hosts: Sequence[str] = DEFAULT_HOSTS,
        timeout_sec: float = 10.0,
        user_agent: str = "Mozilla/5.0 RotationWatch",
    ):
        if not hosts:
            raise ValueError("At least one Bybit host is required")
        self.hosts = [h.rstrip("/") for h in hosts]
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "application/json,text/plain,*/*",
            "Accept-Language": "en-US,en;q=0.9",
        }
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self._headers, timeout=self.timeout)
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        GET `endpoint` from the first host that answers with 2xx JSON.
        One deadline covers every host attempt together.
        Raises FetchError with the last error once every host has failed.
        """
        session = await self._get_session()
        last_error: Optional[BaseException] = None
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout.total

        for host in self.hosts:
            remaining = deadline - loop.time()
            if remaining <= 0:
                last_error = asyncio.TimeoutError(f"Timed out after {self.timeout.total}s")
                logger.warning(f"[REST] GET {endpoint}: no time left for {host}")
                break

            url = f"{host}{endpoint}"
            try:
                async with session.get(
                    url, params=params, timeout=aiohttp.ClientTimeout(total=remaining),
                ) as resp:
                    if resp.status == 403:
                        logger.warning(f"[REST] GET {endpoint} denied by {host} (HTTP 403)")
                    resp.raise_for_status()
                    data = await resp.json(content_type=None)

                if not isinstance(data, dict):
                    data = {}
                if data.get("retCode", 0) != 0:
                    logger.error(
                        f"[REST] GET {endpoint} Error: "
                        f"code={data.get('retCode')}, msg={data.get('retMsg')}"
                    )
                return data

            except aiohttp.ClientResponseError as e:
                last_error = RuntimeError(f"HTTP {e.status}")
            except asyncio.TimeoutError:
                last_error = asyncio.TimeoutError(f"Timed out after {self.timeout.total}s")
                logger.warning(f"[REST] GET {endpoint} on {host} timed out")
            except (aiohttp.ClientError, ValueError) as e:
                last_error = e
                logger.warning(f"[REST] GET {endpoint} on {host} failed: {e}")

        logger.error(f"[REST] GET {endpoint} failed on all hosts: {last_error}")
        raise FetchError(endpoint, last_error)

    # ==================== Market Endpoints ====================

    async def get_instruments_info(self, category: str = "linear") -> List[Dict]:
        """Instrument list for a product category, in exchange listing order."""
        data = await self._request(
            "/v5/market/instruments-info",
            {"category": category, "limit": "1000"},
        )
        return _result_list(data)

    async def get_tickers(self, category: str = "linear") -> List[Dict]:
        """Batch ticker snapshot; carries `fundingRate` for perpetuals."""
        data = await self._request("/v5/market/tickers", {"category": category})
        return _result_list(data)

    async def get_open_interest(
        self,
        symbol: str,
        interval_time: str = "5min",
        category: str = "linear",
    ) -> List[Dict]:
        """
        Open interest samples for one symbol.
        Interval: 5min, 15min, 30min, 1h, 4h, 1d
        Returns newest first.
        """
        data = await self._request(
            "/v5/market/open-interest",
            {"category": category, "symbol": symbol, "intervalTime": interval_time},
        )
        return _result_list(data)

    async def get_klines(
        self,
        symbol: str,
        interval: str,
        start_ms: int,
        end_ms: int,
        category: str = "linear",
    ) -> List[List]:
        """
        Get kline/candle data between start_ms and end_ms.
        Interval: 1, 3, 5, 15, 30, 60, 120, 240, 360, 720, D, W, M
        Returns newest first — caller should reverse for chronological order.
        """
        data = await self._request(
            "/v5/market/kline",
            {
                "category": category,
                "symbol": symbol,
                "interval": interval,
                "start": str(start_ms),
                "end": str(end_ms),
            },
        )
        return _result_list(data)
