"""
Instrument Resolver — Active USDT perpetuals in exchange listing order.
Read fresh on every invocation; nothing is cached between calls.
"""

from __future__ import annotations
from typing import Dict, List, TYPE_CHECKING
from exchange.errors import NoInstrumentsError
from exchange.models import Instrument
import logging

if TYPE_CHECKING:
    from exchange.bybit_rest import BybitRestClient

logger = logging.getLogger(__name__)


def parse_instruments(raw: List[Dict]) -> List[Instrument]:
    """Raw instruments-info entries to Instrument objects. Entries without a symbol are skipped."""
    instruments = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("symbol"):
            continue
        instruments.append(Instrument(
            symbol=str(item["symbol"]),
            quote_coin=str(item.get("quoteCoin", "")),
            status=str(item.get("status", "")),
        ))
    return instruments


class InstrumentResolver:
    """Filters the instrument list down to the tradable universe."""

    def __init__(
        self,
        symbol_limit: int = 100,
        quote_coin: str = "USDT",
        category: str = "linear",
        trading_status: str = "Trading",
    ):
        self.symbol_limit = symbol_limit
        self.quote_coin = quote_coin
        self.category = category
        self.trading_status = trading_status

    def select(self, instruments: List[Instrument]) -> List[str]:
        """Eligible symbols, listing order kept, truncated to the limit."""
        symbols = [
            inst.symbol for inst in instruments
            if inst.is_eligible(self.quote_coin, self.trading_status)
        ][:max(0, self.symbol_limit)]

        if not symbols:
            raise NoInstrumentsError()
        return symbols

    async def resolve(self, client: "BybitRestClient") -> List[str]:
        raw = await client.get_instruments_info(self.category)
        instruments = parse_instruments(raw)
        symbols = self.select(instruments)

        logger.info(
            f"[UNIVERSE] {len(symbols)} of {len(instruments)} instruments eligible "
            f"({self.quote_coin}, cap {self.symbol_limit}): {symbols[:5]}..."
        )
        return symbols
