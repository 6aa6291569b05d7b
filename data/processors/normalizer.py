"""
Data Normalizer - Standardizes upstream market rows for the Meme-Coin Engine
Missing or non-finite numbers become 0 and identity fields become strings
"""

from dataclasses import dataclass
from typing import Any, Dict

from loguru import logger

from utils.helpers import to_finite_float


@dataclass(frozen=True)
class MarketSnapshot:
    """Normalized identity and market fields of one upstream row"""
    id: str
    symbol: str
    name: str
    image: str
    price: float
    change_24h: float
    market_cap: float


class DataNormalizer:
    """Normalizes CoinGecko market rows"""

    def __init__(self, uppercase_symbols: bool = True):
        self.uppercase_symbols = uppercase_symbols

    @staticmethod
    def _text(value: Any) -> str:
        return "" if value is None else str(value).strip()

    def normalize_market_row(self, row: Dict[str, Any]) -> MarketSnapshot:
        """
        Normalize a raw ``/coins/markets`` row

        Raises:
            ValueError: when the row has no usable id
        """
        coin_id = self._text(row.get("id"))
        if not coin_id:
            raise ValueError(f"Market row without id: {row!r}")

        symbol = self._text(row.get("symbol"))
        if self.uppercase_symbols:
            symbol = symbol.upper()

        snapshot = MarketSnapshot(
            id=coin_id,
            symbol=symbol,
            name=self._text(row.get("name")),
            image=self._text(row.get("image")),
            price=to_finite_float(row.get("current_price")),
            change_24h=to_finite_float(row.get("price_change_percentage_24h")),
            market_cap=to_finite_float(row.get("market_cap")),
        )
        logger.trace(f"Normalized market row {coin_id}")
        return snapshot
