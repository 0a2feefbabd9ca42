"""
Per-period trade statistics.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class PeriodStats:
    """
    High, low and volume of the trades in one period.

    ``high`` and ``low`` stay None until the first trade is recorded.
    """

    high: Optional[int] = None
    low: Optional[int] = None
    volume: int = 0
    trade_count: int = 0

    def record(self, price: int, size: int) -> None:
        """Fold one trade into the statistics."""
        self.high = price if self.high is None else max(self.high, price)
        self.low = price if self.low is None else min(self.low, price)
        self.volume += size
        self.trade_count += 1

    @property
    def has_trades(self) -> bool:
        return self.trade_count > 0

    def to_dict(self) -> dict:
        return {
            "high": self.high,
            "low": self.low,
            "volume": self.volume,
            "trade_count": self.trade_count,
        }
