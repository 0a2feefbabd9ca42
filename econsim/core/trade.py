"""
Trade execution domain model

This module defines the Trade class recording one fill between an incoming
(taker) order and a resting (maker) order.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from .order import Side
from ..goods import Good


@dataclass(frozen=True, slots=True)
class Trade:
    """
    Represents a completed fill.

    This class is immutable (frozen=True); fills are final.

    Attributes:
        good: Good traded
        price: Execution price, always the maker's resting price
        size: Executed size
        aggressor_side: Side of the taker (incoming) order
        maker_order_id: ID of the resting order
        taker_order_id: ID of the incoming order
        period: Trading period the fill happened in
        trade_id: Unique identifier for the trade
        timestamp: Execution time
    """

    good: Good
    price: int
    size: int
    aggressor_side: Side
    maker_order_id: UUID
    taker_order_id: UUID
    period: int = 0
    trade_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Price cannot be negative, got {self.price}")

        if self.size <= 0:
            raise ValueError(f"Size must be positive, got {self.size}")

    @property
    def total_value(self) -> int:
        """Total trade value (price * size)."""
        return self.price * self.size

    @property
    def maker_is_buyer(self) -> bool:
        return self.aggressor_side == Side.SELL

    def to_dict(self) -> dict:
        return {
            "trade_id": str(self.trade_id),
            "good": self.good.value,
            "price": self.price,
            "size": self.size,
            "period": self.period,
            "timestamp": self.timestamp.isoformat(),
            "aggressor_side": self.aggressor_side.value,
            "maker_order_id": str(self.maker_order_id),
            "taker_order_id": str(self.taker_order_id),
            "total_value": self.total_value,
        }

    def __repr__(self) -> str:
        return (
            f"Trade(id={str(self.trade_id)[:8]}..., "
            f"{self.good}, {self.size} @ {self.price}, "
            f"aggressor={self.aggressor_side.value})"
        )
