"""
Order domain model with enums and validation

This module defines the Order class and related enums representing
orders resting in, or being matched by, a market.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from ..utils.exceptions import InvalidQuantityException
from ..utils.validators import validate_owner, validate_price, validate_side, validate_size

if TYPE_CHECKING:
    from .market import MarketAgent


class Side(Enum):
    """Order side enumeration."""
    BUY = "BUY"
    SELL = "SELL"

    def __str__(self) -> str:
        return self.value

    @property
    def opposite(self) -> "Side":
        return Side.SELL if self is Side.BUY else Side.BUY


class OrderStatus(Enum):
    """Order status enumeration."""
    PENDING = "PENDING"      # Resting, nothing filled yet
    PARTIAL = "PARTIAL"      # Partially filled
    FILLED = "FILLED"        # Completely filled
    UNFILLED = "UNFILLED"    # Expired at period end with size remaining
    REJECTED = "REJECTED"    # Rejected due to validation failure

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, eq=False)
class Order:
    """
    An intent to trade ``size`` units at ``price`` on one side of a market.

    ``size`` is the remaining quantity and shrinks as the order fills. The
    owner is only referenced, never owned: the market uses it to deliver
    ``on_fill`` / ``on_unfilled`` notifications.

    Attributes:
        price: Limit price in whole monetary units
        size: Remaining size in whole units of the good
        side: Buy or sell
        owner: Agent notified of fills and expiry
        order_id: Unique identifier for the order
        timestamp: Order creation time
        filled_size: Amount already filled
        status: Current status of the order
    """

    price: int
    size: int
    side: Side
    owner: "MarketAgent"
    order_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    filled_size: int = 0
    status: OrderStatus = OrderStatus.PENDING

    def validate(self, max_price: Optional[int] = None, max_size: Optional[int] = None) -> None:
        """
        Validate order parameters.

        Raises:
            InvalidOrderException: If validation fails
        """
        validate_size(self.size, max_size)
        validate_price(self.price, max_price)
        validate_side(self.side)
        validate_owner(self.owner)

    def fill(self, amount: int) -> None:
        """
        Apply a fill of ``amount`` units.

        Raises:
            InvalidQuantityException: If amount is not positive or exceeds size
        """
        if amount <= 0:
            raise InvalidQuantityException(f"Fill size must be positive, got {amount}")

        if amount > self.size:
            raise InvalidQuantityException(
                f"Fill size {amount} exceeds remaining {self.size}",
                details={"order_id": str(self.order_id)}
            )

        self.size -= amount
        self.filled_size += amount
        self.status = OrderStatus.FILLED if self.size == 0 else OrderStatus.PARTIAL

    @property
    def original_size(self) -> int:
        """Size the order was posted with."""
        return self.size + self.filled_size

    @property
    def is_fully_filled(self) -> bool:
        return self.size == 0

    @property
    def is_buy(self) -> bool:
        return self.side == Side.BUY

    @property
    def is_sell(self) -> bool:
        return self.side == Side.SELL

    def crosses(self, best_opposite: Optional[int]) -> bool:
        """
        Check whether this order trades against the given opposite best price.

        Buy orders cross at or above the best ask, sell orders at or below the
        best bid. There is nothing to cross against an empty book.
        """
        if best_opposite is None:
            return False
        if self.is_buy:
            return self.price >= best_opposite
        return self.price <= best_opposite

    def __repr__(self) -> str:
        return (
            f"Order(id={str(self.order_id)[:8]}..., "
            f"{self.side.value} {self.size} @ {self.price}, "
            f"status={self.status.value}, filled={self.filled_size}/{self.original_size})"
        )

    def __hash__(self) -> int:
        return hash(self.order_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert order to a plain dictionary."""
        return {
            "order_id": str(self.order_id),
            "side": self.side.value,
            "price": self.price,
            "size": self.size,
            "filled_size": self.filled_size,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }
