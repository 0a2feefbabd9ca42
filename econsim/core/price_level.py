"""
Price level queue management with FIFO ordering

This module defines the PriceLevel class which maintains a queue of orders
at a single price level with strict time-priority (FIFO) enforcement.
"""

from collections import deque
from typing import Deque, Iterator, Optional

from .order import Order, Side


class PriceLevel:
    """
    Manages orders at a single price level with FIFO ordering.

    A deque gives O(1) append and pop; orders leave in the exact order they
    arrived.

    Attributes:
        price: The price level
        side: Buy or sell side
        orders: Deque of orders at this price level
    """

    def __init__(self, price: int, side: Side):
        self.price: int = price
        self.side: Side = side
        self.orders: Deque[Order] = deque()

    def add_order(self, order: Order) -> None:
        """
        Add an order to the end of the queue (FIFO).

        Raises:
            ValueError: If order price or side doesn't match the level
        """
        if order.price != self.price:
            raise ValueError(
                f"Order price {order.price} doesn't match level price {self.price}"
            )

        if order.side != self.side:
            raise ValueError(
                f"Order side {order.side} doesn't match level side {self.side}"
            )

        self.orders.append(order)

    def get_next_order(self) -> Optional[Order]:
        """Get the next order in FIFO order without removing it."""
        if not self.orders:
            return None
        return self.orders[0]

    def pop_next_order(self) -> Optional[Order]:
        """Get and remove the next order in FIFO order."""
        if not self.orders:
            return None
        return self.orders.popleft()

    def is_empty(self) -> bool:
        return len(self.orders) == 0

    @property
    def total_volume(self) -> int:
        """Sum of remaining sizes at this level."""
        return sum(order.size for order in self.orders)

    @property
    def order_count(self) -> int:
        return len(self.orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(self.orders)

    def __repr__(self) -> str:
        return (
            f"PriceLevel(price={self.price}, side={self.side.value}, "
            f"orders={self.order_count}, volume={self.total_volume})"
        )

    def __len__(self) -> int:
        return len(self.orders)
