"""
Order book data structure with price-time priority

This module implements one side of a market's book using a sorted dictionary
of FIFO price levels.
"""

from typing import Dict, List, Optional, Tuple
from uuid import UUID
from sortedcontainers import SortedDict

from .order import Order, Side
from .price_level import PriceLevel
from ..utils.exceptions import DuplicateOrderException, OrderBookException


class OrderBook:
    """
    Resting orders for one side of a market, kept in price-time priority.

    The buy book is keyed in descending price order and the sell book in
    ascending order, so the best order is always the head of the first
    level. Ties at one price are broken by insertion order.

    Attributes:
        side: Side of the orders held in this book
        levels: Sorted dictionary of price levels, best price first
        order_registry: Lookup of resting orders by ID
    """

    def __init__(self, side: Side):
        """
        Initialize an empty book.

        Args:
            side: BUY for the bid book, SELL for the ask book
        """
        self.side: Side = side

        if side == Side.BUY:
            # Highest price first
            self.levels: SortedDict = SortedDict(lambda price: -price)
        else:
            self.levels: SortedDict = SortedDict()

        self.order_registry: Dict[UUID, Order] = {}

    def insert(self, order: Order) -> None:
        """
        Add an order behind every order of equal or better price.

        Raises:
            DuplicateOrderException: If order already rests in the book
            OrderBookException: If order has no size or belongs to the other side
        """
        if order.order_id in self.order_registry:
            raise DuplicateOrderException(
                f"Order {order.order_id} already exists in book",
                details={"order_id": str(order.order_id)}
            )

        if order.size <= 0:
            raise OrderBookException(
                "Cannot add order with no remaining size",
                details={"order_id": str(order.order_id)}
            )

        if order.side != self.side:
            raise OrderBookException(
                f"Cannot add {order.side} order to {self.side} book",
                details={"order_id": str(order.order_id)}
            )

        level = self.levels.get(order.price)
        if level is None:
            level = PriceLevel(order.price, self.side)
            self.levels[order.price] = level

        level.add_order(order)
        self.order_registry[order.order_id] = order

    def peek_best(self) -> Optional[Order]:
        """
        Get the highest priority order without removing it.

        Returns:
            Head order or None if the book is empty
        """
        if not self.levels:
            return None
        return self.levels.peekitem(0)[1].get_next_order()

    def best_price(self) -> Optional[int]:
        """
        Get the best price in the book.

        Returns:
            Head order's price, or None when there is no quote
        """
        if not self.levels:
            return None
        return self.levels.peekitem(0)[0]

    def reduce_best(self, amount: int) -> Order:
        """
        Fill ``amount`` units of the head order, removing it once empty.

        Args:
            amount: Size to take from the head order

        Returns:
            The head order after the reduction

        Raises:
            OrderBookException: If the book is empty or amount is not in
                (0, head size]
        """
        if not self.levels:
            raise OrderBookException(f"Cannot reduce best order of empty {self.side} book")

        price, level = self.levels.peekitem(0)
        order = level.get_next_order()

        if amount <= 0 or amount > order.size:
            raise OrderBookException(
                f"Cannot reduce order of size {order.size} by {amount}",
                details={"order_id": str(order.order_id), "amount": amount}
            )

        order.fill(amount)

        if order.is_fully_filled:
            level.pop_next_order()
            del self.order_registry[order.order_id]
            if level.is_empty():
                del self.levels[price]

        return order

    def drain_all(self) -> List[Order]:
        """
        Remove and return every resting order.

        Orders come back in priority order, though settlement does not rely
        on it.
        """
        drained = [order for level in self.levels.values() for order in level]
        self.levels.clear()
        self.order_registry.clear()
        return drained

    def get_order(self, order_id: UUID) -> Optional[Order]:
        """Get a resting order by ID."""
        return self.order_registry.get(order_id)

    def get_depth(self, levels: int = 10) -> List[Tuple[int, int]]:
        """
        Get aggregated depth for the best price levels.

        Args:
            levels: Number of price levels to include

        Returns:
            List of (price, volume) tuples, best price first
        """
        result = []
        for i, (price, level) in enumerate(self.levels.items()):
            if i >= levels:
                break
            result.append((price, level.total_volume))
        return result

    @property
    def total_volume(self) -> int:
        """Total resting size across all levels."""
        return sum(level.total_volume for level in self.levels.values())

    def is_empty(self) -> bool:
        return not self.levels

    def __len__(self) -> int:
        """Number of resting orders."""
        return len(self.order_registry)

    def __repr__(self) -> str:
        return (
            f"OrderBook({self.side.value}: {len(self.levels)} levels, "
            f"best={self.best_price()}, {len(self)} orders)"
        )
