"""
Market contracts

Markets expose the interface below to the simulation driver and to agents;
agents implement MarketAgent to be told about their fills.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .order import Order, Side
from .trade import Trade
from ..goods import Good


class MarketAgent(ABC):
    """
    An agent that trades in a market and is notified of market events.

    Callbacks run synchronously inside the market call that triggered them.
    They must not call ``post`` or ``reset`` on the same market.
    """

    @abstractmethod
    def on_fill(self, good: Good, side: Side, price: int, size: int) -> None:
        """Called once per (partial) fill, with the agent's own side."""

    @abstractmethod
    def on_unfilled(self, good: Good, side: Side, size: int) -> None:
        """Called at period end for each order still resting, with its remaining size."""


class Market(ABC):
    """A market for buying and selling a single good."""

    @abstractmethod
    def post(self, order: Order) -> List[Trade]:
        """Post an order to this market."""

    @abstractmethod
    def reset(self):
        """End the trading period."""

    @abstractmethod
    def bid(self) -> Optional[int]:
        """Highest price of the unfilled buy orders, or None."""

    @abstractmethod
    def ask(self) -> Optional[int]:
        """Lowest price of the unfilled sell orders, or None."""

    @abstractmethod
    def high(self) -> Optional[int]:
        """Highest trade price of the last trading period."""

    @abstractmethod
    def low(self) -> Optional[int]:
        """Lowest trade price of the last trading period."""

    @abstractmethod
    def volume(self) -> int:
        """Size traded during the last trading period."""

    @property
    @abstractmethod
    def good(self) -> Good:
        """The good bought and sold in this market."""
