"""
Double auction matching engine for a single good.

Implements continuous price-time priority matching within a trading period
and settles every order left resting when the period is reset.
"""

from collections import deque
from typing import Deque, Dict, List, Optional

from .market import Market
from .order import Order, OrderStatus, Side
from .order_book import OrderBook
from .period_stats import PeriodStats
from .trade import Trade
from ..config import Settings, get_settings
from ..goods import Good
from ..utils.exceptions import InvalidOrderException
from ..utils.logger import get_logger


class MatchingEngine(Market):
    """
    Market for one good, cleared by a continuous double auction.

    - Incoming orders match the opposite book while they cross it.
    - Best price first, then earliest order at that price.
    - Trades execute at the resting order's price.
    - Unmatched size rests until the period is reset.

    The engine is single-threaded and not re-entrant. Agent callbacks are
    invoked inline and must not call ``post`` or ``reset`` on the same
    engine; this is not checked.
    """

    def __init__(self, good: Good, settings: Optional[Settings] = None):
        """
        Initialize the market.

        Args:
            good: Good traded on this market
            settings: Limits and journal size (global settings by default)
        """
        self.settings: Settings = settings or get_settings()
        self._good: Good = good
        self.books: Dict[Side, OrderBook] = {
            Side.BUY: OrderBook(Side.BUY),
            Side.SELL: OrderBook(Side.SELL),
        }
        self._active_stats: PeriodStats = PeriodStats()
        self._last_stats: PeriodStats = PeriodStats()
        self.period: int = 0
        self.trade_journal: Deque[Trade] = deque(maxlen=self.settings.trade_journal_size)
        self.statistics: Dict[str, int] = {
            "orders_posted": 0,
            "orders_rejected": 0,
            "orders_filled": 0,
            "orders_unfilled": 0,
            "trades_executed": 0,
            "total_volume": 0,
            "periods_closed": 0,
        }
        self.logger = get_logger()

    @property
    def good(self) -> Good:
        return self._good

    def post(self, order: Order) -> List[Trade]:
        """
        Submit an order to the market.

        Args:
            order: Order to match; any unmatched size rests in its own book

        Returns:
            Trades produced by this order, in execution order

        Raises:
            InvalidOrderException: If the order is malformed. Neither book is
                touched and no agent is notified.
        """
        try:
            order.validate(max_price=self.settings.max_price, max_size=self.settings.max_order_size)
        except InvalidOrderException as e:
            order.status = OrderStatus.REJECTED
            self.statistics["orders_rejected"] += 1
            self.logger.log_error(
                f"Rejected order {order.order_id} on {self._good}: {e.message}",
                order_id=order.order_id,
                good=self._good,
            )
            raise

        self.statistics["orders_posted"] += 1
        self.logger.log_order_post(
            order.order_id, self._good.value, order.side.value, order.size, order.price
        )

        trades = self._match(order)

        if order.size > 0:
            self.books[order.side].insert(order)
        else:
            self.statistics["orders_filled"] += 1

        return trades

    def reset(self) -> PeriodStats:
        """
        End the trading period.

        Every order still resting is removed and its owner receives one
        ``on_unfilled`` call with the remaining size. The period's statistics
        become the values reported by high/low/volume.

        The period is closed before any agent is notified. If a callback
        raises, the remaining owners are still notified and the first error
        is re-raised afterwards.

        Returns:
            Statistics of the period that was just closed
        """
        unfilled = self.books[Side.BUY].drain_all() + self.books[Side.SELL].drain_all()

        closed = self._active_stats
        self._last_stats = closed
        self._active_stats = PeriodStats()

        self.statistics["orders_unfilled"] += len(unfilled)
        self.statistics["periods_closed"] += 1
        self.logger.log_period_close(
            self._good.value, self.period, closed.high, closed.low, closed.volume, len(unfilled)
        )
        self.period += 1

        first_error: Optional[Exception] = None
        for order in unfilled:
            order.status = OrderStatus.UNFILLED
            self.logger.log_unfilled(order.order_id, self._good.value, order.side.value, order.size)
            try:
                order.owner.on_unfilled(self._good, order.side, order.size)
            except Exception as e:
                self.logger.log_error(
                    f"Error in on_unfilled for order {order.order_id} on {self._good}",
                    e,
                    order_id=order.order_id,
                    good=self._good,
                )
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise first_error

        return closed

    def bid(self) -> Optional[int]:
        return self.books[Side.BUY].best_price()

    def ask(self) -> Optional[int]:
        return self.books[Side.SELL].best_price()

    def high(self) -> Optional[int]:
        return self._last_stats.high

    def low(self) -> Optional[int]:
        return self._last_stats.low

    def volume(self) -> int:
        return self._last_stats.volume

    @property
    def current_stats(self) -> PeriodStats:
        """Statistics of the open period (a copy)."""
        return PeriodStats(**self._active_stats.to_dict())

    def recent_trades(self, limit: Optional[int] = None) -> List[Trade]:
        """
        Get the most recent trades, oldest first.

        Args:
            limit: Maximum number of trades to return (all kept trades if None)
        """
        trades = list(self.trade_journal)
        if limit is not None:
            trades = trades[-limit:] if limit > 0 else []
        return trades

    def get_statistics(self) -> Dict[str, int]:
        """Get counters accumulated over the lifetime of the market."""
        return self.statistics.copy()

    def _match(self, order: Order) -> List[Trade]:
        """
        Match an incoming order against the opposite book.

        Returns:
            Trades generated, in execution order
        """
        trades = []
        opposite = self.books[order.side.opposite]

        while order.size > 0 and order.crosses(opposite.best_price()):
            resting = opposite.peek_best()
            size = min(order.size, resting.size)
            price = resting.price

            # Each owner hears about the trade from its own side
            order.owner.on_fill(self._good, order.side, price, size)
            resting.owner.on_fill(self._good, resting.side, price, size)

            opposite.reduce_best(size)
            order.fill(size)
            if resting.is_fully_filled:
                self.statistics["orders_filled"] += 1

            self._active_stats.record(price, size)
            trades.append(self._record_trade(order, resting, price, size))

        return trades

    def _record_trade(self, taker: Order, maker: Order, price: int, size: int) -> Trade:
        trade = Trade(
            good=self._good,
            price=price,
            size=size,
            aggressor_side=taker.side,
            maker_order_id=maker.order_id,
            taker_order_id=taker.order_id,
            period=self.period,
        )
        self.trade_journal.append(trade)

        self.statistics["trades_executed"] += 1
        self.statistics["total_volume"] += size

        self.logger.log_trade_execution(
            trade.trade_id,
            self._good.value,
            price,
            size,
            taker.side.value,
            maker.order_id,
            taker.order_id,
        )
        return trade

    def __repr__(self) -> str:
        return (
            f"MatchingEngine({self._good}: period={self.period}, "
            f"bid={self.bid()}, ask={self.ask()}, "
            f"resting={len(self.books[Side.BUY]) + len(self.books[Side.SELL])})"
        )
