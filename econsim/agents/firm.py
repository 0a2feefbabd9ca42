"""
Profit-maximizing firm

A firm buys labour and sells the one good it produces. Every period it
adjusts its wage and price from the previous period's results, picks the
profit-maximizing workforce for a Cobb-Douglas technology and posts orders
on the labour and goods markets.
"""

import math
from typing import TYPE_CHECKING

from ..core.market import MarketAgent
from ..core.order import Order, Side
from ..goods import Good
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..simulation import Parameters


class Firm(MarketAgent):
    """
    Agent responsible for buying labour and producing a good.

    Attributes:
        good_produced: Good this firm produces
        wage: Wage the firm is hiring at
        price: Price the firm is selling at
        workers_hired: Labour bought during the current period
        target_workers: Labour the firm wanted this period
        sales_made: Goods sold during the current period
        target_sales: Goods the firm wanted to sell this period
    """

    MIN_PRICE = 1

    def __init__(self, good_produced: Good, initial_wage: int, initial_price: int):
        if good_produced is Good.LABOUR:
            raise ValueError("A firm cannot produce labour")

        self.good_produced: Good = good_produced
        self.wage: int = initial_wage
        self.price: int = initial_price
        self.workers_hired: int = 0
        self.target_workers: int = 0
        self.sales_made: int = 0
        self.target_sales: int = 0
        self.logger = get_logger()

    def act(self, params: "Parameters") -> None:
        """Run the firm's decision process for one period."""
        self.adjust_prices(params)
        self.choose_targets(params)
        # Fills are delivered inside post(), so counters must be cleared first
        self._reset_counters()
        self.place_orders(params)

    def adjust_prices(self, params: "Parameters") -> None:
        """Move price and wage according to last period's outcome."""
        if self.target_sales == 0:
            # First period, or nothing to sell: keep the current prices
            return

        goods_market = params.goods[self.good_produced].market
        labour_market = params.labour_market
        increment = params.increment

        if self.sales_made < self.target_sales:
            self.price = max(self.price - increment, self.MIN_PRICE)
        else:
            high = goods_market.high()
            if high is not None and self.price <= high:
                self.price = high + increment

        if self.workers_hired < self.target_workers:
            high = labour_market.high()
            self.wage = (high if high is not None else self.wage) + increment
        else:
            low = labour_market.low()
            if low is None or self.wage >= low:
                self.wage = max(self.wage - increment, self.MIN_PRICE)

    def choose_targets(self, params: "Parameters") -> None:
        """
        Pick the workforce and sales targets for this period.

        With Q = tech * L^scale the profit-maximizing labour is

            L = (wage / (price * scale * tech)) ^ (1 / (scale - 1))

        Labour is discrete, so the better of floor and ceiling is used.
        """
        info = params.goods[self.good_produced]

        base = self.wage / (self.price * info.tech * info.scale)
        target_labour = math.pow(base, 1.0 / (info.scale - 1.0))

        ceiling, floor = math.ceil(target_labour), math.floor(target_labour)
        if self.profits(params, ceiling) > self.profits(params, floor):
            self.target_workers = int(ceiling)
        else:
            self.target_workers = int(floor)

        if self.workers_hired > 0:
            # Production lags hiring by one period
            self.target_sales = int(math.floor(self.production(params, self.workers_hired)))

    def place_orders(self, params: "Parameters") -> None:
        if self.target_workers > 0:
            params.labour_market.post(Order(
                price=self.wage,
                size=self.target_workers,
                side=Side.BUY,
                owner=self,
            ))

        if self.target_sales > 0:
            params.goods[self.good_produced].market.post(Order(
                price=self.price,
                size=self.target_sales,
                side=Side.SELL,
                owner=self,
            ))

    def profits(self, params: "Parameters", labour: float) -> float:
        """Expected profit at the current wage and price; unsold output is not modelled."""
        return self.price * self.production(params, labour) - self.wage * labour

    def production(self, params: "Parameters", labour: float) -> float:
        info = params.goods[self.good_produced]
        return info.tech * math.pow(labour, info.scale)

    def _reset_counters(self) -> None:
        self.workers_hired = 0
        self.sales_made = 0

    def on_fill(self, good: Good, side: Side, price: int, size: int) -> None:
        if good is Good.LABOUR:
            self.workers_hired += size
        elif good is self.good_produced:
            self.sales_made += size

    def on_unfilled(self, good: Good, side: Side, size: int) -> None:
        self.logger.debug(f"Firm({self.good_produced}) left {size} {good} unfilled ({side})")

    def __repr__(self) -> str:
        return (
            f"Firm({self.good_produced}: wage={self.wage}, price={self.price}, "
            f"workers={self.workers_hired}/{self.target_workers}, "
            f"sales={self.sales_made}/{self.target_sales})"
        )
