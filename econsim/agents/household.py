"""
Household agent: sells labour, buys consumer goods.
"""

from typing import Dict, TYPE_CHECKING

from ..core.market import MarketAgent
from ..core.order import Order, Side
from ..goods import Good

if TYPE_CHECKING:
    from ..simulation import Parameters


class Household(MarketAgent):
    """
    Offers a fixed amount of labour at a reservation wage and spends a fixed
    budget on each consumer good every period.

    ``employed``, ``income`` and ``consumed`` hold the current period's fills.
    """

    def __init__(self, labour_supply: int, reservation_wage: int, demand: int, budget: int):
        self.labour_supply = labour_supply
        self.reservation_wage = reservation_wage
        self.demand = demand
        self.budget = budget
        self.employed: int = 0
        self.income: int = 0
        self.consumed: Dict[Good, int] = {}
        self.unemployed: int = 0

    def act(self, params: "Parameters") -> None:
        self.employed = 0
        self.income = 0
        self.unemployed = 0
        self.consumed = {}

        params.labour_market.post(Order(
            price=self.reservation_wage,
            size=self.labour_supply,
            side=Side.SELL,
            owner=self,
        ))

        bid = self.budget // self.demand
        for good, info in params.goods.items():
            info.market.post(Order(price=bid, size=self.demand, side=Side.BUY, owner=self))

    def on_fill(self, good: Good, side: Side, price: int, size: int) -> None:
        if good is Good.LABOUR:
            self.employed += size
            self.income += price * size
        else:
            self.consumed[good] = self.consumed.get(good, 0) + size

    def on_unfilled(self, good: Good, side: Side, size: int) -> None:
        if good is Good.LABOUR:
            self.unemployed += size

    def __repr__(self) -> str:
        return f"Household(employed={self.employed}/{self.labour_supply}, income={self.income})"
