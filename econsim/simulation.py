"""
Simulation driver

Ticks every agent once per period and then resets every market, closing the
period. Markets are independent instances, one per good.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from .config import Settings, get_settings
from .core.market import Market
from .core.matching_engine import MatchingEngine
from .core.period_stats import PeriodStats
from .agents.firm import Firm
from .agents.household import Household
from .goods import Good
from .utils.exceptions import ConfigurationException
from .utils.logger import get_logger


class Agent(Protocol):
    def act(self, params: "Parameters") -> None:
        ...


@dataclass
class GoodInfo:
    """
    A consumer good's market and production technology.

    Attributes:
        market: Market the good trades on
        tech: Productivity multiplier of Q = tech * L^scale
        scale: Returns-to-scale exponent, strictly between 0 and 1
    """

    market: Market
    tech: float
    scale: float

    def __post_init__(self):
        if self.tech <= 0:
            raise ConfigurationException(
                f"Technology must be positive, got {self.tech}",
                details={"good": str(self.market.good), "tech": self.tech}
            )
        if not 0 < self.scale < 1:
            raise ConfigurationException(
                f"Scale must be between 0 and 1, got {self.scale}",
                details={"good": str(self.market.good), "scale": self.scale}
            )


@dataclass
class Parameters:
    """Everything an agent may consult when acting."""

    goods: Dict[Good, GoodInfo]
    labour_market: Market
    increment: int = 1

    def __post_init__(self):
        if self.increment <= 0:
            raise ConfigurationException(f"Increment must be positive, got {self.increment}")
        if self.labour_market.good is not Good.LABOUR:
            raise ConfigurationException(
                f"Labour market trades {self.labour_market.good}, expected {Good.LABOUR}"
            )
        for good, info in self.goods.items():
            if info.market.good is not good:
                raise ConfigurationException(f"Market for {good} trades {info.market.good}")

    @property
    def markets(self) -> List[Market]:
        return [self.labour_market] + [info.market for info in self.goods.values()]


class Simulation:
    """Runs agents against a fixed set of markets, one period at a time."""

    def __init__(self, params: Parameters, agents: List[Agent]):
        self.params = params
        self.agents = agents
        self.period = 0
        self.logger = get_logger()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        firms_per_good: int = 1,
        households: int = 10,
    ) -> "Simulation":
        """
        Build one market per good plus a population of firms and households.
        """
        settings = settings or get_settings()

        goods = {
            good: GoodInfo(
                market=MatchingEngine(good, settings),
                tech=settings.default_tech,
                scale=settings.default_scale,
            )
            for good in Good.consumer_goods()
        }
        params = Parameters(
            goods=goods,
            labour_market=MatchingEngine(Good.LABOUR, settings),
            increment=settings.price_increment,
        )

        agents: List[Agent] = [
            Firm(good, settings.initial_wage, settings.initial_price)
            for good in goods
            for _ in range(firms_per_good)
        ]
        agents += [
            Household(
                settings.household_labour_supply,
                settings.household_reservation_wage,
                settings.household_demand,
                settings.household_budget,
            )
            for _ in range(households)
        ]

        return cls(params, agents)

    def step(self) -> Dict[Good, PeriodStats]:
        """
        Run one period.

        Returns:
            Closed period statistics for every market
        """
        for agent in self.agents:
            agent.act(self.params)

        results = {market.good: market.reset() for market in self.params.markets}
        self.period += 1

        self.logger.debug(
            f"Simulation period {self.period} done: "
            + ", ".join(f"{good}={stats.volume}@{stats.low}-{stats.high}" for good, stats in results.items())
        )
        return results

    def run(self, periods: int) -> List[Dict[Good, PeriodStats]]:
        """Run ``periods`` periods and return the statistics of each."""
        if periods < 0:
            raise ConfigurationException(f"Period count cannot be negative, got {periods}")
        return [self.step() for _ in range(periods)]
