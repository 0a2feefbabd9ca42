"""
Core domain models and matching engine logic
"""

from .order import Order, Side, OrderStatus
from .trade import Trade
from .price_level import PriceLevel
from .order_book import OrderBook
from .period_stats import PeriodStats
from .market import Market, MarketAgent
from .matching_engine import MatchingEngine

__all__ = [
    "Order",
    "Side",
    "OrderStatus",
    "Trade",
    "PriceLevel",
    "OrderBook",
    "PeriodStats",
    "Market",
    "MarketAgent",
    "MatchingEngine",
]
