"""
Tests for the double auction matching engine.

Covers matching, trade pricing, period statistics, settlement at reset and
order rejection.
"""

import pytest

from econsim.config import Settings
from econsim.core.market import MarketAgent
from econsim.core.matching_engine import MatchingEngine
from econsim.core.order import Order, Side, OrderStatus
from econsim.goods import Good
from econsim.utils.exceptions import (
    InvalidAgentException,
    InvalidOrderException,
    InvalidQuantityException,
    InvalidSideException,
    PriceOutOfBoundsException,
)


class RecordingAgent(MarketAgent):
    """Agent that records every notification it receives."""

    def __init__(self):
        self.fills = []
        self.unfilled = []

    def on_fill(self, good, side, price, size):
        self.fills.append((good, side, price, size))

    def on_unfilled(self, good, side, size):
        self.unfilled.append((good, side, size))

    @property
    def last_fill(self):
        return self.fills[-1] if self.fills else None

    @property
    def filled_size(self):
        return sum(fill[3] for fill in self.fills)


def post(engine, side, price, size, agent=None):
    agent = agent or RecordingAgent()
    order = Order(price=price, size=size, side=side, owner=agent)
    trades = engine.post(order)
    return agent, order, trades


@pytest.fixture
def engine():
    return MatchingEngine(Good.FOOD)


class TestCanonicalScenario:
    """One seller, three buyers: one high, one medium, one low."""

    def test_market(self, engine):
        seller, _, _ = post(engine, Side.SELL, 10, 100)
        b1, _, _ = post(engine, Side.BUY, 12, 10)
        b2, _, _ = post(engine, Side.BUY, 10, 200)
        b3, _, _ = post(engine, Side.BUY, 8, 1000)

        engine.reset()

        # high buy gets filled at 10
        assert b1.last_fill == (Good.FOOD, Side.BUY, 10, 10)
        assert b1.unfilled == []

        # mid buy gets partially filled
        assert b2.last_fill == (Good.FOOD, Side.BUY, 10, 90)
        assert b2.unfilled == [(Good.FOOD, Side.BUY, 110)]

        # low buy does not get filled at all
        assert b3.fills == []
        assert b3.unfilled == [(Good.FOOD, Side.BUY, 1000)]

        # seller's last fill is its final partial fill
        assert seller.last_fill == (Good.FOOD, Side.SELL, 10, 90)
        assert seller.fills == [
            (Good.FOOD, Side.SELL, 10, 10),
            (Good.FOOD, Side.SELL, 10, 90),
        ]
        assert seller.unfilled == []

        assert engine.high() == 10
        assert engine.low() == 10
        assert engine.volume() == 100
        assert engine.bid() is None
        assert engine.ask() is None


class TestMatching:
    """Price-time priority and trade pricing."""

    def test_non_crossing_orders_rest(self, engine):
        _, buy, trades = post(engine, Side.BUY, 9, 5)
        _, sell, more = post(engine, Side.SELL, 10, 5)

        assert trades == [] and more == []
        assert engine.bid() == 9
        assert engine.ask() == 10
        assert buy.status == OrderStatus.PENDING
        assert sell.status == OrderStatus.PENDING

    def test_trade_price_is_resting_price_for_buy(self, engine):
        post(engine, Side.SELL, 10, 5)
        buyer, _, trades = post(engine, Side.BUY, 15, 5)

        assert buyer.fills == [(Good.FOOD, Side.BUY, 10, 5)]
        assert trades[0].price == 10
        assert trades[0].aggressor_side == Side.BUY

    def test_trade_price_is_resting_price_for_sell(self, engine):
        post(engine, Side.BUY, 15, 5)
        seller, _, trades = post(engine, Side.SELL, 10, 5)

        assert seller.fills == [(Good.FOOD, Side.SELL, 15, 5)]
        assert trades[0].price == 15

    def test_more_aggressive_later_order_matches_first(self, engine):
        early, _, _ = post(engine, Side.SELL, 12, 5)
        late, _, _ = post(engine, Side.SELL, 11, 5)

        buyer, _, _ = post(engine, Side.BUY, 12, 5)

        assert late.fills == [(Good.FOOD, Side.SELL, 11, 5)]
        assert early.fills == []
        assert buyer.fills == [(Good.FOOD, Side.BUY, 11, 5)]
        assert engine.ask() == 12

    def test_fifo_among_equal_prices(self, engine):
        first, _, _ = post(engine, Side.BUY, 10, 3)
        second, _, _ = post(engine, Side.BUY, 10, 3)

        post(engine, Side.SELL, 10, 4)

        assert first.fills == [(Good.FOOD, Side.BUY, 10, 3)]
        assert second.fills == [(Good.FOOD, Side.BUY, 10, 1)]

    def test_incoming_order_walks_the_book(self, engine):
        post(engine, Side.SELL, 10, 2)
        post(engine, Side.SELL, 11, 3)
        post(engine, Side.SELL, 13, 5)

        buyer, order, trades = post(engine, Side.BUY, 12, 10)

        assert [(t.price, t.size) for t in trades] == [(10, 2), (11, 3)]
        assert buyer.fills == [
            (Good.FOOD, Side.BUY, 10, 2),
            (Good.FOOD, Side.BUY, 11, 3),
        ]
        assert order.size == 5
        assert order.status == OrderStatus.PARTIAL
        assert engine.bid() == 12
        assert engine.ask() == 13

    def test_fills_are_reported_in_match_order(self, engine):
        calls = []

        class Tracker(MarketAgent):
            def __init__(self, name):
                self.name = name

            def on_fill(self, good, side, price, size):
                calls.append((self.name, side, size))

            def on_unfilled(self, good, side, size):
                pass

        engine.post(Order(price=10, size=1, side=Side.SELL, owner=Tracker("s1")))
        engine.post(Order(price=10, size=1, side=Side.SELL, owner=Tracker("s2")))
        engine.post(Order(price=10, size=2, side=Side.BUY, owner=Tracker("b")))

        assert calls == [
            ("b", Side.BUY, 1),
            ("s1", Side.SELL, 1),
            ("b", Side.BUY, 1),
            ("s2", Side.SELL, 1),
        ]

    def test_size_is_conserved(self, engine):
        resting, resting_order, _ = post(engine, Side.SELL, 10, 7)
        incoming, incoming_order, trades = post(engine, Side.BUY, 10, 4)

        traded = sum(t.size for t in trades)
        assert traded == 4
        assert resting_order.size + resting_order.filled_size == 7
        assert incoming_order.size + incoming_order.filled_size == 4
        assert resting.filled_size == incoming.filled_size == traded

    def test_same_agent_on_both_sides(self, engine):
        agent = RecordingAgent()
        post(engine, Side.SELL, 10, 2, agent)
        post(engine, Side.BUY, 10, 2, agent)

        assert agent.fills == [
            (Good.FOOD, Side.BUY, 10, 2),
            (Good.FOOD, Side.SELL, 10, 2),
        ]

    def test_trades_are_journaled(self, engine):
        post(engine, Side.SELL, 10, 5)
        post(engine, Side.BUY, 10, 2)
        post(engine, Side.BUY, 10, 3)

        trades = engine.recent_trades()
        assert [t.size for t in trades] == [2, 3]
        assert engine.recent_trades(limit=1) == trades[-1:]
        assert engine.recent_trades(limit=0) == []
        assert all(t.good == Good.FOOD and t.period == 0 for t in trades)


class TestPeriods:
    """Reset settlement and statistics rollover."""

    def test_reset_on_empty_books_is_quiet(self, engine):
        stats = engine.reset()

        assert engine.bid() is None
        assert engine.ask() is None
        assert stats.volume == 0
        assert engine.high() is None
        assert engine.low() is None
        assert engine.volume() == 0

        engine.reset()
        assert engine.period == 2

    def test_reset_without_resting_orders_notifies_nobody(self, engine):
        seller, _, _ = post(engine, Side.SELL, 10, 5)
        buyer, _, _ = post(engine, Side.BUY, 10, 5)

        engine.reset()

        assert seller.unfilled == []
        assert buyer.unfilled == []

    def test_one_unfilled_call_per_resting_order(self, engine):
        agent = RecordingAgent()
        post(engine, Side.BUY, 5, 3, agent)
        post(engine, Side.BUY, 6, 4, agent)
        _, sell, _ = post(engine, Side.SELL, 20, 1, agent)

        engine.reset()

        assert sorted(agent.unfilled, key=lambda call: call[2]) == [
            (Good.FOOD, Side.SELL, 1),
            (Good.FOOD, Side.BUY, 3),
            (Good.FOOD, Side.BUY, 4),
        ]
        assert sell.status == OrderStatus.UNFILLED
        assert engine.bid() is None
        assert engine.ask() is None

    def test_statistics_reflect_last_closed_period(self, engine):
        post(engine, Side.SELL, 10, 1)
        post(engine, Side.BUY, 10, 1)
        post(engine, Side.SELL, 14, 2)
        post(engine, Side.BUY, 20, 2)

        # Still open: nothing reported yet
        assert engine.high() is None
        assert engine.volume() == 0
        assert engine.current_stats.volume == 3

        engine.reset()

        assert engine.high() == 14
        assert engine.low() == 10
        assert engine.volume() == 3

    def test_period_isolation(self, engine):
        post(engine, Side.SELL, 10, 1)
        post(engine, Side.BUY, 10, 1)
        engine.reset()

        # Trades in the new period do not leak into the reported period
        post(engine, Side.SELL, 50, 5)
        post(engine, Side.BUY, 50, 5)
        assert engine.high() == 10
        assert engine.low() == 10
        assert engine.volume() == 1

        engine.reset()
        assert engine.high() == 50
        assert engine.low() == 50
        assert engine.volume() == 5

        engine.reset()
        assert engine.high() is None
        assert engine.low() is None
        assert engine.volume() == 0

    def test_reset_returns_closed_stats(self, engine):
        post(engine, Side.SELL, 7, 2)
        post(engine, Side.BUY, 9, 3)

        stats = engine.reset()

        assert stats.to_dict() == {"high": 7, "low": 7, "volume": 2, "trade_count": 1}
        assert engine.current_stats.volume == 0

    def test_failing_unfilled_callback_still_closes_period(self, engine):
        class FailingAgent(RecordingAgent):
            def on_unfilled(self, good, side, size):
                raise RuntimeError("agent failure")

        post(engine, Side.SELL, 10, 1)
        post(engine, Side.BUY, 10, 1)
        post(engine, Side.BUY, 5, 2, FailingAgent())
        later, _, _ = post(engine, Side.SELL, 20, 3)

        with pytest.raises(RuntimeError, match="agent failure"):
            engine.reset()

        # Remaining owners are still told about their orders
        assert later.unfilled == [(Good.FOOD, Side.SELL, 3)]
        assert engine.bid() is None
        assert engine.ask() is None

        # The period was rolled over before the error surfaced
        assert engine.volume() == 1
        assert engine.current_stats.volume == 0
        assert engine.period == 1
        assert engine.get_statistics()["periods_closed"] == 1

        engine.reset()
        assert engine.volume() == 0


class TestRejection:
    """Malformed orders never touch the books."""

    def test_zero_size_order_rejected(self, engine):
        seller, _, _ = post(engine, Side.SELL, 10, 5)
        agent = RecordingAgent()
        order = Order(price=10, size=0, side=Side.BUY, owner=agent)

        with pytest.raises(InvalidQuantityException):
            engine.post(order)

        assert order.status == OrderStatus.REJECTED
        assert agent.fills == []
        assert seller.fills == []
        assert engine.ask() == 10
        assert engine.bid() is None
        assert len(engine.books[Side.SELL]) == 1
        assert engine.get_statistics()["orders_rejected"] == 1

        engine.reset()
        assert agent.unfilled == []

    def test_invalid_order_hierarchy(self, engine):
        with pytest.raises(InvalidOrderException):
            engine.post(Order(price=10, size=-1, side=Side.BUY, owner=RecordingAgent()))

    def test_fractional_size_rejected(self, engine):
        with pytest.raises(InvalidQuantityException):
            engine.post(Order(price=10, size=1.5, side=Side.BUY, owner=RecordingAgent()))

    def test_negative_price_rejected(self, engine):
        with pytest.raises(PriceOutOfBoundsException):
            engine.post(Order(price=-1, size=1, side=Side.SELL, owner=RecordingAgent()))

    def test_bad_side_rejected(self, engine):
        with pytest.raises(InvalidSideException):
            engine.post(Order(price=1, size=1, side="BUY", owner=RecordingAgent()))

    def test_owner_without_callbacks_rejected(self, engine):
        with pytest.raises(InvalidAgentException):
            engine.post(Order(price=1, size=1, side=Side.BUY, owner=object()))

    def test_configured_limits(self):
        engine = MatchingEngine(Good.CLOTHING, Settings(max_order_size=10, max_price=100))

        with pytest.raises(InvalidQuantityException):
            engine.post(Order(price=1, size=11, side=Side.BUY, owner=RecordingAgent()))
        with pytest.raises(PriceOutOfBoundsException):
            engine.post(Order(price=101, size=1, side=Side.BUY, owner=RecordingAgent()))

        engine.post(Order(price=100, size=10, side=Side.BUY, owner=RecordingAgent()))
        assert engine.bid() == 100


class TestEngineBookkeeping:

    def test_good_accessor(self):
        assert MatchingEngine(Good.LABOUR).good is Good.LABOUR

    def test_independent_instances(self):
        food = MatchingEngine(Good.FOOD)
        labour = MatchingEngine(Good.LABOUR)
        post(food, Side.BUY, 10, 1)

        assert food.bid() == 10
        assert labour.bid() is None

    def test_statistics_counters(self, engine):
        post(engine, Side.SELL, 10, 5)
        post(engine, Side.BUY, 10, 5)
        post(engine, Side.BUY, 9, 1)
        engine.reset()

        stats = engine.get_statistics()
        assert stats["orders_posted"] == 3
        assert stats["orders_filled"] == 2
        assert stats["orders_unfilled"] == 1
        assert stats["trades_executed"] == 1
        assert stats["total_volume"] == 5
        assert stats["periods_closed"] == 1
