"""Tests for event buffering and capability switches."""
from datetime import datetime, timezone

import pytest

from tradeplot.chart.buffers import Capabilities, EventBuffers
from tradeplot.chart.types import Candle, StrategySnapshot, Trade
from tradeplot.config import ChartConfig

T0 = 1614862800


def make_candle(start: int = T0, open_: float = 10.0, close: float = 11.0, volume: float = 5.0) -> dict:
    return {"start": start, "open": open_, "high": max(open_, close), "low": min(open_, close), "close": close, "volume": volume}


def make_trade(trade_id: int = 1, action: str = "buy", price: float = 100.0, date=T0) -> dict:
    return {
        "id": trade_id,
        "adviceId": f"advice-{trade_id}",
        "action": action,
        "price": price,
        "amount": 1.0,
        "cost": 0.25,
        "date": date,
        "portfolio": {"currency": 0.0, "asset": 1.0},
        "balance": 100.0,
        "feePercent": 0.25,
        "effectivePrice": price * 1.0025,
    }


class TestCapabilities:
    """Tests for Capabilities.from_config."""

    def test_defaults_all_enabled(self) -> None:
        caps = Capabilities.from_config(ChartConfig())
        assert caps.price and caps.volume and caps.trades and caps.indicators
        assert caps.candles and caps.snapshots

    def test_candles_disabled_when_nothing_uses_them(self) -> None:
        config = ChartConfig.from_dict({"plot": {"data": {
            "price": {"enabled": False},
            "volume": {"enabled": False},
            "strategy": {"enabled": False},
        }}})
        caps = Capabilities.from_config(config)
        assert not caps.candles
        assert not caps.snapshots

    def test_indicators_keep_candle_time_axis(self) -> None:
        config = ChartConfig.from_dict({"plot": {"data": {
            "price": {"enabled": False},
            "volume": {"enabled": False},
        }}})
        assert Capabilities.from_config(config).candles


class TestEventBuffers:
    """Tests for EventBuffers."""

    @pytest.fixture
    def buffers(self) -> EventBuffers:
        return EventBuffers(Capabilities())

    def test_candle_start_normalized(self, buffers: EventBuffers) -> None:
        buffers.record_candle(make_candle(start=datetime(2021, 3, 4, 13, tzinfo=timezone.utc)))
        assert buffers.candles == [Candle(start=T0, open=10.0, high=11.0, low=10.0, close=11.0, volume=5.0)]

    def test_candle_volume_copied_verbatim(self, buffers: EventBuffers) -> None:
        buffers.record_candle(make_candle(volume=0.125))
        assert buffers.candles[0].volume == 0.125

    def test_candle_without_volume_rejected(self, buffers: EventBuffers) -> None:
        candle = make_candle()
        del candle["volume"]
        with pytest.raises(KeyError):
            buffers.record_candle(candle)
        assert buffers.candles == []

    def test_trade_fields_normalized(self, buffers: EventBuffers) -> None:
        buffers.record_trade(make_trade(date="2021-03-04T13:00:00Z"))
        trade = buffers.trades[0]
        assert isinstance(trade, Trade)
        assert trade.date == T0
        assert trade.advice_id == "advice-1"
        assert trade.fee_percent == 0.25
        assert trade.portfolio == {"currency": 0.0, "asset": 1.0}

    def test_append_order_kept(self, buffers: EventBuffers) -> None:
        for i in range(5):
            buffers.record_candle(make_candle(start=T0 + i * 3600, open_=float(i)))
        assert [c.open for c in buffers.candles] == [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_snapshot_is_copied(self, buffers: EventBuffers) -> None:
        update = {"indicators": {"macd": {"result": 1.5}}}
        buffers.record_snapshot(update)
        update["indicators"]["macd"]["result"] = 99

        assert buffers.snapshots == [StrategySnapshot(indicators={"macd": {"result": 1.5}})]

    def test_report_last_write_wins(self, buffers: EventBuffers) -> None:
        buffers.set_performance_report({"profit": 1, "market": 0})
        buffers.set_performance_report({"profit": 2, "market": 1})
        assert buffers.performance_report == {"profit": 2, "market": 1}

    def test_disabled_streams_ignore_events(self) -> None:
        buffers = EventBuffers(Capabilities(price=False, volume=False, trades=False, indicators=False))
        buffers.record_candle(make_candle())
        buffers.record_trade(make_trade())
        buffers.record_snapshot({"indicators": {"a": 1}})
        buffers.set_performance_report({"profit": 0, "market": 0})

        assert buffers.candles == []
        assert buffers.trades == []
        assert buffers.snapshots == []
        assert buffers.performance_report == {"profit": 0, "market": 0}
