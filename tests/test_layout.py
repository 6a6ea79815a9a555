"""Tests for layout construction and the report summary."""
import pytest

from tradeplot.chart.axes import allocate_axes
from tradeplot.chart.errors import ConfigurationError, MissingReportError
from tradeplot.chart.layout import build_layout, build_title, range_selector_buttons
from tradeplot.chart.report import summarize_report, with_edge
from tradeplot.config import ChartConfig

REPORT = {"profit": 120, "market": 80, "timespan": "7d", "trades": 12}


@pytest.fixture
def config() -> ChartConfig:
    return ChartConfig.from_dict({
        "run": {
            "method": "MACD",
            "date_from": "2021-01-01",
            "date_to": "2021-03-01",
            "asset": "BTC",
            "currency": "USDT",
            "exchange": "binance",
        },
        "plot": {"data": {"strategy": {"indicators": {"macd": {"path": ["macd"], "yaxis": 1}}}}},
    })


class TestRangeSelector:
    """Tests for range selector button flattening."""

    def test_default_buttons(self) -> None:
        buttons = range_selector_buttons(ChartConfig().plot.layout.buttons)
        assert [b.get("label") for b in buttons] == [
            "1d", "5d", "10d", "1w", "1m", "3m", "6m", "1y", "3y", None,
        ]
        assert buttons[0] == {"count": 1, "label": "1d", "step": "day", "stepmode": "backward"}
        assert buttons[-1] == {"step": "all"}

    def test_empty_config_keeps_show_all(self) -> None:
        assert range_selector_buttons({}) == [{"step": "all"}]

    def test_invalid_count(self) -> None:
        with pytest.raises(ConfigurationError):
            range_selector_buttons({"day": [0]})


class TestBuildLayout:
    """Tests for build_layout."""

    def test_title(self, config: ChartConfig) -> None:
        assert build_title(config, REPORT) == "MACD : 2021-01-01 to 2021-03-01 : 7d"

    def test_title_requires_report(self, config: ChartConfig) -> None:
        with pytest.raises(MissingReportError):
            build_title(config, None)

    def test_axes_match_allocation(self, config: ChartConfig) -> None:
        allocation = allocate_axes(config)
        layout = build_layout(config, allocation, REPORT)

        assert layout["yaxis"] == {"title": "BTC/USDT binance", "autorange": True, "type": "linear"}
        assert layout["yaxis2"]["title"] == "Volume"
        assert layout["yaxis4"]["hiddenTitle"] == "macd"
        assert layout["yaxis4"]["showticklabels"] is False
        assert "yaxis3" not in layout

    def test_sizing_and_legend(self, config: ChartConfig) -> None:
        layout = build_layout(config, allocate_axes(config), REPORT)
        assert layout["autosize"] is True
        assert layout["height"] == 620
        assert layout["width"] is None
        assert layout["legend"] == {"orientation": "h", "bgcolor": "rgba(0,0,0,0)"}
        assert layout["xaxis"]["type"] == "date"
        assert layout["xaxis"]["rangeselector"]["buttons"][-1] == {"step": "all"}

    def test_additional_fields_merged_last(self) -> None:
        config = ChartConfig.from_dict({"plot": {"layout": {"additional": {
            "height": 900,
            "paper_bgcolor": "#111",
        }}}})
        layout = build_layout(config, allocate_axes(config), REPORT)
        assert layout["height"] == 900
        assert layout["paper_bgcolor"] == "#111"


class TestReport:
    """Tests for edge computation and the summary."""

    @pytest.mark.parametrize("profit,market,edge", [
        (120, 80, 40),
        (-50, 30, -80),
        (10.5, 10.5, 0),
        (-5, -20, 15),
    ])
    def test_edge(self, profit, market, edge) -> None:
        assert with_edge({"profit": profit, "market": market})["edge"] == edge

    def test_edge_does_not_mutate_input(self) -> None:
        report = {"profit": 1, "market": 2}
        with_edge(report)
        assert "edge" not in report

    def test_edge_requires_report(self) -> None:
        with pytest.raises(MissingReportError):
            with_edge(None)

    def test_summary_in_configured_order(self) -> None:
        summary = summarize_report(
            with_edge({"profit": 120.4567, "market": 80, "sharpe": 1.23456}),
            [("Edge", "edge"), ("Profit", "profit"), ("Sharpe", "sharpe")],
        )
        assert summary == [("Edge", 40.46), ("Profit", 120.46), ("Sharpe", 1.23)]

    def test_missing_key_is_error(self) -> None:
        with pytest.raises(ConfigurationError, match="alpha"):
            summarize_report(REPORT, [("Alpha", "alpha")])

    def test_non_numeric_is_error(self) -> None:
        with pytest.raises(ConfigurationError):
            summarize_report(REPORT, [("Span", "timespan")])
