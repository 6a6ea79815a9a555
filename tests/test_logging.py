"""Tests for the structured logging module."""
import json
import logging
from pathlib import Path

import pytest

from tradeplot.chart.html_report import HtmlFileSink
from tradeplot.utils.logger import (
    ChartEventFilter,
    ConsoleFormatter,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def make_record(msg: str = "Test message", level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="tradeplot.chart.collector",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_format(self) -> None:
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "tradeplot.chart.collector"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_extra_fields(self) -> None:
        record = make_record()
        record.event = "chart_written"
        record.path = Path("plots/plot.html")

        data = json.loads(JSONFormatter().format(record))

        assert data["event"] == "chart_written"
        # Non-serializable extras are stringified
        assert data["path"] == str(Path("plots/plot.html"))

    def test_exception_formatting(self) -> None:
        try:
            raise OSError("disk full")
        except OSError:
            import sys
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(make_record("Write failed", logging.ERROR, exc_info)))

        assert "OSError: disk full" in data["exception"]


class TestConsoleFormatter:
    """Tests for ConsoleFormatter."""

    def test_prefix_shortened(self) -> None:
        result = ConsoleFormatter(use_colors=False).format(make_record())

        assert "INFO" in result
        assert " - chart.collector - " in result
        assert "Test message" in result

    def test_extra_fields_in_console(self) -> None:
        record = make_record()
        record.candles = 3

        assert "candles=3" in ConsoleFormatter(use_colors=False).format(record)


class TestChartEventFilter:
    """Tests for ChartEventFilter."""

    @pytest.mark.parametrize("event", sorted(ChartEventFilter.CHART_EVENTS))
    def test_allows_chart_events(self, event: str) -> None:
        record = make_record()
        record.event = event
        assert ChartEventFilter().filter(record) is True

    def test_blocks_other_records(self) -> None:
        plain = make_record()
        other = make_record()
        other.event = "bus_started"

        assert ChartEventFilter().filter(plain) is False
        assert ChartEventFilter().filter(other) is False


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_creates_log_files(self, tmp_path: Path, restore_root_logger) -> None:
        setup_logging(log_dir=str(tmp_path / "logs"), console_output=False)

        logger = get_logger("tradeplot.test")
        logger.info("Info message")
        logger.error("Error message")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_dir = tmp_path / "logs"
        assert (log_dir / "tradeplot.json.log").exists()
        assert (log_dir / "tradeplot.error.log").exists()
        assert (log_dir / "tradeplot.charts.log").exists()

    def test_chart_log_only_has_chart_events(self, tmp_path: Path, restore_root_logger) -> None:
        setup_logging(log_dir=str(tmp_path), console_output=False)

        logger = get_logger("tradeplot.test")
        logger.info("Unrelated")
        logger.info("Written", extra={"event": "chart_written", "path": "x"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "tradeplot.charts.log").read_text().splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["Written"]


class TestSinkLogging:
    """The file sink reports outcomes through logging."""

    @pytest.mark.asyncio
    async def test_success_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="tradeplot.chart.html_report"):
            await HtmlFileSink(tmp_path).write("<html></html>")

        records = [r for r in caplog.records if getattr(r, "event", None) == "chart_written"]
        assert len(records) == 1
        assert records[0].path == str(tmp_path / "plot.html")

    @pytest.mark.asyncio
    async def test_failure_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with caplog.at_level(logging.ERROR, logger="tradeplot.chart.html_report"):
            with pytest.raises(OSError):
                await HtmlFileSink(blocker).write("<html></html>")

        assert any(getattr(r, "event", None) == "chart_write_failed" for r in caplog.records)
