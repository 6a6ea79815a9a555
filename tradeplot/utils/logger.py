"""
Structured JSON Logging for tradeplot.

Provides:
- JSON-formatted log output for machine parsing
- Log rotation by size
- Separate error log
- Chart-event log (documents written, write failures, finalize summaries)
- Console output with human-readable format

Usage:
    from tradeplot.utils.logger import get_logger, setup_logging

    # Setup logging (call once at startup)
    setup_logging(log_dir="logs", level="INFO")

    # Get logger for a module
    logger = get_logger(__name__)
    logger.info("Replaying events", extra={"events": 1200})
"""
import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# Standard LogRecord attributes, never treated as extra fields
SKIP_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2024-01-15T10:30:45.123456Z",
        "level": "INFO",
        "logger": "tradeplot.chart.html_report",
        "message": "Written plot.html to: plots/plot.html",
        "event": "chart_written",
        "path": "plots/plot.html",
        ...
    }
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_traceback: bool = True,
    ) -> None:
        """
        Initialize JSON formatter.

        Args:
            include_timestamp: Include ISO timestamp
            include_level: Include log level
            include_logger: Include logger name
            include_traceback: Include exception traceback
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_traceback = include_traceback

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        if self.include_level:
            log_data["level"] = record.levelname

        if self.include_logger:
            log_data["logger"] = record.name

        log_data["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key not in SKIP_ATTRS and not key.startswith("_"):
                # Handle non-serializable values
                try:
                    json.dumps(value)
                    log_data[key] = value
                except (TypeError, ValueError):
                    log_data[key] = str(value)

        if record.exc_info and self.include_traceback:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with colors.

    Format: [LEVEL] timestamp - logger - message (extra_key=extra_value, ...)
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console."""
        timestamp = datetime.now().strftime("%H:%M:%S")

        level = record.levelname
        if self.use_colors:
            color = self.COLORS.get(level, "")
            level = f"{color}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        logger_name = record.name
        if logger_name.startswith("tradeplot."):
            logger_name = logger_name[len("tradeplot."):]

        message = record.getMessage()

        extras = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in SKIP_ATTRS and not key.startswith("_")
        ]

        output = f"[{level}] {timestamp} - {logger_name} - {message}"
        if extras:
            output += f" ({', '.join(extras)})"

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)

        return output


class ChartEventFilter(logging.Filter):
    """Filter that only allows chart lifecycle events."""

    CHART_EVENTS = {
        "chart_written",
        "chart_write_failed",
        "chart_finalized",
    }

    def filter(self, record: logging.LogRecord) -> bool:
        """Only allow chart events."""
        event = getattr(record, "event", None)
        return event in self.CHART_EVENTS


def setup_logging(
    log_dir: str = "logs",
    level: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 10,
    console_output: bool = True,
    json_output: bool = True,
    use_colors: bool = True,
) -> None:
    """
    Setup logging configuration.

    Creates:
    - Console handler (human-readable format)
    - JSON file handler (structured logs with rotation)
    - Error file handler (errors only, for quick debugging)
    - Chart file handler (chart lifecycle events only)

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_bytes: Max size per log file before rotation
        backup_count: Number of backup files to keep
        console_output: Enable console logging
        json_output: Enable JSON file logging
        use_colors: Use colors in console output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        root_logger.addHandler(console_handler)

    if json_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        json_handler = RotatingFileHandler(
            log_path / "tradeplot.json.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(json_handler)

        error_handler = RotatingFileHandler(
            log_path / "tradeplot.error.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(error_handler)

        chart_handler = RotatingFileHandler(
            log_path / "tradeplot.charts.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        chart_handler.setLevel(logging.DEBUG)
        chart_handler.setFormatter(JSONFormatter())
        chart_handler.addFilter(ChartEventFilter())
        root_logger.addHandler(chart_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_simple_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
) -> None:
    """
    Simple logging configuration for scripts and testing.

    Args:
        level: Log level
        log_file: Optional log file path
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
