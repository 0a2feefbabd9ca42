"""
Logging configuration and utilities for the market engine.

Provides structured logging with JSON format for batch simulation runs
and human-readable format for development.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from uuid import UUID

from ..config import get_settings


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Converts log records to JSON format with additional context fields.
    """

    EXTRA_FIELDS = ("good", "order_id", "trade_id", "period")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in self.EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value if isinstance(value, int) else str(value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class MarketLogger:
    """
    Centralized logger for the market engine.

    Separates order, trade and application records so a simulation run can
    route them to different files.
    """

    def __init__(
        self,
        name: str = "econsim",
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        use_json: bool = False,
    ):
        """
        Initialize the market logger.

        Args:
            name: Logger name
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (None for console only)
            use_json: Use JSON formatting
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(self._make_formatter(use_json))
        self.logger.addHandler(console_handler)

        if log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            self.logger.addHandler(
                self._create_file_handler(log_dir / "application.log", use_json)
            )

            self.trade_logger = logging.getLogger(f"{name}.trades")
            self.trade_logger.setLevel(self.logger.level)
            self.trade_logger.addHandler(
                self._create_file_handler(log_dir / "trades.log", use_json)
            )

            self.order_logger = logging.getLogger(f"{name}.orders")
            self.order_logger.setLevel(self.logger.level)
            self.order_logger.addHandler(
                self._create_file_handler(log_dir / "orders.log", use_json)
            )

            error_handler = self._create_file_handler(log_dir / "errors.log", use_json)
            error_handler.setLevel(logging.ERROR)
            self.logger.addHandler(error_handler)
        else:
            self.trade_logger = self.logger
            self.order_logger = self.logger

    @staticmethod
    def _make_formatter(use_json: bool) -> logging.Formatter:
        if use_json:
            return JSONFormatter()
        return logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def _create_file_handler(self, filepath: Path, use_json: bool) -> logging.FileHandler:
        """Create a file handler with appropriate formatter."""
        handler = logging.FileHandler(filepath)
        handler.setFormatter(self._make_formatter(use_json))
        return handler

    def log_order_post(
        self,
        order_id: UUID,
        good: str,
        side: str,
        size: int,
        price: int,
    ):
        """Log order submission."""
        extra = {"order_id": order_id, "good": good}
        self.order_logger.debug(f"Order posted: {side} {size} {good} @ {price}", extra=extra)

    def log_trade_execution(
        self,
        trade_id: UUID,
        good: str,
        price: int,
        size: int,
        aggressor_side: str,
        maker_order_id: UUID,
        taker_order_id: UUID,
    ):
        """Log trade execution."""
        extra = {"trade_id": trade_id, "good": good}
        msg = (
            f"Trade executed: {size} {good} @ {price} "
            f"(aggressor: {aggressor_side}, maker: {maker_order_id}, taker: {taker_order_id})"
        )
        self.trade_logger.debug(msg, extra=extra)

    def log_unfilled(self, order_id: UUID, good: str, side: str, size: int):
        """Log an order expiring unfilled at period end."""
        extra = {"order_id": order_id, "good": good}
        self.order_logger.debug(f"Order unfilled: {side} {size} {good} ({order_id})", extra=extra)

    def log_period_close(
        self,
        good: str,
        period: int,
        high: Optional[int],
        low: Optional[int],
        volume: int,
        unfilled_orders: int,
    ):
        """Log the statistics of a closed trading period."""
        extra = {"good": good, "period": period}
        msg = (
            f"Period {period} closed for {good}: high={high} low={low} "
            f"volume={volume} unfilled_orders={unfilled_orders}"
        )
        self.logger.info(msg, extra=extra)

    def log_error(
        self,
        message: str,
        exception: Optional[Exception] = None,
        **kwargs
    ):
        """Log error with optional exception."""
        if exception:
            self.logger.error(message, exc_info=exception, extra=kwargs)
        else:
            self.logger.error(message, extra=kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs):
        """Log error message."""
        self.logger.error(message, extra=kwargs)


# Global logger instance
_logger: Optional[MarketLogger] = None


def get_logger(
    name: str = "econsim",
    log_level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    use_json: Optional[bool] = None,
) -> MarketLogger:
    """
    Get or create the global logger instance.

    Unset arguments fall back to the values in Settings.

    Args:
        name: Logger name
        log_level: Logging level
        log_dir: Directory for log files
        use_json: Use JSON formatting

    Returns:
        MarketLogger instance
    """
    global _logger

    if _logger is None:
        settings = get_settings()
        _logger = MarketLogger(
            name,
            log_level or settings.log_level,
            log_dir if log_dir is not None else settings.log_dir,
            settings.use_json_logs if use_json is None else use_json,
        )

    return _logger
