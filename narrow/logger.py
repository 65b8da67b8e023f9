"""
Structured logging for narrow.

Console output goes to stderr because stdout carries the selected
entries. Also tracks per-session metrics (matches, history writes,
selection toggles) for debugging slow or surprising sessions.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    return handler


class StructuredLogger:
    """
    Logger with console (stderr) and optional file outputs.
    Tracks metrics for the matching session.
    """

    def __init__(
        self,
        name: str = "narrow",
        level: str = "WARNING",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if enable_file else getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers
        self.logger.propagate = False

        self.metrics = {
            "candidates_loaded": 0,
            "rematches": 0,
            "last_match_count": 0,
            "history_records_loaded": 0,
            "history_writes": 0,
            "selection_toggles": 0,
            "errors_by_type": {},
        }

        if enable_console:
            self.logger.addHandler(
                _handler(logging.StreamHandler(sys.stderr), getattr(logging, level.upper()), CONSOLE_FORMAT)
            )

        if enable_file:
            log_dir = log_dir or Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / f"narrow_{datetime.now().strftime('%Y%m%d')}.log"
            # File always gets everything
            self.logger.addHandler(
                _handler(logging.FileHandler(log_file, encoding="utf-8"), logging.DEBUG, FILE_FORMAT)
            )

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_load(self, count: int):
        """Record the number of candidates loaded."""
        self.metrics["candidates_loaded"] += count

    def record_rematch(self, match_count: int):
        """Record one full match rebuild and its result size."""
        self.metrics["rematches"] += 1
        self.metrics["last_match_count"] = match_count

    def record_history_load(self, count: int):
        self.metrics["history_records_loaded"] += count

    def record_history_write(self):
        self.metrics["history_writes"] += 1

    def record_selection_toggle(self):
        self.metrics["selection_toggles"] += 1

    def record_error(self, error_type: str):
        """Record a fatal or reported error by type."""
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        metrics_copy = self.metrics.copy()
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.debug("=== Session Metrics ===")
        self.debug(f"Candidates loaded: {metrics['candidates_loaded']}")
        self.debug(f"Rematches: {metrics['rematches']} (last: {metrics['last_match_count']} matches)")
        self.debug(
            f"History: {metrics['history_records_loaded']} loaded, "
            f"{metrics['history_writes']} writes"
        )
        self.debug(f"Selection toggles: {metrics['selection_toggles']}")

        if metrics["errors_by_type"]:
            self.debug("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.debug(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "narrow",
    level: str = "WARNING",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def configure_logger(level: str = "WARNING", log_dir: Optional[Path] = None) -> StructuredLogger:
    """
    Reconfigure the global logger in place so module-level references
    picked up at import time see the new handlers.
    """
    logger = get_logger()
    fresh = StructuredLogger(
        name=logger.logger.name,
        level=level,
        log_dir=log_dir,
        enable_file=log_dir is not None,
    )
    fresh.metrics = logger.metrics
    logger.logger = fresh.logger
    return logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
