"""
Structured logging system for JobBridge.

Provides centralized logging with console and file outputs, log levels,
and counters for intake and matching activity.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import get_log_dir, get_log_level, load_env


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks how many records were registered, rejected and matched.
    """

    def __init__(
        self,
        name: str = "jobbridge",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "records_created": {},
            "validation_failures": {},
            "match_runs": 0,
            "matches_found": 0,
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)  # stdout carries CLI output
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobbridge_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

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
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_created(self, kind: str):
        """Count a persisted record (beneficiary, provider, job)."""
        created = self.metrics["records_created"]
        created[kind] = created.get(kind, 0) + 1

    def record_validation_failure(self, kind: str):
        """Count a rejected intake submission."""
        failures = self.metrics["validation_failures"]
        failures[kind] = failures.get(kind, 0) + 1

    def record_match_run(self, matches: int):
        """Record one engine run and how many matches it produced."""
        self.metrics["match_runs"] += 1
        self.metrics["matches_found"] += matches

    def record_error(self, error_type: str):
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of current metrics with derived totals."""
        metrics_copy = {
            k: dict(v) if isinstance(v, dict) else v for k, v in self.metrics.items()
        }
        metrics_copy["total_created"] = sum(metrics_copy["records_created"].values())
        metrics_copy["total_rejected"] = sum(metrics_copy["validation_failures"].values())
        return metrics_copy

    def log_metrics_summary(self, level: int = logging.INFO):
        """Log a summary of current metrics at the given level."""
        metrics = self.get_metrics()

        def log(message: str):
            self._log(level, message, {})

        log("=== Session Metrics ===")
        log(f"Records created: {metrics['total_created']}")
        for kind, count in metrics["records_created"].items():
            log(f"  {kind}: {count}")

        if metrics["validation_failures"]:
            log(f"Rejected submissions: {metrics['total_rejected']}")
            for kind, count in metrics["validation_failures"].items():
                log(f"  {kind}: {count}")

        if metrics["match_runs"]:
            log(f"Match runs: {metrics['match_runs']} ({metrics['matches_found']} matches)")

        if metrics["errors_by_type"]:
            log("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                log(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobbridge",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and log directory default to the JOBBRIDGE_LOG_LEVEL and
    JOBBRIDGE_LOG_DIR settings. A .env file in the working directory is
    loaded first, since modules create the logger at import time.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        load_env()
        kwargs.setdefault("log_dir", get_log_dir())
        _global_logger = StructuredLogger(name=name, level=level or get_log_level(), **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
