"""
Logging configuration for the HTML to PDF service.

Provides a request-scoped logger that tags every message with the request id
and the current render attempt, so concurrent renders can be told apart in
a single log stream.
"""

import json
import logging
import sys
from typing import Optional


class RenderLogger:
    """
    Contextual logger for a single render request.

    Adds request id and attempt information to all log messages.
    """

    def __init__(
        self,
        name: str,
        request_id: Optional[str] = None,
        attempt: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Initialize render logger.

        Args:
            name: Logger name (usually __name__)
            request_id: Optional request identifier for correlation
            attempt: Optional attempt number within the retry loop
            max_attempts: Total attempts allowed, shown next to the attempt number
        """
        self.logger = logging.getLogger(name)
        self.request_id = request_id
        self.attempt = attempt
        self.max_attempts = max_attempts

    def for_attempt(self, attempt: int, max_attempts: int) -> "RenderLogger":
        """Return a logger bound to a specific attempt of the same request."""
        return RenderLogger(self.logger.name, self.request_id, attempt, max_attempts)

    def _format_message(self, message: str) -> str:
        """Add contextual prefix to message."""
        prefix_parts = []
        if self.request_id:
            prefix_parts.append(f"[req:{self.request_id[:8]}]")
        if self.attempt is not None:
            if self.max_attempts:
                prefix_parts.append(f"[attempt {self.attempt}/{self.max_attempts}]")
            else:
                prefix_parts.append(f"[attempt {self.attempt}]")

        if prefix_parts:
            return f"{' '.join(prefix_parts)} {message}"
        return message

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message), **kwargs)


class JsonFormatter(logging.Formatter):
    """One JSON object per line for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    request_id: Optional[str] = None,
    attempt: Optional[int] = None,
    max_attempts: Optional[int] = None,
) -> RenderLogger:
    """
    Get a render logger instance.

    Args:
        name: Logger name (usually __name__)
        request_id: Optional request identifier
        attempt: Optional attempt number
        max_attempts: Optional total attempts

    Returns:
        RenderLogger instance
    """
    return RenderLogger(name, request_id, attempt, max_attempts)
