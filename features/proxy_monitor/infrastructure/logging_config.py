"""Line-oriented logging for the monitor daemon.

Log lines are the only audit trail the monitor keeps, so each line carries a
timestamp, level and logger name. Credentials are redacted before output.
"""

from __future__ import annotations

import logging
import re


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SENSITIVE_PATTERNS = re.compile(
    r"(password|passwd|pass|secret|token|authorization)[\s]*[=:]\s*\S+",
    re.IGNORECASE,
)


class RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return self._sanitize(super().format(record))

    @staticmethod
    def _sanitize(text: str) -> str:
        """Remove sensitive values from log text."""
        return _SENSITIVE_PATTERNS.sub(lambda m: f"{m.group(1)}=[REDACTED]", text)


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single redacting stream handler."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(RedactingFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    # urllib3 logs every retry at WARNING; the prober reports attempts itself.
    logging.getLogger("urllib3").setLevel(logging.ERROR)
