"""JSON logs on stdout, the shape Cloud Logging parses into structured entries."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from masterchef.core.request_id import RequestIdLogFilter

# Present on every LogRecord; anything else came in through ``extra=``
_STANDARD_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google", "urllib3", "grpc")


class CloudRunJSONFormatter(logging.Formatter):
    """One JSON object per line with ``severity`` and any ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "logger": record.name,
        }
        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_RECORD_FIELDS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_level: str = "INFO", quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """
    Route the root logger to stdout as JSON.

    Args:
        log_level: Name of the root level (DEBUG, INFO, ...); unknown names mean INFO
        quiet: Logger names capped at WARNING
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CloudRunJSONFormatter())
    handler.addFilter(RequestIdLogFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
