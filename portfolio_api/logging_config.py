# logging_config.py
"""Log output for the API.

On Lambda every line goes to CloudWatch, where one JSON object per line is
searchable with Logs Insights. Locally ``LOG_FORMAT=text`` is easier to read.
Records emitted while a request is being served carry its Lambda request id.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("portfolio_request_id", default=None)

NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def set_request_id(rid: Optional[str]):
    request_id_var.set(rid)


class JSONFormatter(logging.Formatter):
    """One JSON object per record: UTC timestamp, level, logger, message."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        rid = request_id_var.get()
        if rid:
            entry["request_id"] = rid
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines, prefixed with the request id when there is one."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        rid = request_id_var.get()
        return f"[{rid}] {line}" if rid else line


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Attach a stdout handler to the ``portfolio_api`` logger.

    The logger does not propagate: the Lambda runtime installs its own handler
    on the root logger, and propagating would print every record twice.
    """
    logger = logging.getLogger("portfolio_api")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
