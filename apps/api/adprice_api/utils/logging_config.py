"""Structured JSON logging.

One JSON object per line, tagged with the request_id of the current request.
Set ADPRICE_JSON_LOGS=false to keep the default text format.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from adprice_api.context import request_id_var


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_json_logging(log_level: str = "INFO") -> None:
    """
    Install JsonFormatter on the root logger.

    Replaces existing root handlers so repeated calls do not duplicate output.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ...)
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level.upper())
