"""Structured JSON logging formatter for offline queue observability."""

import json
import logging
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Output log records as single-line JSON for structured logging."""

    EXTRA_FIELDS = ("queued_id", "submission_id", "status_code")

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_obj[field] = value
        return json.dumps(log_obj, default=str)
