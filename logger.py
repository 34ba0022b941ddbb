import logging
import json
from datetime import datetime, timezone
import sys

import config

# Extra attributes copied from a LogRecord into the JSON line when present
EXTRA_FIELDS = (
    "event",
    "run_id",
    "source",
    "url",
    "game_count",
    "instant_count",
    "draw_count",
    "ledger_count",
    "duration_ms",
    "degraded_sources",
    "state",
    "key",
    "error",
)


class JSONFormatter(logging.Formatter):
    """
    Structured JSON formatter for machine-readable logs.
    One line per record, extra fields inlined next to the message.
    """
    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logger(name):
    """
    Create a logger with JSON formatting.
    Usage: logger = setup_logger(__name__)
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    return logger
