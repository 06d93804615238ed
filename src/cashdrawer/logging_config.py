"""Logging setup for the cashdrawer command line."""

import json
import logging
from datetime import datetime, UTC

LOG_FORMATS = ("text", "json")
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Extra record attributes copied into JSON output when present.
EXTRA_FIELDS = ("session_id", "user_id", "action", "payment_method_id")


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str = "WARNING", fmt: str = "text") -> None:
    """Route ``cashdrawer`` loggers to stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        fmt: "text" or "json"

    Raises:
        ValueError: If the level or format is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{fmt}'. Use one of: {', '.join(LOG_FORMATS)}")

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger("cashdrawer")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
