import json
import logging
import sys
from datetime import datetime, timezone


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_events = logging.getLogger("storefront.events")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the ``storefront`` logger once; later calls only adjust the level."""

    logger = logging.getLogger("storefront")
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_event(level: str, event: str, **fields) -> None:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level.lower(),
        "event": event,
    }
    payload.update(fields or {})
    _events.log(
        logging.getLevelName(level.upper()),
        json.dumps(payload, ensure_ascii=False, default=str),
    )
