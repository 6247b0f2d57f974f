"""Logging setup for the plugin process.

Records go to stderr, which the plugin runtime forwards to the daemon
log. ``GLUSTERVOL_LOGGING_FORMAT`` selects one line of text per record
or python-json-logger JSON with service and pid fields.

A volume create polls Heketi once per second, so the per-poll and cache
events are throttled. Verb outcomes, volume events and gluster stderr
are never dropped.
"""

import logging
import sys
import time
from collections.abc import Callable, Iterable

from pythonjsonlogger import json as jsonlogger
from pythonjsonlogger.core import RESERVED_ATTRS

from glustervol.config import LoggingConfig
from glustervol.logging_schema import LogEvent

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(levelname)s %(name)s %(process)d %(message)s"

THROTTLED_EVENTS = frozenset(
    {
        LogEvent.OPERATION_PENDING,
        LogEvent.CACHE_MISS,
        LogEvent.CACHE_REFRESHED,
    }
)


class EventThrottleFilter(logging.Filter):
    """Drops repeats of high-frequency events within a time window.

    Only records whose ``event`` is in ``events`` are considered. Repeats
    are keyed by logger, event, operation and message, so two operations
    polled at once are throttled independently.
    """

    def __init__(
        self,
        interval: float = 5.0,
        events: Iterable[LogEvent] = THROTTLED_EVENTS,
        max_keys: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self._interval = interval
        self._events = frozenset(events)
        self._max_keys = max_keys
        self._clock = clock
        self._seen: dict[tuple, float] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        event = getattr(record, "event", None)
        if event not in self._events:
            return True

        key = (
            record.name,
            event,
            getattr(record, "operation", None),
            record.getMessage(),
        )
        now = self._clock()
        last = self._seen.get(key)
        if last is not None and now - last < self._interval:
            return False

        self._seen[key] = now
        if len(self._seen) > self._max_keys:
            self._seen = {
                k: t for k, t in self._seen.items() if now - t < self._interval
            }
        return True


def json_formatter(config: LoggingConfig) -> jsonlogger.JsonFormatter:
    """JSON formatter with level, logger, pid, service and UTC timestamp."""
    return jsonlogger.JsonFormatter(
        JSON_FORMAT,
        rename_fields={"levelname": "level", "name": "logger", "process": "pid"},
        static_fields={"service": config.service_name},
        reserved_attrs=[*RESERVED_ATTRS, "color_message"],
        timestamp=True,
    )


def setup_logging(config: LoggingConfig) -> None:
    """Route root, uvicorn and library loggers to one stderr handler."""
    level = getattr(logging, config.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if config.format == "json":
        handler.setFormatter(json_formatter(config))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(EventThrottleFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = False
        uv_logger.addHandler(handler)

    # Verb outcomes are logged by the dispatcher
    logging.getLogger("uvicorn.access").disabled = True

    for name in ("httpx", "httpcore", "aiosqlite"):
        logging.getLogger(name).setLevel(logging.WARNING)
