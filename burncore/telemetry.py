# burncore/telemetry.py

import sys
from collections.abc import Callable
from typing import Any, cast

import structlog

LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}

Subscriber = Callable[[str, dict[str, Any]], None]


def setup_logging(level: str = "INFO", format: str = "json") -> None:
    """Configure structlog.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: "json" for machine-readable output, "console" for development
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


class Telemetry:
    """
    Emits telemetry events to the log and to registered subscribers, once per
    successful mutating engine call. Telemetry is not part of the persisted
    state.
    """

    def __init__(self, logger_name: str = "burncore.telemetry") -> None:
        self.logger = get_logger(logger_name)
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def emit(self, event: str, **fields: Any) -> None:
        self.logger.info(event, telemetry=True, **fields)

        for subscriber in list(self._subscribers):
            try:
                subscriber(event, dict(fields))
            except Exception as e:
                # the operation is already committed
                self.logger.error("telemetry_subscriber_failed", telemetry_event=event, error=str(e))
