"""Structured logging for repeated runs.

The runner configures logging lazily on its first run, from the settings it
was given. Run-level fields (display name, attempt budget) are bound through
``structlog.contextvars`` so every engine event of a run carries them.

Only the handler installed here is managed: handlers that a host (such as
pytest's log capture) put on the root logger are left alone.
"""

import logging
import sys
import threading
from typing import TYPE_CHECKING

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from flaky_repeat.config import Settings

_HANDLER_NAME = "flaky_repeat"
_configure_lock = threading.Lock()
_configured = False


def app_context_processor(app_name: str, app_version: str) -> Processor:
    """Processor stamping every event with the application name and version."""

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("app_version", app_version)
        return event_dict

    return add_app_context


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    app_name: str = "flaky-repeat",
    app_version: str = "0.1.0",
) -> None:
    """Configure structlog and install (or replace) the flaky-repeat handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: ``production`` renders JSON lines, anything else renders
            coloured console output
        app_name: Value of the ``app`` field on every event
        app_version: Value of the ``app_version`` field on every event
    """
    global _configured

    level = getattr(logging, log_level.upper(), logging.INFO)
    json_output = environment.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context_processor(app_name, app_version),
    ]
    if json_output:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == _HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    if root_logger.level == logging.NOTSET or root_logger.level > level:
        root_logger.setLevel(level)

    _configured = True
    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if json_output else "console",
    )


def ensure_logging_configured(settings: "Settings") -> None:
    """Configure logging from settings once per process."""
    if _configured or not settings.CONFIGURE_LOGGING:
        return
    with _configure_lock:
        if not _configured:
            configure_logging(
                settings.LOG_LEVEL,
                settings.ENVIRONMENT,
                app_name=settings.APP_NAME,
                app_version=settings.APP_VERSION,
            )
