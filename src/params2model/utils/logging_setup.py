"""Console logging for Params2Model using structlog.

The library only emits events; applications that already configure
structlog or stdlib logging need not call ``setup_logging``. The CLI does.
"""

import logging
import sys

import structlog

from params2model.config import settings


def setup_logging() -> structlog.stdlib.BoundLogger:
    """
    Configure structlog on top of stdlib logging.

    Renders to stderr as colored text or as JSON lines depending on
    ``settings.log_format``.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    # stdout is reserved for command output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a bound logger for a module.

    Events go through the stdlib logger of the same name, so until an
    application configures logging, stdlib level filtering keeps debug
    events quiet. Processors configured with ``structlog.configure`` still
    apply once set.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
