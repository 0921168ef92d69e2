"""
Structured logging for the price spiral engine.

Two kinds of loggers exist in this package:

  - the pipeline and session edges (``engine.build_spiral``,
    ``SpiralState``) log structured events through ``get_logger()``;
  - the pure geometry / analysis modules use plain
    ``logging.getLogger("spiral.<module>")`` so they stay importable
    without any logging setup.

``setup_logging()`` routes both through one structlog formatter, so a host
application sees a single stream of events with ``service`` (and the
package version) bound on every line. Call it once at startup.

Usage::

    from spiral_lib.core.logging_config import setup_logging, get_logger

    setup_logging(service="spiral-viewer", log_format="json")
    get_logger("spiral.viewer").info("asset_selected", symbol="BTC-USD")
    # => {"symbol": "BTC-USD", "event": "asset_selected", "service": "spiral-viewer", ...}

Environment:
    LOG_LEVEL          root level (default INFO)
    LOG_FORMAT         console | json (default console)
    SPIRAL_LOG_LEVEL   level for the ``spiral.*`` tree only, e.g. DEBUG to
                       see analytics / cache / marker diagnostics
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

import structlog

# Root of every logger name used inside the package
PACKAGE_LOGGER = "spiral"

# Pulled in by yfinance downloads and plotly image export
_NOISY_LOGGERS = ("yfinance", "urllib3", "peewee", "kaleido")


def _level(value: str | None, default: int) -> int:
    if not value:
        return default
    return getattr(logging, value.upper(), default)


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors run on structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str, stream: IO[str]) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(
        colors=hasattr(stream, "isatty") and stream.isatty(),
        pad_event_to=30,
    )


def setup_logging(
    *,
    service: str = "spiral",
    level: str | None = None,
    log_format: str | None = None,
    spiral_level: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure ``structlog`` and stdlib ``logging`` for the whole process.

    Parameters
    ----------
    service:
        Name bound to every log event.
    level:
        Root log level. Falls back to ``LOG_LEVEL``, then ``"INFO"``.
    log_format:
        ``"console"`` or ``"json"``. Falls back to ``LOG_FORMAT``, then
        ``"console"``.
    spiral_level:
        Level for the ``spiral.*`` logger tree. Falls back to
        ``SPIRAL_LOG_LEVEL``; when unset the tree inherits the root level.
    stream:
        Where log lines go (default ``sys.stderr``).
    """
    from spiral_lib import __version__

    root_level = _level(level or os.getenv("LOG_LEVEL"), logging.INFO)
    log_format = (log_format or os.getenv("LOG_FORMAT", "console")).lower()
    stream = stream or sys.stderr

    shared = _shared_processors()
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format, stream),
        ],
        foreign_pre_chain=shared,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(root_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(
        _level(spiral_level or os.getenv("SPIRAL_LOG_LEVEL"), logging.NOTSET)
    )

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service, spiral_version=__version__)


def get_logger(
    name: str | None = None, **initial_binds: Any
) -> structlog.stdlib.BoundLogger:
    """Structured logger, optionally bound with extra context.

    >>> log = get_logger("spiral.state", symbol="BTC-USD")
    >>> log.info("price_data_loaded", points=500)
    """
    log = structlog.get_logger(name)
    if initial_binds:
        log = log.bind(**initial_binds)
    return log
