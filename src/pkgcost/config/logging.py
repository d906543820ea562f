"""structlog setup for pkgcost.

Everything logs through stdlib ``logging`` into one stderr handler, so
stdout only ever carries the rendered result. ``pkgcost.progress`` reports
entry points at INFO unless ``--quiet``. ``--log-json`` swaps the
console renderer for JSON lines.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "pkgcost"
PROGRESS_LOGGER = "pkgcost.progress"


def _pre_chain() -> list[structlog.types.Processor]:
    """Processors applied to both structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_json: bool = False
) -> None:
    """Route pkgcost logs to stderr.

    Args:
        verbose: DEBUG for the ``pkgcost`` loggers (every ``go list`` call,
            per-package costs, span timings). Otherwise WARNING and up.
        quiet: Also silence ``pkgcost.progress``, which otherwise reports
            each entry point and fetch at INFO.
        log_json: One JSON object per line instead of the console format.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger(PROGRESS_LOGGER).setLevel(logging.WARNING if quiet else logging.INFO)
