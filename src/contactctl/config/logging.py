"""Log routing for contactctl.

Application modules log through ``logging.getLogger(__name__)`` or
``structlog.get_logger(...)``. Both end up in one stderr handler whose
formatter runs the structlog processor chain, so a stdlib record and a
structlog event render identically: as a console line by default, or
as one JSON object per line with ``--log-json``.

Command output never goes through logging; it is written to stdout by
the output layer.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

APP_LOGGER = "contactctl"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def build_formatter(
    *, log_json: bool, colors: bool = False
) -> structlog.stdlib.ProcessorFormatter:
    """Return the formatter used by the contactctl log handler."""
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route contactctl logs to *stream* (default: stderr).

    Args:
        verbose: Let contactctl DEBUG records through. Otherwise only
            WARNING and above are shown, for contactctl and third parties.
        log_json: Render JSON lines instead of console lines.
        stream: Destination for log records.

    Calling it again replaces the previous handler.
    """
    target = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(build_formatter(log_json=log_json, colors=target.isatty()))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
