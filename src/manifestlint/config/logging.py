"""Log routing for manifestlint.

Everything is logged through stdlib ``logging`` under the ``manifestlint``
logger and rendered by structlog on stderr, as colored console lines or,
with ``--log-json``, one JSON object per line. Stdout carries only the
formatted result so it can be piped.

Engine workers log from pool threads; their records carry a ``thread``
key so interleaved unit logs can be told apart.
"""

from __future__ import annotations

import logging
import sys
import threading

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

PACKAGE_LOGGER = "manifestlint"
HANDLER_NAME = "manifestlint"


def _add_worker_thread(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    thread = threading.current_thread()
    if thread is not threading.main_thread():
        event_dict.setdefault("thread", thread.name)
    return event_dict


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_worker_thread,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    renderer: Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route manifestlint logs to stderr.

    ``verbose`` lowers the ``manifestlint`` logger to DEBUG; other libraries
    stay at WARNING either way. Calling again replaces the previous handler.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(_stderr_handler(log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
