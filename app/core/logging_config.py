# -*- coding: utf-8 -*-
"""
Logging setup for the patch-history command line.

Records below ERROR are written to stdout and the rest to stderr, from a
QueueListener thread.
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class MaxLevelFilter(logging.Filter):
    """Pass records at or below max_level."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


_log_listener: QueueListener | None = None


def _resolve_level(level: str) -> int:
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _stream_handler(stream, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: str = "INFO") -> None:
    """
    Route root logging through a queue to stdout/stderr at the given level.

    A second call stops the running listener and installs a fresh one.
    """
    global _log_listener

    _stop_log_listener()
    threshold = _resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = _stream_handler(sys.stdout, threshold, formatter)
    stdout_handler.addFilter(MaxLevelFilter(logging.WARNING))
    stderr_handler = _stream_handler(sys.stderr, max(threshold, logging.ERROR), formatter)

    records: queue.Queue = queue.Queue()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(threshold)
    root.addHandler(QueueHandler(records))

    _log_listener = QueueListener(records, stdout_handler, stderr_handler, respect_handler_level=True)
    _log_listener.start()
    atexit.register(_stop_log_listener)


def _stop_log_listener() -> None:
    global _log_listener
    if _log_listener is not None:
        _log_listener.stop()
        _log_listener = None
