"""
Structured logging for symcore components.

Nothing here runs on import; callers opt in with ``setup_logging``.
"""

import logging
import json
import time
import threading
from datetime import datetime

COMPONENTS = ['simplify', 'polynomial', 'groebner', 'cache', 'registry', 'matrix']


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": threading.current_thread().name,
            "thread_id": threading.get_ident(),
        }

        # Add extra fields if present
        if hasattr(record, 'extra_data'):
            log_entry.update(record.extra_data)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level=logging.INFO, log_file=None):
    """Setup structured JSON logging for symcore components."""
    logger = logging.getLogger('symcore')
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = JSONFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    for comp in COMPONENTS:
        comp_logger = logging.getLogger(f'symcore.{comp}')
        comp_logger.setLevel(level)
        comp_logger.propagate = True

    return logger


class Timer:
    """Wall-clock timer usable as a context manager."""

    def __init__(self, name=""):
        self.name = name
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.end_time = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()

    def elapsed_ms(self):
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return (end - self.start_time) * 1000
