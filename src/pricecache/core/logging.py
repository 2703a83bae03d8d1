"""Logging configuration for pricecache"""

import json
import logging
import logging.handlers
import sys
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, Optional

QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 's3transfer')


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line"""

    # Keys passed through ``extra=`` by the cache and the collectors
    EXTRA_FIELDS = ('operation', 'duration', 'instance_type', 'cache', 'region', 'entries', 'errors')

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }
        entry.update({name: getattr(record, name) for name in self.EXTRA_FIELDS if hasattr(record, name)})

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class PerformanceLogger:
    """Times catalog loads and keeps the most recent duration per operation"""

    def __init__(self, name: str = 'pricecache.performance'):
        self.logger = logging.getLogger(name)
        self._durations: Dict[str, float] = {}
        self._running = 0
        self._lock = threading.Lock()

    @contextmanager
    def timer(self, operation: str, **fields) -> Iterator[None]:
        started = time.monotonic()
        with self._lock:
            self._running += 1
        try:
            yield
        finally:
            duration = time.monotonic() - started
            with self._lock:
                self._running -= 1
                self._durations[operation] = duration
            self.logger.debug(f"{operation} took {duration:.3f}s",
                              extra={'operation': operation, 'duration': duration, **fields})

    def last_duration(self, operation: str) -> Optional[float]:
        with self._lock:
            return self._durations.get(operation)

    @property
    def active_timers(self) -> int:
        with self._lock:
            return self._running


class LoggerManager:
    """Owns the root handler setup shared by the CLI and library users"""

    FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    def __init__(self):
        self.performance_logger = PerformanceLogger()

    def setup_logging(self,
                      level: str = "INFO",
                      log_file: Optional[Path] = None,
                      structured: bool = False,
                      console: bool = True,
                      handler: Optional[logging.Handler] = None):
        root = logging.getLogger()
        root.setLevel(level.upper())
        root.handlers = []

        if handler is None and console:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(self._formatter(structured))
        if handler is not None:
            root.addHandler(handler)

        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            # 10MB per file, 5 backups
            file_handler = logging.handlers.RotatingFileHandler(log_file, maxBytes=10485760, backupCount=5)
            file_handler.setFormatter(self._formatter(structured))
            root.addHandler(file_handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def _formatter(self, structured: bool) -> logging.Formatter:
        return StructuredFormatter() if structured else logging.Formatter(self.FORMAT)


logger_manager = LoggerManager()


def setup_logging(**kwargs):
    """Configure root logging for the application"""
    logger_manager.setup_logging(**kwargs)


def get_performance_logger() -> PerformanceLogger:
    return logger_manager.performance_logger
