"""Logging setup shared by the CLI and the library.

Console output goes through rich unless structured (JSON) logs are requested.
Every handler passes records through ``CredentialFilter`` so that AWS keys and
cluster bearer tokens never reach a terminal or log file.
"""

import json
import logging
import logging.handlers
import re
import sys
import threading
import time
import traceback
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler


TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}

QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 'kubernetes')


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra`` fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread_name": record.threadName,
        }

        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS and not name.startswith('_'):
                log_data[name] = value

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_data, default=str)


class CredentialFilter(logging.Filter):
    """Masks AWS access keys, secrets and bearer tokens in log messages"""

    REDACTED = '***REDACTED***'

    PATTERNS = [
        re.compile(r'\b(?:AKIA|ASIA)[A-Z0-9]{16}\b'),
        re.compile(r'(?i)(aws_secret_access_key|aws_session_token|secret|token|password)'
                   r'(["\']?\s*[:=]\s*["\']?)([^"\'\s,}]+)'),
        re.compile(r'(?i)(bearer\s+)([A-Za-z0-9\-._~+/]+=*)'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True

    @classmethod
    def redact(cls, message: str) -> str:
        key_id, assignment, bearer = cls.PATTERNS
        message = key_id.sub(cls.REDACTED, message)
        message = assignment.sub(lambda m: f"{m.group(1)}{m.group(2)}{cls.REDACTED}", message)
        return bearer.sub(lambda m: f"{m.group(1)}{cls.REDACTED}", message)


class PerformanceLogger:
    """Times operations and keeps running totals per operation"""

    def __init__(self):
        self.logger = logging.getLogger('spot_evaluator.performance')
        self._totals: Dict[str, Dict[str, float]] = {}
        self._lock = threading.Lock()

    @contextmanager
    def timer(self, operation: str, **context):
        start = time.monotonic()
        try:
            yield
        finally:
            duration = time.monotonic() - start
            with self._lock:
                totals = self._totals.setdefault(operation, {'count': 0, 'seconds': 0.0})
                totals['count'] += 1
                totals['seconds'] += duration

            self.logger.debug(
                f"{operation} took {duration:.3f}s",
                extra={'operation': operation, 'duration': duration, **context}
            )

    def log_metric(self, metric_name: str, value: float, unit: str = "", **context):
        self.logger.debug(
            f"{metric_name}={value}{unit}",
            extra={'metric_name': metric_name, 'value': value, 'unit': unit, **context}
        )

    def get_stats(self) -> Dict[str, Dict[str, float]]:
        """Call count and total seconds for each timed operation"""
        with self._lock:
            return {operation: dict(totals) for operation, totals in self._totals.items()}


_performance_logger = PerformanceLogger()


def setup_logging(level: str = "INFO",
                  log_file: Optional[Path] = None,
                  structured: bool = False,
                  console: bool = True,
                  rich_console: Optional[Console] = None,
                  max_bytes: int = 10485760,
                  backup_count: int = 5):
    """Replace the root logger's handlers according to the logging settings"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = []

    handlers = []
    if console:
        if structured:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
        else:
            handler = RichHandler(
                console=rich_console or Console(stderr=True),
                rich_tracebacks=True,
                show_path=False
            )
            handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(TEXT_FORMAT))
        handlers.append(handler)

    for handler in handlers:
        handler.addFilter(CredentialFilter())
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_performance_logger() -> PerformanceLogger:
    return _performance_logger
