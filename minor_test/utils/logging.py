"""Logging configuration for functional test runs.

This module wires structlog on top of the standard library logging package,
renders console output through rich, and tags every record with the suite
and test currently being run so interleaved worker output stays readable.
"""

import logging
import logging.handlers
import uuid
import contextvars
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone

import structlog
from rich.logging import RichHandler
from rich.console import Console

# Global logger registry
_loggers = {}
_configured = False

# Context variable for the suite run
suite_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    'suite_id', default=''
)

# Context variable for the test currently being set up
test_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    'test_id', default=''
)


class SuiteContextProcessor:
    """Processor to add suite and test identifiers to log records."""

    def __call__(self, logger, method_name, event_dict):
        """Add test context information to event dictionary.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Event dictionary

        Returns:
            Modified event dictionary
        """
        suite = suite_id.get()
        if suite:
            event_dict['suite_id'] = suite

        test = test_id.get()
        if test:
            event_dict['test_id'] = test

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()

        return event_dict


def _parse_size(max_size: str) -> int:
    size_multipliers = {
        'KB': 1024,
        'MB': 1024 * 1024,
        'GB': 1024 * 1024 * 1024
    }

    for suffix, multiplier in size_multipliers.items():
        if max_size.upper().endswith(suffix):
            return int(max_size[:-len(suffix)].strip()) * multiplier
    return 10 * 1024 * 1024


def setup_logging(level: str = "INFO",
                  log_file: Optional[str] = None,
                  format_type: str = "simple",
                  max_size: str = "10MB",
                  backup_count: int = 3) -> None:
    """Set up logging for the functional test process.

    Only the first call has an effect; later calls are ignored so that a
    suite created inside an already configured process keeps that setup.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        format_type: Log format type (structured, simple)
        max_size: Maximum log file size before rotation
        backup_count: Number of backup files to keep
    """
    global _configured

    if _configured:
        return

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        SuiteContextProcessor(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "structured":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer(
            key_order=['event', 'logger', 'level']
        ))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    console = Console(stderr=True)
    console_handler = RichHandler(
        console=console,
        show_path=False,
        show_time=True,
        rich_tracebacks=True,
    )
    console_handler.setLevel(getattr(logging, level.upper()))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=_parse_size(max_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger('playwright').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    _configured = True

    get_logger("minor_test.logging").debug(
        f"Logging configured: level={level}, format={format_type}, file={log_file}"
    )


def get_logger(name: str):
    """Get a logger instance with the specified name.

    Args:
        name: Logger name

    Returns:
        structlog logger bound to the stdlib logger of the same name
    """
    if name not in _loggers:
        _loggers[name] = structlog.get_logger(name)

    return _loggers[name]


def generate_suite_id() -> str:
    """Generate a new suite run identifier."""
    return str(uuid.uuid4())[:8]


class LogContext:
    """Context manager that tags logs with the current suite and test."""

    def __init__(self, suite_id: Optional[str] = None,
                 test_id: Optional[str] = None):
        self.suite_id = suite_id
        self.test_id = test_id
        self._tokens = []

    def __enter__(self):
        if self.suite_id:
            self._tokens.append((suite_id, suite_id.set(self.suite_id)))
        if self.test_id:
            self._tokens.append((test_id, test_id.set(self.test_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []
