"""
Logging system for Stride Agent.

This module configures stdlib logging from the application configuration:
a colored console handler on stderr (stdout is reserved for command results),
an optional rotating JSON log file, and a filter that redacts credentials
before anything is written.
"""

import os
import sys
import json
import time
import logging
import logging.handlers
import re
from pathlib import Path
from typing import Dict, Optional
from contextlib import contextmanager
from datetime import datetime


class Colors:
    """ANSI color codes for console output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'


class SensitiveDataFilter(logging.Filter):
    """Filter to automatically redact sensitive information from logs."""

    def __init__(self):
        super().__init__()
        self.patterns = [
            # API keys, secrets and tokens
            (re.compile(r'(api[_-]?key|api[_-]?secret|token|secret|password)["\s]*[:=]["\s]*([^\s"]{8,})', re.IGNORECASE), r'\1=***REDACTED***'),
            (re.compile(r'(bearer\s+)([a-zA-Z0-9._-]{20,})', re.IGNORECASE), r'\1***REDACTED***'),
            (re.compile(r'(basic\s+)([a-zA-Z0-9+/=]{12,})', re.IGNORECASE), r'\1***REDACTED***'),

            # URLs with embedded credentials
            (re.compile(r'(://[^:/\s]+:)([^@\s]+)(@)', re.IGNORECASE), r'\1***REDACTED***\3'),
        ]

    def _redact(self, value: str) -> str:
        for pattern, replacement in self.patterns:
            value = pattern.sub(replacement, value)
        return value

    def filter(self, record):
        """Filter log record to redact sensitive information."""
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)

        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self._redact(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        return True


class ColoredConsoleFormatter(logging.Formatter):
    """Formatter that adds colors to console output based on log level."""

    LEVEL_COLORS = {
        'DEBUG': Colors.BRIGHT_BLACK,
        'INFO': Colors.BRIGHT_BLUE,
        'WARNING': Colors.BRIGHT_YELLOW,
        'ERROR': Colors.BRIGHT_RED,
        'CRITICAL': Colors.BRIGHT_MAGENTA + Colors.BOLD,
    }

    def __init__(self, use_colors=True):
        """Initialize the formatter.

        Args:
            use_colors: Whether to use colors in output
        """
        self.use_colors = use_colors and self._supports_color()

        # Console format: timestamp | level | module | message
        fmt = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
        super().__init__(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    def _supports_color(self):
        """Check if stderr supports color output."""
        if not hasattr(sys.stderr, 'isatty') or not sys.stderr.isatty():
            return False

        if os.getenv('NO_COLOR'):
            return False

        if os.getenv('FORCE_COLOR'):
            return True

        term = os.getenv('TERM', '').lower()
        return 'color' in term or term in ('xterm', 'xterm-256color', 'screen', 'linux')

    def format(self, record):
        """Format the log record with colors if enabled."""
        formatted = super().format(record)

        if not self.use_colors:
            return formatted

        color = self.LEVEL_COLORS.get(record.levelname, '')
        if color:
            formatted = f"{color}{formatted}{Colors.RESET}"

        return formatted


class JSONFileFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs for file storage."""

    _RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
        'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
        'thread', 'threadName', 'processName', 'process', 'message',
        'taskName',
    }

    def format(self, record):
        """Format the log record as JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'extra': {
                'filename': record.filename,
                'lineno': record.lineno,
                'funcName': record.funcName,
            },
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_entry['extra'][key] = value

        return json.dumps(log_entry, default=str)


class PerformanceTimer:
    """Context manager for timing an operation."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        """Initialize the performance timer.

        Args:
            logger: Logger instance to use
            operation: Description of the operation being timed
            level: Log level to use for timing messages
        """
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        duration = self.end_time - self.start_time

        if exc_type is None:
            self.logger.log(self.level, f"Completed {self.operation} in {duration:.3f}s")
        else:
            self.logger.log(self.level, f"Failed {self.operation} after {duration:.3f}s")

    @property
    def duration(self) -> Optional[float]:
        """Get the duration if timing is complete."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None


class LoggingManager:
    """Central logging manager for Stride Agent."""

    # Module levels applied on top of the root level
    MODULE_LEVELS = {
        "stride_agent.core": "INFO",
        "stride_agent.tracker": "INFO",
        "stride_agent.tools": "INFO",
        "stride_agent.config": "INFO",
        "httpx": "WARNING",
        "httpcore": "WARNING",
    }

    def __init__(self):
        self._initialized = False
        self._loggers: Dict[str, logging.Logger] = {}
        self._log_dir: Optional[Path] = None

    def setup_logging(self, config, verbose: bool = False, force_reinit: bool = False):
        """Setup logging based on configuration.

        Args:
            config: StrideAgentConfig instance
            verbose: Enable verbose logging (overrides config)
            force_reinit: Force reinitialization even if already setup
        """
        if self._initialized and not force_reinit:
            return

        if verbose or config.app.verbose_logging:
            log_level = logging.DEBUG
        else:
            log_level = getattr(logging, config.app.log_level.value.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        self._setup_console_handler(root_logger, log_level)

        if config.app.log_file:
            self._setup_file_handler(root_logger, config, log_level)

        self._setup_module_loggers(verbose or config.app.verbose_logging)

        sensitive_filter = SensitiveDataFilter()
        for handler in root_logger.handlers:
            handler.addFilter(sensitive_filter)

        self._initialized = True

        logger = self.get_logger('stride_agent.logging')
        logger.debug(f"Logging initialized at {logging.getLevelName(log_level)}")
        if self._log_dir:
            logger.debug(f"Log directory: {self._log_dir}")

    def _setup_console_handler(self, root_logger: logging.Logger, log_level: int):
        """Setup console logging handler on stderr."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ColoredConsoleFormatter(use_colors=True))
        root_logger.addHandler(console_handler)

    def _setup_file_handler(self, root_logger: logging.Logger, config, log_level: int):
        """Setup file logging handler with rotation."""
        try:
            log_file = Path(config.app.log_file)
            self._log_dir = log_file.parent
            self._log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=config.app.max_log_size_mb * 1024 * 1024,
                backupCount=config.app.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(JSONFileFormatter())

            root_logger.addHandler(file_handler)

        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    def _setup_module_loggers(self, verbose: bool):
        """Setup module-specific log levels."""
        for module_name, level_name in self.MODULE_LEVELS.items():
            level = getattr(logging, level_name.upper(), logging.INFO)
            if verbose and module_name.startswith("stride_agent"):
                level = logging.DEBUG
            logging.getLogger(module_name).setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger instance for the given name.

        Args:
            name: Logger name (typically __name__)

        Returns:
            Logger instance
        """
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)

        return self._loggers[name]

    def create_performance_timer(self, operation: str, level: int = logging.DEBUG) -> PerformanceTimer:
        """Create a performance timer context manager."""
        logger = self.get_logger('stride_agent.performance')
        return PerformanceTimer(logger, operation, level)

    def is_initialized(self) -> bool:
        """Check if logging has been initialized."""
        return self._initialized


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config, verbose: bool = False, force_reinit: bool = False):
    """Setup logging based on configuration.

    Args:
        config: StrideAgentConfig instance
        verbose: Enable verbose logging
        force_reinit: Force reinitialization
    """
    _logging_manager.setup_logging(config, verbose, force_reinit)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name."""
    return _logging_manager.get_logger(name)


@contextmanager
def log_performance(operation: str, level: int = logging.DEBUG):
    """Context manager for performance timing.

    Args:
        operation: Description of the operation being timed
        level: Log level to use for timing messages

    Yields:
        PerformanceTimer instance
    """
    timer = _logging_manager.create_performance_timer(operation, level)
    with timer:
        yield timer


def is_logging_initialized() -> bool:
    """Check if logging has been initialized."""
    return _logging_manager.is_initialized()


def log_config_info(config):
    """Log configuration information at startup."""
    logger = get_logger('stride_agent.config')

    logger.debug(f"App debug mode: {config.app.debug}")
    logger.debug(f"Log level: {config.app.log_level.value}")
    logger.debug(f"Tracker base URL: {config.tracker.base_url}")
    logger.debug(f"Concurrent board lookups: {config.resolver.concurrent_board_lookups}")

    if not config.tracker.has_credentials:
        logger.warning("DEVSTRIDE_ORG_ID, DEVSTRIDE_API_KEY or DEVSTRIDE_API_SECRET is not set")
