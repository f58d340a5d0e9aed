"""
Logging configuration for subsync.
Provides both console and file logging with DEBUG level for development.

Supports a per-task playlist context - each log line is automatically
prefixed with the playlist currently being processed. The context lives in
a ContextVar, so concurrent asyncio tasks do not see each other's prefix.

Configuration can be set via the subsync.yaml settings section or environment variables.
"""

import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Optional


ROOT_LOGGER_NAME = "subsync"


def _get_config_safe():
    """
    Get config, or None if it cannot be loaded (e.g. unreadable environment).
    """
    try:
        from .config import get_config
        return get_config()
    except (ImportError, OSError, ValueError):
        return None


_playlist_context: ContextVar[Optional[str]] = ContextVar("playlist_context", default=None)


def set_playlist_context(playlist_id: str) -> None:
    """Set the playlist context for this task's log messages."""
    _playlist_context.set(playlist_id)


def get_playlist_context() -> Optional[str]:
    """Get the playlist context for this task."""
    return _playlist_context.get()


def clear_playlist_context() -> None:
    """Clear the playlist context for this task."""
    _playlist_context.set(None)


class PlaylistContextFormatter(logging.Formatter):
    """Formatter that includes the current playlist context in log messages."""

    def format(self, record):
        # The marker attribute avoids double-prefixing when several handlers format the same record
        playlist = get_playlist_context()
        if playlist and not getattr(record, '_playlist_prefixed', False):
            # Short form: UUxxxxxxxx... -> [UUxxxxxx], PLxxxx... -> [PLxxxxxx]
            record.msg = f"[{playlist[:8]}] {record.msg}"
            record._playlist_prefixed = True
        return super().format(record)


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    console_level: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging with both file and console handlers.

    Args:
        log_dir: Directory for log files (default: from config, env, or "logs")
        log_level: Overall log level (default: from config, env, or "DEBUG")
        console_level: Console output level (default: from config, env, or "INFO")

    Returns:
        Configured logger instance
    """
    cfg = _get_config_safe()

    if log_dir is None:
        log_dir = cfg.log_dir if cfg else os.environ.get("LOG_DIR", "logs")

    if log_level is None:
        log_level = cfg.log_level if cfg else os.environ.get("LOG_LEVEL", "DEBUG")

    if console_level is None:
        console_level = cfg.console_log_level if cfg else os.environ.get("CONSOLE_LOG_LEVEL", "INFO")

    Path(log_dir).mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Clear existing handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers = []

    # Detailed format for file (with playlist context)
    file_formatter = PlaylistContextFormatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Simpler format for console (with playlist context)
    console_formatter = PlaylistContextFormatter(
        '%(asctime)s | %(levelname)-8s | %(message)s',
        datefmt='%H:%M:%S'
    )

    # File handler - DEBUG level, one file per run
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = Path(log_dir) / f"subsync_{timestamp}.log"
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    # Also create a latest.log symlink for easy access
    latest_log = Path(log_dir) / "latest.log"
    try:
        if latest_log.is_symlink() or latest_log.exists():
            latest_log.unlink()
        if os.name != 'nt':
            latest_log.symlink_to(log_file.name)
    except (OSError, NotImplementedError) as e:
        # Symlinks might not work everywhere (e.g., some filesystems, Windows)
        logger.debug(f"Could not create latest.log symlink: {e}")

    # Console handler - configurable level, on stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, console_level.upper()))
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    logger.info(f"Logging initialized: file={log_file}, level={log_level}")
    logger.debug(f"Console level: {console_level}")
    logger.debug(f"Python version: {sys.version}")

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a child logger for a specific module."""
    base_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if name:
        return base_logger.getChild(name)
    return base_logger


class LogContext:
    """Context manager for logging operation blocks with timing."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.log(self.level, f"START: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = (datetime.now() - self.start_time).total_seconds()
        if exc_type:
            self.logger.error(f"FAILED: {self.operation} after {elapsed:.2f}s - {exc_type.__name__}: {exc_val}")
        else:
            self.logger.log(self.level, f"DONE: {self.operation} in {elapsed:.2f}s")
        return False  # Don't suppress exceptions
