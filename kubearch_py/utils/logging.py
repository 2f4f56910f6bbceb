"""Logging utilities for the inspector package."""

import logging
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log level enumeration."""
    NONE = "none"
    INFO = "info"
    VERBOSE = "verbose"


# Custom log level, between INFO and WARNING
STEP = 25

ROOT_LOGGER = "kubearch"

# Global flag for verbose mode (controls warning/error visibility)
_verbose_mode = False


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose_mode


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors and emojis to log messages."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[0m",      # Reset
        STEP: "\033[34m",             # Blue
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
        logging.CRITICAL: "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    EMOJIS = {
        logging.DEBUG: "🔍",
        logging.INFO: "ℹ️ ",
        STEP: "📋",
        logging.WARNING: "⚠️ ",
        logging.ERROR: "❌",
        logging.CRITICAL: "💥",
    }

    def format(self, record: logging.LogRecord) -> str:
        emoji = self.EMOJIS.get(record.levelno, "")
        color = self.COLORS.get(record.levelno, self.RESET)
        return f"{color}{emoji} {record.getMessage()}{self.RESET}"


class PlainFormatter(logging.Formatter):
    """Plain formatter without colors (for non-terminal output)."""

    PREFIXES = {
        logging.DEBUG: "[DEBUG]",
        logging.INFO: "[INFO]",
        STEP: "[STEP]",
        logging.WARNING: "[WARN]",
        logging.ERROR: "[ERROR]",
        logging.CRITICAL: "[CRITICAL]",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.PREFIXES.get(record.levelno, "[LOG]")
        return f"{prefix} {record.getMessage()}"


class VerboseOnlyFilter(logging.Filter):
    """Filter that only shows ERROR/WARNING in verbose mode."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.CRITICAL:
            return True

        if not _verbose_mode and record.levelno in (logging.ERROR, logging.WARNING):
            return False

        return True


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    use_colors: Optional[bool] = None,
    show_errors: bool = True,
) -> None:
    """
    Set up logging configuration.

    Args:
        level: Desired log level
        use_colors: Whether to use colored output (auto-detect if None)
        show_errors: Whether to show warnings and errors outside verbose mode
    """
    global _verbose_mode

    logging.addLevelName(STEP, "STEP")

    if level == LogLevel.NONE:
        log_level = logging.CRITICAL + 1  # Effectively disable logging
        _verbose_mode = False
    elif level == LogLevel.VERBOSE:
        log_level = logging.DEBUG
        _verbose_mode = True
    else:
        log_level = logging.INFO
        _verbose_mode = False

    if use_colors is None:
        use_colors = sys.stderr.isatty()

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if not show_errors:
        handler.addFilter(VerboseOnlyFilter())

    if use_colors:
        handler.setFormatter(ColoredFormatter())
    else:
        handler.setFormatter(PlainFormatter())

    root_logger.addHandler(handler)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get a logger instance.

    Module names are re-rooted under the ``kubearch`` logger so that
    ``setup_logging`` controls every module of the package.

    Args:
        name: Logger name (usually ``__name__``)

    Returns:
        Logger instance
    """
    if name.startswith("kubearch_py"):
        name = ROOT_LOGGER + name[len("kubearch_py"):]
    return logging.getLogger(name)


def log_step(self: logging.Logger, message: str, *args, **kwargs) -> None:
    """Log a step message."""
    if self.isEnabledFor(STEP):
        self._log(STEP, message, args, **kwargs)


def log_success(self: logging.Logger, message: str, *args, **kwargs) -> None:
    """Log a success message."""
    self.info(f"✅ {message}", *args, **kwargs)


# Monkey-patch Logger class to add custom methods
logging.Logger.step = log_step
logging.Logger.success = log_success
