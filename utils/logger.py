"""
Logging utilities with automatic API key masking for security.
Supports context-aware logging for orchestration vs standalone execution.
"""

import logging
import re
import os
import sys
from typing import Dict, Optional
from enum import Enum
from config.settings import settings


class LoggingContext(Enum):
    """Logging context modes for different execution scenarios."""
    STANDALONE = "standalone"      # Module run independently (full logging)
    ORCHESTRATED = "orchestrated"  # Called from a run_*.py CLI (quiet sub-modules)
    SILENT = "silent"              # Batch advice (minimal output)
    PIPELINE_QUIET = "pipeline_quiet" # --json output (keep stdout clean)


# Global logging mode (default: check env var, else standalone)
_env_mode = os.getenv('LOG_MODE', 'standalone').lower()
try:
    _CURRENT_MODE = LoggingContext(_env_mode)
except ValueError:
    _CURRENT_MODE = LoggingContext.STANDALONE

# Console loggers that should always show INFO level (orchestration scripts)
CONSOLE_LOGGERS = {
    'run_analysis', 'run_chart_data', 'run_holdings_advice'
}


# name -> requested level, for set_logging_mode
_MANAGED_LOGGERS: Dict[str, int] = {}


def set_logging_mode(mode: LoggingContext):
    """
    Set the global logging mode and re-level loggers created so far.

    Module loggers are built at import time, before a CLI has parsed its
    arguments, so switching mode has to revisit them.

    Args:
        mode: LoggingContext enum value
    """
    global _CURRENT_MODE
    _CURRENT_MODE = mode
    for name in list(_MANAGED_LOGGERS):
        level = _resolve_level(name, _MANAGED_LOGGERS[name])
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def get_logging_mode() -> LoggingContext:
    """Get the current logging mode."""
    return _CURRENT_MODE


class SecureFormatter(logging.Formatter):
    """Custom formatter that masks API keys and bearer tokens in log messages."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Long alphanumeric runs (Finnhub keys, hf_ tokens)
        self.api_key_pattern = re.compile(r'\b(?:hf_)?[A-Za-z0-9]{20,}\b')
        self.query_token_pattern = re.compile(r'(token=)([^&\s]+)')

    def format(self, record):
        message = super().format(record)

        def mask_match(match):
            return settings.mask_api_key(match.group(0))

        message = self.query_token_pattern.sub(
            lambda m: m.group(1) + settings.mask_api_key(m.group(2)), message
        )
        return self.api_key_pattern.sub(mask_match, message)


def _resolve_level(name: str, requested: int) -> int:
    current_mode = get_logging_mode()
    if current_mode == LoggingContext.ORCHESTRATED:
        # Only the CLI loggers keep INFO, sub-modules report errors only
        if name not in CONSOLE_LOGGERS:
            return logging.ERROR
    elif current_mode == LoggingContext.SILENT:
        return logging.CRITICAL
    elif current_mode == LoggingContext.PIPELINE_QUIET:
        return logging.ERROR
    return requested


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Setup a logger with secure formatting and context-aware levels.

    Args:
        name: Logger name
        level: Logging level (default: INFO, may be overridden by mode)
        log_file: Optional file path for file logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    _MANAGED_LOGGERS[name] = level

    effective_level = _resolve_level(name, level)
    logger.setLevel(effective_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    # stderr, so --json output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(effective_level)

    formatter = SecureFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(effective_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Default logger for the application
default_logger = setup_logger('portfolio_advisor', level=logging.INFO)
