"""
Logging Package
Structured logging with security features

Provides drop-in replacement for standard logging that uses
structured JSON logging with sensitive data filtering.
"""
from larasession.logging.logger_config import (
    LoggerConfig,
    JSONFormatter,
    SensitiveDataFilter
)
import logging
from typing import Optional

__all__ = [
    'LoggerConfig',
    'JSONFormatter',
    'SensitiveDataFilter',
    'getLogger',
    'INFO',
    'DEBUG',
    'WARNING',
    'ERROR',
    'CRITICAL',
]

# Export logging levels for convenience
INFO = logging.INFO
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL


def getLogger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance (drop-in replacement for logging.getLogger)

    Only allows logger names that are:
    - None (root logger)
    - Configured in app.ALLOWED_LOGGING_HANDLERS (e.g., 'session', 'security')
    - Module-based names (containing '.') like 'larasession.session.session'

    Args:
        name: Logger name

    Returns:
        Logger instance with structured logging if configured

    Example:
        from larasession.logging import getLogger
        logger = getLogger(__name__)

        logger.debug("Session started", extra={'driver': 'file'})
    """
    # Allow Sanic's own loggers to bypass our restriction
    if name and name.startswith('sanic.'):
        return logging.getLogger(name)

    if name is not None and '.' not in name:
        from larasession.support import Config
        allowed_handlers = Config.get('app.ALLOWED_LOGGING_HANDLERS', {})

        allowed_names = [
            handler_config.get('name')
            for handler_config in allowed_handlers.values()
            if handler_config.get('name') is not None
        ]

        if name not in allowed_names:
            # Force arbitrary names to use root logger
            name = None

    return logging.getLogger(name)
