"""
Logging Configuration
Provides structured logging with security features
"""
import logging
import logging.handlers
import json
import re
from pathlib import Path
from typing import Dict, List, Optional
from datetime import datetime


class SensitiveDataFilter(logging.Filter):
    """
    Filter to redact sensitive data from logs
    Prevents session IDs, cookie payloads, secrets and passwords from leaking
    """

    # JSON fields whose value is replaced with "[REDACTED]"
    SENSITIVE_FIELDS = (
        'password',
        'secret',
        'secret_key',
        'token',
        'session_id',
        'id',
    )

    SENSITIVE_PATTERNS = {
        **{
            field: r'("' + field + r'"\s*:\s*)"[^"]*"'
            for field in SENSITIVE_FIELDS
        },

        # Session id passed as query parameter (var_session_id override)
        'query_session_id': r'((?:session_id|PHPSESSID|sid)=)[^&\s]+',

        # Cookie headers
        'cookie_header': r'((?:Set-)?Cookie:\s*[^=;\s]+=)[^;\s]+',
    }

    def __init__(self, additional_patterns: Optional[Dict[str, str]] = None):
        """
        Initialize sensitive data filter

        Args:
            additional_patterns: Additional regex patterns to filter (name: pattern)
        """
        super().__init__()
        self.patterns = self.SENSITIVE_PATTERNS.copy()
        if additional_patterns:
            self.patterns.update(additional_patterns)

        self.compiled_patterns = {
            name: re.compile(pattern, re.IGNORECASE)
            for name, pattern in self.patterns.items()
        }

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter log record to redact sensitive data

        Returns:
            True (always pass the record, but with redacted content)
        """
        if record.args:
            # Merge args first so patterns spanning a placeholder still match
            try:
                message = record.getMessage()
            except (TypeError, ValueError):
                message = str(record.msg)
            record.msg = self._redact_sensitive_data(message)
            record.args = ()
        elif isinstance(record.msg, str):
            record.msg = self._redact_sensitive_data(record.msg)

        return True

    def _redact_sensitive_data(self, text: str) -> str:
        """Redact sensitive data from text"""
        redacted = text

        for name, pattern in self.compiled_patterns.items():
            if name in self.SENSITIVE_FIELDS:
                redacted = pattern.sub(r'\1"[REDACTED]"', redacted)
            else:
                redacted = pattern.sub(r'\1[REDACTED]', redacted)

        return redacted


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging

    Outputs logs in JSON format for easy parsing and analysis
    """

    RESERVED_ATTRS = frozenset([
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
        'getMessage', 'message', 'taskName',
    ])

    def __init__(self, include_fields: Optional[List[str]] = None):
        """
        Initialize JSON formatter

        Args:
            include_fields: Additional fields to include in JSON output
        """
        super().__init__()
        self.include_fields = include_fields or []

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data['stack'] = record.stack_info

        for field in self.include_fields:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        # Extra fields passed via logger.x(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class LoggerConfig:
    """
    Centralized logging configuration
    """
    @staticmethod
    def setup_logger(
        name: str,
        format_type: str = 'json',
        max_bytes: int = None,
        backup_count: int = None,
        filter_sensitive: bool = True,
        additional_sensitive_patterns: Optional[Dict[str, str]] = None,
        file_name: Optional[str] = None
    ) -> logging.Logger:
        """
        Setup a logger with rotation and optional sensitive data filtering

        Args:
            name: Logger name
            format_type: Format type ('json' or 'text')
            max_bytes: Max bytes before rotation (default: 10MB)
            backup_count: Number of backup files to keep
            filter_sensitive: Enable sensitive data filtering
            additional_sensitive_patterns: Additional patterns to filter
            file_name: Log file name without extension (default: logger name)

        Returns:
            Configured logger

        Example:
            logger = LoggerConfig.setup_logger('session', format_type='text')
        """
        from larasession.defaults import (
            DEFAULT_LOG_MAX_BYTES,
            DEFAULT_LOG_BACKUP_COUNT,
            DEFAULT_LOG_DIRECTORY,
        )
        from larasession.support import Config

        if max_bytes is None:
            max_bytes = DEFAULT_LOG_MAX_BYTES
        if backup_count is None:
            backup_count = DEFAULT_LOG_BACKUP_COUNT

        app_env = Config.get('app.APP_ENV', 'local')
        app_debug = Config.get('app.APP_DEBUG', False)

        logger = logging.getLogger(name)
        logger.setLevel(LoggerConfig.get_level_by_environment(app_env))

        # Clear existing handlers
        logger.handlers.clear()

        log_directory = Path(Config.get('app.LOG_PATH', DEFAULT_LOG_DIRECTORY))
        log_directory.mkdir(parents=True, exist_ok=True)
        log_file = log_directory / f"{file_name or name}.log"

        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )

        if format_type == 'json':
            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        handler.setFormatter(formatter)

        sensitive_filter = None
        if filter_sensitive:
            sensitive_filter = SensitiveDataFilter(additional_sensitive_patterns)
            handler.addFilter(sensitive_filter)

        logger.addHandler(handler)

        if app_debug:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            if sensitive_filter:
                console_handler.addFilter(sensitive_filter)
            logger.addHandler(console_handler)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

        return logger

    @staticmethod
    def get_level_by_environment(environment: str) -> int:
        """
        Get logging level based on environment

        Args:
            environment: Environment name ('production', 'development', 'testing')

        Returns:
            Logging level
        """
        levels = {
            'production': logging.WARNING,
            'staging': logging.INFO,
            'development': logging.DEBUG,
            'testing': logging.ERROR,
        }
        return levels.get(environment.lower(), logging.INFO)
