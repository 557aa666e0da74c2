"""
Logging utilities with security features.

This module provides logging setup with:
- Configurable log levels and output destinations
- Log rotation for file handlers
- Masking of registry credentials and session tokens
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


MASK = "********"

_SENSITIVE_PATTERNS = [
    # password=..., "password": "...", pass: ..., pwd=...
    (re.compile(r'(password|pass|pwd)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE),
     r'\1: ' + MASK),
    # Session cookies and CSRF/auth tokens sent to the registry
    (re.compile(r'(token|csrf|sessionid|phpsessid)["\']?\s*[:=]\s*["\']?([^"\'\s&;]+)', re.IGNORECASE),
     r'\1: ' + MASK),
    (re.compile(r'(Authorization:\s*\w+)\s+\S+', re.IGNORECASE),
     r'\1 ' + MASK),
]


def mask_sensitive(text: str) -> str:
    """
    Mask credentials and tokens in a string.

    Examples:
        >>> mask_sensitive("login user=ana password=hunter22")
        'login user=ana password: ********'
        >>> mask_sensitive("cookie PHPSESSID=abc123; path=/")
        'cookie PHPSESSID: ********; path=/'
    """
    for pattern, replacement in _SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that automatically masks sensitive information.

    Scans the fully formatted message, so values passed as %-style
    arguments are masked as well.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter and mask sensitive data in log record.

        Args:
            record: Log record to filter

        Returns:
            Always True (allows all records through after masking)
        """
        record.msg = mask_sensitive(record.getMessage())
        record.args = None
        return True


def setup_logger(
    name: str = "registry_sync",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger instance.

    Module loggers (logging.getLogger(__name__)) inside the registry_sync
    package propagate to the logger configured here.

    Args:
        name: Logger name (default: "registry_sync")
        level: Logging level, as a number or a name like "DEBUG"
        log_file: Optional path to log file for file output

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logger()
        >>> logger.info("Synchronization started")

        >>> logger = setup_logger(
        ...     level="DEBUG",
        ...     log_file="output/logs/sync.log"
        ... )
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    return logger
