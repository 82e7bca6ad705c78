"""
Structured logging configuration using structlog.

Provides consistent, structured logging across all modules, with a
privacy redactor for values that can leak into scan logs (Apex source
snippets carry org ids, session ids and e-mail addresses).
"""

import logging
import re
import sys
from typing import Any

import structlog

from apexscan.shared.infrastructure.config import settings

_REDACTION_PATTERNS = [
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[EMAIL_REDACTED]"),
    (re.compile(r"Bearer\s+\S+", re.IGNORECASE), "Bearer [TOKEN_REDACTED]"),
    (
        re.compile(r"(session[_-]?id|sid|access[_-]?token|password|secret)['\"]?\s*[:=]\s*['\"]?([^'\"\s]+)", re.IGNORECASE),
        r"\1=[REDACTED]",
    ),
    # Salesforce session ids: "<15/18 char org id>!<token>"
    (re.compile(r"\b00D[A-Za-z0-9]{12}(?:[A-Za-z0-9]{3})?![A-Za-z0-9._]+"), "[SESSION_REDACTED]"),
    (re.compile(r"\b00D[A-Za-z0-9]{12}(?:[A-Za-z0-9]{3})?\b"), "[ORG_ID_REDACTED]"),
    # Record ids: standard (0..) or custom (a..) key prefix, then a pod digit
    (re.compile(r"\b[0a][A-Za-z0-9]{2}[0-9][A-Za-z0-9]{11}(?:[A-Za-z0-9]{3})?\b"), "[RECORD_ID_REDACTED]"),
]


def _redact_string(text: str) -> str:
    for pattern, replacement in _REDACTION_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return _redact_string(value)
    if isinstance(value, dict):
        return {k: _redact_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact_value(item) for item in value]
    return value


def privacy_redactor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Redact sensitive information from log events.

    Redacts:
    - Email addresses
    - Bearer tokens, session ids, passwords and secrets
    - Salesforce session ids, org ids and 15/18-char record ids

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Redacted event dictionary
    """
    if not getattr(settings, "log_redaction_enabled", True):
        return event_dict

    return {k: _redact_value(v) for k, v in event_dict.items()}


def configure_logging(stream: Any = sys.stderr) -> None:
    """
    Configure structlog for the application.

    Sets up:
    - JSON output for production
    - Pretty console output for development
    - Log level from settings
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        privacy_redactor,
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, settings.log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("scan_completed", class_name="AccountService", total_issues=3)
    """
    return structlog.get_logger(name)
