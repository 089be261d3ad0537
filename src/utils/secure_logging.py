"""
Structured logging with trace correlation and redaction.

Provides:
- JSON log formatting (python-json-logger)
- Trace ID injection from the request context
- Redaction of credential-like fields and values
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Pattern, Set, Tuple

from pythonjsonlogger import jsonlogger

from src.utils.tracing import get_trace_id

SECRET_PATTERNS: List[Tuple[str, Pattern]] = [
    ("api_key", re.compile(r'(?i)(api[_-]?key|apikey|x-api-key)["\s:=]+([a-zA-Z0-9_\-]{16,})')),
    ("bearer_token", re.compile(r'(?i)(bearer)\s+([a-zA-Z0-9_\-\.]{20,})')),
    ("password", re.compile(r'(?i)(password|passwd|pwd)["\s:=]+([^\s"\']{4,})')),
]

SENSITIVE_FIELDS: Set[str] = {
    "password",
    "passwd",
    "pwd",
    "secret",
    "api_key",
    "apikey",
    "x_api_key",
    "authorization",
    "token",
    "bearer",
    "credential",
    "credentials",
    "private_key",
}

# Stakeholder contact details appear in decision payloads
MASKABLE_FIELDS: Set[str] = {
    "email",
    "phone",
    "client_ip",
}

UNREDACTED_FIELDS = frozenset({"timestamp", "level", "logger", "trace_id"})


def redact_string(text: str) -> str:
    """Replace embedded secrets in a string."""
    result = text
    for _, pattern in SECRET_PATTERNS:
        result = pattern.sub(lambda m: f"{m.group(1)}=[REDACTED]", result)
    return result


def redact_value(value: Any, field_name: str = "") -> Any:
    """
    Redact sensitive values based on field name or content.

    Args:
        value: Value to potentially redact
        field_name: Name of the field (used for field-based redaction)

    Returns:
        Redacted value or original if not sensitive
    """
    if value is None:
        return None

    field_lower = field_name.lower().replace("-", "_")

    if field_lower in SENSITIVE_FIELDS:
        return "[REDACTED]"

    if field_lower in MASKABLE_FIELDS:
        str_value = str(value)
        if len(str_value) > 6:
            return f"{str_value[:3]}***{str_value[-3:]}"
        return "[MASKED]"

    if isinstance(value, str):
        return redact_string(value)

    if isinstance(value, dict):
        return {k: redact_value(v, str(k)) for k, v in value.items()}

    if isinstance(value, list):
        return [redact_value(item) for item in value]

    return value


def sanitize_error_for_logging(error: Exception) -> Dict[str, str]:
    """
    Summarize an exception for logging.

    Example:
        >>> sanitize_error_for_logging(ValueError("bad option"))
        {'error_type': 'ValueError', 'error_message': 'bad option'}
    """
    return {
        "error_type": type(error).__name__,
        "error_message": redact_string(str(error))[:200],
    }


class CorrelationIDFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that injects the current trace ID and redacts secrets.
    """

    def __init__(self, *args, redact: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.redact = redact

    def add_fields(self, log_record: Dict, record: logging.LogRecord, message_dict: Dict) -> None:
        super().add_fields(log_record, record, message_dict)

        trace_id = get_trace_id()
        if trace_id:
            log_record["trace_id"] = trace_id

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

        if self.redact:
            for key, value in list(log_record.items()):
                if key not in UNREDACTED_FIELDS:
                    log_record[key] = redact_value(value, key)
