"""Centralized logging configuration with PII redaction.

Occupant contact e-mails and phone numbers travel through the rent desk
(selection, notifications, CLI output). Everything logged through
``get_logger`` is masked before it reaches a handler.
"""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any

from backend.core.config import settings

EMAIL_PATTERN = re.compile(r"(\b[\w.+-]+@[\w-]+\.[\w.-]+\b)")
PHONE_PATTERN = re.compile(r"(\+\d[\d \-/]{6,}\d)")

_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "message", "taskName",
    }
)


def mask_email(email: str) -> str:
    """Mask email: show first char of user, keep domain."""
    if "@" not in email:
        return email
    user, domain = email.split("@", 1)
    if len(user) <= 1:
        masked_user = "*"
    else:
        masked_user = user[0] + "*" * (len(user) - 1)
    return f"{masked_user}@{domain}"


def mask_phone(phone: str) -> str:
    """Mask phone: show first 2 chars, mask the rest."""
    if len(phone) <= 2:
        return "*" * len(phone)
    return phone[:2] + "*" * (len(phone) - 2)


def redact(value: Any) -> Any:
    """Redact e-mails and phone numbers in strings and string sequences."""
    if isinstance(value, str):
        value = EMAIL_PATTERN.sub(lambda m: mask_email(m.group(1)), value)
        return PHONE_PATTERN.sub(lambda m: mask_phone(m.group(1)), value)
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item) for item in value)
    return value


class PIIRedactionFilter(logging.Filter):
    """Filter to redact PII from log messages, args and extra fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = redact(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {key: redact(arg) for key, arg in record.args.items()}
            else:
                record.args = tuple(redact(arg) for arg in record.args)

        for key, value in list(record.__dict__.items()):
            if key not in _RESERVED_ATTRS and isinstance(value, (str, list, tuple)):
                setattr(record, key, redact(value))

        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line with the extra fields of the record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            "ts_utc": datetime.now(UTC).isoformat(),
        }

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with PII redaction applied."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, PIIRedactionFilter) for f in logger.filters):
        logger.addFilter(PIIRedactionFilter())
    return logger


def init_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure the root logger once for CLI entry points."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    use_json = settings.LOG_JSON if json_output is None else json_output
    handler = logging.StreamHandler(sys.stderr)
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    handler.addFilter(PIIRedactionFilter())
    root.addHandler(handler)
