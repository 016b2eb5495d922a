"""Cron Validation — syntactic check of five-field cron expressions.

Invariants:
    - Exactly five whitespace-separated fields: minute hour day month weekday
    - Each field is "*" or built from digits and the characters * / , -
    - Numbers must fall inside the field's bounds
    - Pure function, raises CronValidationError, never returns a value
"""

import re

from app.core.errors import CronValidationError

INVALID_FORMAT = "invalid cron expression format"
INVALID_VALUE = "invalid cron expression value"

_FIELD_PATTERN = re.compile(r"^(\*|[0-9\-*/,]+)$")

# (name, min, max) per position
_FIELDS = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day", 1, 31),
    ("month", 1, 12),
    ("weekday", 0, 6),
)


def validate_cron(expression: str) -> None:
    """Raise CronValidationError unless `expression` is a valid cron schedule."""
    parts = expression.split()
    if len(parts) != len(_FIELDS):
        raise CronValidationError(INVALID_FORMAT)

    for part, (_, low, high) in zip(parts, _FIELDS):
        if not _FIELD_PATTERN.match(part):
            raise CronValidationError(INVALID_FORMAT)
        if part == "*":
            continue
        for item in part.split(","):
            _check_item(item, low, high)


def _check_item(item: str, low: int, high: int) -> None:
    base, _, step = item.partition("/")
    if "/" in step or (item.count("/") == 1 and not _is_positive(step)):
        raise CronValidationError(INVALID_VALUE)

    if base == "*":
        return
    if "-" in base:
        bounds = base.split("-")
        if len(bounds) != 2:
            raise CronValidationError(INVALID_VALUE)
        start, end = (_in_range(b, low, high) for b in bounds)
        if start > end:
            raise CronValidationError(INVALID_VALUE)
        return
    _in_range(base, low, high)


def _in_range(token: str, low: int, high: int) -> int:
    if not token.isdigit():
        raise CronValidationError(INVALID_VALUE)
    value = int(token)
    if not low <= value <= high:
        raise CronValidationError(INVALID_VALUE)
    return value


def _is_positive(token: str) -> bool:
    return token.isdigit() and int(token) > 0
