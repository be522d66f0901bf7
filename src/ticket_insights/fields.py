"""Alias tables for ticket fields that vary between export formats.

Every lookup of a logical field that can live under more than one key goes
through the tables below, in priority order.
"""
import logging
import numbers
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)


ID_ALIASES = ("number", "sys_id", "ticket_id", "id")
CREATED_ALIASES = ("created_at", "created", "opened_at", "sys_created_on")
CLOSED_ALIASES = ("closed_at", "resolved_at")
ASSIGNEE_ALIASES = ("assigned_to", "assignee", "assigned_to_name")

SATISFACTION_PATHS = (("satisfaction", "score"), ("satisfaction_score",))
RESPONSE_TIME_PATHS = (
    ("time_metrics", "response_time_minutes"),
    ("response_time_minutes",),
)

# Keys ServiceNow uses inside reference objects such as {"display_value": "Jane Doe"}
_REFERENCE_KEYS = ("display_value", "name", "value")

# pandas reads words such as "now" or "today" as dates; real timestamps have digits
_HAS_DIGIT = re.compile(r"\d")


def is_present(value: Any) -> bool:
    """True for anything except None, blank strings and NaN."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, float) and value != value:
        return False
    return True


def resolve(record: Mapping, aliases: tuple[str, ...]) -> Any:
    """Return the value of the first alias present on the record."""
    for alias in aliases:
        value = record.get(alias)
        if is_present(value):
            return value
    return None


def resolve_path(record: Mapping, paths: tuple[tuple[str, ...], ...]) -> Any:
    """Like resolve(), but each alias is a path into nested mappings."""
    for path in paths:
        node: Any = record
        for key in path:
            if not isinstance(node, Mapping):
                node = None
                break
            node = node.get(key)
        if is_present(node):
            return node
    return None


def display_value(value: Any) -> str:
    """Flatten a field value to display text ("" when absent)."""
    if isinstance(value, Mapping):
        for key in _REFERENCE_KEYS:
            if is_present(value.get(key)):
                return str(value[key]).strip()
        return ""
    if not is_present(value):
        return ""
    return str(value).strip()


def label(value: Any, default: str = "Unspecified") -> str:
    """Distribution label for a field value."""
    return display_value(value) or default


def ticket_id(ticket: Mapping) -> str | None:
    value = resolve(ticket, ID_ALIASES)
    return display_value(value) or None


def number(value: Any) -> float | None:
    """Numeric value of a metric field, ignoring booleans and text."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    if value != value:
        return None
    return float(value)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp field into an aware datetime (UTC when naive)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            if not _HAS_DIGIT.search(text):
                logger.debug("Unparsable timestamp %r", value)
                return None
            stamp = pd.to_datetime(text, utc=True, errors="coerce")
            if pd.isna(stamp):
                logger.debug("Unparsable timestamp %r", value)
                return None
            parsed = stamp.to_pydatetime()
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def created_at(ticket: Mapping) -> datetime | None:
    return parse_timestamp(resolve(ticket, CREATED_ALIASES))


def closed_at(ticket: Mapping) -> datetime | None:
    return parse_timestamp(resolve(ticket, CLOSED_ALIASES))


def resolution_hours(ticket: Mapping) -> float | None:
    """Hours from creation to closure, or None when not measurable."""
    created = created_at(ticket)
    closed = closed_at(ticket)
    if created is None or closed is None:
        return None

    hours = (closed - created).total_seconds() / 3600
    if hours <= 0:
        logger.debug(
            "Discarding non-positive resolution time for ticket %s",
            ticket_id(ticket) or "<unknown>",
        )
        return None
    return hours
