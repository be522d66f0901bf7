"""Locate ticket and conversation collections inside arbitrary export documents.

Exports arrive in many shapes: a bare array, a ServiceNow ``{"result": [...]}``
envelope, ``{"result": {"tickets": [...]}}``, ``{"records": [...]}``, a single
ticket object, or records buried a few levels down in some wrapper. Tickets
and conversations are searched for independently, so one document can yield
both.

The search is a depth-first walk over an explicit stack. Nodes are visited at
most once and never deeper than ``max_depth``, so self-referencing or
pathologically nested input still terminates.
"""
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple

from .config import settings
from .fields import is_present

logger = logging.getLogger(__name__)


TICKET_MARKERS = ("ticket_id", "number", "short_description", "status")
TICKET_ID_FIELDS = ("ticket_id", "number", "sys_id")


class Extraction(NamedTuple):
    """Records found in one document."""
    tickets: list
    conversations: list


def _is_records(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def looks_like_ticket(record: Any) -> bool:
    """Shape test for ticket records: any marker key, even with a blank value."""
    if not isinstance(record, Mapping):
        return False
    return any(key in record for key in TICKET_MARKERS)


def looks_like_conversation(record: Any) -> bool:
    """Shape test for conversation records."""
    if not isinstance(record, Mapping):
        return False
    if isinstance(record.get("messages"), (list, tuple)):
        return True
    return (
        is_present(record.get("channel"))
        and isinstance(record.get("resolved"), bool)
        and is_present(record.get("id"))
    )


def _ticket_container(node: Mapping) -> list | None:
    result = node.get("result")
    if isinstance(result, Mapping) and _is_records(result.get("tickets")):
        return list(result["tickets"])
    if _is_records(result):
        return list(result)

    for key in ("records", "data", "items", "tickets"):
        value = node.get(key)
        if not _is_records(value):
            continue
        if key == "data" and looks_like_conversation(value[0]):
            continue
        return list(value)
    return None


def _conversation_container(node: Mapping) -> list | None:
    conversations = node.get("conversations")
    if _is_records(conversations):
        return list(conversations)

    data = node.get("data")
    if _is_records(data) and looks_like_conversation(data[0]):
        return list(data)
    return None


def _is_single_ticket(node: Mapping) -> bool:
    return any(is_present(node.get(key)) for key in TICKET_ID_FIELDS)


@dataclass(frozen=True)
class _RecordKind:
    name: str
    matches: Callable[[Any], bool]
    container: Callable[[Mapping], list | None]
    is_single: Callable[[Mapping], bool]


TICKETS = _RecordKind("ticket", looks_like_ticket, _ticket_container, _is_single_ticket)
CONVERSATIONS = _RecordKind(
    "conversation", looks_like_conversation, _conversation_container, looks_like_conversation
)


def _search(document: Any, kind: _RecordKind, max_depth: int) -> list:
    stack = [(document, 0)]
    visited: set[int] = set()

    while stack:
        node, depth = stack.pop()
        if id(node) in visited:
            continue
        visited.add(id(node))

        if isinstance(node, (list, tuple)):
            if not node:
                continue
            if kind.matches(node[0]):
                logger.debug("Found %d %s records in array", len(node), kind.name)
                return list(node)
            children = [item for item in node if isinstance(item, Mapping)]

        elif isinstance(node, Mapping):
            found = kind.container(node)
            if found:
                logger.debug("Found %d %s records in container", len(found), kind.name)
                return found

            if kind.is_single(node):
                logger.debug("Found single %s record", kind.name)
                return [node]

            for key, value in node.items():
                if _is_records(value) and kind.matches(value[0]):
                    logger.debug("Found likely %s array in %r", kind.name, key)
                    return list(value)
            children = [value for value in node.values() if isinstance(value, Mapping)]

        else:
            continue

        if depth >= max_depth:
            if children:
                logger.debug("Search depth limit %d reached, not descending", max_depth)
            continue
        # Reversed so the first key is searched first
        for child in reversed(children):
            stack.append((child, depth + 1))

    return []


def extract_tickets(document: Any, max_depth: int | None = None) -> list:
    """Best-guess list of ticket records in the document ([] if none)."""
    depth = settings.max_search_depth if max_depth is None else max_depth
    tickets = _search(document, TICKETS, depth)
    if not tickets:
        logger.debug("No ticket data found in document")
    return tickets


def extract_conversations(document: Any, max_depth: int | None = None) -> list:
    """Best-guess list of conversation records in the document ([] if none)."""
    depth = settings.max_search_depth if max_depth is None else max_depth
    return _search(document, CONVERSATIONS, depth)


def extract_records(document: Any, max_depth: int | None = None) -> Extraction:
    """Run both independent searches over one document."""
    return Extraction(
        tickets=extract_tickets(document, max_depth),
        conversations=extract_conversations(document, max_depth),
    )


def describe_structure(document: Any) -> str:
    """Human-readable name of the export layout, for previews."""
    if isinstance(document, (list, tuple)):
        return "Direct Array"
    if not isinstance(document, Mapping):
        return "Custom Format"

    result = document.get("result")
    if isinstance(result, Mapping) and result.get("tickets"):
        return 'Nested "result.tickets" Array'
    if isinstance(result, (list, tuple)):
        return "ServiceNow API Result Array"
    if document.get("records"):
        return "Records Array"
    if document.get("tickets"):
        return "Tickets Array"
    if document.get("conversations"):
        return "Conversations Array"
    return "Custom Format"
