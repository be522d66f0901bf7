"""Open/closed classification of tickets."""
from collections.abc import Iterable, Mapping

from .fields import display_value


CLOSED_VOCABULARY = frozenset({
    "closed", "resolved", "complete", "completed", "fixed", "done",
    "cancelled", "canceled", "rejected", "solved", "finished",
})


def is_closed(ticket: Mapping) -> bool:
    """Decide whether a ticket is in a terminal state.

    A ticket is closed when its status, state or close code contains any word
    of CLOSED_VOCABULARY, or when it carries any close code at all.
    """
    close_code = display_value(ticket.get("close_code")).lower()
    if close_code:
        # NOTE: any close code counts, even values such as "still open"
        return True

    for field in ("status", "state"):
        text = display_value(ticket.get(field)).lower()
        if text and any(word in text for word in CLOSED_VOCABULARY):
            return True
    return False


def partition(tickets: Iterable[Mapping]) -> tuple[list[Mapping], list[Mapping]]:
    """Split tickets into (closed, open), preserving order."""
    closed, open_ = [], []
    for ticket in tickets:
        (closed if is_closed(ticket) else open_).append(ticket)
    return closed, open_
