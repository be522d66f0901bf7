"""Normalization and rule-based summaries for support conversations."""
import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from .fields import display_value, number, resolve
from .models import Conversation, ConversationMessage, ConversationStats

logger = logging.getLogger(__name__)


CONVERSATION_ID_ALIASES = ("id", "conversation_id", "sys_id", "number")
MESSAGE_TEXT_ALIASES = ("content", "text", "message", "body")
MESSAGE_SENDER_ALIASES = ("sender", "role", "from", "author")
MESSAGE_TIME_ALIASES = ("timestamp", "time", "created_at", "sent_at")

TOPIC_RULES = [
    (("password", "login", "access"), "Account Access"),
    (("payment", "charge", "invoice"), "Billing Inquiry"),
    (("slow", "crash", "error"), "Technical Issue"),
    (("how to", "where", "what is"), "Product Information"),
]
RESOLVED_WORDS = ("resolve", "fixed", "solution")


def _text(value: Any) -> str | None:
    return display_value(value) or None


def normalize_message(raw: Any) -> ConversationMessage:
    if not isinstance(raw, Mapping):
        return ConversationMessage(content=display_value(raw))
    return ConversationMessage(
        sender=display_value(resolve(raw, MESSAGE_SENDER_ALIASES)).lower() or "user",
        timestamp=_text(resolve(raw, MESSAGE_TIME_ALIASES)),
        content=display_value(resolve(raw, MESSAGE_TEXT_ALIASES)),
    )


def normalize_conversation(raw: Mapping, index: int = 0) -> Conversation:
    """Build a Conversation from an exported record.

    Messages keep their exported order.
    """
    identifier = _text(resolve(raw, CONVERSATION_ID_ALIASES)) or f"conversation_{index}"
    messages = raw.get("messages")
    if not isinstance(messages, (list, tuple)):
        messages = []

    resolved = raw.get("resolved")
    return Conversation(
        id=identifier,
        messages=[normalize_message(message) for message in messages],
        topic=_text(raw.get("topic")),
        channel=_text(raw.get("channel")),
        resolved=resolved if isinstance(resolved, bool) else None,
        start_time=_text(raw.get("start_time")),
        end_time=_text(raw.get("end_time")),
        satisfaction_score=number(raw.get("satisfaction_score")),
    )


def normalize_conversations(records: Sequence[Any]) -> list[Conversation]:
    conversations = []
    for index, raw in enumerate(records):
        if not isinstance(raw, Mapping):
            logger.debug("Skipping non-object conversation record at %d", index)
            continue
        conversations.append(normalize_conversation(raw, index))
    return conversations


def detect_topic(conversation: Conversation) -> str:
    """Explicit topic if present, otherwise a keyword guess."""
    if conversation.topic:
        return conversation.topic
    text = " ".join(message.content for message in conversation.messages).lower()
    for keywords, topic in TOPIC_RULES:
        if any(keyword in text for keyword in keywords):
            return topic
    return "General Inquiry"


def resolution_status(conversation: Conversation) -> str:
    messages = conversation.messages
    if messages:
        last = messages[-1]
        if last.sender == "agent" and any(word in last.content.lower() for word in RESOLVED_WORDS):
            return "Resolved"
    if len(messages) > 4:
        return "In Progress (Complex Issue)"
    return "Pending Resolution"


def is_resolved(conversation: Conversation) -> bool:
    if conversation.resolved is not None:
        return conversation.resolved
    return resolution_status(conversation) == "Resolved"


def summarize_conversations(conversations: Sequence[Conversation]) -> ConversationStats:
    if not conversations:
        return ConversationStats()

    return ConversationStats(
        total_conversations=len(conversations),
        resolved_conversations=sum(1 for c in conversations if is_resolved(c)),
        average_messages=sum(len(c.messages) for c in conversations) / len(conversations),
        channel_distribution=dict(Counter(c.channel or "Unspecified" for c in conversations)),
        topic_distribution=dict(Counter(detect_topic(c) for c in conversations)),
    )
