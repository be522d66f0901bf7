"""Export file loading (JSON and CSV)."""
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from .conversations import normalize_conversations
from .extractor import describe_structure, extract_records
from .fields import ticket_id
from .models import Conversation, FileOutcome

logger = logging.getLogger(__name__)


class DocumentParseError(ValueError):
    """The file exists but is not well-formed JSON or CSV."""


@dataclass
class LoadResult:
    """Records gathered from a batch of files, plus one outcome per file."""
    tickets: list[dict] = field(default_factory=list)
    conversations: list[Conversation] = field(default_factory=list)
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def errors(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == "error"]


def _decode_cell(value: Any) -> Any:
    """Expand JSON objects/arrays stored inside CSV cells."""
    if isinstance(value, str) and value.strip()[:1] in ("{", "["):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _read_csv(path: Path) -> list[dict]:
    # Cells stay text so ids and priorities such as "1001" or "1" keep their form
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    rows = []
    for row in df.to_dict(orient="records"):
        rows.append({
            str(key): _decode_cell(value)
            for key, value in row.items()
            if value.strip() != ""
        })
    return rows


def load_document(path: Path) -> Any:
    """Parse one export file into a raw document."""
    try:
        if path.suffix.lower() == ".csv":
            return _read_csv(path)
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError,
            pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DocumentParseError(f"Invalid format in {path.name}: {e}") from e


def dedupe_tickets(tickets: Iterable[Mapping]) -> list[Mapping]:
    """Drop later tickets whose identifier was already seen.

    Tickets without an identifier are always kept.
    """
    seen = set()
    unique = []
    for ticket in tickets:
        identifier = ticket_id(ticket)
        if identifier is not None:
            if identifier in seen:
                continue
            seen.add(identifier)
        unique.append(ticket)
    return unique


def load_documents(paths: Iterable[Path]) -> LoadResult:
    """Load every file, concatenating records in file order.

    A file that cannot be read or parsed is reported in its outcome and does
    not stop the rest of the batch.
    """
    result = LoadResult()

    for path in paths:
        path = Path(path)
        try:
            document = load_document(path)
        except (DocumentParseError, OSError) as e:
            logger.warning("Failed to load %s: %s", path, e)
            result.outcomes.append(FileOutcome(path=str(path), status="error", message=str(e)))
            continue

        records = extract_records(document)
        tickets = [record for record in records.tickets if isinstance(record, Mapping)]
        if len(tickets) < len(records.tickets):
            logger.debug(
                "Dropped %d non-object ticket records from %s",
                len(records.tickets) - len(tickets), path,
            )
        conversations = normalize_conversations(records.conversations)

        if not tickets and not conversations:
            result.outcomes.append(FileOutcome(
                path=str(path),
                status="no_data",
                structure=describe_structure(document),
                message="Could not find ticket or conversation data in this file.",
            ))
            continue

        result.tickets.extend(tickets)
        result.conversations.extend(conversations)
        result.outcomes.append(FileOutcome(
            path=str(path),
            status="ok",
            structure=describe_structure(document),
            ticket_count=len(tickets),
            conversation_count=len(conversations),
        ))
        logger.info(
            "Loaded %d tickets and %d conversations from %s",
            len(tickets), len(conversations), path,
        )

    return result
