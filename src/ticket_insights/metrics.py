"""Aggregate statistics over a ticket collection."""
import logging
import re
from collections import Counter, defaultdict
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from .classifier import is_closed, partition
from .fields import (
    ASSIGNEE_ALIASES,
    RESPONSE_TIME_PATHS,
    SATISFACTION_PATHS,
    created_at,
    display_value,
    label,
    number,
    resolution_hours,
    resolve,
    resolve_path,
)
from .models import AssigneeCount, Metrics, MonthlyTrend

logger = logging.getLogger(__name__)


TOP_ASSIGNEES = 5
TOP_COMMON_ISSUES = 5
PLACEHOLDER_MONTHS = 6
MAX_SATISFACTION = 5
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_NEGATIONS = re.compile(r"\b(not|can't|cannot|won't|doesn't|isn't)\b")
_PROBLEM_WORDS = re.compile(r"\b(error|issue|problem)\b")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values."""
    return int(value + 0.5)


def format_duration(hours: float | None) -> str:
    """Render hours as whole hours below a day, whole days otherwise."""
    if hours is None:
        return "N/A"
    if hours < 24:
        return f"{round_half_up(hours)} hours"
    return f"{round_half_up(hours / 24)} days"


def average_resolution_hours(tickets: Sequence[Mapping]) -> float | None:
    """Mean creation-to-closure time of the closed tickets, in hours."""
    durations = [
        hours for hours in (resolution_hours(t) for t in tickets if is_closed(t))
        if hours is not None
    ]
    if not durations:
        return None
    return sum(durations) / len(durations)


def average_resolution_time(tickets: Sequence[Mapping]) -> str:
    return format_duration(average_resolution_hours(tickets))


def count_by_field(tickets: Sequence[Mapping], field: str) -> dict[str, int]:
    """Count tickets per value of one field."""
    return dict(Counter(label(ticket.get(field)) for ticket in tickets))


def count_nested(tickets: Sequence[Mapping], outer: str, inner: str) -> dict[str, dict[str, int]]:
    """Count tickets per (outer, inner) value pair, e.g. category → subcategory."""
    counts: defaultdict[str, Counter] = defaultdict(Counter)
    for ticket in tickets:
        counts[label(ticket.get(outer))][label(ticket.get(inner))] += 1
    return {key: dict(value) for key, value in counts.items()}


def _sub(ticket: Mapping, key: str) -> Mapping:
    value = ticket.get(key)
    return value if isinstance(value, Mapping) else {}


def category_details(tickets: Sequence[Mapping]) -> dict[str, dict[str, int]]:
    """Product and model level counts per category."""
    details: defaultdict[str, Counter] = defaultdict(Counter)

    for ticket in tickets:
        category = label(ticket.get("category"))
        counts = details[category]
        kind = category.lower()

        if "software" in kind:
            software = _sub(ticket, "software")
            name = display_value(software.get("name"))
            if name:
                counts[name] += 1
                version = display_value(software.get("version"))
                if version:
                    counts[f"{name} {version}"] += 1
        elif "hardware" in kind:
            hardware = _sub(ticket, "hardware")
            for key in ("model", "type"):
                value = display_value(hardware.get(key))
                if value:
                    counts[value] += 1
        elif "network" in kind:
            value = display_value(_sub(ticket, "network").get("type"))
            if value:
                counts[value] += 1

    return {key: dict(value) for key, value in details.items()}


def top_assignees(tickets: Sequence[Mapping], limit: int = TOP_ASSIGNEES) -> list[AssigneeCount]:
    counts = Counter(
        label(resolve(ticket, ASSIGNEE_ALIASES), default="Unassigned")
        for ticket in tickets
    )
    return [AssigneeCount(name=name, count=count) for name, count in counts.most_common(limit)]


def _month_counts(tickets: Sequence[Mapping]) -> Counter:
    counts: Counter = Counter()
    for ticket in tickets:
        created = created_at(ticket)
        if created is None:
            continue
        counts[(created.year, created.month)] += 1
    return counts


def _month_label(year: int, month: int) -> str:
    # Fixed names so labels do not follow LC_TIME
    return f"{MONTH_NAMES[month - 1]} {year % 100:02d}"


def _placeholder_months(now: datetime, count: int) -> list[tuple[int, int]]:
    year, month = now.year, now.month
    keys = []
    for _ in range(count):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return keys[::-1]


def _trend_series(counts: Counter, now: datetime | None) -> list[MonthlyTrend]:
    if not counts:
        now = now or datetime.now(timezone.utc)
        return [
            MonthlyTrend(month=_month_label(year, month), count=0)
            for year, month in _placeholder_months(now, PLACEHOLDER_MONTHS)
        ]
    return [
        MonthlyTrend(month=_month_label(year, month), count=counts[(year, month)])
        for year, month in sorted(counts)
    ]


def monthly_trends(tickets: Sequence[Mapping], now: datetime | None = None) -> list[MonthlyTrend]:
    """Tickets per creation month in chronological order.

    With no usable creation date at all, six empty months ending at ``now``
    are returned so charts still get axis labels.
    """
    return _trend_series(_month_counts(tickets), now)


def normalize_issue_text(text: str) -> str:
    text = text.strip().lower()
    text = _NEGATIONS.sub("not", text)
    return _PROBLEM_WORDS.sub("error", text)


def common_issues(tickets: Sequence[Mapping], limit: int = TOP_COMMON_ISSUES) -> list[str]:
    """Most frequent short descriptions after light normalization."""
    counts: Counter = Counter()
    for ticket in tickets:
        text = display_value(ticket.get("short_description"))
        if text:
            counts[normalize_issue_text(text)] += 1

    return [
        f"{text[:1].upper()}{text[1:]} ({count} tickets)"
        for text, count in counts.most_common(limit)
    ]


def response_quality(minutes: float) -> float:
    """1.0 up to 15 minutes, 0.2 beyond two hours, linear in between."""
    if minutes <= 15:
        return 1.0
    if minutes > 120:
        return 0.2
    return 1 - ((minutes - 15) / 105) * 0.8


def resolution_efficiency(tickets: Sequence[Mapping]) -> int:
    """Composite 0-100 score from resolution rate, satisfaction and response time."""
    if not tickets:
        return 0
    closed, _ = partition(tickets)
    if not closed:
        return 0

    score = len(closed) / len(tickets) * 30

    ratings = [
        value for value in (number(resolve_path(t, SATISFACTION_PATHS)) for t in closed)
        if value is not None
    ]
    if ratings:
        score += (sum(ratings) / len(ratings)) / MAX_SATISFACTION * 40
    else:
        score += 20

    responses = [
        response_quality(value)
        for value in (number(resolve_path(t, RESPONSE_TIME_PATHS)) for t in closed)
        if value is not None
    ]
    if responses:
        score += sum(responses) / len(responses) * 30
    else:
        score += 15

    return min(100, max(0, round_half_up(score)))


def compute_metrics(tickets: Sequence[Mapping], now: datetime | None = None) -> Metrics:
    """Build a fresh Metrics snapshot for the tickets."""
    closed, _ = partition(tickets)
    months = _month_counts(tickets)
    logger.debug("Computing metrics for %d tickets (%d closed)", len(tickets), len(closed))

    return Metrics(
        total_tickets=len(tickets),
        open_tickets=len(tickets) - len(closed),
        resolved_tickets=len(closed),
        average_resolution_time=average_resolution_time(closed),
        priority_distribution=count_by_field(tickets, "priority"),
        category_distribution=count_by_field(tickets, "category"),
        category_to_subcategory=count_nested(tickets, "category", "subcategory"),
        category_details=category_details(tickets),
        top_assignees=top_assignees(tickets),
        monthly_trends=_trend_series(months, now),
        trend_is_placeholder=not months,
        common_issues=common_issues(tickets),
        resolution_efficiency=resolution_efficiency(tickets),
    )
