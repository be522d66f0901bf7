"""Rule-based natural-language findings over computed metrics.

Rules run in the order of INSIGHT_RULES. Each one looks at the metrics (and
the tickets, when given) plus what earlier rules already produced, and returns
zero or more sentences.
"""
from collections import defaultdict
from collections.abc import Callable, Mapping, Sequence
from operator import attrgetter, itemgetter

from .classifier import is_closed
from .fields import display_value, label, resolution_hours
from .metrics import round_half_up
from .models import IssueStat, Metrics


MAX_INSIGHTS = 6
MAX_ISSUE_INSIGHTS = 3
MIN_CATEGORY_SAMPLES = 2
DOMINANT_PRIORITY_PCT = 30
TREND_CHANGE_RATIO = 0.2
WORKLOAD_PCT = 25
FALLBACK_BELOW = 4
TOP_ISSUE_PCT = 20
UNMATCHED_ISSUE_PCT = 50

Rule = Callable[[Metrics, Sequence[Mapping] | None, list[str]], list[str]]


def _percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100)


def slowest_category(metrics: Metrics, tickets: Sequence[Mapping] | None, found: list[str]) -> list[str]:
    if not tickets or metrics.resolved_tickets == 0:
        return []

    totals: defaultdict[str, list] = defaultdict(lambda: [0.0, 0])
    for ticket in tickets:
        category = display_value(ticket.get("category"))
        if not category or not is_closed(ticket):
            continue
        hours = resolution_hours(ticket)
        if hours is None:
            continue
        totals[category][0] += hours
        totals[category][1] += 1

    slowest, longest = None, 0.0
    for category, (total, count) in totals.items():
        if count < MIN_CATEGORY_SAMPLES:
            continue
        average = total / count
        if average > longest:
            slowest, longest = category, average

    if slowest is None:
        return []
    return [
        f"{slowest} issues take the longest to resolve with an average of "
        f"{round_half_up(longest)} hours."
    ]


def dominant_priority(metrics: Metrics, tickets: Sequence[Mapping] | None, found: list[str]) -> list[str]:
    if not metrics.priority_distribution:
        return []

    priority, count = max(metrics.priority_distribution.items(), key=itemgetter(1))
    share = _percent(count, metrics.total_tickets)
    if share <= DOMINANT_PRIORITY_PCT:
        return []
    return [f"{share}% of tickets are {priority} priority, suggesting this is your team's most common workload."]


def volume_trend(metrics: Metrics, tickets: Sequence[Mapping] | None, found: list[str]) -> list[str]:
    trends = metrics.monthly_trends
    if metrics.trend_is_placeholder or len(trends) < 2:
        return []

    peak = max(trends, key=attrgetter("count"))
    results = [f"{peak.month} had the highest ticket volume with {peak.count} tickets."]

    first, last = trends[0], trends[-1]
    change = last.count - first.count
    if first.count > 0 and abs(change) > first.count * TREND_CHANGE_RATIO:
        direction = "increasing" if change > 0 else "decreasing"
        results.append(
            f"Ticket volume is {direction} with a {_percent(abs(change), first.count)}% "
            f"change over the analyzed period."
        )
    return results


def workload_concentration(metrics: Metrics, tickets: Sequence[Mapping] | None, found: list[str]) -> list[str]:
    if len(metrics.top_assignees) < 2:
        return []

    top = metrics.top_assignees[0]
    share = _percent(top.count, metrics.total_tickets)
    if share <= WORKLOAD_PCT:
        return []
    return [f"{top.name} handles {share}% of all tickets, which may indicate an uneven workload distribution."]


def _is_high_priority(priority: str) -> bool:
    return "1" in priority or "critical" in priority.lower()


def open_high_priority(metrics: Metrics, tickets: Sequence[Mapping] | None, found: list[str]) -> list[str]:
    if not tickets:
        return []

    count = sum(
        1 for ticket in tickets
        if not is_closed(ticket) and _is_high_priority(label(ticket.get("priority")))
    )
    if count == 0:
        return []
    return [f"There are {count} open high-priority tickets that require immediate attention."]


def overall_fallbacks(metrics: Metrics, tickets: Sequence[Mapping] | None, found: list[str]) -> list[str]:
    if len(found) >= FALLBACK_BELOW:
        return []

    results = []
    efficiency = metrics.resolution_efficiency
    if efficiency > 0:
        if efficiency > 70:
            quality = "strong"
        elif efficiency > 50:
            quality = "adequate"
        else:
            quality = "opportunity for improvement in"
        results.append(
            f"The overall ticket resolution efficiency is {efficiency}%, indicating {quality} service delivery."
        )

    if metrics.resolved_tickets > 0:
        rate = _percent(metrics.resolved_tickets, metrics.total_tickets)
        results.append(f"The team has resolved {rate}% of all tickets to date.")
    return results


INSIGHT_RULES: list[Rule] = [
    slowest_category,
    dominant_priority,
    volume_trend,
    workload_concentration,
    open_high_priority,
    overall_fallbacks,
]


def generate_insights(metrics: Metrics, tickets: Sequence[Mapping] | None = None) -> list[str]:
    """Ordered findings for a metrics snapshot, at most MAX_INSIGHTS."""
    if metrics.total_tickets == 0:
        return []

    found: list[str] = []
    for rule in INSIGHT_RULES:
        found.extend(rule(metrics, tickets, found))
    return found[:MAX_INSIGHTS]


def generate_issue_insights(issues: Sequence[IssueStat], total_tickets: int) -> list[str]:
    """Findings over the issue detector output."""
    if not issues or total_tickets <= 0:
        return []

    found = []
    top = issues[0]
    share = _percent(top.count, total_tickets)
    if share >= TOP_ISSUE_PCT:
        found.append(
            f"{top.label} is the most common technical issue, appearing in {share}% of tickets "
            f"({top.count} tickets)."
        )

    timed = [
        issue for issue in issues
        if issue.count >= MIN_CATEGORY_SAMPLES and issue.average_resolution_hours is not None
    ]
    if timed:
        slowest = max(timed, key=attrgetter("average_resolution_hours"))
        found.append(
            f"{slowest.label} tickets take the longest to resolve among technical issues, "
            f"averaging {slowest.average_resolution_time}."
        )

    unmatched = _percent(total_tickets - sum(issue.count for issue in issues), total_tickets)
    if unmatched > UNMATCHED_ISSUE_PCT:
        found.append(f"{unmatched}% of tickets do not match a known technical issue pattern.")

    return found[:MAX_ISSUE_INSIGHTS]
