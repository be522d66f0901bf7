"""Bucket tickets into common technical issue types by their text.

Patterns are tried in table order and the first match wins, so more specific
issue types must come before broader ones.
"""
import re
from collections.abc import Mapping, Sequence

from .fields import display_value, resolution_hours
from .metrics import format_duration
from .models import IssueStat


ISSUE_PATTERNS = [
    (re.compile(r"\bvpn\b|remote access|anyconnect|globalprotect|tunnel", re.I), "VPN connectivity"),
    (re.compile(r"password|locked out|account lock|reset (my )?credentials|\bmfa\b|2fa", re.I), "Password reset"),
    (re.compile(r"e-?mail|outlook|mailbox|inbox|\bsmtp\b|exchange", re.I), "Email delivery"),
    (re.compile(r"print(er|ing)?\b|toner|paper jam|scanner", re.I), "Printer issues"),
    (re.compile(r"wi-?fi|wireless|wlan|access point|hotspot", re.I), "Wi-Fi connectivity"),
    (re.compile(r"\bteams\b|zoom|webex|video call|conference|webcam|headset|microphone", re.I), "Video conferencing"),
    (re.compile(r"laptop|desktop|workstation|blue screen|\bbsod\b|slow (computer|pc)|won'?t boot|overheat", re.I), "Workstation performance"),
    (re.compile(r"install|software|application|\bapp\b|licen[cs]e|update|upgrade|crash", re.I), "Software installation"),
    (re.compile(r"shared drive|network drive|mapped drive|file share|\bnas\b|onedrive|sharepoint", re.I), "Network drive access"),
    (re.compile(r"permission|access denied|unauthori[sz]ed|\baccess\b|privilege", re.I), "Access permissions"),
]


def issue_text(ticket: Mapping) -> str:
    return " ".join(
        text for text in (
            display_value(ticket.get("short_description")),
            display_value(ticket.get("description")),
        ) if text
    )


def classify_issue(text: str) -> str | None:
    """Label of the first pattern matching the text, if any."""
    for pattern, issue_label in ISSUE_PATTERNS:
        if pattern.search(text):
            return issue_label
    return None


def detect_issues(tickets: Sequence[Mapping]) -> list[IssueStat]:
    """Count tickets per issue type, with their average resolution time."""
    # label -> [matches, timed matches, total hours]
    buckets: dict[str, list] = {}

    for ticket in tickets:
        issue_label = classify_issue(issue_text(ticket))
        if issue_label is None:
            continue

        bucket = buckets.setdefault(issue_label, [0, 0, 0.0])
        bucket[0] += 1
        hours = resolution_hours(ticket)
        if hours is not None:
            bucket[1] += 1
            bucket[2] += hours

    order = {issue_label: index for index, (_, issue_label) in enumerate(ISSUE_PATTERNS)}
    stats = []
    for issue_label in sorted(buckets, key=lambda name: (-buckets[name][0], order[name])):
        count, timed, total = buckets[issue_label]
        average = total / timed if timed else None
        stats.append(IssueStat(
            label=issue_label,
            count=count,
            average_resolution_hours=average,
            average_resolution_time=format_duration(average),
        ))
    return stats
