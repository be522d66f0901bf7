"""Analysis orchestration over an immutable ticket snapshot."""
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from types import MappingProxyType

from .client import APIClient
from .conversations import summarize_conversations
from .insights import generate_insights, generate_issue_insights
from .issues import detect_issues
from .metrics import compute_metrics
from .models import AnalysisReport, Conversation
from .prompts import ANALYSIS_PROMPT

logger = logging.getLogger(__name__)


def build_prompt(report: AnalysisReport, company_context: str = "") -> str:
    """Fill the analysis prompt from a finished report."""
    m = report.metrics
    return ANALYSIS_PROMPT.format(
        total_tickets=m.total_tickets,
        open_tickets=m.open_tickets,
        resolved_tickets=m.resolved_tickets,
        average_resolution_time=m.average_resolution_time,
        resolution_efficiency=m.resolution_efficiency,
        priorities=m.priority_distribution,
        categories=m.category_distribution,
        assignees={a.name: a.count for a in m.top_assignees},
        trends={t.month: t.count for t in m.monthly_trends},
        common_issues="; ".join(m.common_issues) or "none",
        issue_types={i.label: i.count for i in report.issues},
        insights="\n".join(f"- {text}" for text in report.insights + report.issue_insights) or "- none",
        company_context=company_context.strip() or "not provided",
    )


class AnalysisSession:
    """Current ticket/conversation snapshot and the analysis published for it.

    Every replace() starts a new generation. A report is only published by
    accept() when it was computed from the current generation, so a slow
    recomputation can never overwrite the result of a newer snapshot.
    """

    def __init__(self, tickets: Iterable[Mapping] = (), conversations: Iterable[Conversation] = ()):
        self._generation = 0
        self._tickets: tuple[Mapping, ...] = ()
        self._conversations: tuple[Conversation, ...] = ()
        self.latest: AnalysisReport | None = None
        self.replace(tickets, conversations)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def tickets(self) -> tuple[Mapping, ...]:
        return self._tickets

    @property
    def conversations(self) -> tuple[Conversation, ...]:
        return self._conversations

    def replace(self, tickets: Iterable[Mapping], conversations: Iterable[Conversation] = ()) -> int:
        """Swap in a new snapshot and return its generation."""
        self._tickets = tuple(MappingProxyType(dict(ticket)) for ticket in tickets)
        self._conversations = tuple(conversations)
        self._generation += 1
        logger.debug(
            "Snapshot %d: %d tickets, %d conversations",
            self._generation, len(self._tickets), len(self._conversations),
        )
        return self._generation

    def analyze(self, now: datetime | None = None) -> AnalysisReport:
        """Run the full analysis over the current snapshot."""
        generation, tickets, conversations = self._generation, self._tickets, self._conversations

        metrics = compute_metrics(tickets, now=now)
        issues = detect_issues(tickets)
        return AnalysisReport(
            generation=generation,
            metrics=metrics,
            issues=issues,
            insights=generate_insights(metrics, tickets),
            issue_insights=generate_issue_insights(issues, metrics.total_tickets),
            conversations=summarize_conversations(conversations) if conversations else None,
        )

    def accept(self, report: AnalysisReport) -> bool:
        """Publish the report unless a newer snapshot superseded it."""
        if report.generation != self._generation:
            logger.info(
                "Discarding stale analysis for snapshot %d (current %d)",
                report.generation, self._generation,
            )
            return False
        self.latest = report
        return True

    def refresh(self, now: datetime | None = None) -> AnalysisReport:
        report = self.analyze(now=now)
        self.accept(report)
        return report

    async def narrate(self, report: AnalysisReport, api: APIClient, company_context: str = "") -> str:
        """Ask the completion service for a narrative; the text is returned as-is."""
        return await api.call(build_prompt(report, company_context))
