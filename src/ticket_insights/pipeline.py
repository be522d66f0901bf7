"""Ticket analysis pipeline: load → analyze → report."""
import argparse
import asyncio
from pathlib import Path

from .client import APIClient
from .config import settings
from .loader import load_documents
from .models import AnalysisReport
from .orchestrator import AnalysisSession


def _format_value(value) -> str:
    """Format value for markdown output."""
    if isinstance(value, dict):
        return "; ".join(f"{k}: {v}" for k, v in value.items()) or "N/A"
    elif isinstance(value, list):
        return ", ".join(str(i) if not isinstance(i, (dict, list)) else _format_value(i) for i in value) or "N/A"
    return str(value).strip()


def _report_to_markdown(report: AnalysisReport, narrative: str | None = None) -> str:
    """Convert report to markdown format."""
    m = report.metrics
    lines = [
        "# Support Ticket Analysis Report",
        "",
        "## Overview",
        f"- **Total Tickets:** {m.total_tickets}",
        f"- **Open:** {m.open_tickets}",
        f"- **Resolved:** {m.resolved_tickets}",
        f"- **Average Resolution Time:** {m.average_resolution_time}",
        f"- **Resolution Efficiency:** {m.resolution_efficiency}%",
        "",
        "## Distributions",
        f"- **Priority:** {_format_value(m.priority_distribution)}",
        f"- **Category:** {_format_value(m.category_distribution)}",
        "",
    ]

    if m.category_to_subcategory:
        lines.append("### Subcategories")
        lines.extend(
            f"- **{category}:** {_format_value(subcategories)}"
            for category, subcategories in m.category_to_subcategory.items()
        )
        lines.append("")

    details = {category: counts for category, counts in m.category_details.items() if counts}
    if details:
        lines.append("### Category Details")
        lines.extend(f"- **{category}:** {_format_value(counts)}" for category, counts in details.items())
        lines.append("")

    lines.append("## Top Assignees")
    lines.extend(f"- {a.name}: {a.count}" for a in m.top_assignees)
    lines.extend(["", "## Monthly Trend"])
    if m.trend_is_placeholder:
        lines.append("_No valid creation dates found._")
    lines.extend(f"- {t.month}: {t.count}" for t in m.monthly_trends)
    lines.append("")

    if m.common_issues:
        lines.append("## Common Issues")
        lines.extend(f"- {issue}" for issue in m.common_issues)
        lines.append("")

    if report.issues:
        lines.extend([
            "## Technical Issue Types",
            "| Issue | Tickets | Avg. Resolution |",
            "|---|---|---|",
            *[f"| {i.label} | {i.count} | {i.average_resolution_time} |" for i in report.issues],
            "",
        ])

    lines.append("## Key Insights")
    for i, insight in enumerate(report.insights + report.issue_insights, 1):
        lines.append(f"{i}. {insight}")
    lines.append("")

    if report.conversations:
        cs = report.conversations
        lines.extend([
            "## Conversations",
            f"- **Total:** {cs.total_conversations}",
            f"- **Resolved:** {cs.resolved_conversations}",
            f"- **Average Messages:** {cs.average_messages:.1f}",
            f"- **Channels:** {_format_value(cs.channel_distribution)}",
            f"- **Topics:** {_format_value(cs.topic_distribution)}",
            "",
        ])

    if narrative:
        lines.extend(["## AI Analysis", narrative, ""])

    return "\n".join(lines)


async def run_pipeline(
    files: list[Path],
    output_dir: Path | None = None,
    use_ai: bool = False,
    company_context: str = "",
) -> AnalysisReport | None:
    """Run the complete pipeline: load → analyze → (narrate) → report."""
    print("=== Support Ticket Analysis ===\n")
    output_dir = output_dir or settings.output_dir

    # Load
    print(f"Loading {len(files)} file(s)...")
    loaded = load_documents(files)
    for outcome in loaded.outcomes:
        if outcome.status == "ok":
            print(f"✓ {outcome.path}: {outcome.ticket_count} tickets, "
                  f"{outcome.conversation_count} conversations ({outcome.structure})")
        elif outcome.status == "no_data":
            print(f"  Warning: {outcome.path}: {outcome.message}")
        else:
            print(f"  Error: {outcome.path}: {outcome.message}")

    if not loaded.tickets and not loaded.conversations:
        print("\nNo ticket or conversation data found.")
        return None

    # Analyze
    session = AnalysisSession(loaded.tickets, loaded.conversations)
    report = session.refresh()
    print(f"\nAnalyzed {report.metrics.total_tickets} tickets\n")

    # Narrate
    narrative = None
    if use_ai:
        print("Requesting AI analysis...")
        try:
            narrative = await session.narrate(report, APIClient(), company_context)
            print("✓ AI analysis received\n")
        except Exception as e:
            print(f"  Warning: AI analysis failed: {e}\n")

    # Save
    output_dir.mkdir(parents=True, exist_ok=True)
    md_file = output_dir / "ticket_report.md"
    md_file.write_text(_report_to_markdown(report, narrative), encoding="utf-8")
    json_file = output_dir / "ticket_report.json"
    json_file.write_text(report.model_dump_json(indent=2), encoding="utf-8")

    # Display summary
    m = report.metrics
    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"  Tickets: {m.total_tickets} ({m.open_tickets} open, {m.resolved_tickets} resolved)")
    print(f"  Average Resolution Time: {m.average_resolution_time}")
    print(f"  Resolution Efficiency: {m.resolution_efficiency}%")
    print("\nKEY INSIGHTS:")
    for i, insight in enumerate(report.insights + report.issue_insights, 1):
        print(f"{i}. {insight}")
    print("=" * 60)
    print(f"Full report: {md_file}")
    print("=" * 60)

    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze support ticket and conversation exports")
    parser.add_argument("files", nargs="+", type=Path, help="JSON or CSV export files")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Report directory")
    parser.add_argument("--ai", action="store_true", help="Add an AI-written analysis (needs ANTHROPIC_API_KEY)")
    parser.add_argument("--context", default="", help="Organization context for the AI analysis")
    args = parser.parse_args(argv)

    settings.setup_logging()
    report = asyncio.run(run_pipeline(args.files, args.output, args.ai, args.context))
    return 0 if report is not None else 1


if __name__ == "__main__":
    raise SystemExit(main())
