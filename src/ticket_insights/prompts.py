"""Prompt templates."""

ANALYSIS_PROMPT = """You are reviewing IT support ticket statistics for a service desk.

Stats:
- Total tickets: {total_tickets} ({open_tickets} open, {resolved_tickets} resolved)
- Average resolution time: {average_resolution_time}
- Resolution efficiency score: {resolution_efficiency}/100
- Priorities: {priorities}
- Categories: {categories}
- Top assignees: {assignees}
- Monthly volume: {trends}
- Most common issues: {common_issues}
- Technical issue types: {issue_types}

Findings so far:
{insights}

Organization context: {company_context}

Write three short sections in plain text: Insights, Recommendations and
Outlook. Refer only to the numbers above."""
