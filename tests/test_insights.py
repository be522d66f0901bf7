"""
Unit tests for rule-based insights
"""

import unittest
from datetime import datetime, timezone

from ticket_insights.insights import MAX_INSIGHTS, generate_insights, generate_issue_insights
from ticket_insights.issues import detect_issues
from ticket_insights.metrics import compute_metrics
from ticket_insights.models import IssueStat, Metrics, MonthlyTrend
from tests.fixtures.sample_data import create_priority_tickets, create_sample_tickets


class TestGenerateInsights(unittest.TestCase):
    """Test suite for the ordered insight rules."""

    def test_sample_export(self):
        tickets = create_sample_tickets()
        insights = generate_insights(compute_metrics(tickets), tickets)
        self.assertEqual(insights, [
            "Hardware issues take the longest to resolve with an average of 26 hours.",
            "40% of tickets are 1 - Critical priority, suggesting this is your team's most common workload.",
            "Jan 24 had the highest ticket volume with 2 tickets.",
            "Alice handles 40% of all tickets, which may indicate an uneven workload distribution.",
            "There are 1 open high-priority tickets that require immediate attention.",
        ])

    def test_no_tickets(self):
        self.assertEqual(generate_insights(compute_metrics([]), []), [])

    def test_dominant_priority(self):
        tickets = create_priority_tickets(critical=6, total=10)
        insights = generate_insights(
            compute_metrics(tickets, now=datetime(2024, 3, 15, tzinfo=timezone.utc)), tickets
        )
        self.assertIn(
            "60% of tickets are 1 - Critical priority, suggesting this is your team's most common workload.",
            insights,
        )

    def test_priority_at_threshold_is_not_dominant(self):
        tickets = [
            {"number": str(i), "status": "Open", "priority": p}
            for i, p in enumerate(["1", "1", "1", "2", "2", "2", "3", "3", "3", "4"])
        ]
        insights = generate_insights(compute_metrics(tickets), tickets)
        self.assertFalse(any("priority, suggesting" in text for text in insights))

    def test_placeholder_trend_is_skipped(self):
        tickets = create_priority_tickets()
        insights = generate_insights(compute_metrics(tickets), tickets)
        self.assertFalse(any("highest ticket volume" in text for text in insights))

    def test_volume_change(self):
        metrics = Metrics(
            total_tickets=14,
            monthly_trends=[
                MonthlyTrend(month="Jan 24", count=4),
                MonthlyTrend(month="Feb 24", count=10),
            ],
        )
        insights = generate_insights(metrics)
        self.assertIn("Feb 24 had the highest ticket volume with 10 tickets.", insights)
        self.assertIn("Ticket volume is increasing with a 150% change over the analyzed period.", insights)

    def test_volume_change_from_empty_month(self):
        metrics = Metrics(
            total_tickets=3,
            monthly_trends=[
                MonthlyTrend(month="Jan 24", count=0),
                MonthlyTrend(month="Feb 24", count=3),
            ],
        )
        insights = generate_insights(metrics)
        self.assertFalse(any("Ticket volume is" in text for text in insights))

    def test_single_assignee_is_not_concentration(self):
        tickets = [{"number": str(i), "status": "Open", "assigned_to": "Dana"} for i in range(3)]
        insights = generate_insights(compute_metrics(tickets), tickets)
        self.assertFalse(any("handles" in text for text in insights))

    def test_open_high_priority_counts_critical(self):
        tickets = [
            {"number": "1", "status": "Open", "priority": "Critical"},
            {"number": "2", "status": "Open", "priority": "1 - High"},
            {"number": "3", "status": "Closed", "priority": "1 - Critical"},
            {"number": "4", "status": "Open", "priority": "Low"},
        ]
        insights = generate_insights(compute_metrics(tickets), tickets)
        self.assertIn("There are 2 open high-priority tickets that require immediate attention.", insights)

    def test_fallbacks_fill_short_lists(self):
        metrics = Metrics(total_tickets=4, resolved_tickets=3, open_tickets=1, resolution_efficiency=75)
        self.assertEqual(generate_insights(metrics), [
            "The overall ticket resolution efficiency is 75%, indicating strong service delivery.",
            "The team has resolved 75% of all tickets to date.",
        ])

    def test_fallback_wording(self):
        adequate = Metrics(total_tickets=2, resolved_tickets=1, resolution_efficiency=60)
        weak = Metrics(total_tickets=2, resolved_tickets=1, resolution_efficiency=40)
        self.assertIn("indicating adequate service delivery", generate_insights(adequate)[0])
        self.assertIn("indicating opportunity for improvement in service delivery", generate_insights(weak)[0])

    def test_capped(self):
        metrics = Metrics(
            total_tickets=10,
            priority_distribution={"1": 8, "2": 2},
            monthly_trends=[MonthlyTrend(month="Jan 24", count=1), MonthlyTrend(month="Feb 24", count=9)],
        )
        tickets = [
            {"number": str(i), "status": "Open", "priority": "1", "category": "Network"}
            for i in range(10)
        ]
        self.assertLessEqual(len(generate_insights(metrics, tickets)), MAX_INSIGHTS)


class TestIssueInsights(unittest.TestCase):
    """Test suite for insights over detected issue types."""

    def test_sample_export(self):
        tickets = create_sample_tickets()
        insights = generate_issue_insights(detect_issues(tickets), len(tickets))
        self.assertEqual(insights, [
            "VPN connectivity is the most common technical issue, appearing in 20% of tickets (1 tickets).",
        ])

    def test_slowest_issue_and_unmatched_share(self):
        issues = [
            IssueStat(label="Printer issues", count=3, average_resolution_hours=5.0,
                      average_resolution_time="5 hours"),
            IssueStat(label="VPN connectivity", count=2, average_resolution_hours=50.0,
                      average_resolution_time="2 days"),
        ]
        # Printer issues cover only 15% of tickets, below the top-issue threshold
        self.assertEqual(generate_issue_insights(issues, 20), [
            "VPN connectivity tickets take the longest to resolve among technical issues, averaging 2 days.",
            "75% of tickets do not match a known technical issue pattern.",
        ])

    def test_empty(self):
        self.assertEqual(generate_issue_insights([], 10), [])
        self.assertEqual(generate_issue_insights([IssueStat(label="x", count=1)], 0), [])


if __name__ == '__main__':
    unittest.main()
