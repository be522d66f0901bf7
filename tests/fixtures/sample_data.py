"""
Sample data fixtures for testing

Ticket and conversation records shaped like the exports the loader sees:
ServiceNow-style fields, reference objects and mixed date aliases.
"""

import copy
import json
import tempfile
from pathlib import Path


SAMPLE_TICKETS = [
    {
        "number": "INC001",
        "short_description": "VPN connection keeps failing when connecting to corporate network",
        "status": "Resolved",
        "priority": "1 - Critical",
        "category": "Network",
        "subcategory": "VPN",
        "assigned_to": "Alice",
        "created_at": "2024-01-01T00:00:00Z",
        "closed_at": "2024-01-02T00:00:00Z",
        "network": {"type": "VPN"},
        "satisfaction": {"score": 4},
        "time_metrics": {"response_time_minutes": 10},
    },
    {
        "number": "INC002",
        "short_description": "Cannot print to floor 3 printer",
        "status": "Closed",
        "priority": "3 - Moderate",
        "category": "Hardware",
        "subcategory": "Printer",
        "assigned_to": "Bob",
        "created_at": "2024-01-15T08:00:00Z",
        "closed_at": "2024-01-15T12:00:00Z",
        "hardware": {"model": "HP LaserJet 4050", "type": "Printer"},
        "satisfaction": {"score": 5},
        "time_metrics": {"response_time_minutes": 30},
    },
    {
        "number": "INC003",
        "short_description": "Outlook not syncing mailbox",
        "state": "In Progress",
        "priority": "2 - High",
        "category": "Software",
        "subcategory": "Email",
        "assigned_to": {"display_value": "Alice"},
        "opened_at": "2024-02-03T09:00:00Z",
        "software": {"name": "Outlook", "version": "2019"},
    },
    {
        "number": "INC004",
        "short_description": "Password reset request",
        "status": "New",
        "priority": "1 - Critical",
        "category": "Software",
        "subcategory": "Account",
        "created": "2024-03-10T10:00:00Z",
    },
    {
        "sys_id": "abc123",
        "short_description": "Laptop overheating",
        "state": "Closed Complete",
        "close_code": "Solved (Permanently)",
        "priority": "3 - Moderate",
        "category": "Hardware",
        "subcategory": "Laptop",
        "assignee": "Carol",
        "sys_created_on": "2024-03-20 10:00:00",
        "resolved_at": "2024-03-22 10:00:00",
        "hardware": {"model": "Dell XPS 13", "type": "Laptop"},
    },
]


SAMPLE_CONVERSATIONS = [
    {
        "id": "CONV-1",
        "channel": "chat",
        "resolved": True,
        "start_time": "2024-03-01T10:00:00Z",
        "end_time": "2024-03-01T10:20:00Z",
        "messages": [
            {"sender": "user", "timestamp": "2024-03-01T10:00:00Z", "content": "I cannot login to the portal"},
            {"sender": "agent", "timestamp": "2024-03-01T10:05:00Z", "content": "I have reset your password"},
        ],
    },
    {
        "id": "CONV-2",
        "channel": "email",
        "resolved": False,
        "topic": "Billing",
        "messages": [
            {"role": "customer", "time": "2024-03-02T09:00:00Z", "text": "Why was I charged twice?"},
        ],
    },
]


def create_sample_tickets():
    """
    Create sample ticket records for testing.

    Returns:
        list: Deep copies of SAMPLE_TICKETS, safe to modify in a test
    """
    return copy.deepcopy(SAMPLE_TICKETS)


def create_sample_conversations():
    """
    Create sample conversation records for testing.

    Returns:
        list: Deep copies of SAMPLE_CONVERSATIONS
    """
    return copy.deepcopy(SAMPLE_CONVERSATIONS)


def create_priority_tickets(critical=6, total=10):
    """
    Tickets without dates where `critical` of `total` are "1 - Critical".
    """
    return [
        {
            "number": f"INC{i:03d}",
            "status": "Open",
            "priority": "1 - Critical" if i < critical else "3 - Moderate",
        }
        for i in range(total)
    ]


def write_sample_file(document, suffix=".json", directory=None):
    """
    Write a document to a file for loader tests.

    Args:
        document: JSON-serializable object, or raw text for malformed files
        suffix: File extension
        directory: Optional directory. If None, creates a temp directory.

    Returns:
        Path: Path to the created file
    """
    directory = Path(directory or tempfile.mkdtemp())
    path = directory / f"export{suffix}"
    if isinstance(document, str):
        path.write_text(document)
    else:
        path.write_text(json.dumps(document))
    return path
