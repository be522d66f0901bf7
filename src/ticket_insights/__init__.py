"""Support ticket and conversation export analysis."""
from .classifier import is_closed
from .extractor import extract_conversations, extract_records, extract_tickets
from .insights import generate_insights, generate_issue_insights
from .issues import detect_issues
from .loader import load_documents
from .metrics import compute_metrics
from .orchestrator import AnalysisSession

__all__ = [
    "AnalysisSession",
    "compute_metrics",
    "detect_issues",
    "extract_conversations",
    "extract_records",
    "extract_tickets",
    "generate_insights",
    "generate_issue_insights",
    "is_closed",
    "load_documents",
]
