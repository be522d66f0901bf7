"""Data models for analysis outputs."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AssigneeCount(BaseModel):
    """Ticket count for one assignee."""
    model_config = ConfigDict(frozen=True)

    name: str
    count: int


class MonthlyTrend(BaseModel):
    """Ticket volume for one month, labelled like "Jan 24"."""
    model_config = ConfigDict(frozen=True)

    month: str
    count: int


class Metrics(BaseModel):
    """Aggregate snapshot over one ticket collection."""
    model_config = ConfigDict(frozen=True)

    total_tickets: int = 0
    open_tickets: int = 0
    resolved_tickets: int = 0
    average_resolution_time: str = "N/A"
    priority_distribution: dict[str, int] = Field(default_factory=dict)
    category_distribution: dict[str, int] = Field(default_factory=dict)
    category_to_subcategory: dict[str, dict[str, int]] = Field(default_factory=dict)
    category_details: dict[str, dict[str, int]] = Field(default_factory=dict)
    top_assignees: list[AssigneeCount] = Field(default_factory=list)
    monthly_trends: list[MonthlyTrend] = Field(default_factory=list)
    trend_is_placeholder: bool = False
    common_issues: list[str] = Field(default_factory=list)
    resolution_efficiency: int = Field(default=0, ge=0, le=100)


class IssueStat(BaseModel):
    """Matches and resolution time for one technical issue type."""
    model_config = ConfigDict(frozen=True)

    label: str
    count: int
    average_resolution_hours: float | None = None
    average_resolution_time: str = "N/A"


class ConversationMessage(BaseModel):
    """One message in a conversation."""
    model_config = ConfigDict(frozen=True)

    sender: str = "user"
    timestamp: str | None = None
    content: str = ""


class Conversation(BaseModel):
    """Conversation between a requester and a support agent."""
    model_config = ConfigDict(frozen=True)

    id: str
    messages: list[ConversationMessage] = Field(default_factory=list)
    topic: str | None = None
    channel: str | None = None
    resolved: bool | None = None
    start_time: str | None = None
    end_time: str | None = None
    satisfaction_score: float | None = None


class ConversationStats(BaseModel):
    """Aggregate view over a conversation collection."""
    model_config = ConfigDict(frozen=True)

    total_conversations: int = 0
    resolved_conversations: int = 0
    average_messages: float = 0.0
    channel_distribution: dict[str, int] = Field(default_factory=dict)
    topic_distribution: dict[str, int] = Field(default_factory=dict)


class AnalysisReport(BaseModel):
    """Everything derived from one snapshot."""
    model_config = ConfigDict(frozen=True)

    generation: int
    metrics: Metrics
    issues: list[IssueStat] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    issue_insights: list[str] = Field(default_factory=list)
    conversations: ConversationStats | None = None


class FileOutcome(BaseModel):
    """Result of loading one input file."""
    path: str
    status: Literal["ok", "no_data", "error"]
    structure: str | None = None
    ticket_count: int = 0
    conversation_count: int = 0
    message: str = ""
