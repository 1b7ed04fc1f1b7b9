from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

Priority = Literal["high", "medium", "low"]
Period = Literal["today", "week"]


class TodoDraftOutput(BaseModel):
    """Structured output requested from the model for a single sentence."""

    title: str = Field(description="Short title holding only the core action")
    description: Optional[str] = Field(
        default=None,
        description="Longer description based on the original sentence"
    )
    due_date: Optional[str] = Field(
        default=None,
        description="Due date in YYYY-MM-DD format"
    )
    due_time: Optional[str] = Field(
        default=None,
        description="Due time in 24-hour HH:mm format"
    )
    priority: Optional[Priority] = Field(
        default=None,
        description="One of high, medium, low"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category such as work, personal, health, study"
    )


class SummaryOutput(BaseModel):
    summary: str = Field(description="Summary of the tasks including completion rate")
    urgentTasks: List[str] = Field(description="Titles of urgent tasks")
    insights: List[str] = Field(description="List of insights")
    recommendations: List[str] = Field(description="List of recommendations")


class ParsedTaskDraft(BaseModel):
    """Repaired draft, every field populated. due_date is the only nullable one."""

    title: str
    description: str
    due_date: Optional[str]
    priority: Priority
    category: str
    completed: bool = False


class Task(BaseModel):
    """Task as supplied by the storage layer."""

    id: Union[int, str, None] = None
    title: str = ""
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = "medium"
    category: Optional[str] = None
    completed: bool = False
    created_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, value):
        return "medium" if value is None else value

    @field_validator("due_date", "created_date", "updated_at", mode="before")
    @classmethod
    def blank_date_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("completed", mode="before")
    @classmethod
    def default_completed(cls, value):
        return False if value is None else value


class ParseTodoRequest(BaseModel):
    text: Any = None


class SummarizeTodosRequest(BaseModel):
    todos: Any = None
    period: Any = None


class PriorityStats(BaseModel):
    total: int = 0
    completed: int = 0
    incomplete: int = 0
    completion_rate: float = 0.0


class GroupStats(BaseModel):
    total: int = 0
    completed: int = 0
    completion_rate: float = 0.0


class StatisticsReport(BaseModel):
    period: Period
    total: int
    completed: int
    incomplete: int
    completion_rate: float
    priority_stats: Dict[str, PriorityStats]
    category_stats: Dict[str, GroupStats]
    with_due_date: int
    on_time_completed: int
    due_date_compliance_rate: float
    overdue: List[Task]
    completed_after_due: List[Task]
    time_slots: Dict[str, GroupStats]
    most_concentrated_slot: Optional[str]
    day_stats: Dict[str, GroupStats]
    best_category: Optional[str]
    best_priority: Optional[str]
    urgent: List[Task]
