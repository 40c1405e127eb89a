from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class TaskCategory(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    URGENT = "urgent"
    MEETING = "meeting"
    PROJECT = "project"
    HEALTH = "health"
    SHOPPING = "shopping"
    HOME = "home"
    OTHER = "other"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class DependencyType(str, Enum):
    MUST_COMPLETE = "must_complete"
    SHOULD_COMPLETE = "should_complete"
    CAN_OVERLAP = "can_overlap"


class PatternType(str, Enum):
    RECURRING = "recurring"
    BATCH = "batch"
    SEASONAL = "seasonal"
    PROJECT_PHASE = "project_phase"


class EstimateBasis(str, Enum):
    """Which rule produced a duration estimate."""

    EXPLICIT = "explicit"  # "30 Minuten", "2h"
    KEYWORD = "keyword"  # "quick", "komplex"
    CATEGORY = "category"  # per-category default


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    ICAL = "ical"
    MARKDOWN = "markdown"


CATEGORY_WEIGHTS: Dict[TaskCategory, float] = {
    TaskCategory.URGENT: 0.9,
    TaskCategory.MEETING: 0.8,
    TaskCategory.HEALTH: 0.8,
    TaskCategory.WORK: 0.7,
    TaskCategory.PROJECT: 0.7,
    TaskCategory.SHOPPING: 0.5,
    TaskCategory.PERSONAL: 0.4,
    TaskCategory.HOME: 0.4,
    TaskCategory.OTHER: 0.3,
}

PRIORITY_WEIGHTS: Dict[TaskPriority, float] = {
    TaskPriority.CRITICAL: 1.0,
    TaskPriority.HIGH: 0.8,
    TaskPriority.MEDIUM: 0.6,
    TaskPriority.LOW: 0.3,
}


# one year; longer explicit estimates are capped
MAX_DURATION_S = 365 * 24 * 3600


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def derive_priority(urgency_score: float, category: TaskCategory) -> TaskPriority:
    """Priority is never stored; it always follows from urgency and category."""
    combined = 0.7 * urgency_score + 0.3 * CATEGORY_WEIGHTS[category]
    if combined >= 0.8:
        return TaskPriority.CRITICAL
    if combined >= 0.6:
        return TaskPriority.HIGH
    if combined >= 0.4:
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


class Task(BaseModel):
    id: UUID = Field(default_factory=uuid4, frozen=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    category: TaskCategory = TaskCategory.OTHER

    urgency_score: float = 0.5
    # seconds
    estimated_duration: int = Field(3600, ge=1, le=MAX_DURATION_S)

    deadline: Optional[datetime] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None

    dependencies: List[UUID] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)
    completion_probability: float = 0.5
    tags: List[str] = Field(default_factory=list)
    source_text: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    is_completed: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("urgency_score", "completion_probability")
    @classmethod
    def clamp_unit_interval(cls, v: float) -> float:
        return clamp(float(v))

    @computed_field
    @property
    def priority(self) -> TaskPriority:
        return derive_priority(self.urgency_score, self.category)


class DateInference(BaseModel):
    model_config = ConfigDict(frozen=True)

    inferred_date: datetime
    confidence: float = Field(..., ge=0.0, le=1.0)
    source_text: str
    context: str = ""


class UrgencyIndicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=1.0)
    keywords: List[str] = Field(default_factory=list)
    context: str = ""


class TaskDependency(BaseModel):
    model_config = ConfigDict(frozen=True)

    task_id: UUID
    depends_on_task_id: UUID
    type: DependencyType = DependencyType.MUST_COMPLETE


class TaskPattern(BaseModel):
    pattern_type: PatternType
    frequency: float = Field(..., ge=0.0, le=1.0)
    description: str
    related_tasks: List[UUID] = Field(default_factory=list)


class TimeEstimate(BaseModel):
    task_id: UUID
    estimated_minutes: int
    confidence: float = Field(..., ge=0.0, le=1.0)
    basis: EstimateBasis


class WorkingHours(BaseModel):
    start_hour: int = Field(9, ge=0, le=23)
    end_hour: int = Field(17, ge=1, le=24)
    # ISO weekdays, 1 = Monday .. 7 = Sunday
    working_days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])

    def is_working_time(self, dt: datetime) -> bool:
        return (
            dt.isoweekday() in self.working_days
            and self.start_hour <= dt.hour < self.end_hour
        )


class DelegationRule(BaseModel):
    category: TaskCategory
    participants: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)


class TimePreferences(BaseModel):
    preferred_task_duration_min: int = Field(30, gt=0)
    break_intervals_min: List[int] = Field(default_factory=list)
    focus_blocks_min: List[int] = Field(default_factory=list)


class UserPreferences(BaseModel):
    preferred_categories: List[TaskCategory] = Field(default_factory=list)
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    delegation_rules: List[DelegationRule] = Field(default_factory=list)
    time_preferences: TimePreferences = Field(default_factory=TimePreferences)


class CalendarEvent(BaseModel):
    title: str
    start: datetime
    end: datetime
    is_busy: bool = True


class AnalysisContext(BaseModel):
    """Optional inputs to one generator run; every field has a safe default."""

    user_preferences: Optional[UserPreferences] = None
    historical_tasks: List[Task] = Field(default_factory=list)
    calendar_events: List[CalendarEvent] = Field(default_factory=list)
    working_hours: Optional[WorkingHours] = None
    # reference "now" for resolving relative dates
    now: Optional[datetime] = None

    def reference_time(self) -> datetime:
        return self.now if self.now is not None else datetime.now()

    def effective_working_hours(self) -> Optional[WorkingHours]:
        if self.working_hours is not None:
            return self.working_hours
        if self.user_preferences is not None:
            return self.user_preferences.working_hours
        return None

    def delegates_for(self, category: TaskCategory) -> List[str]:
        if self.user_preferences is None:
            return []
        names: List[str] = []
        for rule in self.user_preferences.delegation_rules:
            if rule.category == category:
                names.extend(rule.participants)
        return names


class ContentAnalysis(BaseModel):
    extracted_tasks: List[Task] = Field(default_factory=list)
    detected_participants: List[str] = Field(default_factory=list)
    deadlines: List[DateInference] = Field(default_factory=list)
    urgency_indicators: List[UrgencyIndicator] = Field(default_factory=list)
    time_estimates: List[TimeEstimate] = Field(default_factory=list)
    patterns: List[TaskPattern] = Field(default_factory=list)

    dependencies: List[TaskDependency] = Field(default_factory=list)
    dependency_cycles: List[List[UUID]] = Field(default_factory=list)
    # number of candidates turned into tasks before merging
    candidates_processed: int = 0
    # True when a time budget or cancellation cut per-candidate work short
    partial: bool = False


class TaskSlotSuggestion(BaseModel):
    task_id: UUID
    recommended_start: datetime
    recommended_end: datetime
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
