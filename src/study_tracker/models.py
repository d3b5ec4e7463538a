"""Data classes for the tracker domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

TOPIC = "topic"
BULLETIN = "bulletin"

URGENT = "urgent"
HIGH = "high"
MEDIUM = "medium"
LOW = "low"
TIERS = (URGENT, HIGH, MEDIUM, LOW)


@dataclass
class Category:
    id: str
    name: str


@dataclass
class Topic:
    id: str
    title: str
    checks: dict[str, bool] = field(default_factory=dict)
    note: Optional[str] = None
    updated_at: Optional[datetime] = None
    review_count: int = 0
    folder_id: Optional[str] = None


@dataclass
class Bulletin:
    id: str
    title: str
    exercise_count: int
    completed_exercises: dict[int, bool] = field(default_factory=dict)
    note: Optional[str] = None
    updated_at: Optional[datetime] = None
    folder_id: Optional[str] = None


@dataclass
class Folder:
    id: str
    name: str


@dataclass
class StudyItem:
    id: str
    type: str
    title: str
    priority: str
    progress: float
    score: int
    reason: str
    days_without_update: int


@dataclass
class PlanStats:
    total_items: int = 0
    avg_progress: float = 0.0
    items_not_started: int = 0
    items_in_progress: int = 0
    items_completed: int = 0
    days_until_exam: Optional[int] = None


@dataclass
class StudyPlan:
    urgent: list[StudyItem] = field(default_factory=list)
    high: list[StudyItem] = field(default_factory=list)
    medium: list[StudyItem] = field(default_factory=list)
    low: list[StudyItem] = field(default_factory=list)
    stats: PlanStats = field(default_factory=PlanStats)

    def bucket(self, tier: str) -> list[StudyItem]:
        return getattr(self, tier)


@dataclass
class StudyPattern:
    average_progress_per_day: float = 0.0
    study_frequency: float = 0.0  # days studied / days elapsed
    average_session_duration: float = 0.0  # minutes
    consistency_score: float = 0.0
    preferred_time_of_day: Optional[str] = None


@dataclass
class PerformancePrediction:
    will_finish_on_time: bool
    estimated_completion_date: datetime
    completion_percentage: float
    days_needed: int
    recommendation: str
    confidence: float


@dataclass
class WeekItem:
    id: str
    type: str
    title: str
    priority: float
    reason: str
    progress: float
    is_review: bool = False


@dataclass
class WeeklyPlan:
    week_number: int
    start_date: datetime
    end_date: datetime
    items: list[WeekItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass
class Recommendation:
    kind: str  # warning | success | info | tip
    title: str
    message: str
    priority: int
    actionable: bool = False
    action: Optional[str] = None
