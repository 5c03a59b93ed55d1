"""Data classes for the study agenda domain model."""
from dataclasses import dataclass, field
from typing import Optional

from study_agenda.config import AppSettings

INCIDENCE_WEIGHTS = {"low": 1, "medium": 5, "high": 10}
TASK_TYPES = ("study", "review")


@dataclass
class HistoryEntry:
    date: str
    confidence: int
    notes: str = ""


@dataclass
class Unit:
    id: str
    name: str
    difficulty: int = 3
    exam_incidence: str = "medium"
    last_studied: Optional[str] = None
    confidence: int = 3
    history: list[HistoryEntry] = field(default_factory=list)


@dataclass
class Topic:
    id: str
    name: str
    units: list[Unit] = field(default_factory=list)


@dataclass
class Discipline:
    id: str
    name: str
    weight: float = 1.0
    topics: list[Topic] = field(default_factory=list)


@dataclass
class Task:
    id: str
    unit_id: str
    topic_id: str
    discipline_id: str
    unit_name: str
    topic_name: str
    discipline_name: str
    type: str
    duration: int
    completed: bool = False
    completion_date: Optional[str] = None
    confidence: Optional[int] = None
    notes: Optional[str] = None

    @property
    def unit_key(self) -> tuple[str, str, str]:
        return (self.discipline_id, self.topic_id, self.unit_id)


@dataclass
class DailyPlan:
    date: str
    tasks: list[Task] = field(default_factory=list)
    is_rest_day: bool = False

    @property
    def minutes(self) -> int:
        return sum(t.duration for t in self.tasks)


@dataclass
class CalendarEntry:
    id: str
    date: str
    timestamp: str
    type: str
    title: str
    discipline_id: str
    discipline_name: str
    topic_id: str
    unit_id: str
    notes: str = ""
    review_sequence: Optional[int] = None


@dataclass
class AgendaState:
    settings: AppSettings = field(default_factory=AppSettings)
    disciplines: list[Discipline] = field(default_factory=list)
    plans: dict[str, DailyPlan] = field(default_factory=dict)
    calendar: list[CalendarEntry] = field(default_factory=list)
    last_reorganized: Optional[str] = None


def iter_units(disciplines: list[Discipline]):
    """Yield (discipline, topic, unit) in declaration order."""
    for discipline in disciplines:
        for topic in discipline.topics:
            for unit in topic.units:
                yield discipline, topic, unit
