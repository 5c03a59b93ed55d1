"""Planner settings, defaults and validation."""
from dataclasses import dataclass, field
from pathlib import Path

from study_agenda.dates import to_date
from study_agenda.errors import SettingsError

DEFAULT_DATA_DIR = Path.home() / ".study_agenda"
DEFAULT_DATA_PATH = str(DEFAULT_DATA_DIR / "agenda.json")
DEFAULT_LOG_PATH = str(DEFAULT_DATA_DIR / "agenda.log")

PLANNING_HORIZON_DAYS = 90
STUDY_TASK_MINUTES = 45
REVIEW_TASK_MINUTES = 25


@dataclass
class ConfidenceFactors:
    low: float = 0.8
    high: float = 1.5


@dataclass
class ExamPhase:
    """An exam date and the disciplines that get a boost until it passes."""
    exam_date: str
    boosted_discipline_ids: list[str] = field(default_factory=list)
    boost_weight: float = 0.0


@dataclass
class AppSettings:
    daily_study_minutes: int = 180
    study_days_per_week: int = 6
    max_tasks_per_discipline_per_day: int = 2
    max_reviews_per_day: int = 3
    auto_replan_on_complete: bool = True
    auto_review: bool = True
    base_cadence: list[int] = field(default_factory=lambda: [1, 3, 7])
    confidence_factors: ConfidenceFactors = field(default_factory=ConfidenceFactors)
    exam_phases: list[ExamPhase] = field(default_factory=list)


def validate_settings(settings: AppSettings) -> None:
    """Raise SettingsError listing every invalid field."""
    problems = []
    if settings.daily_study_minutes <= 0:
        problems.append("daily_study_minutes must be greater than 0")
    if not 1 <= settings.study_days_per_week <= 7:
        problems.append("study_days_per_week must be between 1 and 7")
    if settings.max_tasks_per_discipline_per_day <= 0:
        problems.append("max_tasks_per_discipline_per_day must be greater than 0")
    if settings.max_reviews_per_day <= 0:
        problems.append("max_reviews_per_day must be greater than 0")
    if any(days <= 0 for days in settings.base_cadence):
        problems.append("base_cadence intervals must be positive")
    if settings.confidence_factors.low < 0 or settings.confidence_factors.high < 0:
        problems.append("confidence_factors must not be negative")
    for phase in settings.exam_phases:
        try:
            to_date(phase.exam_date)
        except (TypeError, ValueError):
            problems.append(f"exam_date {phase.exam_date!r} is not a YYYY-MM-DD date")
    if problems:
        raise SettingsError(problems)
