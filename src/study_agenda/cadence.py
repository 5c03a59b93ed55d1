"""Spaced-repetition review cadence derived from study history."""
import math
import uuid
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from study_agenda.config import REVIEW_TASK_MINUTES, AppSettings
from study_agenda.dates import add_days
from study_agenda.models import Discipline, Task, Unit, iter_units

TASK_NAMESPACE = uuid.UUID("6f1c9a52-3f0e-4a57-9d2b-54c1e7a0b3d8")


@dataclass
class ReviewDue:
    task: Task
    due_date: str


def stable_id(kind: str, date: str, discipline_id: str, topic_id: str, unit_id: str) -> str:
    """Stable id so that re-planning identical inputs yields identical tasks."""
    return str(uuid.uuid5(TASK_NAMESPACE, f"{kind}:{date}:{discipline_id}:{topic_id}:{unit_id}"))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def confidence_factor(confidence: int, settings: AppSettings) -> float:
    if confidence <= 2:
        return settings.confidence_factors.low
    elif confidence >= 4:
        return settings.confidence_factors.high
    return 1.0


def review_interval(history_length: int, confidence: int, settings: AppSettings) -> Optional[int]:
    """Days until the next review, or None if there is nothing (left) to review.

    The cadence index is history_length - 1; past the end of the cadence the
    unit is treated as mastered.
    """
    cadence_index = history_length - 1
    if cadence_index < 0 or cadence_index >= len(settings.base_cadence):
        return None
    base_interval = settings.base_cadence[cadence_index]
    return max(1, round_half_up(base_interval * confidence_factor(confidence, settings)))


def latest_confidence(unit: Unit) -> int:
    if unit.history and unit.history[-1].confidence is not None:
        return unit.history[-1].confidence
    return unit.confidence or 3


def next_review_date(unit: Unit, settings: AppSettings) -> Optional[str]:
    if not unit.history:
        return None
    interval = review_interval(len(unit.history), latest_confidence(unit), settings)
    if interval is None:
        return None
    anchor = unit.last_studied or unit.history[-1].date
    return add_days(anchor, interval)


def build_review_tasks(
    disciplines: list[Discipline], settings: AppSettings, today: str
) -> list[ReviewDue]:
    """Review tasks due today or later, one per unit with remaining cadence."""
    if not settings.auto_review:
        return []

    reviews = []
    for discipline, topic, unit in iter_units(disciplines):
        due_date = next_review_date(unit, settings)
        if due_date is None or due_date < today:
            continue
        task = Task(
            id=stable_id("review", due_date, discipline.id, topic.id, unit.id),
            unit_id=unit.id,
            topic_id=topic.id,
            discipline_id=discipline.id,
            unit_name=unit.name,
            topic_name=topic.name,
            discipline_name=discipline.name,
            type="review",
            duration=REVIEW_TASK_MINUTES,
        )
        reviews.append(ReviewDue(task=task, due_date=due_date))
    logger.debug("Built {} review task(s) due on or after {}", len(reviews), today)
    return reviews
