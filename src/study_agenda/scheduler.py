"""Agenda scheduler: lays review and study tasks over the planning horizon."""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from study_agenda.cadence import ReviewDue, build_review_tasks, stable_id
from study_agenda.config import PLANNING_HORIZON_DAYS, STUDY_TASK_MINUTES, AppSettings
from study_agenda.dates import date_range, day_of_week, today_str
from study_agenda.models import DailyPlan, Discipline, Task, Topic, Unit, iter_units
from study_agenda.priority import score_unit

# Monday=0 ... Sunday=6
STUDY_WEEKDAYS = {
    1: {0},
    2: {0, 2},
    3: {0, 2, 4},
    4: {0, 1, 3, 4},
}


@dataclass
class Candidate:
    discipline: Discipline
    topic: Topic
    unit: Unit
    score: float
    index: int


def is_study_day(date: str, study_days_per_week: int) -> bool:
    """Unrecognized day counts schedule nothing."""
    weekday = day_of_week(date)
    if study_days_per_week == 7:
        return True
    if study_days_per_week == 6:
        return weekday != 6
    if study_days_per_week == 5:
        return weekday < 5
    return weekday in STUDY_WEEKDAYS.get(study_days_per_week, set())


def build_empty_plans(start: str, settings: AppSettings, days: int = PLANNING_HORIZON_DAYS) -> dict[str, DailyPlan]:
    return {
        date: DailyPlan(date=date, is_rest_day=not is_study_day(date, settings.study_days_per_week))
        for date in date_range(start, days)
    }


def place_reviews(plans: dict[str, DailyPlan], reviews: list[ReviewDue], settings: AppSettings) -> int:
    """Put each review on its due date if the day has room; otherwise drop it."""
    placed = 0
    ordered = sorted(enumerate(reviews), key=lambda item: (item[1].due_date, item[0]))
    for _, review in ordered:
        plan = plans.get(review.due_date)
        if plan is None or plan.is_rest_day:
            continue
        review_count = sum(1 for t in plan.tasks if t.type == "review")
        if (
            plan.minutes + review.task.duration <= settings.daily_study_minutes
            and review_count < settings.max_reviews_per_day
        ):
            plan.tasks.append(review.task)
            placed += 1
        else:
            logger.debug("Dropped review of {} on full day {}", review.task.unit_name, review.due_date)
    return placed


def rank_candidates(
    disciplines: list[Discipline],
    excluded: set[tuple[str, str, str]],
    settings: AppSettings,
    today: str,
) -> list[Candidate]:
    """Units open for fresh study, most urgent first; ties keep declaration order."""
    candidates = []
    for index, (discipline, topic, unit) in enumerate(iter_units(disciplines)):
        if (discipline.id, topic.id, unit.id) in excluded:
            continue
        score = score_unit(unit, discipline, today, settings.exam_phases)
        candidates.append(Candidate(discipline, topic, unit, score, index))
    candidates.sort(key=lambda c: (-c.score, c.index))
    return candidates


def _study_task(candidate: Candidate, date: str) -> Task:
    discipline, topic, unit = candidate.discipline, candidate.topic, candidate.unit
    return Task(
        id=stable_id("study", date, discipline.id, topic.id, unit.id),
        unit_id=unit.id,
        topic_id=topic.id,
        discipline_id=discipline.id,
        unit_name=unit.name,
        topic_name=topic.name,
        discipline_name=discipline.name,
        type="study",
        duration=STUDY_TASK_MINUTES,
    )


def fill_day(
    plan: DailyPlan,
    candidates: list[Candidate],
    placed: set[int],
    settings: AppSettings,
) -> list[int]:
    """Greedily add study tasks to one day.

    Returns the positions (into candidates) that were placed; the caller
    adds them to the placed set so no unit is scheduled twice.
    """
    minutes_used = plan.minutes
    per_discipline: dict[str, int] = {}
    for task in plan.tasks:
        per_discipline[task.discipline_id] = per_discipline.get(task.discipline_id, 0) + 1

    newly_placed = []
    for position, candidate in enumerate(candidates):
        if minutes_used >= settings.daily_study_minutes:
            break
        if position in placed:
            continue
        discipline_id = candidate.discipline.id
        if (
            minutes_used + STUDY_TASK_MINUTES <= settings.daily_study_minutes
            and per_discipline.get(discipline_id, 0) < settings.max_tasks_per_discipline_per_day
        ):
            plan.tasks.append(_study_task(candidate, plan.date))
            minutes_used += STUDY_TASK_MINUTES
            per_discipline[discipline_id] = per_discipline.get(discipline_id, 0) + 1
            newly_placed.append(position)
    return newly_placed


def reorganize_agenda(
    disciplines: list[Discipline],
    settings: AppSettings,
    today: Optional[str] = None,
) -> dict[str, DailyPlan]:
    """Build a fresh plan for the horizon starting today.

    Inputs are never mutated. Reviews are placed on their due dates first,
    then remaining capacity is filled with the highest-priority units.
    """
    if not disciplines:
        return {}
    today = today or today_str()

    plans = build_empty_plans(today, settings)
    reviews = build_review_tasks(disciplines, settings, today)
    reviews_placed = place_reviews(plans, reviews, settings)

    reviewed_units = {review.task.unit_key for review in reviews}
    candidates = rank_candidates(disciplines, reviewed_units, settings, today)

    placed: set[int] = set()
    for date in sorted(plans):
        plan = plans[date]
        if plan.is_rest_day:
            continue
        if len(placed) == len(candidates):
            break
        placed.update(fill_day(plan, candidates, placed, settings))

    logger.info(
        "Reorganized agenda from {}: {} review(s) placed of {}, {} of {} unit(s) scheduled for study",
        today, reviews_placed, len(reviews), len(placed), len(candidates),
    )
    return plans
