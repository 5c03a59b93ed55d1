"""Task completion: records confidence feedback and optionally re-plans."""
from dataclasses import replace
from datetime import datetime
from typing import Optional

from loguru import logger

from study_agenda.cadence import stable_id
from study_agenda.dates import today_str
from study_agenda.errors import TaskNotFoundError, UnitNotFoundError
from study_agenda.models import (
    AgendaState, CalendarEntry, DailyPlan, Discipline, HistoryEntry, Task, Unit,
)
from study_agenda.scheduler import reorganize_agenda


def find_task(plans: dict[str, DailyPlan], task_id: str, today: str) -> tuple[str, Task]:
    """Locate a task, looking at today's plan before the rest of the horizon."""
    dates = [today] + sorted(d for d in plans if d != today)
    for date in dates:
        plan = plans.get(date)
        if plan is None:
            continue
        for task in plan.tasks:
            if task.id == task_id:
                return date, task
    raise TaskNotFoundError(task_id)


def record_study(
    disciplines: list[Discipline],
    task: Task,
    entry: HistoryEntry,
) -> tuple[list[Discipline], Unit]:
    """Copy-on-write update of the unit a task refers to.

    Only the touched discipline, topic and unit are copied; everything
    else is shared with the input list.
    """
    for d_index, discipline in enumerate(disciplines):
        if discipline.id != task.discipline_id:
            continue
        for t_index, topic in enumerate(discipline.topics):
            if topic.id != task.topic_id:
                continue
            for u_index, unit in enumerate(topic.units):
                if unit.id != task.unit_id:
                    continue
                new_unit = replace(
                    unit,
                    history=[*unit.history, entry],
                    last_studied=entry.date,
                    confidence=entry.confidence,
                )
                units = [*topic.units]
                units[u_index] = new_unit
                topics = [*discipline.topics]
                topics[t_index] = replace(topic, units=units)
                updated = [*disciplines]
                updated[d_index] = replace(discipline, topics=topics)
                return updated, new_unit
    raise UnitNotFoundError(task.unit_key)


def complete_task(
    state: AgendaState,
    task_id: str,
    confidence: int,
    notes: str = "",
    today: Optional[str] = None,
) -> AgendaState:
    """Mark a task done and return the updated state; the input is left untouched."""
    if not 1 <= confidence <= 5:
        raise ValueError(f"Confidence must be 1-5, got {confidence}")
    today = today or today_str()

    date, task = find_task(state.plans, task_id, today)
    entry = HistoryEntry(date=today, confidence=confidence, notes=notes)
    disciplines, unit = record_study(state.disciplines, task, entry)

    done = replace(task, completed=True, completion_date=today, confidence=confidence, notes=notes)
    plan = state.plans[date]
    plans = dict(state.plans)
    plans[date] = replace(plan, tasks=[done if t.id == task_id else t for t in plan.tasks])

    calendar_entry = CalendarEntry(
        id=stable_id("calendar", today, task.discipline_id, task.topic_id, f"{task.unit_id}#{len(unit.history)}"),
        date=today,
        timestamp=datetime.now().isoformat(timespec="seconds"),
        type=task.type,
        title=task.unit_name,
        discipline_id=task.discipline_id,
        discipline_name=task.discipline_name,
        topic_id=task.topic_id,
        unit_id=task.unit_id,
        notes=notes,
        review_sequence=len(unit.history) if task.type == "review" else None,
    )
    logger.info(
        "Completed {} of {} ({}) with confidence {}",
        task.type, task.unit_name, task.discipline_name, confidence,
    )

    new_state = replace(
        state,
        disciplines=disciplines,
        plans=plans,
        calendar=[*state.calendar, calendar_entry],
    )
    if state.settings.auto_replan_on_complete:
        new_state = replace(
            new_state,
            plans=reorganize_agenda(disciplines, state.settings, today),
            last_reorganized=today,
        )
    return new_state
