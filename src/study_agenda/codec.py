"""Conversion between the dataclass model and the exchanged JSON document shape.

The document uses camelCase keys::

    {
      "settings": {"dailyStudyMinutes": 180, ...},
      "disciplines": [{"id": ..., "name": ..., "weight": ..., "topics": [...]}],
      "plans": {"2025-01-06": {"date": ..., "tasks": [...], "isRestDay": false}},
      "calendar": [...],
      "lastReorganized": "2025-01-06"
    }

Units additionally carry derived ``needsReview``, ``priorityScore`` and
``priorityColor`` fields on export; they are recomputed, never read back.
"""
from contextlib import contextmanager
from dataclasses import replace

from study_agenda.config import AppSettings, ConfidenceFactors, ExamPhase, validate_settings
from study_agenda.dates import format_date, to_date
from study_agenda.errors import AgendaError, DocumentError
from study_agenda.models import (
    AgendaState, CalendarEntry, DailyPlan, Discipline, HistoryEntry, Task, Topic, Unit,
)
from study_agenda.priority import priority_badge, tier_color


def _require(data: dict, key: str, kind: str):
    if not isinstance(data, dict):
        raise DocumentError(f"Expected an object for {kind}, got {type(data).__name__}")
    if key not in data:
        raise DocumentError(f"{kind} is missing required field '{key}'")
    return data[key]


def _parse_date(value, kind: str) -> str:
    try:
        return format_date(to_date(value))
    except (TypeError, ValueError) as e:
        raise DocumentError(f"{kind} has an invalid date: {value!r}") from e


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise DocumentError(f"settings field '{key}' must be true or false, got {value!r}")
    return value


@contextmanager
def document_errors(source: str = "agenda document"):
    """Report conversion failures inside the block as DocumentError."""
    try:
        yield
    except AgendaError:
        raise
    except (TypeError, ValueError, AttributeError) as e:
        raise DocumentError(f"Malformed {source}: {e}") from e


# --- settings ---------------------------------------------------------------

def settings_to_dict(settings: AppSettings) -> dict:
    return {
        "dailyStudyMinutes": settings.daily_study_minutes,
        "studyDaysPerWeek": settings.study_days_per_week,
        "maxTasksPerDisciplinePerDay": settings.max_tasks_per_discipline_per_day,
        "maxReviewsPerDay": settings.max_reviews_per_day,
        "autoReplanOnComplete": settings.auto_replan_on_complete,
        "autoReview": settings.auto_review,
        "baseCadence": list(settings.base_cadence),
        "confidenceFactors": {
            "low": settings.confidence_factors.low,
            "high": settings.confidence_factors.high,
        },
        "examPhases": [
            {
                "examDate": p.exam_date,
                "boostedDisciplineIds": list(p.boosted_discipline_ids),
                "boostWeight": p.boost_weight,
            }
            for p in settings.exam_phases
        ],
    }


def settings_from_dict(data: dict) -> AppSettings:
    """Build settings from a document, falling back to defaults per field."""
    if not isinstance(data, dict):
        raise DocumentError("settings must be an object")
    defaults = AppSettings()
    factors = data.get("confidenceFactors") or {}
    settings = AppSettings(
        daily_study_minutes=int(data.get("dailyStudyMinutes", defaults.daily_study_minutes)),
        study_days_per_week=int(data.get("studyDaysPerWeek", defaults.study_days_per_week)),
        max_tasks_per_discipline_per_day=int(
            data.get("maxTasksPerDisciplinePerDay", defaults.max_tasks_per_discipline_per_day)
        ),
        max_reviews_per_day=int(data.get("maxReviewsPerDay", defaults.max_reviews_per_day)),
        auto_replan_on_complete=_flag(data, "autoReplanOnComplete", defaults.auto_replan_on_complete),
        auto_review=_flag(data, "autoReview", defaults.auto_review),
        base_cadence=[int(d) for d in data.get("baseCadence", defaults.base_cadence)],
        confidence_factors=ConfidenceFactors(
            low=float(factors.get("low", defaults.confidence_factors.low)),
            high=float(factors.get("high", defaults.confidence_factors.high)),
        ),
        exam_phases=[
            ExamPhase(
                exam_date=_require(p, "examDate", "exam phase"),
                boosted_discipline_ids=list(p.get("boostedDisciplineIds", [])),
                boost_weight=float(p.get("boostWeight", 0.0)),
            )
            for p in data.get("examPhases", [])
        ],
    )
    validate_settings(settings)
    # exam dates are compared as strings, so drop any time component
    return replace(settings, exam_phases=[
        replace(p, exam_date=format_date(to_date(p.exam_date))) for p in settings.exam_phases
    ])


# --- disciplines ------------------------------------------------------------

def unit_to_dict(unit: Unit) -> dict:
    score, tier = priority_badge(unit)
    return {
        "id": unit.id,
        "name": unit.name,
        "difficulty": unit.difficulty,
        "examIncidence": unit.exam_incidence,
        "lastStudied": unit.last_studied,
        "confidence": unit.confidence,
        "history": [
            {"date": h.date, "confidence": h.confidence, "notes": h.notes}
            for h in unit.history
        ],
        "needsReview": bool(unit.history),
        "priorityScore": score,
        "priorityColor": tier_color(tier),
    }


def unit_from_dict(data: dict) -> Unit:
    unit_id = str(_require(data, "id", "unit"))
    last_studied = data.get("lastStudied")
    return Unit(
        id=unit_id,
        name=_require(data, "name", "unit"),
        difficulty=int(data.get("difficulty", 3)),
        exam_incidence=data.get("examIncidence", "medium"),
        last_studied=_parse_date(last_studied, f"unit '{unit_id}'") if last_studied else None,
        confidence=int(data.get("confidence", 3)),
        history=[
            HistoryEntry(
                date=_parse_date(_require(h, "date", "history entry"), f"history of unit '{unit_id}'"),
                confidence=int(h.get("confidence", 3)),
                notes=h.get("notes", ""),
            )
            for h in data.get("history", [])
        ],
    )


def disciplines_to_list(disciplines: list[Discipline]) -> list[dict]:
    return [
        {
            "id": d.id,
            "name": d.name,
            "weight": d.weight,
            "topics": [
                {"id": t.id, "name": t.name, "units": [unit_to_dict(u) for u in t.units]}
                for t in d.topics
            ],
        }
        for d in disciplines
    ]


def disciplines_from_list(data: list) -> list[Discipline]:
    if not isinstance(data, list):
        raise DocumentError("disciplines must be a list")
    return [
        Discipline(
            id=str(_require(d, "id", "discipline")),
            name=_require(d, "name", "discipline"),
            weight=float(d.get("weight", 1.0)),
            topics=[
                Topic(
                    id=str(_require(t, "id", "topic")),
                    name=_require(t, "name", "topic"),
                    units=[unit_from_dict(u) for u in t.get("units", [])],
                )
                for t in d.get("topics", [])
            ],
        )
        for d in data
    ]


# --- plans ------------------------------------------------------------------

TASK_FIELDS = {
    "id": "id",
    "unitId": "unit_id",
    "topicId": "topic_id",
    "disciplineId": "discipline_id",
    "unitName": "unit_name",
    "topicName": "topic_name",
    "disciplineName": "discipline_name",
    "type": "type",
    "duration": "duration",
    "completed": "completed",
    "completionDate": "completion_date",
    "confidence": "confidence",
    "notes": "notes",
}
REQUIRED_TASK_FIELDS = ("id", "unitId", "topicId", "disciplineId", "type", "duration")


def task_to_dict(task: Task) -> dict:
    return {key: getattr(task, attr) for key, attr in TASK_FIELDS.items()}


def task_from_dict(data: dict) -> Task:
    for key in REQUIRED_TASK_FIELDS:
        _require(data, key, "task")
    values = {attr: data[key] for key, attr in TASK_FIELDS.items() if key in data}
    values.setdefault("unit_name", "")
    values.setdefault("topic_name", "")
    values.setdefault("discipline_name", "")
    values["duration"] = int(values["duration"])
    return Task(**values)


def plans_to_dict(plans: dict[str, DailyPlan]) -> dict:
    return {
        date: {
            "date": plan.date,
            "tasks": [task_to_dict(t) for t in plan.tasks],
            "isRestDay": plan.is_rest_day,
        }
        for date, plan in plans.items()
    }


def plans_from_dict(data: dict) -> dict[str, DailyPlan]:
    if not isinstance(data, dict):
        raise DocumentError("plans must be an object keyed by date")
    return {
        date: DailyPlan(
            date=plan.get("date", date),
            tasks=[task_from_dict(t) for t in plan.get("tasks", [])],
            is_rest_day=bool(plan.get("isRestDay", False)),
        )
        for date, plan in data.items()
    }


# --- calendar and whole state -----------------------------------------------

CALENDAR_FIELDS = {
    "id": "id",
    "date": "date",
    "timestamp": "timestamp",
    "type": "type",
    "title": "title",
    "disciplineId": "discipline_id",
    "disciplineName": "discipline_name",
    "topicId": "topic_id",
    "unitId": "unit_id",
    "notes": "notes",
    "reviewSequence": "review_sequence",
}


def calendar_to_list(entries: list[CalendarEntry]) -> list[dict]:
    return [{key: getattr(e, attr) for key, attr in CALENDAR_FIELDS.items()} for e in entries]


def calendar_from_list(data: list) -> list[CalendarEntry]:
    entries = []
    for item in data:
        for key in ("id", "date", "type", "disciplineId", "topicId", "unitId"):
            _require(item, key, "calendar entry")
        values = {attr: item.get(key) for key, attr in CALENDAR_FIELDS.items()}
        values["timestamp"] = values["timestamp"] or values["date"]
        values["title"] = values["title"] or ""
        values["discipline_name"] = values["discipline_name"] or ""
        values["notes"] = values["notes"] or ""
        entries.append(CalendarEntry(**values))
    return entries


def state_to_dict(state: AgendaState) -> dict:
    return {
        "settings": settings_to_dict(state.settings),
        "disciplines": disciplines_to_list(state.disciplines),
        "plans": plans_to_dict(state.plans),
        "calendar": calendar_to_list(state.calendar),
        "lastReorganized": state.last_reorganized,
    }


def state_from_dict(data: dict) -> AgendaState:
    if not isinstance(data, dict):
        raise DocumentError("An agenda document must be a JSON/YAML object")
    with document_errors():
        return AgendaState(
            settings=settings_from_dict(data.get("settings") or {}),
            disciplines=disciplines_from_list(data.get("disciplines", [])),
            plans=plans_from_dict(data.get("plans") or {}),
            calendar=calendar_from_list(data.get("calendar") or []),
            last_reorganized=data.get("lastReorganized"),
        )
