"""Agenda statistics, discipline summaries and priority ranking."""
from study_agenda.cadence import next_review_date
from study_agenda.config import AppSettings
from study_agenda.models import DailyPlan, Discipline, iter_units
from study_agenda.priority import priority_badge, score_unit


def get_load_label(minutes: int, daily_minutes: int) -> str:
    if daily_minutes <= 0 or minutes == 0:
        return "FREE"
    ratio = minutes / daily_minutes
    if ratio >= 0.9:
        return "FULL"
    elif ratio >= 0.5:
        return "BUSY"
    return "LIGHT"


def get_load_color(label: str) -> str:
    return {"FULL": "red", "BUSY": "yellow", "LIGHT": "green"}.get(label, "dim")


def get_agenda_stats(plans: dict[str, DailyPlan], today: str) -> dict:
    study_days = [p for p in plans.values() if not p.is_rest_day]
    tasks = [t for p in plans.values() for t in p.tasks]
    today_plan = plans.get(today)
    return {
        "days": len(plans),
        "study_days": len(study_days),
        "rest_days": len(plans) - len(study_days),
        "tasks_scheduled": len(tasks),
        "tasks_completed": sum(1 for t in tasks if t.completed),
        "study_tasks": sum(1 for t in tasks if t.type == "study"),
        "review_tasks": sum(1 for t in tasks if t.type == "review"),
        "minutes_scheduled": sum(t.duration for t in tasks),
        "today_minutes": today_plan.minutes if today_plan else 0,
        "today_tasks": len(today_plan.tasks) if today_plan else 0,
    }


def get_discipline_summaries(disciplines: list[Discipline]) -> list[dict]:
    results = []
    for d in disciplines:
        units = [u for t in d.topics for u in t.units]
        studied = [u for u in units if u.last_studied]
        avg_conf = (
            round(sum(u.confidence for u in studied) / len(studied), 1) if studied else 0.0
        )
        results.append({
            "discipline_id": d.id,
            "name": d.name,
            "weight": d.weight,
            "topics": len(d.topics),
            "units": len(units),
            "studied": len(studied),
            "pending": len(units) - len(studied),
            "avg_confidence": avg_conf,
        })
    return results


def get_priority_ranking(
    disciplines: list[Discipline], settings: AppSettings, today: str, limit: int = 10
) -> list[dict]:
    ranked = []
    for index, (discipline, topic, unit) in enumerate(iter_units(disciplines)):
        badge_score, tier = priority_badge(unit)
        ranked.append({
            "unit_id": unit.id,
            "unit_name": unit.name,
            "topic_name": topic.name,
            "discipline_name": discipline.name,
            "score": round(score_unit(unit, discipline, today, settings.exam_phases), 1),
            "tier": tier,
            "badge_score": badge_score,
            "last_studied": unit.last_studied,
            "_index": index,
        })
    ranked.sort(key=lambda r: (-r["score"], r["_index"]))
    for r in ranked:
        del r["_index"]
    return ranked[:limit]


def get_due_reviews(disciplines: list[Discipline], settings: AppSettings, today: str) -> list[dict]:
    """Next review date per unit still on its cadence, soonest first (overdue included)."""
    due = []
    for discipline, topic, unit in iter_units(disciplines):
        date = next_review_date(unit, settings)
        if date is None:
            continue
        due.append({
            "unit_name": unit.name,
            "discipline_name": discipline.name,
            "due_date": date,
            "overdue": date < today,
            "times_studied": len(unit.history),
        })
    return sorted(due, key=lambda r: r["due_date"])
