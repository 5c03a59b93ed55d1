"""Priority scoring for study units."""
from typing import Optional

from study_agenda.config import ExamPhase
from study_agenda.dates import days_between
from study_agenda.models import INCIDENCE_WEIGHTS, Discipline, Unit

UNSTUDIED_BONUS = 1000
PASSED_EXAM_FACTOR = 0.01

BADGE_INCIDENCE_LEVELS = {"low": 1, "medium": 2, "high": 3}
TIER_COLORS = {"low": "green", "medium": "yellow", "high": "red"}


def _recency_adjustment(score: float, days_since: int) -> float:
    if days_since <= 3:
        return score * 0.1
    elif days_since <= 7:
        return score * 0.5
    elif days_since > 90:
        return score + 100
    elif days_since > 30:
        return score + 50
    return score + 15


def _exam_adjustment(score: float, discipline_id: str, today: str, exam_phases: list[ExamPhase]) -> float:
    """Boost disciplines whose exam is next; damp the ones whose exam has passed.

    Once every exam date is behind us no adjustment applies.
    """
    phases = sorted(exam_phases, key=lambda p: p.exam_date)
    active = next((p for p in phases if today < p.exam_date), None)
    if active is None:
        return score
    if discipline_id in active.boosted_discipline_ids:
        return score + active.boost_weight
    passed = [p for p in phases if p.exam_date <= today]
    if any(discipline_id in p.boosted_discipline_ids for p in passed):
        return score * PASSED_EXAM_FACTOR
    return score


def score_unit(
    unit: Unit,
    discipline: Discipline,
    today: str,
    exam_phases: Optional[list[ExamPhase]] = None,
) -> float:
    """Return the priority of a unit; higher means more urgent."""
    score = (discipline.weight or 1) * 20
    score += (unit.difficulty or 3) * 5
    score += INCIDENCE_WEIGHTS.get(unit.exam_incidence, 5)
    score += (6 - (unit.confidence or 3)) * 10

    if unit.last_studied:
        score = _recency_adjustment(score, days_between(unit.last_studied, today))
    else:
        score += UNSTUDIED_BONUS

    return _exam_adjustment(score, discipline.id, today, exam_phases or [])


def get_priority_tier(score: int) -> str:
    if score <= 6:
        return "low"
    elif score <= 12:
        return "medium"
    return "high"


def tier_color(tier: str) -> str:
    return TIER_COLORS.get(tier, "white")


def priority_badge(unit: Unit) -> tuple[int, str]:
    """Coarse (score, tier) badge from incidence, difficulty and review need."""
    incidence = BADGE_INCIDENCE_LEVELS.get(unit.exam_incidence, 2)
    difficulty = min(3, max(1, round(unit.difficulty or 1)))
    review_weight = 2 if unit.history else 1
    score = incidence * difficulty * review_weight
    return score, get_priority_tier(score)
