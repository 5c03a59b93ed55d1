import pytest

from study_agenda.config import AppSettings
from study_agenda.models import Discipline, HistoryEntry, Topic, Unit

# A Monday
TODAY = "2025-01-06"


def make_discipline(disc_id: str, units: list[Unit], weight: float = 1.0) -> Discipline:
    """One discipline holding a single topic with the given units."""
    return Discipline(
        id=disc_id,
        name=disc_id.title(),
        weight=weight,
        topics=[Topic(id=f"{disc_id}-t1", name=f"{disc_id.title()} basics", units=units)],
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def tmp_data(tmp_path):
    """Provide a temporary agenda file path for tests."""
    return str(tmp_path / "agenda.json")


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def disciplines():
    """Two disciplines: one fresh, one with a unit studied yesterday."""
    math_units = [
        Unit(id="u1", name="Permutations", difficulty=2, exam_incidence="high"),
        Unit(id="u2", name="Probability", difficulty=4, exam_incidence="high"),
        Unit(id="u3", name="Plane areas", difficulty=2, exam_incidence="medium"),
    ]
    history_units = [
        Unit(
            id="u1", name="Colonial period", difficulty=3, exam_incidence="medium",
            last_studied="2025-01-05", confidence=3,
            history=[HistoryEntry(date="2025-01-05", confidence=3, notes="first pass")],
        ),
        Unit(id="u2", name="Republic era", difficulty=3, exam_incidence="high"),
    ]
    return [
        make_discipline("math", math_units, weight=1.2),
        make_discipline("history", history_units),
    ]
