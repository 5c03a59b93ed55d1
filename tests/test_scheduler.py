# tests/test_scheduler.py
import copy
from collections import Counter

import pytest

from study_agenda.config import AppSettings
from study_agenda.dates import add_days, day_of_week
from study_agenda.models import HistoryEntry, Unit
from study_agenda.scheduler import is_study_day, reorganize_agenda
from study_agenda.seed import sample_state

from conftest import TODAY, make_discipline

WEEK = ["2025-01-06", "2025-01-07", "2025-01-08", "2025-01-09",
        "2025-01-10", "2025-01-11", "2025-01-12"]  # Mon..Sun


def _fresh(unit_id, name=None, **kwargs):
    return Unit(id=unit_id, name=name or unit_id, **kwargs)


def _all_tasks(plans):
    return [(date, t) for date, plan in plans.items() for t in plan.tasks]


@pytest.mark.parametrize("count,expected", [
    (7, [True] * 7),
    (6, [True] * 6 + [False]),
    (5, [True] * 5 + [False, False]),
    (4, [True, True, False, True, True, False, False]),
    (3, [True, False, True, False, True, False, False]),
    (2, [True, False, True, False, False, False, False]),
    (1, [True, False, False, False, False, False, False]),
    (0, [False] * 7),
    (8, [False] * 7),
])
def test_is_study_day(count, expected):
    assert [is_study_day(d, count) for d in WEEK] == expected


def test_empty_disciplines_give_empty_agenda(settings):
    assert reorganize_agenda([], settings, TODAY) == {}


def test_horizon_is_ninety_days(disciplines, settings):
    plans = reorganize_agenda(disciplines, settings, TODAY)
    assert len(plans) == 90
    assert min(plans) == TODAY
    assert max(plans) == add_days(TODAY, 89)
    assert all(plan.date == date for date, plan in plans.items())


def test_two_fresh_units_fill_first_weekday():
    """Five study days and 90 minutes: two 45-minute tasks fit exactly on Monday."""
    settings = AppSettings(study_days_per_week=5, daily_study_minutes=90)
    disciplines = [
        make_discipline("mat", [_fresh("u1", difficulty=3)]),
        make_discipline("nat", [_fresh("u1", difficulty=3)]),
    ]
    plans = reorganize_agenda(disciplines, settings, TODAY)
    first = plans[TODAY]
    assert not first.is_rest_day
    assert len(first.tasks) == 2
    assert {t.discipline_id for t in first.tasks} == {"mat", "nat"}
    assert all(t.type == "study" and t.duration == 45 for t in first.tasks)
    for date, plan in plans.items():
        if day_of_week(date) >= 5:
            assert plan.is_rest_day
            assert plan.tasks == []


def test_discipline_cap_spreads_units_over_days():
    settings = AppSettings(daily_study_minutes=180, max_tasks_per_discipline_per_day=2)
    units = [_fresh(f"u{i}") for i in range(5)]
    plans = reorganize_agenda([make_discipline("mat", units)], settings, TODAY)
    assert [len(plans[d].tasks) for d in WEEK[:4]] == [2, 2, 1, 0]
    assert [t.unit_id for t in plans[WEEK[0]].tasks] == ["u0", "u1"]


def test_highest_priority_scheduled_first():
    settings = AppSettings(daily_study_minutes=45)
    stale = _fresh("stale", last_studied="2024-11-20")
    new = _fresh("new")
    plans = reorganize_agenda([make_discipline("mat", [stale, new])], settings, TODAY)
    assert [t.unit_id for t in plans["2025-01-06"].tasks] == ["new"]
    assert [t.unit_id for t in plans["2025-01-07"].tasks] == ["stale"]


def test_ties_keep_declaration_order():
    settings = AppSettings(daily_study_minutes=45)
    disciplines = [make_discipline("b", [_fresh("x")]), make_discipline("a", [_fresh("x")])]
    plans = reorganize_agenda(disciplines, settings, TODAY)
    assert plans["2025-01-06"].tasks[0].discipline_id == "b"
    assert plans["2025-01-07"].tasks[0].discipline_id == "a"


def test_review_placed_on_due_date_and_not_studied(disciplines, settings):
    plans = reorganize_agenda(disciplines, settings, TODAY)
    history_tasks = [(d, t) for d, t in _all_tasks(plans)
                     if t.discipline_id == "history" and t.unit_id == "u1"]
    assert len(history_tasks) == 1
    date, task = history_tasks[0]
    assert date == TODAY
    assert task.type == "review"
    assert task.duration == 25


def test_review_cap_drops_extra_reviews():
    settings = AppSettings(max_reviews_per_day=1)
    studied = [
        Unit(id=f"r{i}", name=f"r{i}", last_studied="2025-01-05",
             history=[HistoryEntry(date="2025-01-05", confidence=3)])
        for i in range(2)
    ]
    plans = reorganize_agenda([make_discipline("mat", studied)], settings, TODAY)
    tasks = [t for _, t in _all_tasks(plans)]
    assert [t.unit_id for t in tasks] == ["r0"]


def test_review_dropped_when_day_full():
    settings = AppSettings(daily_study_minutes=45)
    studied = [
        Unit(id=f"r{i}", name=f"r{i}", last_studied="2025-01-05",
             history=[HistoryEntry(date="2025-01-05", confidence=3)])
        for i in range(2)
    ]
    plans = reorganize_agenda([make_discipline("mat", studied)], settings, TODAY)
    assert [t.unit_id for t in plans[TODAY].tasks] == ["r0"]
    assert len(_all_tasks(plans)) == 1


def test_review_on_rest_day_dropped():
    settings = AppSettings(study_days_per_week=5)
    history = [HistoryEntry(date=d, confidence=3) for d in ("2025-01-01", "2025-01-02", "2025-01-04")]
    unit = Unit(id="r", name="r", last_studied="2025-01-04", history=history)
    plans = reorganize_agenda([make_discipline("mat", [unit])], settings, TODAY)
    # due 2025-01-11, a Saturday
    assert _all_tasks(plans) == []


def test_unrecognized_study_days_schedule_nothing():
    settings = AppSettings(study_days_per_week=0)
    plans = reorganize_agenda([make_discipline("mat", [_fresh("u1")])], settings, TODAY)
    assert len(plans) == 90
    assert all(p.is_rest_day and not p.tasks for p in plans.values())


def test_empty_cadence_means_no_reviews(disciplines):
    plans = reorganize_agenda(disciplines, AppSettings(base_cadence=[]), TODAY)
    assert all(t.type == "study" for _, t in _all_tasks(plans))


def test_reorganize_is_deterministic(disciplines, settings):
    assert reorganize_agenda(disciplines, settings, TODAY) == reorganize_agenda(disciplines, settings, TODAY)


def test_reorganize_does_not_mutate_inputs(disciplines, settings):
    before = copy.deepcopy(disciplines)
    settings_before = copy.deepcopy(settings)
    reorganize_agenda(disciplines, settings, TODAY)
    assert disciplines == before
    assert settings == settings_before


@pytest.mark.parametrize("settings", [
    AppSettings(),
    AppSettings(daily_study_minutes=100, study_days_per_week=3, max_reviews_per_day=1),
    AppSettings(daily_study_minutes=45, study_days_per_week=7, max_tasks_per_discipline_per_day=1),
])
def test_invariants_on_sample_agenda(settings):
    disciplines = sample_state().disciplines
    disciplines[0].topics[0].units[0].last_studied = "2025-01-05"
    disciplines[0].topics[0].units[0].history = [HistoryEntry(date="2025-01-05", confidence=2)]
    plans = reorganize_agenda(disciplines, settings, TODAY)

    placed = Counter()
    for date, plan in plans.items():
        assert plan.minutes <= settings.daily_study_minutes
        if not is_study_day(date, settings.study_days_per_week):
            assert plan.is_rest_day
            assert plan.tasks == []
        per_discipline = Counter(t.discipline_id for t in plan.tasks)
        assert all(n <= settings.max_tasks_per_discipline_per_day for n in per_discipline.values())
        assert sum(1 for t in plan.tasks if t.type == "review") <= settings.max_reviews_per_day
        placed.update(t.unit_key for t in plan.tasks)
    assert all(n == 1 for n in placed.values())
    assert len(placed) == 17
