# tests/test_dashboard.py
from study_agenda.dashboard import (
    get_agenda_stats, get_discipline_summaries, get_due_reviews,
    get_load_color, get_load_label, get_priority_ranking,
)
from study_agenda.scheduler import reorganize_agenda

from conftest import TODAY


def test_load_labels():
    assert get_load_label(0, 180) == "FREE"
    assert get_load_label(45, 180) == "LIGHT"
    assert get_load_label(90, 180) == "BUSY"
    assert get_load_label(170, 180) == "FULL"
    assert get_load_label(45, 0) == "FREE"


def test_load_colors():
    assert get_load_color("FULL") == "red"
    assert get_load_color("BUSY") == "yellow"
    assert get_load_color("LIGHT") == "green"
    assert get_load_color("FREE") == "dim"


def test_agenda_stats(disciplines, settings):
    plans = reorganize_agenda(disciplines, settings, TODAY)
    stats = get_agenda_stats(plans, TODAY)
    assert stats["days"] == 90
    assert stats["study_days"] + stats["rest_days"] == 90
    assert stats["review_tasks"] == 1
    assert stats["study_tasks"] == 4
    assert stats["tasks_scheduled"] == 5
    assert stats["tasks_completed"] == 0
    assert stats["minutes_scheduled"] == 25 + 4 * 45
    assert stats["today_tasks"] == 4
    assert stats["today_minutes"] == 160


def test_agenda_stats_empty():
    stats = get_agenda_stats({}, TODAY)
    assert stats["tasks_scheduled"] == 0
    assert stats["today_minutes"] == 0


def test_discipline_summaries(disciplines):
    summaries = get_discipline_summaries(disciplines)
    math, history = summaries
    assert math["units"] == 3
    assert math["studied"] == 0
    assert math["pending"] == 3
    assert math["avg_confidence"] == 0.0
    assert history["studied"] == 1
    assert history["pending"] == 1
    assert history["avg_confidence"] == 3.0


def test_priority_ranking(disciplines, settings):
    ranking = get_priority_ranking(disciplines, settings, TODAY, limit=3)
    assert len(ranking) == 3
    assert [r["unit_name"] for r in ranking] == ["Probability", "Republic era", "Permutations"]
    assert ranking[0]["score"] == 1084.0
    assert ranking[0]["tier"] == "medium"
    scores = [r["score"] for r in get_priority_ranking(disciplines, settings, TODAY)]
    assert scores == sorted(scores, reverse=True)


def test_due_reviews(disciplines, settings):
    due = get_due_reviews(disciplines, settings, TODAY)
    assert len(due) == 1
    assert due[0]["unit_name"] == "Colonial period"
    assert due[0]["due_date"] == TODAY
    assert due[0]["overdue"] is False
    assert due[0]["times_studied"] == 1


def test_due_reviews_flags_overdue(disciplines, settings):
    due = get_due_reviews(disciplines, settings, "2025-01-20")
    assert due[0]["overdue"] is True
