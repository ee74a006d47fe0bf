from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

from riskboard.services.action_tracking import evaluate, is_overdue


def test_half_year_old_deadline_is_overdue():
    summary = evaluate([{"id": 1, "due": "2024-01-01", "completed": False}], datetime(2024, 6, 1))
    assert summary.overdue_count == 1
    assert summary.nearest_upcoming.id == 1
    assert summary.nearest_upcoming.days_left == -152


def test_due_today_is_not_overdue_until_the_day_ends():
    action = {"id": 1, "due_date": "2024-06-01", "is_completed": False}
    assert not is_overdue(action, datetime(2024, 6, 1, 23, 59, 59))
    assert is_overdue(action, datetime(2024, 6, 2, 0, 0, 0))
    assert evaluate([action], datetime(2024, 6, 1, 12, 0)).nearest_upcoming.days_left == 0


def test_completed_actions_are_ignored():
    actions = [
        {"id": 1, "due_date": "2024-01-01", "is_completed": True},
        {"id": 2, "due_date": "2024-07-01", "is_completed": False},
    ]
    summary = evaluate(actions, date(2024, 6, 1))
    assert summary.overdue_count == 0
    assert summary.nearest_upcoming.id == 2
    assert summary.nearest_upcoming.days_left == 30


def test_equal_due_dates_keep_list_order():
    actions = [
        {"id": "b", "dueDate": "2024-07-01", "isCompleted": False},
        {"id": "a", "dueDate": "2024-07-01", "isCompleted": False},
        {"id": "c", "dueDate": "2024-08-01", "isCompleted": False},
    ]
    assert evaluate(actions, date(2024, 6, 1)).nearest_upcoming.id == "b"


def test_nothing_open_means_no_upcoming():
    assert evaluate([], date(2024, 6, 1)).nearest_upcoming is None
    done = [SimpleNamespace(id=1, due_date=date(2024, 1, 1), is_completed=True)]
    summary = evaluate(done, date(2024, 6, 1))
    assert summary.overdue_count == 0
    assert summary.nearest_upcoming is None


def test_orm_like_objects_with_date_values():
    actions = [
        SimpleNamespace(id=7, due_date=date(2024, 5, 1), is_completed=False),
        SimpleNamespace(id=8, due_date=date(2024, 5, 20), is_completed=False),
    ]
    summary = evaluate(actions, datetime(2024, 5, 10, 9, 0))
    assert summary.overdue_count == 1
    assert summary.nearest_upcoming.id == 7
    assert summary.nearest_upcoming.days_left == -9
