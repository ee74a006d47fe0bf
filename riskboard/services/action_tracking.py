# riskboard/services/action_tracking.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from riskboard.core.dates import as_moment, days_until, end_of_day, parse_calendar_date, start_of_day


@dataclass(frozen=True)
class UpcomingAction:
    id: Any
    days_left: int


@dataclass(frozen=True)
class ActionSummary:
    overdue_count: int
    nearest_upcoming: Optional[UpcomingAction]


def _field(item: Any, name: str, *aliases: str) -> Any:
    """Read a field from an ORM object or a dict (dicts may use camelCase keys)."""
    for key in (name, *aliases):
        if isinstance(item, dict):
            if key in item:
                return item[key]
        elif hasattr(item, key):
            return getattr(item, key)
    return None


def _due(item: Any) -> Optional[date]:
    return parse_calendar_date(_field(item, "due_date", "dueDate", "due"), field="due_date")


def _completed(item: Any) -> bool:
    return bool(_field(item, "is_completed", "isCompleted", "completed"))


def is_overdue(action: Any, now: Union[date, datetime]) -> bool:
    """Incomplete and the whole due day (until 23:59:59.999 local) is behind ``now``."""
    if _completed(action):
        return False
    due = _due(action)
    if due is None:
        return False
    return end_of_day(due) < as_moment(now)


def evaluate(actions: Iterable[Any], now: Union[date, datetime]) -> ActionSummary:
    """
    Input: ActionItem ORM rows or dicts with due_date / is_completed / id.
    - overdue_count: incomplete actions whose due day has fully passed
    - nearest_upcoming: earliest-due incomplete action (list order breaks ties);
      days_left is negative when even the nearest one is already late
    """
    items = list(actions)
    overdue_count = sum(1 for a in items if is_overdue(a, now))

    open_items = [(a, _due(a)) for a in items if not _completed(a)]
    open_items = [(a, d) for a, d in open_items if d is not None]
    if not open_items:
        return ActionSummary(overdue_count=overdue_count, nearest_upcoming=None)

    # stable sort: equal dates keep list order
    nearest, nearest_due = sorted(open_items, key=lambda pair: pair[1])[0]
    return ActionSummary(
        overdue_count=overdue_count,
        nearest_upcoming=UpcomingAction(
            id=_field(nearest, "id"),
            days_left=days_until(start_of_day(nearest_due), now),
        ),
    )
