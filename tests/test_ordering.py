# tests/test_ordering.py

from __future__ import annotations

import random
from datetime import timedelta

from taskflow.tasks.ordering import (
    DueState,
    classify,
    format_due_date,
    is_due_soon,
    is_overdue,
    sort_tasks,
    task_stats,
)
from taskflow.tasks.task_models import TaskPriority
from taskflow.tasks.task_store import TaskStore

from .fakes import FIXED_NOW, FakeClock, make_task

HOUR = timedelta(hours=1)


def _mixed_tasks():
    return [
        make_task(1, priority=TaskPriority.LOW, due_date=FIXED_NOW + HOUR),
        make_task(2, priority=TaskPriority.HIGH),
        make_task(3, priority=TaskPriority.MEDIUM, due_date=FIXED_NOW + 5 * HOUR),
        make_task(4, priority=TaskPriority.HIGH, due_date=FIXED_NOW + 3 * HOUR),
        make_task(5, priority=TaskPriority.MEDIUM, created_at=FIXED_NOW + HOUR),
        make_task(6, priority=TaskPriority.HIGH, due_date=FIXED_NOW - HOUR),
        make_task(7, priority=TaskPriority.MEDIUM),
        make_task(8, priority=TaskPriority.MEDIUM, due_date=FIXED_NOW + 2 * HOUR),
    ]


def test_canonical_order() -> None:
    ordered = sort_tasks(_mixed_tasks())
    # high: dated asc (6, 4) then undated (2); medium: dated asc (8, 3),
    # undated newest first (5, 7); low: 1
    assert [t.id for t in ordered] == [6, 4, 2, 8, 3, 5, 7, 1]


def test_order_properties_hold_for_adjacent_pairs() -> None:
    ordered = sort_tasks(_mixed_tasks())
    for a, b in zip(ordered, ordered[1:]):
        assert a.priority.rank >= b.priority.rank
        if a.priority == b.priority:
            assert not (a.due_date is None and b.due_date is not None)
            if a.due_date is not None and b.due_date is not None:
                assert a.due_date <= b.due_date


def test_order_is_deterministic_regardless_of_input_order() -> None:
    tasks = _mixed_tasks()
    expected = [t.id for t in sort_tasks(tasks)]
    rng = random.Random(7)
    for _ in range(10):
        rng.shuffle(tasks)
        assert [t.id for t in sort_tasks(tasks)] == expected


def test_overdue_classification() -> None:
    late = make_task(1, due_date=FIXED_NOW - timedelta(seconds=1))
    done = make_task(2, due_date=FIXED_NOW - timedelta(seconds=1), completed=True)
    exactly_now = make_task(3, due_date=FIXED_NOW)

    assert is_overdue(late, FIXED_NOW)
    assert classify(late, FIXED_NOW) is DueState.OVERDUE
    assert not is_overdue(done, FIXED_NOW)
    assert classify(done, FIXED_NOW) is DueState.NONE
    assert not is_overdue(exactly_now, FIXED_NOW)
    assert not is_overdue(make_task(4), FIXED_NOW)


def test_due_soon_is_strictly_inside_48h() -> None:
    assert is_due_soon(make_task(1, due_date=FIXED_NOW + 47 * HOUR), FIXED_NOW)
    assert not is_due_soon(make_task(2, due_date=FIXED_NOW + 48 * HOUR), FIXED_NOW)
    assert not is_due_soon(make_task(3, due_date=FIXED_NOW), FIXED_NOW)
    assert not is_due_soon(make_task(4, due_date=FIXED_NOW + HOUR, completed=True), FIXED_NOW)
    assert not is_due_soon(make_task(5, due_date=FIXED_NOW - HOUR), FIXED_NOW)
    assert classify(make_task(6, due_date=FIXED_NOW + HOUR), FIXED_NOW) is DueState.DUE_SOON


def test_format_due_date_labels() -> None:
    day = timedelta(days=1)
    assert format_due_date(FIXED_NOW - 2 * day, FIXED_NOW) == "Overdue by 2 days"
    assert format_due_date(FIXED_NOW - 1.5 * day, FIXED_NOW) == "Overdue by 1 day"
    assert format_due_date(FIXED_NOW - HOUR, FIXED_NOW) == "Due today"
    assert format_due_date(FIXED_NOW + HOUR, FIXED_NOW) == "Due tomorrow"
    assert format_due_date(FIXED_NOW + 3 * day, FIXED_NOW) == "Due in 3 days"
    assert format_due_date(FIXED_NOW + 30 * day, FIXED_NOW) == "Nov 17, 2026"


def test_task_stats_counts_pending_and_overdue() -> None:
    tasks = [
        make_task(1, due_date=FIXED_NOW - HOUR),
        make_task(2, due_date=FIXED_NOW - HOUR, completed=True),
        make_task(3, due_date=FIXED_NOW + HOUR),
        make_task(4, completed=True),
    ]
    stats = task_stats(tasks, FIXED_NOW)
    assert (stats.total, stats.pending, stats.overdue) == (4, 2, 1)


def test_pay_rent_example_end_to_end() -> None:
    clock = FakeClock()
    store = TaskStore(clock=clock)
    store.create_task({"title": "Groceries", "priority": "medium", "category": "Personal"})
    store.create_task({"title": "Stretch", "priority": "low", "category": "Health"})
    rent = store.create_task(
        {
            "title": "Pay rent",
            "priority": "high",
            "category": "Personal",
            "dueDate": FIXED_NOW + timedelta(days=1),
        }
    )

    assert store.list_tasks()[0].id == rent.id

    late_now = FIXED_NOW + timedelta(days=3)
    assert is_overdue(rent, late_now)

    done = store.update_task(rent.id, {"completed": True})
    assert done is not None
    for now in (FIXED_NOW, FIXED_NOW + 20 * HOUR, late_now):
        assert classify(done, now) is DueState.NONE
