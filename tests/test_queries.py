# tests/test_queries.py

from __future__ import annotations

from task_tracker import crud
from task_tracker.queries import TaskFilters, build_task_listing, list_tasks


def _add(db, title, user_id, priority) -> int:
    outcome = crud.create_task(db, title, user_id, priority)
    assert outcome.ok
    return outcome.value


def test_empty_listing_is_not_an_error(db) -> None:
    assert list_tasks(db) == []


def test_unfiltered_sort_priority_then_newest(db) -> None:
    low = _add(db, "low", 1, "Low")
    high_old = _add(db, "high old", 2, "High")
    medium = _add(db, "medium", 1, "Medium")
    high_new = _add(db, "high new", 1, "High")

    ids = [r.id for r in list_tasks(db)]
    assert ids == [high_new, high_old, medium, low]


def test_wildcard_and_blank_filters_are_ignored(db) -> None:
    _add(db, "a", 1, "High")
    _add(db, "b", 2, "Low")

    everything = [r.id for r in list_tasks(db)]
    wild = TaskFilters(user_id="all", status="all", priority="all")
    blank = TaskFilters(user_id="", status="", priority="")
    assert [r.id for r in list_tasks(db, wild)] == everything
    assert [r.id for r in list_tasks(db, blank)] == everything


def test_priority_filter_is_subset_of_unfiltered(db) -> None:
    _add(db, "a", 1, "High")
    _add(db, "b", 2, "Low")
    _add(db, "c", 2, "High")

    high = list_tasks(db, TaskFilters(priority="High"))
    assert len(high) == 2
    assert all(r.priority == "High" for r in high)
    all_ids = {r.id for r in list_tasks(db)}
    assert {r.id for r in high} <= all_ids


def test_filters_compose(db) -> None:
    _add(db, "alice high", 1, "High")
    bob_high = _add(db, "bob high", 2, "High")
    _add(db, "bob low", 2, "Low")
    crud.complete_task(db, bob_high)

    rows = list_tasks(db, TaskFilters(user_id="2", status="Open"))
    assert [r.title for r in rows] == ["bob low"]

    rows = list_tasks(db, TaskFilters(user_id="2", status="Complete", priority="High"))
    assert [r.title for r in rows] == ["bob high"]


def test_rows_carry_assignee_username(db) -> None:
    _add(db, "x", 2, "Medium")
    (row,) = list_tasks(db)
    assert row.username == "Bob"
    assert row.assigned_user_id == 2


def test_non_numeric_user_filter_matches_nothing(db) -> None:
    _add(db, "x", 1, "Medium")
    assert list_tasks(db, TaskFilters(user_id="1 OR 1=1")) == []


def test_filter_values_are_bound_not_inlined() -> None:
    stmt = build_task_listing(TaskFilters(status="Open'; DROP TABLE task; --"))
    sql = str(stmt)
    assert "DROP TABLE" not in sql
    assert "Open" not in sql
