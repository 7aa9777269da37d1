from __future__ import annotations

from datetime import datetime

import pytest

from dayplanner.errors import EntityNotFound
from dayplanner.repositories.checklists import ChecklistRepository


@pytest.fixture
def repo(store, clock):
    return ChecklistRepository(store, clock)


def test_create_defaults(repo):
    item = repo.create("Trip")
    assert item.title == "Trip"
    assert item.is_completed is False
    assert item.priority == 0
    assert item.subtasks == []
    assert item.notes is None
    assert item.due_date is None
    assert repo.get(item.id) == item


def test_update(repo):
    item = repo.create("Trip")
    due = datetime(2024, 4, 1)
    updated = repo.update(item.id, "Trip to Rome", "bring adapters", 2, due)
    stored = repo.get(item.id)
    assert stored.title == "Trip to Rome"
    assert stored.notes == "bring adapters"
    assert stored.priority == 2
    assert stored.due_date == due
    assert updated.updated_at > item.updated_at


def test_toggle_completion_twice_restores_state(repo):
    item = repo.create("Trip")
    repo.add_subtask(item.id, "Book flight")
    before = repo.get(item.id)

    repo.toggle_completion(item.id)
    assert repo.get(item.id).is_completed is True
    repo.toggle_completion(item.id)

    after = repo.get(item.id)
    assert after.is_completed is False
    assert after.subtasks == before.subtasks


def test_subtask_scenario(repo):
    item = repo.create("Trip")
    repo.add_subtask(item.id, "Book flight")
    before = repo.add_subtask(item.id, "Pack bag")

    after = repo.toggle_subtask(item.id, before.subtasks[0].id)

    stored = repo.get(item.id)
    assert [(s.title, s.is_completed) for s in stored.subtasks] == [
        ("Book flight", True),
        ("Pack bag", False),
    ]
    assert after.updated_at > before.updated_at
    assert stored.completed_subtasks == 1


def test_delete_subtask(repo):
    item = repo.create("Trip")
    repo.add_subtask(item.id, "Book flight")
    with_two = repo.add_subtask(item.id, "Pack bag")

    after = repo.delete_subtask(item.id, with_two.subtasks[0].id)
    assert [s.title for s in repo.get(item.id).subtasks] == ["Pack bag"]
    assert after.updated_at > with_two.updated_at


def test_unknown_subtask_is_noop(repo):
    item = repo.add_subtask(repo.create("Trip").id, "Book flight")
    assert repo.toggle_subtask(item.id, "missing") == item
    assert repo.delete_subtask(item.id, "missing") == item
    assert repo.get(item.id) == item


def test_delete_removes_subtasks_with_parent(repo, store):
    item = repo.create("Trip")
    repo.add_subtask(item.id, "Book flight")
    repo.delete(item.id)
    assert store.fetch_all("checklist_items") == []
    with pytest.raises(EntityNotFound):
        repo.add_subtask(item.id, "Pack bag")


def test_toggle_favorite_keeps_updated_at(repo):
    item = repo.create("Trip")
    toggled = repo.toggle_favorite(item.id)
    assert toggled.is_favorite is True
    assert repo.get(item.id).updated_at == item.updated_at


def test_filtered_defaults_to_newest_created_first(repo):
    a = repo.create("a")
    b = repo.create("b")
    assert [c.id for c in repo.filtered()] == [b.id, a.id]


def test_filtered_hides_completed(repo):
    a = repo.create("a")
    repo.create("b")
    repo.toggle_completion(a.id)

    assert len(repo.filtered(show_completed=True)) == 2
    assert [c.title for c in repo.filtered(show_completed=False)] == ["b"]


def test_filtered_by_priority(repo):
    low = repo.create("low")
    high = repo.create("high")
    mid = repo.create("mid")
    repo.update(low.id, "low", None, 1, None)
    repo.update(high.id, "high", None, 3, None)
    repo.update(mid.id, "mid", None, 2, None)

    assert [c.title for c in repo.filtered(sort_by_priority=True)] == ["high", "mid", "low"]
    assert [c.title for c in repo.filtered()] == ["mid", "high", "low"]
