from __future__ import annotations

from datetime import datetime

import pytest

from dayplanner.repositories.checklists import ChecklistRepository
from dayplanner.repositories.daily import DailyEntryRepository
from dayplanner.repositories.favorites import FavoriteFilter, FavoritesAggregator
from dayplanner.repositories.notes import NoteRepository
from dayplanner.repositories.planner import PlannerRepository


@pytest.fixture
def repos(store, clock):
    notes = NoteRepository(store, clock)
    checklists = ChecklistRepository(store, clock)
    daily = DailyEntryRepository(store, clock)
    planner = PlannerRepository(store, clock)
    return notes, checklists, daily, planner, FavoritesAggregator(notes, checklists, daily)


@pytest.fixture
def marked(repos):
    notes, checklists, daily, planner, _ = repos
    note = notes.create()
    item = checklists.create("Trip")
    entry = daily.save(datetime(2024, 3, 15), "sunny")
    planner.create("Dentist", "", datetime(2024, 3, 15))
    notes.create()

    notes.toggle_favorite(note.id)
    checklists.toggle_favorite(item.id)
    daily.toggle_favorite(entry.id)
    return note, item, entry


def test_all_contains_exactly_favorites(repos, marked):
    *_, favorites = repos
    note, item, entry = marked
    assert [f.id for f in favorites.all()] == [note.id, item.id, entry.id]


def test_filtered_views(repos, marked):
    *_, favorites = repos
    note, item, entry = marked
    assert [f.id for f in favorites.filtered(FavoriteFilter.NOTES)] == [note.id]
    assert [f.id for f in favorites.filtered(FavoriteFilter.CHECKLISTS)] == [item.id]
    assert [f.id for f in favorites.filtered(FavoriteFilter.DAILY)] == [entry.id]
    assert len(favorites.filtered()) == 3


def test_remove_favorite_keeps_entity(repos, marked):
    notes, checklists, daily, _, favorites = repos
    note, item, entry = marked

    remaining = favorites.remove_favorite_note(note.id)
    assert [f.id for f in remaining] == [item.id, entry.id]
    assert notes.get(note.id).is_favorite is False

    favorites.remove_favorite_checklist(item.id)
    favorites.remove_favorite_daily_entry(entry.id)
    assert favorites.all() == []
    assert checklists.get(item.id).title == "Trip"
    assert daily.get(entry.id).content == "sunny"


def test_remove_favorite_is_idempotent(repos, marked):
    *_, favorites = repos
    note, _, _ = marked
    favorites.remove_favorite_note(note.id)
    favorites.remove_favorite_note(note.id)
    assert note.id not in [f.id for f in favorites.all()]


def test_sorted_by_updated_at_desc(repos):
    notes, *_, favorites = repos
    first = notes.create()
    second = notes.create()
    notes.toggle_favorite(first.id)
    notes.toggle_favorite(second.id)
    assert [n.id for n in favorites.notes()] == [second.id, first.id]

    # content edits move a note up, favorite toggles do not
    notes.update(first.id, "edited", "", [])
    assert [n.id for n in favorites.notes()] == [first.id, second.id]
