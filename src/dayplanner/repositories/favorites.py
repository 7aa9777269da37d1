from __future__ import annotations

import enum
from typing import Union

from dayplanner.models import ChecklistItem, DailyEntry, Note
from dayplanner.repositories.checklists import ChecklistRepository
from dayplanner.repositories.daily import DailyEntryRepository
from dayplanner.repositories.notes import NoteRepository

Favorite = Union[Note, ChecklistItem, DailyEntry]


class FavoriteFilter(str, enum.Enum):
    ALL = "all"
    NOTES = "notes"
    CHECKLISTS = "checklists"
    DAILY = "daily"


class FavoritesAggregator:
    """Read-only view over the favorite flag of notes, checklists and daily
    entries. Planner items carry no favorite flag and never show up here."""

    def __init__(
        self,
        notes: NoteRepository,
        checklists: ChecklistRepository,
        daily: DailyEntryRepository,
    ) -> None:
        self._notes = notes
        self._checklists = checklists
        self._daily = daily

    def notes(self) -> list[Note]:
        return self._notes.favorites()

    def checklists(self) -> list[ChecklistItem]:
        return self._checklists.favorites()

    def daily_entries(self) -> list[DailyEntry]:
        return self._daily.favorites()

    def all(self) -> list[Favorite]:
        return [*self.notes(), *self.checklists(), *self.daily_entries()]

    def filtered(self, kind: FavoriteFilter = FavoriteFilter.ALL) -> list[Favorite]:
        if kind is FavoriteFilter.NOTES:
            return self.notes()
        if kind is FavoriteFilter.CHECKLISTS:
            return self.checklists()
        if kind is FavoriteFilter.DAILY:
            return self.daily_entries()
        return self.all()

    def remove_favorite_note(self, note_id: str) -> list[Favorite]:
        self._notes.set_favorite(note_id, False)
        return self.all()

    def remove_favorite_checklist(self, item_id: str) -> list[Favorite]:
        self._checklists.set_favorite(item_id, False)
        return self.all()

    def remove_favorite_daily_entry(self, entry_id: str) -> list[Favorite]:
        self._daily.set_favorite(entry_id, False)
        return self.all()
