from __future__ import annotations

import enum
from typing import Iterable

from dayplanner.models import Note
from dayplanner.repositories.base import FavoritesMixin, Repository


class NoteSort(str, enum.Enum):
    NEWEST_FIRST = "newest"
    OLDEST_FIRST = "oldest"
    TITLE_ASC = "title"
    TITLE_DESC = "title-desc"


def search_notes(notes: Iterable[Note], text: str) -> list[Note]:
    if not text:
        return list(notes)
    needle = text.casefold()
    return [n for n in notes if needle in n.title.casefold() or needle in n.content.casefold()]


def filter_by_tags(notes: Iterable[Note], tags: Iterable[str]) -> list[Note]:
    selected = set(tags)
    if not selected:
        return list(notes)
    return [n for n in notes if not selected.isdisjoint(n.tags)]


def sort_notes(notes: Iterable[Note], sort: NoteSort = NoteSort.NEWEST_FIRST) -> list[Note]:
    if sort is NoteSort.NEWEST_FIRST:
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)
    if sort is NoteSort.OLDEST_FIRST:
        return sorted(notes, key=lambda n: n.updated_at)
    if sort is NoteSort.TITLE_ASC:
        return sorted(notes, key=lambda n: n.title)
    return sorted(notes, key=lambda n: n.title, reverse=True)


def collect_tags(notes: Iterable[Note]) -> list[str]:
    return sorted({tag for n in notes for tag in n.tags})


class NoteRepository(FavoritesMixin, Repository[Note]):
    table = "notes"
    model = Note
    kind = "note"

    def list(self) -> list[Note]:
        return sort_notes(self._load())

    def create(self) -> Note:
        """Insert an empty note and return it for the caller to fill in."""
        now = self.clock()
        return self._insert(Note(created_at=now, updated_at=now))

    def update(self, note_id: str, title: str, content: str, tags: list[str]) -> Note:
        note = self.get(note_id)
        note.title = title
        note.content = content
        note.tags = list(tags)
        note.updated_at = self.clock()
        return self._save(note)

    def filtered(
        self,
        search: str = "",
        tags: Iterable[str] = (),
        sort: NoteSort = NoteSort.NEWEST_FIRST,
    ) -> list[Note]:
        notes = search_notes(self._load(), search)
        notes = filter_by_tags(notes, tags)
        return sort_notes(notes, sort)

    def all_tags(self) -> list[str]:
        return collect_tags(self._load())
