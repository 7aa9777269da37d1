from __future__ import annotations

import logging
from datetime import date, datetime

from dayplanner.dates import add_days, same_day, start_of_day
from dayplanner.models import DailyEntry
from dayplanner.repositories.base import FavoritesMixin, Repository

logger = logging.getLogger(__name__)


class DailyEntryRepository(FavoritesMixin, Repository[DailyEntry]):
    table = "daily_entries"
    model = DailyEntry
    kind = "daily entry"

    def list(self) -> list[DailyEntry]:
        return sorted(self._load(), key=lambda e: e.date, reverse=True)

    def entry_for_date(self, day: datetime | date) -> DailyEntry | None:
        for entry in self.list():
            if same_day(entry.date, day):
                return entry
        return None

    def save(self, day: datetime | date, content: str, mood: str | None = None) -> DailyEntry:
        """Write the entry for ``day``, updating the existing one if present.

        At most one entry exists per calendar day: a second save for the same
        day overwrites content and mood in place and keeps the id.
        """
        existing = self.entry_for_date(day)
        if existing is not None:
            existing.content = content
            existing.mood = mood
            existing.updated_at = self.clock()
            return self._save(existing)

        now = self.clock()
        entry = DailyEntry(
            date=start_of_day(day),
            content=content,
            mood=mood,
            created_at=now,
            updated_at=now,
        )
        logger.debug("Creating daily entry for %s", entry.date.date())
        return self._insert(entry)

    def next_day(self, day: datetime | date) -> tuple[datetime, DailyEntry | None]:
        target = add_days(start_of_day(day), 1)
        return target, self.entry_for_date(target)

    def previous_day(self, day: datetime | date) -> tuple[datetime, DailyEntry | None]:
        target = add_days(start_of_day(day), -1)
        return target, self.entry_for_date(target)
