from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from dayplanner.config import Settings, load_settings
from dayplanner.repositories.base import Clock
from dayplanner.repositories.checklists import ChecklistRepository
from dayplanner.repositories.daily import DailyEntryRepository
from dayplanner.repositories.favorites import FavoritesAggregator
from dayplanner.repositories.notes import NoteRepository
from dayplanner.repositories.planner import PlannerRepository
from dayplanner.store import Store, open_store


@dataclass
class App:
    store: Store
    notes: NoteRepository
    checklists: ChecklistRepository
    daily: DailyEntryRepository
    planner: PlannerRepository
    favorites: FavoritesAggregator


def create_app(
    settings: Settings | None = None,
    store: Store | None = None,
    clock: Clock = datetime.now,
) -> App:
    settings = settings or load_settings()
    store = store or open_store(settings)

    notes = NoteRepository(store, clock)
    checklists = ChecklistRepository(store, clock)
    daily = DailyEntryRepository(store, clock)
    return App(
        store=store,
        notes=notes,
        checklists=checklists,
        daily=daily,
        planner=PlannerRepository(store, clock, week_start=settings.week_start),
        favorites=FavoritesAggregator(notes, checklists, daily),
    )
