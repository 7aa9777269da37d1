from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, ClassVar, Generic, Iterator, TypeVar

from dayplanner.errors import EntityNotFound, PersistenceFailure
from dayplanner.store import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


class Repository(Generic[T]):
    """Shared plumbing: every read is a full reload, every write goes straight
    to the store, and persistence failures are logged here before they reach
    the caller."""

    table: ClassVar[str]
    model: ClassVar[type]
    kind: ClassVar[str]

    def __init__(self, store: Store, clock: Clock = datetime.now) -> None:
        self.store = store
        self.clock = clock

    @contextmanager
    def _reporting(self, action: str) -> Iterator[None]:
        try:
            yield
        except PersistenceFailure:
            logger.exception("Failed to %s", action)
            raise

    def _decode(self, row) -> T:
        try:
            return self.model.from_row(row)
        except (ValueError, TypeError, KeyError) as exc:
            raise PersistenceFailure(f"corrupt {self.kind} row {row.get('id')!r}: {exc}") from exc

    def _load(self) -> list[T]:
        with self._reporting(f"fetch {self.table}"):
            rows = self.store.fetch_all(self.table)
            return [self._decode(r) for r in rows]

    def get(self, entity_id: str) -> T:
        with self._reporting(f"fetch {self.kind} {entity_id}"):
            row = self.store.fetch(self.table, entity_id)
            if row is None:
                raise EntityNotFound(self.kind, entity_id)
            return self._decode(row)

    def _insert(self, entity: T) -> T:
        with self._reporting(f"create {self.kind}"):
            self.store.insert(self.table, entity.to_row())
        return entity

    def _save(self, entity: T) -> T:
        with self._reporting(f"update {self.kind} {entity.id}"):
            self.store.update(self.table, entity.to_row())
        return entity

    def delete(self, entity_id: str) -> None:
        self.get(entity_id)
        with self._reporting(f"delete {self.kind} {entity_id}"):
            self.store.delete(self.table, entity_id)


class FavoritesMixin:
    """Favorite flag changes never touch ``updated_at``."""

    def set_favorite(self, entity_id: str, value: bool):
        entity = self.get(entity_id)
        entity.is_favorite = value
        return self._save(entity)

    def toggle_favorite(self, entity_id: str):
        entity = self.get(entity_id)
        entity.is_favorite = not entity.is_favorite
        return self._save(entity)

    def favorites(self) -> list:
        items = [e for e in self._load() if e.is_favorite]
        return sorted(items, key=lambda e: e.updated_at, reverse=True)
