"""Row-level persistence backends.

Repositories talk to a :class:`Store` only; rows are flat dicts of
primitive values produced by ``to_row()`` on the model classes.
"""
from __future__ import annotations

import copy
import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from dayplanner.config import Settings
from dayplanner.db import TABLES, get_db, init_db
from dayplanner.errors import PersistenceFailure
from dayplanner.models import Row

logger = logging.getLogger(__name__)

# Columns that must hold distinct values within a table.
UNIQUE_COLUMNS = {"daily_entries": ("date",)}


def _check_table(table: str) -> None:
    if table not in TABLES:
        raise ValueError(f"unknown table: {table!r}")


class Store(ABC):
    @abstractmethod
    def fetch_all(self, table: str) -> list[Row]: ...

    @abstractmethod
    def fetch(self, table: str, entity_id: str) -> Row | None: ...

    @abstractmethod
    def insert(self, table: str, row: Row) -> None: ...

    @abstractmethod
    def update(self, table: str, row: Row) -> None: ...

    @abstractmethod
    def delete(self, table: str, entity_id: str) -> None: ...

    def close(self) -> None:
        pass


class SqliteStore(Store):
    def __init__(self, path: Path) -> None:
        self.path = path
        with self._guard("open"):
            init_db(path)

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceFailure(f"{action} failed on {self.path}: {exc}") from exc

    def fetch_all(self, table: str) -> list[Row]:
        _check_table(table)
        with self._guard(f"fetch {table}"), get_db(self.path) as db:
            return [dict(r) for r in db.execute(f"SELECT * FROM {table}").fetchall()]

    def fetch(self, table: str, entity_id: str) -> Row | None:
        _check_table(table)
        with self._guard(f"fetch {table}"), get_db(self.path) as db:
            row = db.execute(f"SELECT * FROM {table} WHERE id = ?", (entity_id,)).fetchone()
        return dict(row) if row else None

    def insert(self, table: str, row: Row) -> None:
        _check_table(table)
        cols = ", ".join(row)
        marks = ", ".join("?" for _ in row)
        with self._guard(f"insert into {table}"), get_db(self.path) as db:
            db.execute(f"INSERT INTO {table} ({cols}) VALUES ({marks})", tuple(row.values()))

    def update(self, table: str, row: Row) -> None:
        _check_table(table)
        fields = {k: v for k, v in row.items() if k != "id"}
        assignments = ", ".join(f"{k} = ?" for k in fields)
        with self._guard(f"update {table}"), get_db(self.path) as db:
            cur = db.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*fields.values(), row["id"]),
            )
            if cur.rowcount == 0:
                raise PersistenceFailure(f"update {table}: no row with id {row['id']!r}")

    def delete(self, table: str, entity_id: str) -> None:
        _check_table(table)
        with self._guard(f"delete from {table}"), get_db(self.path) as db:
            db.execute(f"DELETE FROM {table} WHERE id = ?", (entity_id,))


class MemoryStore(Store):
    """Dict-backed store with the same contract as :class:`SqliteStore`."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Row]] = {t: {} for t in TABLES}

    def _rows(self, table: str) -> dict[str, Row]:
        _check_table(table)
        return self._tables[table]

    def _check_unique(self, table: str, row: Row) -> None:
        for column in UNIQUE_COLUMNS.get(table, ()):
            for other in self._tables[table].values():
                if other["id"] != row["id"] and other[column] == row[column]:
                    raise PersistenceFailure(
                        f"UNIQUE constraint failed: {table}.{column}"
                    )

    def fetch_all(self, table: str) -> list[Row]:
        return [copy.deepcopy(r) for r in self._rows(table).values()]

    def fetch(self, table: str, entity_id: str) -> Row | None:
        row = self._rows(table).get(entity_id)
        return copy.deepcopy(row) if row is not None else None

    def insert(self, table: str, row: Row) -> None:
        rows = self._rows(table)
        if row["id"] in rows:
            raise PersistenceFailure(f"UNIQUE constraint failed: {table}.id")
        self._check_unique(table, row)
        rows[row["id"]] = copy.deepcopy(row)

    def update(self, table: str, row: Row) -> None:
        rows = self._rows(table)
        if row["id"] not in rows:
            raise PersistenceFailure(f"update {table}: no row with id {row['id']!r}")
        self._check_unique(table, row)
        rows[row["id"]] = copy.deepcopy(row)

    def delete(self, table: str, entity_id: str) -> None:
        self._rows(table).pop(entity_id, None)


def open_store(settings: Settings) -> Store:
    if settings.in_memory:
        logger.info("Using in-memory store")
        return MemoryStore()
    logger.info("Opening store at %s", settings.db_path)
    return SqliteStore(Path(settings.db_path))
