from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

Row = dict[str, Any]

PRIORITY_LEVELS = (0, 1, 2, 3)
MOODS = ("😊", "😐", "😔", "😴", "🤩", "😤")
CATEGORIES = ("general", "work", "personal", "health", "family")


def new_id() -> str:
    return str(uuid.uuid4())


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass
class Note:
    id: str = field(default_factory=new_id)
    title: str = ""
    content: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    is_favorite: bool = False
    tags: list[str] = field(default_factory=list)
    color: str | None = None

    def to_row(self) -> Row:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "created_at": _ts(self.created_at),
            "updated_at": _ts(self.updated_at),
            "is_favorite": int(self.is_favorite),
            "tags": json.dumps(self.tags),
            "color": self.color,
        }

    @classmethod
    def from_row(cls, row: Row) -> Note:
        return cls(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"]),
            is_favorite=bool(row["is_favorite"]),
            tags=json.loads(row["tags"] or "[]"),
            color=row["color"],
        )


@dataclass
class SubTask:
    title: str
    is_completed: bool = False
    id: str = field(default_factory=new_id)


@dataclass
class ChecklistItem:
    id: str = field(default_factory=new_id)
    title: str = ""
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    is_favorite: bool = False
    due_date: datetime | None = None
    priority: int = 0
    subtasks: list[SubTask] = field(default_factory=list)
    notes: str | None = None

    @property
    def completed_subtasks(self) -> int:
        return sum(1 for s in self.subtasks if s.is_completed)

    def to_row(self) -> Row:
        return {
            "id": self.id,
            "title": self.title,
            "is_completed": int(self.is_completed),
            "created_at": _ts(self.created_at),
            "updated_at": _ts(self.updated_at),
            "is_favorite": int(self.is_favorite),
            "due_date": _ts(self.due_date),
            "priority": self.priority,
            "subtasks": json.dumps([asdict(s) for s in self.subtasks]),
            "notes": self.notes,
        }

    @classmethod
    def from_row(cls, row: Row) -> ChecklistItem:
        return cls(
            id=row["id"],
            title=row["title"],
            is_completed=bool(row["is_completed"]),
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"]),
            is_favorite=bool(row["is_favorite"]),
            due_date=_dt(row["due_date"]),
            priority=row["priority"],
            subtasks=[SubTask(**s) for s in json.loads(row["subtasks"] or "[]")],
            notes=row["notes"],
        )


@dataclass
class DailyEntry:
    id: str = field(default_factory=new_id)
    date: datetime = field(default_factory=datetime.now)
    content: str = ""
    mood: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    is_favorite: bool = False

    def to_row(self) -> Row:
        return {
            "id": self.id,
            "date": _ts(self.date),
            "content": self.content,
            "mood": self.mood,
            "created_at": _ts(self.created_at),
            "updated_at": _ts(self.updated_at),
            "is_favorite": int(self.is_favorite),
        }

    @classmethod
    def from_row(cls, row: Row) -> DailyEntry:
        return cls(
            id=row["id"],
            date=_dt(row["date"]),
            content=row["content"],
            mood=row["mood"],
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"]),
            is_favorite=bool(row["is_favorite"]),
        )


@dataclass
class PlannerItem:
    id: str = field(default_factory=new_id)
    title: str = ""
    detail: str = ""
    date: datetime = field(default_factory=datetime.now)
    start_time: datetime | None = None
    end_time: datetime | None = None
    is_all_day: bool = False
    is_completed: bool = False
    category: str = "general"
    color: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_row(self) -> Row:
        return {
            "id": self.id,
            "title": self.title,
            "detail": self.detail,
            "date": _ts(self.date),
            "start_time": _ts(self.start_time),
            "end_time": _ts(self.end_time),
            "is_all_day": int(self.is_all_day),
            "is_completed": int(self.is_completed),
            "category": self.category,
            "color": self.color,
            "created_at": _ts(self.created_at),
        }

    @classmethod
    def from_row(cls, row: Row) -> PlannerItem:
        return cls(
            id=row["id"],
            title=row["title"],
            detail=row["detail"],
            date=_dt(row["date"]),
            start_time=_dt(row["start_time"]),
            end_time=_dt(row["end_time"]),
            is_all_day=bool(row["is_all_day"]),
            is_completed=bool(row["is_completed"]),
            category=row["category"],
            color=row["color"],
            created_at=_dt(row["created_at"]),
        )
