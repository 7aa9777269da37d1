from __future__ import annotations

from datetime import datetime

from dayplanner.models import ChecklistItem, SubTask
from dayplanner.repositories.base import FavoritesMixin, Repository


class ChecklistRepository(FavoritesMixin, Repository[ChecklistItem]):
    table = "checklist_items"
    model = ChecklistItem
    kind = "checklist"

    def list(self) -> list[ChecklistItem]:
        return sorted(self._load(), key=lambda c: c.created_at, reverse=True)

    def filtered(self, show_completed: bool = True, sort_by_priority: bool = False) -> list[ChecklistItem]:
        items = self.list()
        if not show_completed:
            items = [c for c in items if not c.is_completed]
        if sort_by_priority:
            items.sort(key=lambda c: c.priority, reverse=True)
        return items

    def create(self, title: str) -> ChecklistItem:
        now = self.clock()
        return self._insert(ChecklistItem(title=title, created_at=now, updated_at=now))

    def update(
        self,
        item_id: str,
        title: str,
        notes: str | None,
        priority: int,
        due_date: datetime | None,
    ) -> ChecklistItem:
        item = self.get(item_id)
        item.title = title
        item.notes = notes
        item.priority = priority
        item.due_date = due_date
        item.updated_at = self.clock()
        return self._save(item)

    def toggle_completion(self, item_id: str) -> ChecklistItem:
        item = self.get(item_id)
        item.is_completed = not item.is_completed
        item.updated_at = self.clock()
        return self._save(item)

    def add_subtask(self, item_id: str, title: str) -> ChecklistItem:
        item = self.get(item_id)
        item.subtasks.append(SubTask(title=title))
        item.updated_at = self.clock()
        return self._save(item)

    def toggle_subtask(self, item_id: str, subtask_id: str) -> ChecklistItem:
        item = self.get(item_id)
        for subtask in item.subtasks:
            if subtask.id == subtask_id:
                subtask.is_completed = not subtask.is_completed
                item.updated_at = self.clock()
                return self._save(item)
        return item

    def delete_subtask(self, item_id: str, subtask_id: str) -> ChecklistItem:
        item = self.get(item_id)
        remaining = [s for s in item.subtasks if s.id != subtask_id]
        if len(remaining) == len(item.subtasks):
            return item
        item.subtasks = remaining
        item.updated_at = self.clock()
        return self._save(item)
