from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from dayplanner.dates import add_days, add_months, day_interval, month_interval, start_of_day, week_interval
from dayplanner.models import PlannerItem
from dayplanner.repositories.base import Clock, Repository
from dayplanner.store import Store


class ViewMode(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass
class DayAgenda:
    day: datetime
    all_day: list[PlannerItem] = field(default_factory=list)
    timed: list[PlannerItem] = field(default_factory=list)


def _order(item: PlannerItem):
    # items without a start time come first within their day
    return (item.date, item.start_time is not None, item.start_time or item.date)


def interval(mode: ViewMode, ref: datetime | date, week_start: int = 0) -> tuple[datetime, datetime]:
    if mode is ViewMode.DAY:
        return day_interval(ref)
    if mode is ViewMode.WEEK:
        return week_interval(ref, week_start)
    return month_interval(ref)


def shift_period(mode: ViewMode, ref: datetime, steps: int) -> datetime:
    if mode is ViewMode.DAY:
        return add_days(ref, steps)
    if mode is ViewMode.WEEK:
        return add_days(ref, 7 * steps)
    return add_months(ref, steps)


def group_by_day(items: Iterable[PlannerItem]) -> list[DayAgenda]:
    days: dict[datetime, DayAgenda] = {}
    for item in sorted(items, key=_order):
        agenda = days.setdefault(item.date, DayAgenda(day=item.date))
        if item.start_time is None:
            agenda.all_day.append(item)
        else:
            agenda.timed.append(item)
    return list(days.values())


class PlannerRepository(Repository[PlannerItem]):
    table = "planner_items"
    model = PlannerItem
    kind = "planner item"

    def __init__(self, store: Store, clock: Clock = datetime.now, week_start: int = 0) -> None:
        super().__init__(store, clock)
        self.week_start = week_start

    def list(self) -> list[PlannerItem]:
        return sorted(self._load(), key=_order)

    def create(
        self,
        title: str,
        detail: str,
        day: datetime | date,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        category: str = "general",
    ) -> PlannerItem:
        item = PlannerItem(
            title=title,
            detail=detail,
            date=start_of_day(day),
            start_time=start_time,
            end_time=end_time,
            category=category,
            created_at=self.clock(),
        )
        return self._insert(item)

    def update(
        self,
        item_id: str,
        title: str,
        detail: str,
        day: datetime | date,
        start_time: datetime | None,
        end_time: datetime | None,
        is_all_day: bool,
        category: str,
    ) -> PlannerItem:
        item = self.get(item_id)
        item.title = title
        item.detail = detail
        item.date = start_of_day(day)
        item.start_time = start_time
        item.end_time = end_time
        item.is_all_day = is_all_day
        item.category = category
        return self._save(item)

    def toggle_completion(self, item_id: str) -> PlannerItem:
        item = self.get(item_id)
        item.is_completed = not item.is_completed
        return self._save(item)

    def items_in_range(self, mode: ViewMode, ref: datetime | date) -> list[PlannerItem]:
        start, end = interval(mode, ref, self.week_start)
        return [item for item in self.list() if start <= item.date < end]

    def agenda(self, mode: ViewMode, ref: datetime | date) -> list[DayAgenda]:
        return group_by_day(self.items_in_range(mode, ref))

    def next_period(self, mode: ViewMode, ref: datetime) -> datetime:
        return shift_period(mode, ref, 1)

    def previous_period(self, mode: ViewMode, ref: datetime) -> datetime:
        return shift_period(mode, ref, -1)
