from __future__ import annotations


class DayPlannerError(Exception):
    """Base class for errors the UI layer is expected to report."""


class PersistenceFailure(DayPlannerError):
    """The store could not be opened, read, or written."""


class EntityNotFound(DayPlannerError, LookupError):
    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} {entity_id!r} not found")
        self.kind = kind
        self.entity_id = entity_id
