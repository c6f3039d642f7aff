# src/planner_ai/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """One row of the task sheet: task, note, date (raw cell text), status."""

    task: str
    note: str
    date: str
    status: str

    def to_dict(self) -> dict[str, str]:
        return {"task": self.task, "note": self.note, "date": self.date, "status": self.status}


@dataclass(slots=True, frozen=True)
class NormalizedTask:
    """
    TaskRecord plus its canonical date.

    canonical_date is an ISO date ("YYYY-MM-DD") or "" when the raw date is absent or
    unparseable; such tasks never land in a date bucket.
    """

    record: TaskRecord
    canonical_date: str


@dataclass(slots=True)
class TaskBuckets:
    today: list[TaskRecord] = field(default_factory=list)
    overdue: list[TaskRecord] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.today and not self.overdue


@dataclass(slots=True, frozen=True)
class ClassEntry:
    slot_label: str
    details: str

    def to_dict(self) -> dict[str, str]:
        return {"time": self.slot_label, "details": self.details}


@dataclass(slots=True, frozen=True)
class RoutineSnapshot:
    """
    Last evaluation of a dataset.

    updated_at: when the dataset was last evaluated ("last checked").
    changed_at: when its signature last differed from the previous one ("last changed");
    the baseline evaluation counts as a change for this field.
    """

    signature: str
    updated_at: str
    count: int
    changed_at: str


@dataclass(slots=True, frozen=True)
class ChangeReport:
    changed: bool
    previous_count: int
    current_count: int
    updated_at: str
    previous_updated_at: str
    changed_at: str
    previous_changed_at: str
