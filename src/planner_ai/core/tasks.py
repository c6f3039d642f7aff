# src/planner_ai/core/tasks.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from .dates import normalize_date, to_iso
from .models import NormalizedTask, TaskBuckets, TaskRecord

PENDING = "pending"


def normalize_status(value: Any) -> str:
    return "" if value is None else str(value).strip().lower()


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value)


def build_task_record(row: Sequence[Any]) -> TaskRecord:
    return TaskRecord(task=_cell(row, 0), note=_cell(row, 1), date=_cell(row, 2), status=_cell(row, 3))


def build_task_records(rows: Iterable[Sequence[Any]]) -> list[TaskRecord]:
    return [build_task_record(row) for row in rows]


def normalize_task(record: TaskRecord) -> NormalizedTask:
    return NormalizedTask(record=record, canonical_date=normalize_date(record.date))


def classify_tasks(rows: Iterable[Sequence[Any]], today: date | str) -> TaskBuckets:
    """
    Split raw task rows into today-pending and overdue-pending buckets.

    today must already be the user's civil date (see dates.today_in_timezone).
    Rows whose date does not normalize are dropped from both buckets.
    """
    today_iso = to_iso(today)
    buckets = TaskBuckets()
    if not today_iso:
        return buckets

    for row in rows:
        item = normalize_task(build_task_record(row))
        if not item.canonical_date or normalize_status(item.record.status) != PENDING:
            continue
        # ISO strings compare in calendar order.
        if item.canonical_date == today_iso:
            buckets.today.append(item.record)
        elif item.canonical_date < today_iso:
            buckets.overdue.append(item.record)
    return buckets
