# src/planner_ai/core/routine.py

"""
Weekly routine grid parsing.

Grid shape (as exported from the routine sheet):

    row 0:  [<corner>, <slot label 1>, <slot label 2>, ...]
    row n:  [<weekday or blank>, <cell>, <cell>, ...]

A weekday name in column 0 opens a day block; blank column-0 rows continue it; the next
weekday name closes it.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date
from typing import Any

from .dates import WEEKDAY_NAMES, normalize_day_name, weekday_name
from .models import ClassEntry

_WEEKDAYS_LOWER = frozenset(name.lower() for name in WEEKDAY_NAMES)

_SLOT_NUMBER_RE = re.compile(r"^slot\s*>?\s*(\d+)\s*(.*)$", re.IGNORECASE | re.DOTALL)
_SLOT_PREFIX_RE = re.compile(r"^slot\b", re.IGNORECASE)
_SLOT_STRIP_RE = re.compile(r"^slot\s*", re.IGNORECASE)
_NEWLINE_RE = re.compile(r"\r?\n")


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def format_slot_label(value: Any) -> str:
    """
    Render a header label for display.

    "Slot1 9:00-10:00" -> "Slot 1 > 9:00-10:00"
    "Slot"             -> "Slot  >"
    "9:00"             -> "Slot > 9:00"
    """
    raw = _text(value)
    if not raw:
        return ""

    m = _SLOT_NUMBER_RE.match(raw)
    if m:
        number, rest = m.group(1), m.group(2).strip()
        suffix = f" {rest}" if rest else ""
        return f"Slot {number} >{suffix}"

    if _SLOT_PREFIX_RE.match(raw):
        rest = _SLOT_STRIP_RE.sub("", raw, count=1).strip()
        return f"Slot {rest} >"

    return f"Slot > {raw}"


def normalize_routine_rows(rows: Sequence[Sequence[Any]] | None) -> list[list[str]]:
    """Trim every cell; this is the content the change detector fingerprints."""
    return [[_text(cell) for cell in row] for row in (rows or [])]


def _slot_labels(header: Sequence[Any]) -> list[str]:
    return [_text(cell).replace("\n", " ").strip() for cell in header[1:]]


def _find_block_start(rows: Sequence[Sequence[Any]], target: str) -> int:
    for i in range(1, len(rows)):
        row = rows[i]
        if row and _text(row[0]).lower() == target:
            return i
    return -1


def parse_day_classes(rows: Sequence[Sequence[Any]] | None, weekday: str | date) -> list[ClassEntry]:
    """
    Classes for one weekday, in grid order (row by row, then left to right).

    Returns [] for an empty grid or when the weekday has no block.
    """
    if not rows:
        return []

    target_name = weekday_name(weekday) if isinstance(weekday, date) else _text(weekday)
    target = target_name.lower()
    if not target:
        return []

    start = _find_block_start(rows, target)
    if start < 0:
        return []

    labels = _slot_labels(rows[0])
    classes: list[ClassEntry] = []

    for i in range(start, len(rows)):
        row = rows[i]
        marker = _text(row[0]) if row else ""
        if i > start and marker and marker.lower() in _WEEKDAYS_LOWER:
            break

        for j in range(1, len(row)):
            info = _text(row[j])
            if not info:
                continue
            raw_label = labels[j - 1] if j - 1 < len(labels) and labels[j - 1] else f"Slot {j}"
            classes.append(
                ClassEntry(
                    slot_label=format_slot_label(raw_label),
                    details=_NEWLINE_RE.sub(", ", info),
                )
            )

    return classes


def resolve_weekday(forced_day: str | None, fallback: date) -> str:
    """Forced weekday override if it names a real weekday, else the weekday of fallback."""
    return normalize_day_name(forced_day) or weekday_name(fallback)
