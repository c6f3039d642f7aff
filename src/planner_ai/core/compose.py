# src/planner_ai/core/compose.py

"""
Deterministic message builders.

Used as-is when no prose generator is configured, and as the fallback whenever the
generator fails. Output is plain text (WhatsApp renders no markdown).
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .dates import format_display_date, format_update_datetime
from .models import ClassEntry, TaskRecord

DEFAULT_RECIPIENT_NAME = "there"

# "1. foo\n2. bar" -> "1. foo\n\n2. bar"
_NUMBERED_GAP_RE = re.compile(r"^(\d+\.[^\r\n]*)\r?\n(?=\d+\.)", re.MULTILINE)


def _name(name: str | None) -> str:
    return (name or "").strip() or DEFAULT_RECIPIENT_NAME


def _with_note(text: str, note: str) -> str:
    note = (note or "").strip()
    return f"{text} - {note}" if note else text


def build_task_summary(today: Sequence[TaskRecord], overdue: Sequence[TaskRecord]) -> str:
    lines = [_with_note(f"{i}. {t.task}", t.note) for i, t in enumerate(today, start=1)]
    msg = "Your tasks for today:\n\n" + "\n".join(lines)

    if overdue:
        overdue_lines = [
            _with_note(f"{i}. {t.task} (was due {format_display_date(t.date)})", t.note)
            for i, t in enumerate(overdue, start=1)
        ]
        msg += "\n\nOverdue tasks:\n" + "\n".join(overdue_lines)

    msg += "\n\nStay focused and productive!"
    return msg


def build_no_tasks_message(name: str | None = None) -> str:
    return f"Hello {_name(name)}, there are no tasks for today."


def _class_lines(classes: Sequence[ClassEntry]) -> list[str]:
    return [f"{i}. {c.slot_label} - {c.details}" for i, c in enumerate(classes, start=1)]


def build_routine_update_notification(
    day_name: str | None,
    classes: Sequence[ClassEntry],
    updated_at: str,
    *,
    tz_name: str,
    name: str | None = None,
) -> str:
    safe_day = (day_name or "").strip() or "today"
    updated_text = format_update_datetime(updated_at, tz_name)
    updated_line = f"Updated at: {updated_text} ({tz_name})\n" if updated_text else ""
    head = (
        f"Dear {_name(name)},\n\n"
        "Your class routine has been updated by your university.\n\n"
        f"Day: {safe_day}\n"
        f"{updated_line}"
    )

    if not classes:
        return (
            head
            + "Classes: No classes scheduled for this day.\n\n"
            "Please review the latest routine sheet for details.\n\n"
            "Best regards."
        )

    return (
        head
        + "Updated class schedule:\n"
        + "\n".join(_class_lines(classes))
        + "\n\nPlease follow this updated timing.\n\nBest regards."
    )


def build_routine_summary(day_name: str, classes: Sequence[ClassEntry], *, name: str | None = None) -> str:
    return (
        f"Dear {_name(name)},\n\n"
        f"Your classes for {day_name}:\n\n"
        + "\n\n".join(_class_lines(classes))
        + "\n\nWishing you a productive day.\n\nBest regards."
    )


def space_numbered_items(text: str | None) -> str:
    """Insert a blank line between consecutive numbered lines of generated text."""
    return _NUMBERED_GAP_RE.sub(r"\1\n\n", text or "")
