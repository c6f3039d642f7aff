# src/planner_ai/llm/prose.py

"""
Prose formatting on top of an LLMClient.

Every public method returns text and never raises: when no LLM is configured, or the
LLM call fails, the deterministic builders from core.compose are used instead.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence

from ..core.compose import build_routine_summary, build_task_summary, space_numbered_items
from ..core.dates import format_display_date
from ..core.models import ClassEntry, TaskRecord
from ..core.ports import LLMClient

logger = logging.getLogger(__name__)

_PLAIN_TEXT_RULES = """\
- This message will be sent on WhatsApp, so do NOT use any markdown, bold, italic, headers, tables, bullet symbols, or special formatting.
- Use plain text only with numbered lists and line breaks."""


def _tasks_json(tasks: Sequence[TaskRecord]) -> str:
    return json.dumps(
        [{**t.to_dict(), "date": format_display_date(t.date)} for t in tasks],
        ensure_ascii=False,
    )


def build_task_prompt(
    today: Sequence[TaskRecord],
    overdue: Sequence[TaskRecord],
    *,
    name: str,
    day_name: str,
    display_date: str,
) -> str:
    section = f"Today's tasks:\n{_tasks_json(today)}"
    if overdue:
        section += f"\n\nOverdue tasks (date has passed but still pending):\n{_tasks_json(overdue)}"

    return f"""\
You are {name}'s personal productivity assistant.

Day: {day_name}
Date: {display_date}

{section}

Each task has these fields: task (name), note (extra details), date (DD Mon YYYY), status.

Rules:
- Address {name} by name.
- Today's day and date are already provided above. Use them exactly as given.
- Keep day and date on separate lines.
- First list today's tasks with numbers.
- If there are overdue tasks, list them separately under an "Overdue" section with numbered list and their original due dates.
- If a task has a note, include it next to the task.
- Add a short motivational line at the end.
- Keep it under 300 words.
{_PLAIN_TEXT_RULES}
- Write in a warm, formal and professional tone.
"""


def build_routine_prompt(classes: Sequence[ClassEntry], *, name: str, day_name: str) -> str:
    payload = json.dumps([c.to_dict() for c in classes], ensure_ascii=False)
    return f"""\
You are {name}'s personal class schedule assistant.

Today is {day_name}. Here are {name}'s classes for today:
{payload}

Each class has: time (slot time) and details (instructor, course code, section, room).

Rules:
- Address {name} by name.
- Show today's day.
- List each class with its time and details in numbered format.
- Add one blank line after each class item.
- Keep it concise and under 200 words.
{_PLAIN_TEXT_RULES}
- Use a formal and professional tone throughout.
"""


class ProseFormatter:
    def __init__(self, llm: LLMClient | None, *, name: str) -> None:
        self._llm = llm
        self._name = name

    @property
    def enabled(self) -> bool:
        return self._llm is not None

    async def _generate(self, prompt: str, what: str) -> str | None:
        if self._llm is None:
            return None
        try:
            text = await asyncio.to_thread(self._llm.complete, prompt)
        except Exception:
            logger.exception("LLM %s formatting failed, using plain format", what)
            return None
        if not (text or "").strip():
            logger.warning("LLM returned empty %s text, using plain format", what)
            return None
        return text

    async def format_tasks(
        self,
        today: Sequence[TaskRecord],
        overdue: Sequence[TaskRecord],
        *,
        day_name: str,
        display_date: str,
    ) -> str:
        prompt = build_task_prompt(
            today, overdue, name=self._name, day_name=day_name, display_date=display_date
        )
        text = await self._generate(prompt, "task")
        if text is None:
            return build_task_summary(today, overdue)
        return text

    async def format_routine(self, classes: Sequence[ClassEntry], *, day_name: str) -> str:
        prompt = build_routine_prompt(classes, name=self._name, day_name=day_name)
        text = await self._generate(prompt, "routine")
        if text is None:
            return build_routine_summary(day_name, classes, name=self._name)
        return space_numbered_items(text)
