# tests/test_prose.py

from __future__ import annotations

import pytest

from planner_ai.core.compose import build_routine_summary, build_task_summary
from planner_ai.core.models import ClassEntry, TaskRecord
from planner_ai.llm.prose import ProseFormatter

from .fakes import FakeLLMClient

TODAY = [TaskRecord(task="Write report", note="draft", date="2/20/2026", status="pending")]
OVERDUE = [TaskRecord(task="Renew card", note="", date="2026-02-18", status="pending")]
CLASSES = [ClassEntry("Slot 1 > 8:00-9:00", "CSE101 RoomA"), ClassEntry("Slot 2 > 9:00-10:00", "CSE102")]


@pytest.mark.asyncio
async def test_task_prompt_carries_context_and_llm_text_is_returned() -> None:
    llm = FakeLLMClient(next_text="Dear Ziban, here is your day.")
    prose = ProseFormatter(llm, name="Ziban")

    text = await prose.format_tasks(TODAY, OVERDUE, day_name="Friday", display_date="20 Feb 2026")

    assert text == "Dear Ziban, here is your day."
    prompt = llm.prompts[0]
    assert "Day: Friday" in prompt
    assert "Date: 20 Feb 2026" in prompt
    assert "Overdue tasks" in prompt
    # Dates are shown in display form, not the raw cell.
    assert '"date": "18 Feb 2026"' in prompt
    assert "Address Ziban by name." in prompt


@pytest.mark.asyncio
async def test_task_prompt_omits_overdue_section_when_empty() -> None:
    llm = FakeLLMClient(next_text="ok")
    await ProseFormatter(llm, name="Ziban").format_tasks(TODAY, [], day_name="Friday", display_date="x")
    assert "Overdue tasks (date has passed" not in llm.prompts[0]


@pytest.mark.asyncio
async def test_llm_failure_falls_back_to_plain_text() -> None:
    llm = FakeLLMClient(error=RuntimeError("All LLM models failed."))
    prose = ProseFormatter(llm, name="Ziban")

    tasks_text = await prose.format_tasks(TODAY, OVERDUE, day_name="Friday", display_date="20 Feb 2026")
    routine_text = await prose.format_routine(CLASSES, day_name="Monday")

    assert tasks_text == build_task_summary(TODAY, OVERDUE)
    assert routine_text == build_routine_summary("Monday", CLASSES, name="Ziban")


@pytest.mark.asyncio
async def test_no_llm_and_empty_answer_fall_back() -> None:
    assert not ProseFormatter(None, name="Ziban").enabled
    text = await ProseFormatter(None, name="Ziban").format_routine(CLASSES, day_name="Monday")
    assert text == build_routine_summary("Monday", CLASSES, name="Ziban")

    blank = await ProseFormatter(FakeLLMClient(next_text="  "), name="Ziban").format_tasks(
        TODAY, [], day_name="Friday", display_date="x"
    )
    assert blank == build_task_summary(TODAY, [])


@pytest.mark.asyncio
async def test_routine_text_gets_blank_lines_between_items() -> None:
    llm = FakeLLMClient(next_text="Dear Ziban,\n1. Slot 1 - CSE101\n2. Slot 2 - CSE102\nBest.")
    text = await ProseFormatter(llm, name="Ziban").format_routine(CLASSES, day_name="Monday")

    assert text == "Dear Ziban,\n1. Slot 1 - CSE101\n\n2. Slot 2 - CSE102\nBest."
    assert '"time": "Slot 1 > 8:00-9:00"' in llm.prompts[0]
    assert "Today is Monday." in llm.prompts[0]
