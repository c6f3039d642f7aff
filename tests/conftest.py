# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace

import pytest

from planner_ai.core.changes import ChangeDetector
from planner_ai.core.service import PlannerService
from planner_ai.llm.prose import ProseFormatter

from .fakes import FakeMessenger, FakeTableReader

TASKS_KEY = ("tasks-sheet", "Tasks!A2:D")
ROUTINE_KEY = ("routine-sheet", "Sheet1!A1:G30")

ROUTINE_GRID = [
    ["", "Slot1 8:00-9:00", "Slot2 9:00-10:00"],
    ["Sunday", "MAT101 Room1", ""],
    ["Monday", "CSE101 RoomA", ""],
    ["", "", "CSE102 RoomB"],
    ["Tuesday", "", "CSE220 RoomC"],
]

TASK_ROWS = [
    ["Write report", "draft", "2026-02-16", "Pending"],
    ["Pay rent", "", "2/14/2026", "pending"],
    ["Done already", "", "2026-02-16", "done"],
    ["Someday", "", "later", "pending"],
]


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with PlannerService.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        timezone="Asia/Dhaka",
        spreadsheet_id="tasks-sheet",
        sheet_range="",
        sheet_name="Tasks",
        routine_spreadsheet_id="routine-sheet",
        routine_range="Sheet1!A1:G30",
        recipient_name="Ziban",
    )


@pytest.fixture()
def reader() -> FakeTableReader:
    return FakeTableReader({TASKS_KEY: TASK_ROWS, ROUTINE_KEY: ROUTINE_GRID})


@pytest.fixture()
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture()
def clock():
    # 2026-02-16 02:00 in Dhaka (a Monday); still 2026-02-15 in UTC.
    return lambda: datetime(2026, 2, 15, 20, 0, tzinfo=UTC)


@pytest.fixture()
def service(settings, reader, messenger, clock) -> PlannerService:
    """PlannerService wired with deterministic fakes and no LLM (plain formatting)."""
    return PlannerService(
        settings,
        reader=reader,
        messenger=messenger,
        prose=ProseFormatter(None, name="Ziban"),
        detector=ChangeDetector(),
        clock=clock,
    )
