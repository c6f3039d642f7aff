# src/planner_ai/core/service.py

from __future__ import annotations

"""
Evaluation pass.

One pass = fetch -> normalize -> classify -> detect -> compose -> deliver, for two
independent paths:

- task path: task sheet -> today/overdue buckets -> digest (or "no tasks" message)
- routine path: routine grid -> change report (+ update notice) -> today's classes summary

A failure in one path is logged, recorded on the PassResult, and does not stop the other.
Passes are serialized per service instance, so a manual run cannot interleave with a
scheduled one.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from ..llm.prose import ProseFormatter
from ..sheets.reader import resolve_task_range
from .changes import ChangeDetector
from .compose import build_no_tasks_message, build_routine_update_notification
from .dates import format_display_date, normalize_date, today_in_timezone
from .models import ChangeReport, ClassEntry, TaskBuckets
from .ports import OutboundMessenger, Rows, TableReader
from .routine import normalize_routine_rows, parse_day_classes, resolve_weekday
from .tasks import classify_tasks

logger = logging.getLogger(__name__)

ROUTINE_DATASET = "routine_sheet"


class RoutineNotConfigured(RuntimeError):
    pass


@dataclass(slots=True)
class PassResult:
    today: str
    day_name: str
    tasks: TaskBuckets | None = None
    classes: list[ClassEntry] | None = None
    routine_change: ChangeReport | None = None
    messages_sent: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class PlannerService:
    def __init__(
        self,
        settings: Any,
        *,
        reader: TableReader,
        messenger: OutboundMessenger,
        prose: ProseFormatter,
        detector: ChangeDetector | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings
        self._reader = reader
        self._messenger = messenger
        self._prose = prose
        self._detector = detector if detector is not None else ChangeDetector()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._pass_lock = asyncio.Lock()

    @property
    def detector(self) -> ChangeDetector:
        return self._detector

    def today(self) -> date:
        """The user's civil date in the configured timezone."""
        return today_in_timezone(self._settings.timezone, self._clock())

    def _resolve_today(self, today: date | str | None) -> date:
        if today is None:
            return self.today()
        if isinstance(today, date):
            return today
        iso = normalize_date(today)
        if not iso:
            raise ValueError(f"Not a date: {today!r}")
        return date.fromisoformat(iso)

    # ---- fetch ----

    async def _task_rows(self) -> Rows:
        range_a1 = await resolve_task_range(self._reader, self._settings)
        logger.info("Reading task rows from range: %s", range_a1)
        return await self._reader.read_rows(self._settings.spreadsheet_id, range_a1)

    async def _routine_rows(self) -> Rows:
        spreadsheet_id = (getattr(self._settings, "routine_spreadsheet_id", "") or "").strip()
        if not spreadsheet_id:
            raise RoutineNotConfigured("Routine spreadsheet id is not configured.")
        return await self._reader.read_rows(spreadsheet_id, self._settings.routine_range)

    # ---- read-only queries ----

    async def get_task_buckets(self, today: date | str | None = None) -> TaskBuckets:
        rows = await self._task_rows()
        return classify_tasks(rows, self._resolve_today(today))

    async def get_today_classes(
        self,
        weekday: str | None = None,
        *,
        rows: Rows | None = None,
    ) -> list[ClassEntry]:
        if rows is None:
            rows = await self._routine_rows()
        day_name = resolve_weekday(weekday, self.today())
        logger.info("Looking for classes on: %s", day_name)
        return parse_day_classes(rows, day_name)

    # ---- pass ----

    async def _deliver(self, text: str, what: str, result: PassResult) -> bool:
        try:
            await self._messenger.send_text(text=text)
        except Exception as e:
            logger.exception("Sending %s message failed", what)
            result.errors.append(f"deliver {what}: {e}")
            return False
        result.messages_sent += 1
        logger.info("Sent %s message", what)
        return True

    async def _run_task_path(self, result: PassResult, today: date) -> None:
        logger.info("Fetching tasks...")
        buckets = await self.get_task_buckets(today)
        result.tasks = buckets
        logger.info(
            "Found %d task(s) for today, %d overdue task(s).", len(buckets.today), len(buckets.overdue)
        )

        if buckets.empty:
            await self._deliver(build_no_tasks_message(self._settings.recipient_name), "no-tasks", result)
            return

        text = await self._prose.format_tasks(
            buckets.today,
            buckets.overdue,
            day_name=result.day_name,
            display_date=format_display_date(today.isoformat()),
        )
        logger.debug("Task message:\n%s", text)
        await self._deliver(text, "task", result)

    async def _run_routine_path(self, result: PassResult) -> None:
        logger.info("Fetching class routine...")
        rows = await self._routine_rows()

        report = self._detector.detect(ROUTINE_DATASET, normalize_routine_rows(rows))
        result.routine_change = report

        classes = await self.get_today_classes(result.day_name, rows=rows)
        result.classes = classes
        logger.info("Found %d class(es) for %s.", len(classes), result.day_name)

        if report.changed:
            logger.info("Routine update detected. Sending update notification...")
            notice = build_routine_update_notification(
                result.day_name,
                classes,
                report.updated_at,
                tz_name=self._settings.timezone,
                name=self._settings.recipient_name,
            )
            await self._deliver(notice, "routine-update", result)

        if not classes:
            logger.info("No classes for %s.", result.day_name)
            return

        text = await self._prose.format_routine(classes, day_name=result.day_name)
        logger.debug("Routine message:\n%s", text)
        await self._deliver(text, "routine", result)

    async def run_pass(
        self,
        forced_day: str | None = None,
        today: date | str | None = None,
    ) -> PassResult:
        """
        Run one full pass. Collaborator failures are recorded on the result, never raised.

        forced_day overrides the weekday used for the routine and for message headers;
        today overrides the reference date for task classification.
        """
        async with self._pass_lock:
            ref = self._resolve_today(today)
            result = PassResult(today=ref.isoformat(), day_name=resolve_weekday(forced_day, ref))
            logger.info("Pass started today=%s day=%s", result.today, result.day_name)

            try:
                await self._run_task_path(result, ref)
            except Exception as e:
                logger.exception("Task path failed")
                result.errors.append(f"tasks: {e}")

            try:
                await self._run_routine_path(result)
            except RoutineNotConfigured:
                logger.warning("Routine spreadsheet is not configured; skipping routine path.")
            except Exception as e:
                logger.exception("Routine path failed")
                result.errors.append(f"routine: {e}")

            logger.info(
                "Pass finished: %d message(s) sent, %d error(s)", result.messages_sent, len(result.errors)
            )
            return result
