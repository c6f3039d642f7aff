# src/planner_ai/scheduler.py

from __future__ import annotations

"""
Pass scheduler.

A small polling loop that:
- computes the next due time from a 5-field cron expression in the user's timezone,
- wakes up every poll interval (or earlier, when the due time is closer),
- runs one evaluation pass when the due time has passed,
- logs pass failures and keeps going (a failed pass is not retried until the next due time).

To stop the scheduler, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from .core.dates import get_zone

logger = logging.getLogger(__name__)

_FIELD_BOUNDS = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day of month", 1, 31),
    ("month", 1, 12),
    ("day of week", 0, 7),
)


def _parse_field(text: str, name: str, lo: int, hi: int) -> frozenset[int]:
    values: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            raise ValueError(f"empty {name} field")

        step = 1
        if "/" in part:
            part, step_s = part.split("/", 1)
            if not step_s.isdigit() or int(step_s) <= 0:
                raise ValueError(f"bad step in {name}: {step_s!r}")
            step = int(step_s)

        if part == "*":
            start, end = lo, hi
        elif "-" in part:
            a, b = part.split("-", 1)
            if not (a.isdigit() and b.isdigit()):
                raise ValueError(f"bad range in {name}: {part!r}")
            start, end = int(a), int(b)
        elif part.isdigit():
            start = end = int(part)
        else:
            raise ValueError(f"bad {name}: {part!r}")

        if start < lo or end > hi or start > end:
            raise ValueError(f"{name} out of range: {part!r}")
        values.update(range(start, end + 1, step))
    return frozenset(values)


@dataclass(slots=True, frozen=True)
class CronSchedule:
    minutes: frozenset[int]
    hours: frozenset[int]
    days: frozenset[int]
    months: frozenset[int]
    weekdays: frozenset[int]  # 0 = Sunday
    day_restricted: bool
    weekday_restricted: bool

    def _day_matches(self, d: datetime) -> bool:
        if d.month not in self.months:
            return False
        dom = d.day in self.days
        dow = (d.weekday() + 1) % 7 in self.weekdays
        # Classic cron: either may match only when neither day field starts with '*'.
        if self.day_restricted and self.weekday_restricted:
            return dom or dow
        return dom and dow

    def next_after(self, after: datetime) -> datetime:
        """First matching minute strictly after `after` (same tzinfo as `after`)."""
        base = after.replace(second=0, microsecond=0)
        hours = sorted(self.hours)
        minutes = sorted(self.minutes)
        for offset in range(0, 366 * 5):
            day = base + timedelta(days=offset)
            if not self._day_matches(day):
                continue
            for h in hours:
                for m in minutes:
                    candidate = day.replace(hour=h, minute=m)
                    if candidate > after:
                        return candidate
        raise ValueError("cron expression never matches")


def parse_cron(expr: str) -> CronSchedule:
    """Parse "m h dom mon dow" (numbers, '*', lists, ranges and steps)."""
    fields = (expr or "").split()
    if len(fields) != 5:
        raise ValueError(f"expected 5 fields, got {len(fields)}")

    parsed = [_parse_field(text, *bounds) for text, bounds in zip(fields, _FIELD_BOUNDS)]
    weekdays = frozenset(d % 7 for d in parsed[4])
    return CronSchedule(
        minutes=parsed[0],
        hours=parsed[1],
        days=parsed[2],
        months=parsed[3],
        weekdays=weekdays,
        day_restricted=not fields[2].startswith("*"),
        weekday_restricted=not fields[4].startswith("*"),
    )


async def run_pass_scheduler(
        run_pass: Callable[[], Awaitable[Any]],
        schedule: CronSchedule,
        *,
        tz_name: str,
        poll_seconds: float = 30.0,
        now: Callable[[], datetime] | None = None,
) -> None:
    """
    Run `run_pass` each time `schedule` comes due in tz_name.

    `now` returns the current time (aware); injectable for tests.
    """
    zone = get_zone(tz_name)
    clock = now or (lambda: datetime.now(UTC))
    poll_s = max(0.01, float(poll_seconds))

    def _local_now() -> datetime:
        return clock().astimezone(zone)

    next_due = schedule.next_after(_local_now())
    logger.info("Scheduler started; next pass at %s (%s)", next_due.isoformat(), tz_name)

    while True:
        current = _local_now()

        if current >= next_due:
            logger.info("Running scheduled pass (due %s)", next_due.isoformat())
            try:
                await run_pass()
            except Exception:
                logger.exception("Scheduled pass failed")
            next_due = schedule.next_after(_local_now())
            logger.info("Next pass at %s", next_due.isoformat())
            continue

        remaining = (next_due - current).total_seconds()
        logger.debug("Scheduler idle; %.0fs until next pass", remaining)
        await asyncio.sleep(min(poll_s, max(0.01, remaining)))
