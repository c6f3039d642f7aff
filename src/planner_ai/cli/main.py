# src/planner_ai/cli/main.py

"""
CLI entrypoint.

Initializes logging, validates settings, builds the PlannerService, then either:
- runs one pass and exits (--once),
- prints a read-only query as JSON (--show tasks|routine),
- or runs the scheduler until SIGINT/SIGTERM.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
from collections.abc import Sequence

from ..config import ConfigError, get_settings
from ..core.dates import WEEKDAY_NAMES, get_zone, normalize_day_name, weekday_name
from ..core.service import PlannerService
from ..logging_setup import setup_logging
from ..scheduler import parse_cron, run_pass_scheduler
from .bootstrap import create_service

logger = logging.getLogger(__name__)


def _day_arg(value: str) -> str:
    name = normalize_day_name(value)
    if not name:
        raise argparse.ArgumentTypeError(f"expected a weekday name ({', '.join(WEEKDAY_NAMES)})")
    return name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="planner-ai",
        description="Daily task digest and class-routine notifier.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="run one pass and exit")
    mode.add_argument("--show", choices=("tasks", "routine"), help="print a read-only query as JSON")
    parser.add_argument("--day", type=_day_arg, default=None, help="force the weekday (e.g. Monday)")
    parser.add_argument("--dry-run", action="store_true", help="print messages instead of sending them")
    return parser


async def _show(service: PlannerService, what: str, day: str | None) -> int:
    try:
        if what == "tasks":
            buckets = await service.get_task_buckets()
            payload = {
                "today": [t.to_dict() for t in buckets.today],
                "overdue": [t.to_dict() for t in buckets.overdue],
            }
        else:
            classes = await service.get_today_classes(day)
            payload = {"day": day or weekday_name(service.today()), "classes": [c.to_dict() for c in classes]}
    except Exception as e:
        logger.exception("Query %s failed", what)
        print(json.dumps({"error": str(e)}, ensure_ascii=False, indent=2))
        return 1

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


async def _serve(service: PlannerService, settings) -> int:
    """Run the scheduler until a stop signal (0) or until the scheduler itself dies (1)."""
    schedule = parse_cron(settings.cron_schedule)
    runner = asyncio.create_task(
        run_pass_scheduler(
            service.run_pass,
            schedule,
            tz_name=settings.timezone,
            poll_seconds=settings.scheduler_poll_seconds,
        )
    )

    stop = asyncio.Event()
    stop_waiter = asyncio.create_task(stop.wait())
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not every platform supports loop signal handlers.
        with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)

    logger.info(
        "Scheduler running with CRON '%s' in timezone '%s'. Press Ctrl+C to stop.",
        settings.cron_schedule,
        settings.timezone,
    )
    try:
        await asyncio.wait({runner, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
        if runner.done():
            if runner.cancelled():
                logger.error("Scheduler was cancelled unexpectedly.")
            else:
                logger.error("Scheduler stopped unexpectedly.", exc_info=runner.exception())
            return 1
        return 0
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        for task in (runner, stop_waiter):
            if task.done():
                continue
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    config_ok = True
    try:
        settings.validate()
        logger.info("Config validated successfully.")
    except ConfigError as e:
        config_ok = False
        logger.error("Config validation failed: %s", e)

    service = create_service(settings=settings, dry_run=args.dry_run)

    if args.show:
        return asyncio.run(_show(service, args.show, args.day))

    if args.once:
        if not config_ok and not args.dry_run:
            return 1
        result = asyncio.run(service.run_pass(forced_day=args.day))
        for err in result.errors:
            logger.error("Pass error: %s", err)
        return 0 if result.ok else 1

    try:
        parse_cron(settings.cron_schedule)
    except ValueError:
        logger.error("Scheduler not started: invalid CRON_SCHEDULE %r", settings.cron_schedule)
        return 1

    try:
        get_zone(settings.timezone)
    except ValueError as e:
        logger.error("Scheduler not started: %s", e)
        return 1

    if not config_ok:
        logger.warning("Starting scheduler with incomplete config; passes will report errors until it is fixed.")

    code = 0
    try:
        code = asyncio.run(_serve(service, settings))
    except KeyboardInterrupt:
        pass
    logger.info("Bye.")
    return code


if __name__ == "__main__":
    sys.exit(main())
