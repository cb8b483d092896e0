"""
One status sentence for a whole submit
"""
from datetime import datetime
from typing import Iterable
from zoneinfo import ZoneInfo

from .composer import MODE_SCHEDULE


def format_local_time(value: datetime, timezone_name: str = 'UTC') -> str:
    """e.g. 'Mar 5, 2026, 3:05 PM' in the caller's zone"""
    local = value.astimezone(ZoneInfo(timezone_name))
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year}, {hour}:{local:%M} {local:%p}"


def summarize(results: Iterable, mode: str, schedule_at: datetime = None, timezone_name: str = 'UTC') -> str:
    results = list(results)
    succeeded = sum(1 for r in results if r.success)
    failed = [r for r in results if not r.success]
    lines = "\n".join(r.failure_line for r in failed)

    if mode == MODE_SCHEDULE:
        if succeeded and not failed:
            when = format_local_time(schedule_at, timezone_name) if schedule_at else "the scheduled time"
            return f"Scheduled successfully for {succeeded} account(s). Post(s) will go out at {when}."
        if succeeded:
            return f"Scheduled for {succeeded} account(s). Failed for {len(failed)}:\n{lines}"
        return f"Scheduling failed:\n{lines}"

    if succeeded and not failed:
        return f"Queued successfully for {succeeded} account(s)."
    if succeeded:
        return f"Queued for {succeeded} account(s). Failed for {len(failed)}:\n{lines}"
    return f"Post failed:\n{lines}"
