"""
Task availability — due dates, admin extensions and "Day N" weekly tasks.

Weeks run Monday to Sunday in the display timezone. An admin may extend an
overdue task only while its due date is still inside the current week.
"""

import re
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from levelup_rules.models.time_window import (
    AvailabilityStatus,
    TaskAvailability,
    TaskDayAvailability,
)
from levelup_rules.time_window.evaluator import (
    Timestamp,
    coerce_datetime,
    resolve_display_zone,
    utc_now,
)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_DAY_PATTERN = re.compile(r"Day (\d+)", re.IGNORECASE)


def _resolve_now(now: Optional[Timestamp]) -> datetime:
    return coerce_datetime(now) if now is not None else utc_now()


def _current_week_bounds(now: datetime, tz: Optional[tzinfo]) -> tuple:
    local = now.astimezone(resolve_display_zone(tz))
    week_start = (local - timedelta(days=local.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    week_end = week_start + timedelta(days=7) - timedelta(microseconds=1)
    return week_start, week_end


def is_due_date_passed(due_date: Timestamp, now: Optional[Timestamp] = None) -> bool:
    return _resolve_now(now) > coerce_datetime(due_date)


def is_due_date_in_current_week(
    due_date: Timestamp,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    week_start, week_end = _current_week_bounds(_resolve_now(now), tz)
    due = coerce_datetime(due_date)
    return week_start <= due <= week_end


def can_admin_extend_task(
    due_date: Timestamp,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    return is_due_date_in_current_week(due_date, now, tz)


def can_user_interact_with_task(
    due_date: Timestamp,
    admin_extended: bool = False,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """Open until the due date; afterwards only if extended and still this week."""
    if not is_due_date_passed(due_date, now):
        return True
    return admin_extended and is_due_date_in_current_week(due_date, now, tz)


def get_task_availability_status(
    due_date: Timestamp,
    admin_extended: bool = False,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> TaskAvailability:
    if can_user_interact_with_task(due_date, admin_extended, now, tz):
        return TaskAvailability(
            can_interact=True,
            status=AvailabilityStatus.ACTIVE,
            message="Extended by admin" if admin_extended else "Active",
        )

    if is_due_date_passed(due_date, now) and is_due_date_in_current_week(due_date, now, tz):
        return TaskAvailability(
            can_interact=False,
            status=AvailabilityStatus.EXPIRED,
            message="Due date passed - Request extension from admin",
        )

    return TaskAvailability(
        can_interact=False,
        status=AvailabilityStatus.WEEK_EXPIRED,
        message="Week expired - Cannot be extended",
    )


def get_task_day_availability(
    task_title: str,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> TaskDayAvailability:
    """
    A task titled "Day N - ..." belongs to weekday N (1 = Monday).

    It is open only on that weekday; earlier days show it as upcoming, later
    days as past due with an extension option. Titles without a valid day
    number are always available.
    """
    local = _resolve_now(now).astimezone(resolve_display_zone(tz))
    today = local.isoweekday()

    match = _DAY_PATTERN.search(task_title)
    task_day = int(match.group(1)) if match else None

    if task_day is None or not 1 <= task_day <= 7:
        return TaskDayAvailability(
            is_available=True,
            is_past_due=False,
            is_future_day=False,
            can_request_extension=False,
            day_of_week=today,
            message="Task available",
        )

    day_name = DAY_NAMES[task_day - 1]

    if today == task_day:
        return TaskDayAvailability(
            is_available=True,
            is_past_due=False,
            is_future_day=False,
            can_request_extension=False,
            day_of_week=today,
            message=f"Available today ({day_name})",
        )

    if today > task_day:
        return TaskDayAvailability(
            is_available=False,
            is_past_due=True,
            is_future_day=False,
            can_request_extension=True,
            day_of_week=today,
            message=f"Task was due on {day_name}. Request extension to complete.",
        )

    return TaskDayAvailability(
        is_available=False,
        is_past_due=False,
        is_future_day=True,
        can_request_extension=False,
        day_of_week=today,
        message=f"Will be available on {day_name}",
    )


def can_user_interact_with_day_based_task(
    task_title: str,
    admin_extended: bool = False,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    if admin_extended:
        return True
    return get_task_day_availability(task_title, now, tz).is_available


def get_task_availability_message(
    task_title: str,
    admin_extended: bool = False,
    now: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    if admin_extended:
        return "Extended by admin - Available now"
    return get_task_day_availability(task_title, now, tz).message
