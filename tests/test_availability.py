"""Tests for due-date and day-based task availability."""

from datetime import datetime, timezone

from levelup_rules.models.time_window import AvailabilityStatus
from levelup_rules.time_window.availability import (
    can_admin_extend_task,
    can_user_interact_with_day_based_task,
    can_user_interact_with_task,
    get_task_availability_message,
    get_task_availability_status,
    get_task_day_availability,
    is_due_date_in_current_week,
    is_due_date_passed,
)

UTC = timezone.utc

# Wednesday of the week Mon 2024-01-01 .. Sun 2024-01-07
NOW = datetime(2024, 1, 3, 12, 0, tzinfo=UTC)


class TestDueDates:
    def test_due_date_passed(self):
        assert is_due_date_passed("2024-01-02T12:00:00Z", now=NOW) is True
        assert is_due_date_passed("2024-01-04T12:00:00Z", now=NOW) is False

    def test_current_week_is_monday_to_sunday(self):
        assert is_due_date_in_current_week("2024-01-01T00:00:00Z", now=NOW, tz=UTC) is True
        assert is_due_date_in_current_week("2024-01-07T23:59:59Z", now=NOW, tz=UTC) is True
        assert is_due_date_in_current_week("2023-12-31T23:59:59Z", now=NOW, tz=UTC) is False
        assert is_due_date_in_current_week("2024-01-08T00:00:00Z", now=NOW, tz=UTC) is False

    def test_admin_can_extend_only_this_week(self):
        assert can_admin_extend_task("2024-01-02T09:00:00Z", now=NOW, tz=UTC) is True
        assert can_admin_extend_task("2023-12-29T09:00:00Z", now=NOW, tz=UTC) is False

    def test_user_interaction(self):
        assert can_user_interact_with_task("2024-01-05T00:00:00Z", now=NOW, tz=UTC) is True
        assert can_user_interact_with_task("2024-01-02T00:00:00Z", now=NOW, tz=UTC) is False
        assert can_user_interact_with_task(
            "2024-01-02T00:00:00Z", admin_extended=True, now=NOW, tz=UTC
        ) is True
        assert can_user_interact_with_task(
            "2023-12-29T00:00:00Z", admin_extended=True, now=NOW, tz=UTC
        ) is False


class TestAvailabilityStatus:
    def test_active(self):
        status = get_task_availability_status("2024-01-05T00:00:00Z", now=NOW, tz=UTC)
        assert status.can_interact is True
        assert status.status == AvailabilityStatus.ACTIVE
        assert status.message == "Active"

    def test_extended(self):
        status = get_task_availability_status(
            "2024-01-02T00:00:00Z", admin_extended=True, now=NOW, tz=UTC
        )
        assert status.status == AvailabilityStatus.ACTIVE
        assert status.message == "Extended by admin"

    def test_expired_but_extendable(self):
        status = get_task_availability_status("2024-01-02T00:00:00Z", now=NOW, tz=UTC)
        assert status.can_interact is False
        assert status.status == AvailabilityStatus.EXPIRED

    def test_week_expired(self):
        status = get_task_availability_status(
            "2023-12-29T00:00:00Z", admin_extended=True, now=NOW, tz=UTC
        )
        assert status.can_interact is False
        assert status.status == AvailabilityStatus.WEEK_EXPIRED
        assert status.message == "Week expired - Cannot be extended"


class TestDayBasedTasks:
    def test_today(self):
        day = get_task_day_availability("Day 3 - Connect with 10 people", now=NOW, tz=UTC)
        assert day.is_available is True
        assert day.day_of_week == 3
        assert day.message == "Available today (Wednesday)"

    def test_past_day(self):
        day = get_task_day_availability("Day 1 - Update headline", now=NOW, tz=UTC)
        assert day.is_available is False
        assert day.is_past_due is True
        assert day.can_request_extension is True
        assert day.message == "Task was due on Monday. Request extension to complete."

    def test_future_day_case_insensitive(self):
        day = get_task_day_availability("day 5 - Publish a post", now=NOW, tz=UTC)
        assert day.is_future_day is True
        assert day.is_available is False
        assert day.message == "Will be available on Friday"

    def test_titles_without_day_are_available(self):
        for title in ("Weekly review", "Day 9 - Bonus", "Day 0 - Warmup"):
            day = get_task_day_availability(title, now=NOW, tz=UTC)
            assert day.is_available is True
            assert day.message == "Task available"

    def test_sunday_is_day_seven(self):
        sunday = datetime(2024, 1, 7, 10, 0, tzinfo=UTC)
        day = get_task_day_availability("Day 7 - Reflect", now=sunday, tz=UTC)
        assert day.day_of_week == 7
        assert day.is_available is True

    def test_admin_extension_overrides_day(self):
        assert can_user_interact_with_day_based_task("Day 1 - Old", now=NOW, tz=UTC) is False
        assert can_user_interact_with_day_based_task(
            "Day 1 - Old", admin_extended=True, now=NOW, tz=UTC
        ) is True
        assert get_task_availability_message(
            "Day 1 - Old", admin_extended=True, now=NOW, tz=UTC
        ) == "Extended by admin - Available now"
        assert get_task_availability_message("Day 6 - Later", now=NOW, tz=UTC) == (
            "Will be available on Saturday"
        )
