"""
Time Window Evaluator — deadline arithmetic for Job Hunter actions.

Checks whether an action (follow-up, thank-you note, evidence upload) landed
inside its allowed window, derives time-based bonus points, and classifies
how urgent an open deadline is.

Behavioral Contract:
- Pure functions; "now" is injectable through current_time
- A window closes AT its deadline: zero time remaining is expired
- Retrospective checks (both timestamps known) compare elapsed hours
  inclusively; prospective checks fall back to a live countdown
- Results are returned, never raised; only unparseable timestamps raise
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Optional, Union

from croniter import croniter
from pydantic import TypeAdapter, ValidationError

from levelup_rules.config import get_settings
from levelup_rules.models.time_window import (
    BonusRule,
    TimeBonus,
    TimeValidationResult,
    UrgencyLevel,
)

Timestamp = Union[datetime, str]

HOUR_MS = 60 * 60 * 1000
MINUTE_MS = 60 * 1000

FOLLOW_UP_WINDOW_HOURS = 48
THANK_YOU_WINDOW_HOURS = 24
FOLLOW_UP_BONUS_WINDOW_HOURS = 36

# Monday-Friday, 09:00-16:59 local time
BUSINESS_HOURS_SCHEDULE = "* 9-16 * * 1-5"

BONUS_RULES: Dict[str, BonusRule] = {
    "follow_up": BonusRule(threshold_hours=36, bonus_points=3, label="Follow-up"),
    "per_job_follow_up": BonusRule(threshold_hours=36, bonus_points=2, label="Job follow-up"),
    "thank_you": BonusRule(threshold_hours=12, bonus_points=2, label="Thank you note"),
}

# Tightest bound first
_URGENCY_THRESHOLDS = (
    (2, UrgencyLevel.CRITICAL),
    (6, UrgencyLevel.HIGH),
    (24, UrgencyLevel.MEDIUM),
)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_datetime_adapter = TypeAdapter(datetime)


class InvalidTimestampError(ValueError):
    """Raised when a timestamp cannot be parsed."""
    pass


def coerce_datetime(value: Timestamp) -> datetime:
    """Parse an ISO-8601 string or pass a datetime through. Naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = _datetime_adapter.validate_python(value)
        except ValidationError as e:
            raise InvalidTimestampError(f"Invalid timestamp: {value!r}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def elapsed_hours(start: Timestamp, end: Timestamp) -> float:
    """Signed hours from start to end."""
    return (coerce_datetime(end) - coerce_datetime(start)) / timedelta(hours=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_display_zone(tz: Optional[tzinfo]) -> tzinfo:
    return tz if tz is not None else get_settings().display_zone()


def validate_time_window(
    action_time: Timestamp,
    window_hours: float,
    current_time: Optional[Timestamp] = None,
) -> TimeValidationResult:
    """Check whether current_time is still inside window_hours after action_time."""
    if window_hours <= 0:
        raise ValueError(f"window_hours must be positive, got {window_hours}")

    action = coerce_datetime(action_time)
    current = coerce_datetime(current_time) if current_time is not None else utc_now()
    expiry = calculate_deadline(action, window_hours)
    remaining_ms = (expiry - current) / timedelta(milliseconds=1)

    if remaining_ms <= 0:
        return TimeValidationResult(
            is_valid=False,
            is_expired=True,
            time_remaining_ms=0,
            message=(
                f"Time window has expired. You had {window_hours:g} hours "
                f"from {format_date_time(action)}."
            ),
        )

    return TimeValidationResult(
        is_valid=True,
        is_expired=False,
        time_remaining_ms=remaining_ms,
        message=(
            f"{format_time_remaining(remaining_ms)} remaining "
            f"(until {format_date_time(expiry)})"
        ),
    )


def _retrospective_check(
    start: Timestamp,
    end: Timestamp,
    threshold_hours: float,
    within_message: str,
    exceeded_message: str,
) -> TimeValidationResult:
    hours = elapsed_hours(start, end)
    if hours <= threshold_hours:
        return TimeValidationResult(
            is_valid=True,
            is_expired=False,
            message=within_message.format(hours=f"{hours:.1f}"),
        )
    return TimeValidationResult(
        is_valid=False,
        is_expired=True,
        message=exceeded_message.format(hours=f"{hours:.1f}"),
    )


def validate_48_hour_window(
    application_time: Timestamp,
    follow_up_time: Optional[Timestamp] = None,
    current_time: Optional[Timestamp] = None,
) -> TimeValidationResult:
    """Follow-up within 48h of applying, or the countdown if not yet sent."""
    if follow_up_time:
        return _retrospective_check(
            application_time,
            follow_up_time,
            FOLLOW_UP_WINDOW_HOURS,
            "Follow-up sent {hours} hours after application (within 48h window)",
            "Follow-up was sent {hours} hours after application (exceeded 48h window)",
        )
    return validate_time_window(application_time, FOLLOW_UP_WINDOW_HOURS, current_time)


def validate_24_hour_thank_you_window(
    interview_time: Timestamp,
    thank_you_time: Optional[Timestamp] = None,
    current_time: Optional[Timestamp] = None,
) -> TimeValidationResult:
    """Thank-you note within 24h of the interview, or the countdown if not yet sent."""
    if thank_you_time:
        return _retrospective_check(
            interview_time,
            thank_you_time,
            THANK_YOU_WINDOW_HOURS,
            "Thank you note sent {hours} hours after interview (within 24h window)",
            "Thank you note was sent {hours} hours after interview (exceeded 24h window)",
        )
    return validate_time_window(interview_time, THANK_YOU_WINDOW_HOURS, current_time)


def validate_36_hour_bonus_window(
    application_time: Timestamp,
    follow_up_time: Timestamp,
) -> TimeValidationResult:
    return _retrospective_check(
        application_time,
        follow_up_time,
        FOLLOW_UP_BONUS_WINDOW_HOURS,
        "Bonus eligible: Follow-up sent within 36 hours ({hours}h)",
        "Bonus not eligible: Follow-up sent after 36 hours ({hours}h)",
    )


def get_time_based_bonus(
    action_type: str,
    base_time: Timestamp,
    action_time: Timestamp,
) -> TimeBonus:
    """Look up the bonus for action_type and grant it if sent quickly enough."""
    hours = elapsed_hours(base_time, action_time)

    rule = BONUS_RULES.get(action_type)
    if rule and hours <= rule.threshold_hours:
        return TimeBonus(
            eligible=True,
            bonus_points=rule.bonus_points,
            reason=(
                f"{rule.label} sent within {rule.threshold_hours:g} hours "
                f"(+{rule.bonus_points} bonus points)"
            ),
        )

    return TimeBonus(
        eligible=False,
        bonus_points=0,
        reason=f"No time-based bonus (sent after {hours:.1f} hours)",
    )


def format_time_remaining(milliseconds: float) -> str:
    if milliseconds <= 0:
        return "0 minutes"

    hours = int(milliseconds // HOUR_MS)
    minutes = int((milliseconds % HOUR_MS) // MINUTE_MS)

    if hours == 0:
        return f"{minutes} minute{'' if minutes == 1 else 's'}"
    if minutes == 0:
        return f"{hours} hour{'' if hours == 1 else 's'}"
    return f"{hours}h {minutes}m"


def format_date_time(value: Timestamp, tz: Optional[tzinfo] = None) -> str:
    """Render as e.g. "Jan 1, 2024, 09:05 AM" in the display timezone."""
    local = coerce_datetime(value).astimezone(resolve_display_zone(tz))
    hour12 = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    month = MONTH_ABBREVIATIONS[local.month - 1]
    return f"{month} {local.day}, {local.year}, {hour12:02d}:{local.minute:02d} {meridiem}"


def calculate_deadline(action_time: Timestamp, window_hours: float) -> datetime:
    return coerce_datetime(action_time) + timedelta(hours=window_hours)


def get_urgency_level(time_remaining_ms: float) -> UrgencyLevel:
    hours = time_remaining_ms / HOUR_MS
    for max_hours, level in _URGENCY_THRESHOLDS:
        if hours <= max_hours:
            return level
    return UrgencyLevel.LOW


def is_business_hours(
    date: Optional[Timestamp] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """Monday to Friday, 9 AM to 5 PM in the display timezone."""
    moment = coerce_datetime(date) if date is not None else utc_now()
    local = moment.astimezone(resolve_display_zone(tz))
    return croniter.match(BUSINESS_HOURS_SCHEDULE, local)
