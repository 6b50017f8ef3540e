"""
Cadence arithmetic for contact schedules and risk assessment reviews.

Day-based frequencies add a fixed number of days. Month and year offsets
use relativedelta, which clamps to the last valid day of the target
month: Jan 31 + 1 month is Feb 28 (Feb 29 in a leap year), and
Feb 29 + 1 year is Feb 28.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

from family_contact.db.enums import ContactFrequency, RiskLevel

# Offset from the last contact date for each frequency
FREQUENCY_OFFSETS: dict[str, relativedelta | timedelta] = {
    ContactFrequency.DAILY.value: timedelta(days=1),
    ContactFrequency.TWICE_WEEKLY.value: timedelta(days=3),
    ContactFrequency.WEEKLY.value: timedelta(days=7),
    ContactFrequency.FORTNIGHTLY.value: timedelta(days=14),
    ContactFrequency.MONTHLY.value: relativedelta(months=1),
    ContactFrequency.QUARTERLY.value: relativedelta(months=3),
    ContactFrequency.ANNUALLY.value: relativedelta(years=1),
}
FALLBACK_OFFSET = relativedelta(months=1)

# Review cadence (months) by overall risk level
REVIEW_MONTHS_BY_RISK_LEVEL: dict[str, int] = {
    RiskLevel.CRITICAL.value: 3,
    RiskLevel.VERY_HIGH.value: 3,
    RiskLevel.HIGH.value: 6,
    RiskLevel.MEDIUM.value: 12,
    RiskLevel.LOW.value: 12,
}
DEFAULT_REVIEW_MONTHS = 12


def today_utc() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping to the end of shorter months."""
    return start + relativedelta(months=months)


def _value(enum_or_str: object) -> str:
    return getattr(enum_or_str, "value", enum_or_str)  # type: ignore[return-value]


def next_contact_date(last_contact: date, frequency: ContactFrequency | str) -> date:
    """
    Next contact date after a completed session.

    Unrecognized frequencies fall back to one calendar month.
    """
    offset = FREQUENCY_OFFSETS.get(_value(frequency), FALLBACK_OFFSET)
    return last_contact + offset


def review_months_for_risk_level(risk_level: RiskLevel | str) -> int:
    """Months between risk assessment reviews for a given overall risk level."""
    return REVIEW_MONTHS_BY_RISK_LEVEL.get(_value(risk_level), DEFAULT_REVIEW_MONTHS)


def parse_clock_time(value: str) -> int:
    """
    Parse an "HH:MM" (or "HH:MM:SS") clock string into minutes after midnight.

    Raises:
        ValueError: if the string is not a valid clock time.
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def format_clock_time(minutes: int) -> str:
    """Render minutes after midnight as a zero-padded "HH:MM" string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_minutes(start: str | None, end: str | None) -> int | None:
    """Minutes between two clock times on the same day, or None if either is missing."""
    if not start or not end:
        return None
    return parse_clock_time(end) - parse_clock_time(start)
