import re
from datetime import date, datetime


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")

DAY_LABELS = {
    "monday": "Mon",
    "tuesday": "Tue",
    "wednesday": "Wed",
    "thursday": "Thu",
    "friday": "Fri",
}


def is_conference_day(day: str) -> bool:
    return day in WEEKDAYS


def week_day_of(value: str | date) -> str:
    """Lower-case English weekday name of an ISO date like '2025-10-06'."""
    if isinstance(value, str):
        match = re.match(r"^(\d{4}-\d{2}-\d{2})", value.strip())
        if not match:
            raise ValueError(f"Unrecognized date format: {value!r}")
        value = date.fromisoformat(match.group(1))
    return value.strftime("%A").lower()


def make_tab_label(day: str) -> str:
    """Create a short tab label from a weekday name."""
    return DAY_LABELS.get(day, day[:3].title())


def format_time_range(start: datetime | None, end: datetime | None, separator: str = "-") -> str:
    """Format a start/end instant pair into a display string."""
    if start is None:
        return ""
    if end:
        return f"{start:%H:%M}{separator}{end:%H:%M}"
    return f"{start:%H:%M}"
