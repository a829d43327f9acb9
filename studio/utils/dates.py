from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from studio.core.config import settings

DateLike = Union[str, int, date, datetime]


def normalize_date(
    value: DateLike,
    year: Optional[int] = None,
    month_index: Optional[int] = None
) -> str:
    """
    Normalize a date-ish value to the canonical "YYYY-MM-DD" string.

    Accepts date/datetime objects, ISO-like strings with or without zero
    padding ("2025-6-1") and legacy bare day numbers (5 or "5"), which can
    only be resolved when a year and zero-based month index are given.

    Raises ValueError when the value cannot be turned into a real date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, bool):
        raise ValueError(f"Invalid date value: {value!r}")

    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        if year is None or month_index is None:
            raise ValueError(f"Day number {value!r} needs a year and month to be resolved")
        return date(year, month_index + 1, int(value)).isoformat()

    if isinstance(value, str):
        text = value.strip()
        # Drop any time component ("2025-06-10T12:00:00")
        text = text.split("T")[0].split(" ")[0]
        parts = text.split("-")
        if len(parts) != 3:
            raise ValueError(f"Invalid date format: {value!r}. Use YYYY-MM-DD")
        try:
            y, m, d = (int(p) for p in parts)
        except ValueError:
            raise ValueError(f"Invalid date format: {value!r}. Use YYYY-MM-DD")
        return date(y, m, d).isoformat()

    raise ValueError(f"Invalid date value: {value!r}")


def normalize_time(value: str) -> str:
    """Normalize "9:5" / "09:05" / "09:05:00" to "HH:MM"."""
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time format: {value!r}. Use HH:MM")
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid time format: {value!r}. Use HH:MM")
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Time out of range: {value!r}")
    return f"{hours:02d}:{minutes:02d}"


def parse_date(date_str: str) -> date:
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def weekday_of(d: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return d.isoweekday() % 7


def time_to_minutes(time_str: str) -> int:
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def studio_today() -> date:
    """Current date in the studio's timezone."""
    return datetime.now(ZoneInfo(settings.STUDIO_TIMEZONE)).date()
