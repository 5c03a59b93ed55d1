"""Calendar arithmetic on ISO date strings (YYYY-MM-DD)."""
from datetime import date, timedelta


def today_str() -> str:
    return date.today().isoformat()


def to_date(value: str) -> date:
    """Parse a date string, ignoring any time component (e.g. a full ISO timestamp)."""
    return date.fromisoformat(value[:10])


def format_date(value: date) -> str:
    return value.isoformat()


def add_days(value: str, days: int) -> str:
    return format_date(to_date(value) + timedelta(days=days))


def day_of_week(value: str) -> int:
    """Monday=0 ... Sunday=6."""
    return to_date(value).weekday()


def days_between(first: str, second: str) -> int:
    """Whole calendar days between two dates, regardless of order."""
    return abs((to_date(second) - to_date(first)).days)


def date_range(start: str, days: int) -> list[str]:
    return [add_days(start, offset) for offset in range(days)]
