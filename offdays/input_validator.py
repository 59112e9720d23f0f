"""
Input Validator for the off-days API
Parses the requested date and checks it against the supported window.
"""

from datetime import date, datetime

from offdays.config import Settings
from offdays.errors import ScheduleError


def parse_date(raw: str) -> date:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp into a calendar date."""
    raw = (raw or "").strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        raise ScheduleError.invalid_input("The date is not valid")


def validate_date(raw: str, settings: Settings) -> date:
    """
    Validate that the passed-in date is a real date inside the supported window.

    The configured minimum is exclusive and the maximum inclusive, so the
    error message names ``min + 1 day`` as the first valid date.
    """
    day = parse_date(raw)
    if day < settings.first_valid_date or day > settings.max_date:
        raise ScheduleError.invalid_input(
            f"The date must be between {settings.format_date(settings.first_valid_date)} "
            f"and {settings.format_date(settings.max_date)} (inclusive)"
        )
    return day
