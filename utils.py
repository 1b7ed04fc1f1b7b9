from datetime import date, datetime

import pytz

WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
)


def get_current_time(tz_name: str = "UTC") -> datetime:
    """Returns the current wall-clock time in tz_name as a naive datetime"""
    tz = pytz.timezone(tz_name)
    return datetime.now(tz).replace(tzinfo=None)


def to_local(value: datetime, tz_name: str = "UTC") -> datetime:
    """Converts aware datetimes into tz_name and drops tzinfo; naive ones are kept as is"""
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(tz_name)).replace(tzinfo=None)


def calendar_date(value: datetime, tz_name: str = "UTC") -> date:
    return to_local(value, tz_name).date()


def weekday_name(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]


def get_formatted_date(now: datetime):
    """Returns tuple: (iso_date, weekday_name, long_date) for prompts"""
    # For the parse prompt: "2025-10-27"
    iso_date = now.strftime("%Y-%m-%d")

    # For the summary prompt: "Monday, October 27, 2025"
    long_date = f"{weekday_name(now.date())}, {now.strftime('%B %d, %Y')}"

    return iso_date, weekday_name(now.date()), long_date
