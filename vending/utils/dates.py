"""
Date and time utilities.

Las fechas se guardan como cadenas ISO 8601. Las que no traen zona horaria
se interpretan en UTC.
"""
import datetime

from vending.utils.logger import get_logger

logger = get_logger("Dates")

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(tz=datetime.timezone.utc)


def now_iso() -> str:
    """
    Current UTC timestamp as ISO 8601 with milliseconds and ``Z`` suffix.

    Returns:
        Timestamp string like "2024-01-15T14:30:00.000Z"
    """
    return to_iso(utc_now())


def to_iso(dt: datetime.datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def is_date_only(value: str) -> bool:
    return bool(value) and len(value.strip()) == 10 and "T" not in value


def parse_iso(value: str | None) -> datetime.datetime | None:
    """
    Safely parse an ISO 8601 date or datetime string.

    Args:
        value: "2024-01-15", "2024-01-15T14:30:00Z", "2024-01-15T14:30:00-05:00"...

    Returns:
        Timezone-aware datetime or None if parsing fails
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError as e:
        logger.debug("Failed to parse date '%s': %s", value, e)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def parse_range_end(value: str | None) -> datetime.datetime | None:
    """Like :func:`parse_iso`, but a date-only value means the end of that day."""
    parsed = parse_iso(value)
    if parsed is not None and is_date_only(value or ""):
        parsed = parsed + datetime.timedelta(days=1, microseconds=-1)
    return parsed


def days_between(start: datetime.datetime, end: datetime.datetime) -> int:
    """Whole days elapsed from ``start`` to ``end`` (floor)."""
    seconds = (end - start).total_seconds()
    return int(seconds // SECONDS_PER_DAY)


def format_date_display(value: str | None) -> str:
    """
    Format an ISO string for display ("15/01/2024").

    Returns:
        Formatted string or empty string if the value can't be parsed
    """
    parsed = parse_iso(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d/%m/%Y")


def get_today_str() -> str:
    """Today's date in YYYY-MM-DD format."""
    return datetime.date.today().strftime("%Y-%m-%d")

