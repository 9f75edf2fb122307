from datetime import date, datetime


def parse_day(value) -> date:
    """Calendar day of `value`; any time of day or timezone is dropped.

    Accepts a date, a datetime, or an ISO string ("2026-03-01",
    "2026-03-01T18:30:00+05:30"). Anything else raises ValueError.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Invalid date. Use YYYY-MM-DD")

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError("Invalid date. Use YYYY-MM-DD") from None
