"""Event date helpers.

An event counts as past once its date/time has elapsed, except on the
event's own calendar day: games stay editable until midnight.
"""

from datetime import date, datetime
from typing import Optional

from match_fit.models.team import EventRecord


def parse_event_date(value: str | date | datetime) -> datetime:
    """Parse an ISO date or datetime into a datetime.

    Date-only values resolve to midnight. A trailing "Z" is accepted.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def is_event_past(event_date: str | date | datetime, now: Optional[datetime] = None) -> bool:
    """Check whether an event is in the past and not today.

    Args:
        event_date: The event's date or datetime
        now: Reference time (defaults to the current local time)
    """
    when = parse_event_date(event_date)
    if now is None:
        now = datetime.now(when.tzinfo) if when.tzinfo else datetime.now()
    elif when.tzinfo and not now.tzinfo:
        when = when.astimezone().replace(tzinfo=None)
    elif now.tzinfo and not when.tzinfo:
        now = now.astimezone().replace(tzinfo=None)
    elif when.tzinfo:
        when = when.astimezone(now.tzinfo)

    if when.date() == now.date():
        return False
    return when < now


def upcoming_games(events: list[EventRecord], now: Optional[datetime] = None) -> list[EventRecord]:
    """Game events that can still receive a lineup, in the given order."""
    return [e for e in events if e.is_game and not is_event_past(e.date, now)]
