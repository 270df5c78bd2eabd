import datetime
from typing import Sequence

from .models import Session
from .utils import date_part, iso_from_ms, today_str


def record(ledger: Sequence[Session], session: Session) -> tuple[Session, ...]:
    return (session,) + tuple(ledger)


def recent(ledger: Sequence[Session], limit: int = 5) -> list[Session]:
    return list(ledger[:limit])


def session_day(session: Session) -> str:
    return date_part(iso_from_ms(session.start_time))


def daily_minutes(ledger: Sequence[Session], days: int = 7, today: str | None = None) -> list[tuple[str, int]]:
    # Oldest first, bucketed by the local date of each session start.
    end = datetime.date.fromisoformat(today or today_str())
    window = [str(end - datetime.timedelta(days=days - 1 - i)) for i in range(days)]

    totals = {d: 0 for d in window}
    for s in ledger:
        d = session_day(s)
        if d in totals:
            totals[d] += s.duration_minutes
    return [(d, totals[d]) for d in window]
