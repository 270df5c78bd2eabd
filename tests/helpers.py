import datetime

from quest_focus.progression import build_session


def local_ms(year, month, day, hour=12, minute=0) -> int:
    # Naive datetimes are local time, matching how session days are derived.
    return int(datetime.datetime(year, month, day, hour, minute).timestamp() * 1000)


def make_session(minutes: int, day=(2024, 1, 1), hour=12, subject="Math", session_id=None):
    end = local_ms(*day, hour=hour)
    return build_session(subject, end - minutes * 60000, end, session_id=session_id)
