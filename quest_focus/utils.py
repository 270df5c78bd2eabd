import os
import time
import datetime


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def seconds_to_hhmmss(seconds: float) -> str:
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def minutes_to_hm(minutes: int) -> str:
    h, m = divmod(max(0, int(minutes)), 60)
    return f"{h}h {m}m"


def now_ms() -> int:
    return int(time.time() * 1000)


def iso_from_ms(ms: int) -> str:
    # Local time, no offset: the date part is the local calendar day.
    return datetime.datetime.fromtimestamp(ms / 1000.0).isoformat(timespec="seconds")


def date_part(iso_ts: str | None) -> str | None:
    if not iso_ts:
        return None
    return str(iso_ts)[:10]


def day_before(day: str) -> str:
    return str(datetime.date.fromisoformat(day) - datetime.timedelta(days=1))


def today_str() -> str:
    return str(datetime.date.today())
