from .utils import date_part, day_before

# Days compare as YYYY-MM-DD cut from local-time ISO timestamps, so 23:59
# and 00:01 local time are two different days.


def update_streak(last_study_date: str | None, completion_date: str, current_streak: int) -> int:
    last = date_part(last_study_date)
    today = date_part(completion_date)

    if last == today:
        return current_streak

    if last is not None and last == day_before(today):
        return current_streak + 1

    # Any other gap restarts the streak, no grace period.
    return 1
