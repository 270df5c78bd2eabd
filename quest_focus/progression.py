import enum
import math
import uuid
from dataclasses import dataclass, replace

from .achievements import evaluate, newly_unlocked
from .config import MAX_LEVEL_UPS_PER_SESSION, MIN_SESSION_SEC, XP_PER_MINUTE
from .errors import ValidationError
from .ledger import record
from .leveling import next_level_xp
from .logging_setup import get_logger
from .models import Achievement, QuestState, Session, UserStats
from .streak import update_streak
from .utils import iso_from_ms


class StopDecision(enum.Enum):
    NOTHING = "nothing"
    CONFIRM_DISCARD = "confirm_discard"
    COMMIT = "commit"


@dataclass(frozen=True)
class SessionOutcome:
    state: QuestState
    session: Session
    leveled_up: bool
    levels_gained: int
    unlocked: tuple[Achievement, ...]


def validate_stop(subject: str, elapsed_seconds: float) -> StopDecision:
    if not (subject or "").strip():
        raise ValidationError("subject must not be empty")
    if elapsed_seconds <= 0:
        return StopDecision.NOTHING
    if elapsed_seconds < MIN_SESSION_SEC:
        return StopDecision.CONFIRM_DISCARD
    return StopDecision.COMMIT


def xp_for_minutes(minutes: int) -> int:
    return minutes * XP_PER_MINUTE


def build_session(subject: str, start_ms: int, end_ms: int, session_id: str | None = None) -> Session:
    subject = (subject or "").strip()
    if not subject:
        raise ValidationError("subject must not be empty")
    if end_ms < start_ms:
        raise ValidationError(f"session ends before it starts ({end_ms} < {start_ms})")

    # Rounded up, so any started minute counts.
    minutes = max(1, math.ceil((end_ms - start_ms) / 60000))
    return Session(
        id=session_id or uuid.uuid4().hex,
        start_time=int(start_ms),
        end_time=int(end_ms),
        duration_minutes=minutes,
        subject=subject,
        xp_earned=xp_for_minutes(minutes),
    )


def _roll_levels(level: int, xp: int, threshold: int) -> tuple[int, int, int, int]:
    gained = 0
    while xp >= threshold:
        if gained >= MAX_LEVEL_UPS_PER_SESSION:
            get_logger().warning(
                f"Level rollover stopped after {gained} levels (xp={xp} threshold={threshold})"
            )
            break
        xp -= threshold
        level += 1
        threshold = next_level_xp(level)
        gained += 1
    return level, xp, threshold, gained


def apply_session(stats: UserStats, session: Session) -> tuple[UserStats, bool]:
    updated, gained = _apply(stats, session)
    return updated, gained > 0


def _apply(stats: UserStats, session: Session) -> tuple[UserStats, int]:
    earned = xp_for_minutes(session.duration_minutes)
    level, xp, threshold, gained = _roll_levels(
        stats.level, stats.current_xp + earned, stats.next_level_xp
    )

    completed_at = iso_from_ms(session.end_time)
    updated = replace(
        stats,
        level=level,
        current_xp=xp,
        next_level_xp=threshold,
        total_study_minutes=stats.total_study_minutes + session.duration_minutes,
        streak_days=update_streak(stats.last_study_date, completed_at, stats.streak_days),
        last_study_date=completed_at,
    )
    return updated, gained


def complete_session(state: QuestState, session: Session) -> SessionOutcome:
    stats, gained = _apply(state.stats, session)
    sessions = record(state.sessions, session)
    achievements = tuple(evaluate(state.achievements, stats, sessions))

    return SessionOutcome(
        state=QuestState(stats=stats, sessions=sessions, achievements=achievements),
        session=session,
        leveled_up=gained > 0,
        levels_gained=gained,
        unlocked=tuple(newly_unlocked(state.achievements, achievements)),
    )
