import enum
import logging
import threading
from dataclasses import dataclass

from .feedback import FeedbackClient
from .progression import (
    SessionOutcome,
    StopDecision,
    build_session,
    complete_session,
    validate_stop,
)
from .quest_store import QuestStore


class FinishStatus(enum.Enum):
    NOTHING = "nothing"
    DISCARDED = "discarded"
    COMMITTED = "committed"


@dataclass(frozen=True)
class FinishResult:
    status: FinishStatus
    outcome: SessionOutcome | None = None
    feedback_thread: threading.Thread | None = None


def end_session(
    store: QuestStore,
    feedback: FeedbackClient,
    logger: logging.Logger,
    subject: str,
    start_ms: int,
    end_ms: int,
    elapsed: float,
    confirm_discard,
    on_feedback,
) -> FinishResult:
    decision = validate_stop(subject, elapsed)

    if decision is StopDecision.NOTHING:
        return FinishResult(FinishStatus.NOTHING)
    if decision is StopDecision.CONFIRM_DISCARD and confirm_discard():
        logger.info(f"Session discarded elapsed={elapsed:.1f}")
        return FinishResult(FinishStatus.DISCARDED)

    session = build_session(subject, start_ms, end_ms)
    outcome = complete_session(store.state(), session)
    store.commit(outcome.state)

    stats = outcome.state.stats
    logger.info(
        f"Session committed subject={session.subject!r} minutes={session.duration_minutes} "
        f"xp={session.xp_earned} level={stats.level} streak={stats.streak_days} "
        f"unlocked={[a.id for a in outcome.unlocked]}"
    )

    # Feedback runs only after the commit and never writes back to the store.
    thread = None
    if feedback.enabled:
        thread = feedback.request_async(session.duration_minutes, session.subject, stats.level, on_feedback)
    return FinishResult(FinishStatus.COMMITTED, outcome, thread)
