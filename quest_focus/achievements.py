from dataclasses import replace
from typing import Callable, Iterable, Sequence

from .models import Achievement, AchievementKind, Session, UserStats


ACHIEVEMENT_CATALOG: tuple[Achievement, ...] = (
    Achievement(
        id="first_step",
        title="Novice Scholar",
        description="Complete your first study session.",
        icon="🌱",
        kind=AchievementKind.FIRST_SESSION,
        threshold=1,
    ),
    Achievement(
        id="dedicated",
        title="Dedicated Student",
        description="Study for a total of 5 hours.",
        icon="📚",
        kind=AchievementKind.TOTAL_MINUTES,
        threshold=300,
    ),
    Achievement(
        id="streak_3",
        title="On Fire",
        description="Reach a 3-day study streak.",
        icon="🔥",
        kind=AchievementKind.STREAK,
        threshold=3,
    ),
    Achievement(
        id="deep_work",
        title="Deep Focus",
        description="Complete a single session longer than 60 minutes.",
        icon="🧘",
        kind=AchievementKind.LONG_SESSION,
        threshold=60,
    ),
    Achievement(
        id="master",
        title="Grandmaster",
        description="Reach Level 10.",
        icon="👑",
        kind=AchievementKind.LEVEL,
        threshold=10,
    ),
)


_CONDITIONS: dict[AchievementKind, Callable[[int, UserStats, Sequence[Session]], bool]] = {
    AchievementKind.FIRST_SESSION: lambda n, stats, sessions: len(sessions) >= n,
    AchievementKind.TOTAL_MINUTES: lambda n, stats, sessions: stats.total_study_minutes >= n,
    AchievementKind.STREAK: lambda n, stats, sessions: stats.streak_days >= n,
    AchievementKind.LONG_SESSION: lambda n, stats, sessions: any(s.duration_minutes >= n for s in sessions),
    AchievementKind.LEVEL: lambda n, stats, sessions: stats.level >= n,
}


def is_satisfied(achievement: Achievement, stats: UserStats, sessions: Sequence[Session]) -> bool:
    return _CONDITIONS[achievement.kind](achievement.threshold, stats, sessions)


def evaluate(
    achievements: Iterable[Achievement],
    stats: UserStats,
    sessions: Sequence[Session],
) -> list[Achievement]:
    # Unlocked entries pass through untouched; catalog order is kept.
    out: list[Achievement] = []
    for ach in achievements:
        if not ach.unlocked and is_satisfied(ach, stats, sessions):
            ach = replace(ach, unlocked=True)
        out.append(ach)
    return out


def newly_unlocked(before: Iterable[Achievement], after: Iterable[Achievement]) -> list[Achievement]:
    was_unlocked = {a.id for a in before if a.unlocked}
    return [a for a in after if a.unlocked and a.id not in was_unlocked]


def default_achievements() -> tuple[Achievement, ...]:
    return ACHIEVEMENT_CATALOG


def merge_catalog(saved: Iterable[dict]) -> tuple[Achievement, ...]:
    # Unknown ids are ignored, missing ones come back locked.
    unlocked_ids = set()
    for rec in saved:
        if isinstance(rec, dict) and rec.get("unlocked") is True:
            unlocked_ids.add(str(rec.get("id")))

    merged = []
    for ach in ACHIEVEMENT_CATALOG:
        if ach.id in unlocked_ids:
            ach = replace(ach, unlocked=True)
        merged.append(ach)
    return tuple(merged)
