import enum
from dataclasses import dataclass

from .config import BASE_LEVEL_XP, XP_PER_MINUTE
from .errors import StoreError


@dataclass(frozen=True)
class UserStats:
    level: int = 1
    current_xp: int = 0
    next_level_xp: int = BASE_LEVEL_XP
    total_study_minutes: int = 0
    streak_days: int = 0
    last_study_date: str | None = None

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "currentXP": self.current_xp,
            "nextLevelXP": self.next_level_xp,
            "totalStudyMinutes": self.total_study_minutes,
            "streakDays": self.streak_days,
            "lastStudyDate": self.last_study_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserStats":
        try:
            last = data.get("lastStudyDate")
            stats = cls(
                level=int(data["level"]),
                current_xp=int(data["currentXP"]),
                next_level_xp=int(data["nextLevelXP"]),
                total_study_minutes=int(data["totalStudyMinutes"]),
                streak_days=int(data["streakDays"]),
                last_study_date=str(last) if last else None,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreError(f"malformed stats record: {e!r}") from e
        if stats.level < 1 or stats.next_level_xp <= 0 or not 0 <= stats.current_xp < stats.next_level_xp:
            raise StoreError(f"stats record violates level invariant: {data!r}")
        if stats.total_study_minutes < 0 or stats.streak_days < 0:
            raise StoreError(f"stats record has negative counters: {data!r}")
        return stats


@dataclass(frozen=True)
class Session:
    id: str
    start_time: int
    end_time: int
    duration_minutes: int
    subject: str
    xp_earned: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "subject": self.subject,
            "xpEarned": self.xp_earned,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        try:
            session = cls(
                id=str(data["id"]),
                start_time=int(data["startTime"]),
                end_time=int(data["endTime"]),
                duration_minutes=int(data["durationMinutes"]),
                subject=str(data["subject"]),
                xp_earned=int(data["xpEarned"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreError(f"malformed session record: {e!r}") from e
        if session.duration_minutes < 1 or session.end_time < session.start_time:
            raise StoreError(f"session record has an invalid time span: {data!r}")
        if not session.subject.strip():
            raise StoreError(f"session record has an empty subject: {data!r}")
        if session.xp_earned != session.duration_minutes * XP_PER_MINUTE:
            raise StoreError(f"session record xp does not match its duration: {data!r}")
        return session


class AchievementKind(enum.Enum):
    FIRST_SESSION = "first_session"
    TOTAL_MINUTES = "total_minutes"
    STREAK = "streak"
    LONG_SESSION = "long_session"
    LEVEL = "level"


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    kind: AchievementKind
    threshold: int
    unlocked: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "unlocked": self.unlocked,
        }


@dataclass(frozen=True)
class QuestState:
    stats: UserStats
    sessions: tuple[Session, ...]
    achievements: tuple[Achievement, ...]
