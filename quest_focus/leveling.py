import math

from .config import BASE_LEVEL_XP, LEVEL_MULTIPLIER
from .models import UserStats


def next_level_xp(level: int) -> int:
    """XP needed to go from *level* to *level + 1*."""
    return int(math.floor(BASE_LEVEL_XP * (LEVEL_MULTIPLIER ** (level - 1))))


def total_xp(stats: UserStats) -> int:
    return sum(next_level_xp(lvl) for lvl in range(1, stats.level)) + stats.current_xp


def level_progress(stats: UserStats) -> float:
    denom = max(1, stats.next_level_xp)
    prog = stats.current_xp / denom
    if prog < 0.0:
        prog = 0.0
    if prog > 1.0:
        prog = 1.0
    return prog
