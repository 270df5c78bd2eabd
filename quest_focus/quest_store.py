import os
import json
import threading
import logging

from .achievements import default_achievements, merge_catalog
from .config import STORE_SCHEMA
from .errors import StoreError
from .leveling import next_level_xp
from .models import QuestState, Session, UserStats
from .utils import ensure_dir


def default_state() -> QuestState:
    return QuestState(stats=UserStats(), sessions=(), achievements=default_achievements())


class QuestStore:
    def __init__(self, path: str, logger: logging.Logger):
        self._path = path
        self._logger = logger
        self._lock = threading.RLock()
        self._state = default_state()

    @property
    def path(self) -> str:
        return self._path

    def state(self) -> QuestState:
        with self._lock:
            return self._state

    def load(self) -> QuestState:
        ensure_dir(os.path.dirname(self._path))
        if not os.path.exists(self._path):
            self._logger.info("Store file not found, starting fresh")
            return self.state()

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception:
            self._logger.exception("Store load failed, starting fresh")
            return self.state()

        if not isinstance(data, dict):
            self._logger.error(f"Store root is {type(data).__name__}, expected object; starting fresh")
            return self.state()

        schema = data.get("schema")
        if schema != STORE_SCHEMA:
            self._logger.warning(f"Store schema={schema!r}, expected {STORE_SCHEMA}; loading best-effort")

        state = QuestState(
            stats=self._load_stats(data.get("stats")),
            sessions=self._load_sessions(data.get("sessions")),
            achievements=self._load_achievements(data.get("achievements")),
        )
        with self._lock:
            self._state = state
        self._logger.info(
            f"Store loaded level={state.stats.level} sessions={len(state.sessions)} "
            f"unlocked={sum(1 for a in state.achievements if a.unlocked)}"
        )
        return state

    def _load_stats(self, raw) -> UserStats:
        if raw is None:
            return UserStats()
        try:
            if not isinstance(raw, dict):
                raise StoreError(f"stats record is {type(raw).__name__}")
            stats = UserStats.from_dict(raw)
            if stats.next_level_xp != next_level_xp(stats.level):
                raise StoreError(
                    f"stats nextLevelXP={stats.next_level_xp} does not match level {stats.level} "
                    f"(expected {next_level_xp(stats.level)})"
                )
            return stats
        except StoreError:
            self._logger.exception("Stats record malformed, using defaults")
            return UserStats()

    def _load_sessions(self, raw) -> tuple[Session, ...]:
        if raw is None:
            return ()
        try:
            if not isinstance(raw, list):
                raise StoreError(f"sessions record is {type(raw).__name__}")
            return tuple(Session.from_dict(item) for item in raw)
        except StoreError:
            self._logger.exception("Sessions record malformed, using empty ledger")
            return ()

    def _load_achievements(self, raw):
        if not isinstance(raw, list):
            if raw is not None:
                self._logger.error("Achievements record malformed, using defaults")
            return default_achievements()
        return merge_catalog(raw)

    def commit(self, state: QuestState) -> bool:
        # In-memory state stays authoritative if the write fails.
        with self._lock:
            self._state = state
        return self.save()

    def save(self) -> bool:
        ensure_dir(os.path.dirname(self._path))
        with self._lock:
            state = self._state
        data = {
            "schema": STORE_SCHEMA,
            "stats": state.stats.to_dict(),
            "sessions": [s.to_dict() for s in state.sessions],
            "achievements": [a.to_dict() for a in state.achievements],
        }
        tmp_path = self._path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except Exception:
            self._logger.exception("Store save failed")
            return False
        return True
