import time

from .errors import TimerError
from .utils import now_ms


class StudyTimer:
    # elapsed = accumulated + (monotonic now - resumed_at); ticks only read it.

    def __init__(self, clock=time.monotonic, wall_ms=now_ms):
        self._clock = clock
        self._wall_ms = wall_ms
        self._accumulated = 0.0
        self._resumed_at: float | None = None

    @property
    def running(self) -> bool:
        return self._resumed_at is not None

    def start(self) -> None:
        if self.running:
            raise TimerError("timer already running")
        self._resumed_at = self._clock()

    def pause(self) -> None:
        if not self.running:
            return
        self._accumulated += max(0.0, self._clock() - self._resumed_at)
        self._resumed_at = None

    def elapsed(self) -> float:
        if self._resumed_at is None:
            return self._accumulated
        return self._accumulated + max(0.0, self._clock() - self._resumed_at)

    def stop(self) -> tuple[int, int, float]:
        # start_ms is back-dated from the end so paused stretches do not count.
        self.pause()
        elapsed = self._accumulated
        end = self._wall_ms()
        return end - int(round(elapsed * 1000)), end, elapsed

    def reset(self) -> None:
        self._accumulated = 0.0
        self._resumed_at = None
