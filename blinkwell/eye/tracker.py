from __future__ import annotations
import logging, time
from typing import Callable, Optional

from ..config import Thresholds
from ..runtime.events import BlinkEvent, BlinkResult, BlinkStats
from .blink import EyeState, EyeStateTracker
from .geometry import FaceGeometry
from .history import BlinkHistory, rate_status

logger = logging.getLogger(__name__)


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class BlinkTracker:
    """
    One blink-tracking session: eye state + bounded blink history.

    Not thread-safe; drive it from a single frame loop. All instants are
    milliseconds; every method taking `now` falls back to `clock()`.
    """
    def __init__(self, thresholds: Thresholds | None = None, clock: Callable[[], float] = wall_clock_ms):
        self.thresholds = thresholds or Thresholds()
        self.clock = clock
        self.eyes = EyeStateTracker(self.thresholds.eye_closure_threshold)
        self.history = BlinkHistory(self.thresholds.window_ms)
        self.started_at = self.clock()

    @property
    def state(self) -> EyeState:
        return self.eyes.state

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def observe(self, left_prob: float, right_prob: float, now: Optional[float] = None) -> BlinkResult:
        left_blink, right_blink, cur = self.eyes.update(left_prob, right_prob)
        if left_blink or right_blink:
            t = self._now(now)
            self.history.add(BlinkEvent(timestamp=t, left_eye_open=cur.left, right_eye_open=cur.right))
            # pruning only happens here, on append
            self.history.prune(t)
        return BlinkResult(left_blink=left_blink, right_blink=right_blink)

    def process(self, face: FaceGeometry, now: Optional[float] = None) -> BlinkResult:
        return self.observe(face.left_eye_open_probability, face.right_eye_open_probability, now)

    def prune(self, now: Optional[float] = None) -> int:
        return self.history.prune(self._now(now))

    def blink_rate(self, now: Optional[float] = None) -> int:
        return self.history.blink_rate(self._now(now))

    def total_blinks(self) -> int:
        return self.history.total()

    def stats(self, now: Optional[float] = None) -> BlinkStats:
        t = self._now(now)
        rate = self.history.blink_rate(t)
        total = self.history.total()
        left, right = self.history.left_blinks(), self.history.right_blinks()
        return BlinkStats(
            blink_rate=rate,
            total_blinks=total,
            left_eye_blinks=left,
            right_eye_blinks=right,
            average_blink_duration=self.thresholds.average_blink_duration_ms,
            session_ms=max(0.0, t - self.started_at),
            symmetry=abs(left - right) / total if total else 0.0,
            status=rate_status(rate),
        )

    def reset(self, now: Optional[float] = None):
        self.history.clear()
        self.eyes.reset()
        self.started_at = self._now(now)
        logger.info("Blink session reset")
