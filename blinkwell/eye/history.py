from __future__ import annotations
import logging
from collections import deque
from typing import Deque, Iterator

from ..config import RATE_WINDOW_MS
from ..runtime.events import BlinkEvent

logger = logging.getLogger(__name__)


def rate_status(rate: int) -> str:
    """Health band for a blinks-per-minute figure."""
    if 12 <= rate <= 25:
        return "normal"
    if rate < 8:
        return "low"
    if rate < 12:
        return "slightly_low"
    return "high"


class BlinkHistory:
    """
    Append-only blink log. Entries leave only through prune(),
    which keeps those younger than window_ms.
    """
    def __init__(self, window_ms: float = 60_000.0):
        self.window_ms = window_ms
        self.events: Deque[BlinkEvent] = deque()

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[BlinkEvent]:
        return iter(self.events)

    def add(self, ev: BlinkEvent):
        self.events.append(ev)

    def prune(self, now: float) -> int:
        # full scan: caller-supplied instants are not guaranteed to be monotonic
        kept = deque(e for e in self.events if now - e.timestamp < self.window_ms)
        dropped = len(self.events) - len(kept)
        self.events = kept
        if dropped:
            logger.debug(f"pruned {dropped} blink(s), {len(self.events)} retained")
        return dropped

    def blink_rate(self, now: float) -> int:
        return sum(1 for e in self.events if now - e.timestamp < RATE_WINDOW_MS)

    def total(self) -> int:
        return len(self.events)

    def left_blinks(self) -> int:
        return sum(1 for e in self.events if not e.left_eye_open)

    def right_blinks(self) -> int:
        return sum(1 for e in self.events if not e.right_eye_open)

    def clear(self):
        self.events.clear()
