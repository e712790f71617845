from __future__ import annotations
import cv2, logging
from typing import Callable, Iterator, NamedTuple, Optional

import numpy as np

from ..eye.tracker import wall_clock_ms

logger = logging.getLogger(__name__)


class Frame(NamedTuple):
    ts: float           # epoch ms, the `now` handed to BlinkTracker
    image: np.ndarray   # BGR


def frames(source: int | str = 0, width: int = 640, height: int = 480,
           max_fps: Optional[float] = None, clock: Callable[[], float] = wall_clock_ms) -> Iterator[Frame]:
    """
    Timestamped frames from a camera index or video path.
    With max_fps, frames arriving sooner than 1000/max_fps ms after the last yielded one are dropped.
    Timestamps never go backwards, even if the clock does.
    """
    cap = cv2.VideoCapture(source)
    if width:  cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    if height: cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    if not cap.isOpened():
        raise RuntimeError(f"Cannot open video source {source!r}")
    min_gap = 1000.0 / max_fps if max_fps else 0.0
    last: Optional[float] = None
    dropped = 0
    try:
        while True:
            ok, image = cap.read()
            if not ok:
                break
            ts = clock()
            if last is not None:
                ts = max(ts, last)
                if ts - last < min_gap:
                    dropped += 1
                    continue
            last = ts
            yield Frame(ts, image)
    finally:
        cap.release()
        logger.info(f"Video source {source!r} closed ({dropped} frame(s) dropped by rate limit)")
