from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)


@dataclass
class EyeState:
    """Per-eye open (True) / closed (False) classification."""
    left: bool = True
    right: bool = True

    def update(self, other: "EyeState"):
        self.left = other.left
        self.right = other.right

    def reset(self):
        self.left = True
        self.right = True


def classify_eyes(left_prob: float, right_prob: float, thr: float = 0.4) -> EyeState:
    """An eye is open only when its probability is strictly above thr."""
    return EyeState(left=left_prob > thr, right=right_prob > thr)


def falling_edges(prev: EyeState, cur: EyeState) -> Tuple[bool, bool]:
    """Open -> closed transitions: (left_blink, right_blink)."""
    return (prev.left and not cur.left), (prev.right and not cur.right)


class EyeStateTracker:
    """
    Edge-triggered blink detection: holds the previous frame's classification,
    so a run of closed frames yields a single blink.
    """
    def __init__(self, threshold: float = 0.4):
        self.threshold = threshold
        self.state = EyeState()

    def update(self, left_prob: float, right_prob: float) -> Tuple[bool, bool, EyeState]:
        cur = classify_eyes(left_prob, right_prob, self.threshold)
        left_blink, right_blink = falling_edges(self.state, cur)
        self.state.update(cur)
        if left_blink or right_blink:
            logger.debug(f"blink left={left_blink} right={right_blink} (p={left_prob:.2f},{right_prob:.2f})")
        return left_blink, right_blink, cur

    def reset(self):
        self.state.reset()
