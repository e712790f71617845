from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..config import Thresholds
from ..errors import MalformedDetectionError

logger = logging.getLogger(__name__)

# BlazeFace keypoint order
RIGHT_EYE, LEFT_EYE, NOSE_TIP, MOUTH_CENTER, RIGHT_EAR_TRAGION, LEFT_EAR_TRAGION = range(6)
NUM_KEYPOINTS = 6


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


@dataclass(frozen=True)
class RawDetection:
    """One face as reported by the detector, before any interpretation."""
    top_left: Point
    bottom_right: Point
    keypoints: Sequence[Point]
    probability: Optional[float] = None


@dataclass(frozen=True)
class FaceBounds:
    top_left: Point
    bottom_right: Point

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y


@dataclass(frozen=True)
class FaceLandmarks:
    right_eye: Point
    left_eye: Point
    nose_tip: Point
    mouth_center: Point
    right_ear_tragion: Point
    left_ear_tragion: Point


@dataclass(frozen=True)
class FaceGeometry:
    bounds: FaceBounds
    landmarks: FaceLandmarks
    probability: float
    left_eye_open_probability: float
    right_eye_open_probability: float

    @property
    def width(self) -> float:
        return self.bounds.width

    @property
    def height(self) -> float:
        return self.bounds.height


def distance(a: Point, b: Point) -> float:
    return float(np.linalg.norm(a.as_array() - b.as_array()))


def openness(eye: Point, ear: Point, nose: Point, thresholds: Thresholds | None = None) -> float:
    """
    Eye-openness proxy in [0, 1] from the eye->nose span relative to the eye->ear span.
    Linear between closed_ratio (0.0) and open_ratio (1.0), clamped outside the band.
    """
    th = thresholds or Thresholds()
    eye_to_ear = distance(eye, ear)
    eye_to_nose = distance(eye, nose)
    ratio = eye_to_nose / (eye_to_ear + th.epsilon)
    closed, open_ = th.open_probability_band
    return float(np.clip((ratio - closed) / (open_ - closed), 0.0, 1.0))


def extract(det: RawDetection, thresholds: Thresholds | None = None) -> FaceGeometry:
    th = thresholds or Thresholds()
    kp = list(det.keypoints)
    if len(kp) < NUM_KEYPOINTS:
        raise MalformedDetectionError(len(kp), NUM_KEYPOINTS)

    lm = FaceLandmarks(
        right_eye=kp[RIGHT_EYE],
        left_eye=kp[LEFT_EYE],
        nose_tip=kp[NOSE_TIP],
        mouth_center=kp[MOUTH_CENTER],
        right_ear_tragion=kp[RIGHT_EAR_TRAGION],
        left_ear_tragion=kp[LEFT_EAR_TRAGION],
    )
    # corners are not validated; inverted boxes give negative width/height
    bounds = FaceBounds(top_left=det.top_left, bottom_right=det.bottom_right)
    prob = det.probability if det.probability is not None else th.default_probability
    return FaceGeometry(
        bounds=bounds,
        landmarks=lm,
        probability=float(prob),
        left_eye_open_probability=openness(lm.left_eye, lm.left_ear_tragion, lm.nose_tip, th),
        right_eye_open_probability=openness(lm.right_eye, lm.right_ear_tragion, lm.nose_tip, th),
    )


def extract_geometry(detections: Iterable[RawDetection], thresholds: Thresholds | None = None) -> List[FaceGeometry]:
    """Extract every well-formed detection; malformed ones are logged and skipped."""
    out: List[FaceGeometry] = []
    for i, det in enumerate(detections):
        try:
            out.append(extract(det, thresholds))
        except MalformedDetectionError as e:
            logger.warning(f"Skipping detection {i}: {e}")
    return out
