from __future__ import annotations
import logging
from typing import List

import cv2
import numpy as np

from ..eye.geometry import Point, RawDetection

logger = logging.getLogger(__name__)


class BlazeFaceDetector:
    """
    MediaPipe face detection (BlazeFace). Keypoints come out in the order
    right eye, left eye, nose tip, mouth center, right ear tragion, left ear tragion.
    """
    def __init__(self, model_selection: int = 0, min_detection_confidence: float = 0.5):
        self.model_selection = model_selection
        self.min_detection_confidence = min_detection_confidence
        self.model = None

    def initialize(self) -> None:
        import mediapipe as mp
        self.model = mp.solutions.face_detection.FaceDetection(
            model_selection=self.model_selection,
            min_detection_confidence=self.min_detection_confidence,
        )

    def estimate(self, frame_bgr: np.ndarray) -> List[RawDetection]:
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        res = self.model.process(rgb)
        if not res.detections: return []
        h, w = frame_bgr.shape[:2]
        out = []
        for det in res.detections:
            loc = det.location_data
            box = loc.relative_bounding_box
            x0, y0 = box.xmin * w, box.ymin * h
            kps = [Point(kp.x * w, kp.y * h) for kp in loc.relative_keypoints]
            score = float(det.score[0]) if det.score else None
            out.append(RawDetection(
                top_left=Point(x0, y0),
                bottom_right=Point(x0 + box.width * w, y0 + box.height * h),
                keypoints=kps,
                probability=score,
            ))
        # largest face first
        out.sort(key=lambda d: (d.bottom_right.x - d.top_left.x) * (d.bottom_right.y - d.top_left.y), reverse=True)
        return out

    def close(self):
        if self.model is not None:
            self.model.close()
            self.model = None
