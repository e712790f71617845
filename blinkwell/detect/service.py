from __future__ import annotations
import logging
from typing import Any, List, Optional, Protocol, runtime_checkable

from ..config import Thresholds
from ..errors import InitError, NotInitializedError
from ..eye.geometry import FaceGeometry, RawDetection, extract_geometry

logger = logging.getLogger(__name__)


@runtime_checkable
class Detector(Protocol):
    """Anything that maps an image to raw six-keypoint face detections."""

    def initialize(self) -> None: ...

    def estimate(self, image: Any) -> List[RawDetection]: ...


class FaceDetectionService:
    """
    Wraps a Detector with the load/inference failure policy:
    load errors are reported, not raised; inference errors give no faces.
    """
    def __init__(self, detector: Detector, thresholds: Thresholds | None = None):
        self.detector = detector
        self.thresholds = thresholds or Thresholds()
        self.initialized = False
        self.init_error: Optional[InitError] = None

    def initialize(self) -> bool:
        if self.initialized:
            return True
        try:
            self.detector.initialize()
        except Exception as e:
            self.init_error = InitError(e)
            logger.error(f"Failed to initialize face detection: {e}")
            return False
        self.initialized = True
        self.init_error = None
        logger.info(f"{type(self.detector).__name__} loaded successfully")
        return True

    def detect_faces(self, image: Any) -> List[FaceGeometry]:
        if not self.initialized:
            raise NotInitializedError("Face detection service not initialized")
        try:
            raw = self.detector.estimate(image)
        except Exception as e:
            logger.warning(f"Error detecting faces: {e}")
            return []
        return extract_geometry(raw, self.thresholds)

    def dispose(self):
        close = getattr(self.detector, "close", None)
        if callable(close):
            close()
        self.initialized = False
