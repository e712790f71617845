from __future__ import annotations


class BlinkwellError(Exception):
    """Base class for blinkwell errors."""


class NotInitializedError(BlinkwellError):
    """Detection was requested before the face detector finished loading."""


class MalformedDetectionError(BlinkwellError, ValueError):
    """A raw detection carries fewer than six keypoints."""

    def __init__(self, found: int, expected: int = 6):
        super().__init__(f"expected {expected} keypoints, got {found}")
        self.found = found
        self.expected = expected


class InitError(BlinkwellError):
    """
    The face detector failed to load. Never raised out of the service:
    kept on FaceDetectionService.init_error so the app stays usable without detection.
    """

    def __init__(self, cause: BaseException):
        super().__init__(f"detector failed to initialize: {cause}")
        self.cause = cause
