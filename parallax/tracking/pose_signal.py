"""
Conversion of raw detector output into a normalized pose signal.
"""

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Tuple, Union

import numpy as np

from parallax.core.types import PoseSample

logger = logging.getLogger(__name__)

# Face mesh landmark indices
NOSE_TIP = 1
FACE_LEFT_EDGE = 234
FACE_RIGHT_EDGE = 454

# Image-space offset to pose-space gain; negative because the webcam feed is mirrored
POSITION_GAIN = -3.0

# Smallest width used as a depth denominator
MIN_WIDTH = 0.01

DEFAULT_NEUTRAL_WIDTH = 0.2

TrackingMode = Literal["face", "object"]


@dataclass
class BoundingBox:
    """Detection box in pixels."""

    origin_x: float
    origin_y: float
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.origin_x + self.width / 2, self.origin_y + self.height / 2)


@dataclass
class ObjectDetection:
    """A classified box from the object detector."""

    label: str
    score: float
    box: BoundingBox


@dataclass
class LandmarkSet:
    """Face landmarks in normalized image coordinates."""

    points: np.ndarray  # Shape: (N, 2) or (N, 3)

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=float)
        assert self.points.ndim == 2 and self.points.shape[1] >= 2, "Landmarks must be (N, 2+)"

    def __len__(self) -> int:
        return len(self.points)

    def xy(self, index: int) -> np.ndarray:
        return self.points[index, :2]


Detection = Union[LandmarkSet, Sequence[ObjectDetection], None]


def to_pose_xy(nx: float, ny: float) -> Tuple[float, float]:
    """Map a normalized image point to pose space."""
    return (nx - 0.5) * POSITION_GAIN, (ny - 0.5) * POSITION_GAIN


class PoseSignalAdapter:
    """
    Turns one detection per sampling tick into a PoseSample.

    Ticks without a usable detection leave the previous sample in place.
    """

    def __init__(
        self,
        mode: TrackingMode = "face",
        object_label: str = "cell phone",
        neutral_width: float = DEFAULT_NEUTRAL_WIDTH,
    ):
        self.mode: TrackingMode = mode
        self.object_label = object_label

        self.neutral_face_width = neutral_width
        self.neutral_object_width = neutral_width
        self.last_face_width = neutral_width
        self.last_object_width = neutral_width

        self.info = PoseSample()

    def set_mode(self, mode: TrackingMode) -> None:
        if mode not in ("face", "object"):
            raise ValueError(f"Unknown tracking mode: {mode}")
        self.mode = mode
        logger.info(f"Tracking mode switched to: {mode}")

    def update(
        self,
        detection: Detection,
        frame_size: Optional[Tuple[int, int]] = None,
    ) -> PoseSample:
        """
        Consume one detector result for the active mode.

        Args:
            detection: LandmarkSet in face mode, list of ObjectDetection in
                object mode, or None when the detector found nothing
            frame_size: (width, height) in pixels, needed in object mode

        Returns:
            The current pose sample (unchanged if nothing was usable)
        """
        if detection is None:
            return self.info

        if self.mode == "face" and isinstance(detection, LandmarkSet):
            self._update_face(detection)
        elif self.mode == "object" and not isinstance(detection, LandmarkSet):
            self._update_object(detection, frame_size)

        return self.info

    def _update_face(self, landmarks: LandmarkSet) -> None:
        if len(landmarks) <= FACE_RIGHT_EDGE:
            logger.debug(f"Landmark set too small ({len(landmarks)} points), keeping last pose")
            return

        x, y = to_pose_xy(*landmarks.xy(NOSE_TIP))

        width = float(np.linalg.norm(landmarks.xy(FACE_RIGHT_EDGE) - landmarks.xy(FACE_LEFT_EDGE)))
        self.last_face_width = width

        self.info = PoseSample(x=x, y=y, depth=self.neutral_face_width / max(width, MIN_WIDTH))

    def _update_object(
        self,
        detections: Sequence[ObjectDetection],
        frame_size: Optional[Tuple[int, int]],
    ) -> None:
        if frame_size is None:
            raise ValueError("frame_size is required in object mode")

        target = next((d for d in detections if d.label == self.object_label), None)
        if target is None:
            return

        frame_w, frame_h = frame_size
        cx, cy = target.box.center
        x, y = to_pose_xy(cx / frame_w, cy / frame_h)

        width = target.box.width / frame_w
        self.last_object_width = width

        self.info = PoseSample(x=x, y=y, depth=self.neutral_object_width / max(width, MIN_WIDTH))

    def calibrate(self) -> None:
        """Take the last observed width as the neutral distance for this mode."""
        if self.mode == "face" and self.last_face_width > 0:
            self.neutral_face_width = self.last_face_width
            logger.info(f"Calibrated neutral face width: {self.neutral_face_width:.4f}")
        elif self.mode == "object" and self.last_object_width > 0:
            self.neutral_object_width = self.last_object_width
            logger.info(f"Calibrated neutral object width: {self.neutral_object_width:.4f}")

    @property
    def neutral_width(self) -> float:
        return self.neutral_face_width if self.mode == "face" else self.neutral_object_width

