"""Webcam frame source for the sampling loop."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from parallax.core.config import TrackingConfig

logger = logging.getLogger(__name__)


class CameraCapture:
    """User-facing webcam opened at the tracking resolution."""

    def __init__(self, config: TrackingConfig) -> None:
        self.config = config
        self._cap: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    @property
    def frame_size(self) -> Tuple[int, int]:
        """(width, height) of delivered frames."""
        if self._cap is None:
            return self.config.frame_width, self.config.frame_height
        return (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def open(self) -> None:
        self._cap = cv2.VideoCapture(self.config.device_index)
        if not self._cap.isOpened():
            self._cap = None
            raise RuntimeError(f"Could not open camera {self.config.device_index}")
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.frame_width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.frame_height)
        logger.info(f"Camera {self.config.device_index} opened at {self.frame_size}")

    def read(self) -> Optional[np.ndarray]:
        """Next BGR frame, or None if the camera is closed or stalled."""
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok:
            return None
        return frame

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def __enter__(self) -> "CameraCapture":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
