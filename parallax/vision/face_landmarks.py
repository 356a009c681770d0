"""
MediaPipe face mesh detector producing LandmarkSets for face mode.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from parallax.tracking.pose_signal import LandmarkSet


def _load_solutions():
    try:
        import mediapipe as mp
    except ImportError as exc:
        raise ImportError(
            "mediapipe is not installed. Install the 'vision' extra: pip install parallax-window[vision]"
        ) from exc

    if hasattr(mp, "solutions"):
        return mp.solutions

    try:
        from mediapipe import solutions as mp_solutions
    except ImportError as exc:
        raise ImportError(
            "mediapipe does not expose solutions. This usually means a different package "
            "named 'mediapipe' is installed. Uninstall it and install the official "
            "google 'mediapipe' package."
        ) from exc
    return mp_solutions


class FaceLandmarkDetector:
    """Single-face landmark detector for webcam frames."""

    def __init__(self, min_detection_confidence: float = 0.5) -> None:
        solutions = _load_solutions()
        self._mesh = solutions.face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=1,
            refine_landmarks=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=0.5,
        )

    def detect(self, frame_bgr: np.ndarray) -> Optional[LandmarkSet]:
        frame_rgb = np.ascontiguousarray(frame_bgr[:, :, ::-1])
        results = self._mesh.process(frame_rgb)
        if not results.multi_face_landmarks:
            return None

        face = results.multi_face_landmarks[0]
        points = np.array([[lm.x, lm.y, lm.z] for lm in face.landmark], dtype=float)
        return LandmarkSet(points)

    def close(self) -> None:
        self._mesh.close()
