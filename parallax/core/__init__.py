"""Core data types, configuration and session wiring."""

from parallax.core.config import AppConfig, AxisMap, CalibrationProfile, RetargetConfig
from parallax.core.types import (
    CameraTransform,
    MotionSample,
    PoseSample,
    ProjectionFrustum,
    RetargetedClip,
    RetargetedTrack,
)

__all__ = [
    "AppConfig",
    "AxisMap",
    "CalibrationProfile",
    "RetargetConfig",
    "CameraTransform",
    "MotionSample",
    "PoseSample",
    "ProjectionFrustum",
    "RetargetedClip",
    "RetargetedTrack",
]
