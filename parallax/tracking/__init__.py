"""Pose signal, calibration and sampling."""

from parallax.tracking.calibration import CalibrationStore, Corner
from parallax.tracking.pose_signal import PoseSignalAdapter
from parallax.tracking.sampling import PoseChannel, SamplingLoop

__all__ = [
    "CalibrationStore",
    "Corner",
    "PoseSignalAdapter",
    "PoseChannel",
    "SamplingLoop",
]
