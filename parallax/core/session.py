"""
Session wiring for the render loop, the calibration steps and retargeting.
"""

import logging
from typing import Optional

from parallax.core.config import AppConfig, RetargetConfig
from parallax.core.errors import MalformedSourceError, MissingTargetError
from parallax.core.types import CameraTransform, RetargetedClip
from parallax.motion.retarget import MotionRetargeter
from parallax.motion.skeleton import TargetSkeleton
from parallax.motion.source import MotionSource
from parallax.render.viewport import ViewportProjector
from parallax.tracking.calibration import CalibrationStore, Corner
from parallax.tracking.pose_signal import PoseSignalAdapter
from parallax.tracking.sampling import PoseChannel

logger = logging.getLogger(__name__)

CALIBRATION_STEPS = ("center", "top_left", "top_right", "bottom_right", "bottom_left")


class ParallaxSession:
    """
    Process-wide state shared by the render and sampling loops.

    The render loop calls render_tick() once per display refresh. The
    retargeted clip is rebuilt whenever motion or retarget settings
    change; a failed rebuild leaves the previous clip in place.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()

        self.calibration = CalibrationStore(self.config.calibration)
        self.adapter = PoseSignalAdapter(
            mode=self.config.tracking.mode,
            object_label=self.config.tracking.object_label,
        )
        self.poses = PoseChannel(self.adapter.info)
        self.projector = ViewportProjector(self.config.view, base_z=self.calibration.profile.base_z)
        self.retargeter = MotionRetargeter(self.config.motion_fps)

        self.retarget_config: RetargetConfig = self.config.retarget
        self.skeleton: Optional[TargetSkeleton] = None
        self.motion: Optional[MotionSource] = None
        self.clip: Optional[RetargetedClip] = None

    def render_tick(self) -> CameraTransform:
        """Update the camera from the latest published pose."""
        return self.projector.project(self.poses.latest(), self.calibration.profile)

    def calibrate(self, step: str) -> None:
        """
        Run one calibration step against the latest pose.

        Args:
            step: One of CALIBRATION_STEPS

        Raises:
            MissingTargetError: No skeleton is loaded; the profile is untouched
        """
        if step not in CALIBRATION_STEPS:
            raise ValueError(f"Unknown calibration step: {step}. Steps: {list(CALIBRATION_STEPS)}")
        if self.skeleton is None:
            logger.warning(f"Calibration step {step} skipped: no target skeleton loaded")
            raise MissingTargetError("Load a target skeleton before calibrating")

        pose = self.poses.latest()
        if step == "center":
            self.adapter.calibrate()
            self.calibration.calibrate_center(pose)
        else:
            self.calibration.calibrate_corner(Corner[step.upper()], pose)

    def load_skeleton(self, skeleton: TargetSkeleton) -> None:
        self.skeleton = skeleton
        logger.info(f"Target skeleton loaded: {skeleton.name} ({len(skeleton)} bones)")
        if self.motion is not None:
            self.reapply()

    def load_motion(self, motion: MotionSource) -> RetargetedClip:
        """Retarget a new motion source and make it current."""
        clip = self._retarget(motion, self.retarget_config)
        self.motion = motion
        self.clip = clip
        return clip

    def update_retarget_config(self, config: RetargetConfig) -> Optional[RetargetedClip]:
        """Apply new retarget settings, rebuilding the clip if motion is loaded."""
        if self.motion is not None:
            self.clip = self._retarget(self.motion, config)
        self.retarget_config = config
        return self.clip

    def reapply(self) -> Optional[RetargetedClip]:
        if self.motion is None:
            return None
        self.clip = self._retarget(self.motion, self.retarget_config)
        return self.clip

    def _retarget(self, motion: MotionSource, config: RetargetConfig) -> RetargetedClip:
        try:
            clip = self.retargeter.retarget(
                motion.samples, config, self.skeleton, source_fps=motion.frame_rate
            )
        except (MissingTargetError, MalformedSourceError) as exc:
            logger.warning(f"Retarget of {motion.name} aborted: {exc}")
            raise
        clip.name = motion.name
        return clip
