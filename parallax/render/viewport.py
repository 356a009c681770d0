"""
Head position to camera transform.

The physical screen is modelled as the rectangle
[-w/2, w/2] x [-h/2, h/2] at world Z = 0 with the viewer on the +Z side.
Off-axis mode keeps the camera unrotated and skews the frustum so that
its near-plane window always lines up with the screen rectangle; that
skew is what makes the scene read as depth behind the glass.
"""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from parallax.core.config import CalibrationProfile, ViewConfig
from parallax.core.types import CameraTransform, PoseSample, ProjectionFrustum
from parallax.utils.math_utils import clamp, lerp, look_at_rotation

logger = logging.getLogger(__name__)

ORIGIN = np.zeros(3)

# Smallest camera-to-screen distance used by the frustum
MIN_DISTANCE = 0.1


def target_position(
    pose: PoseSample,
    profile: CalibrationProfile,
    view: Optional[ViewConfig] = None,
) -> NDArray[np.float64]:
    """World-space camera target for a pose, before smoothing."""
    view = view or ViewConfig()

    offset_x = pose.x + profile.offset_x
    offset_y = pose.y + profile.offset_y
    if profile.invert_x:
        offset_x = -offset_x
    if profile.invert_y:
        offset_y = -offset_y

    # Per-quadrant gain; world +Y is up
    sens_x = profile.sensitivity_x_left if offset_x < 0 else profile.sensitivity_x_right
    sens_y = profile.sensitivity_y_top if offset_y > 0 else profile.sensitivity_y_bottom

    world_x = offset_x * (profile.screen_width / 2) * sens_x
    world_y = offset_y * (profile.screen_height / 2) * sens_y

    z_delta = (pose.depth - 1) * profile.z_sensitivity
    if profile.invert_z:
        z_delta = -z_delta
    world_z = clamp(profile.base_z * (1 + z_delta), view.min_z, view.max_z)

    return np.array([world_x, world_y, world_z])


def off_axis_frustum(
    camera: NDArray[np.float64],
    profile: CalibrationProfile,
    near: float = 0.1,
    far: float = 1000.0,
) -> ProjectionFrustum:
    """Asymmetric frustum through the screen rectangle, by similar triangles."""
    cx, cy, cz = camera
    half_w = profile.screen_width / 2
    half_h = profile.screen_height / 2

    dist = max(cz, MIN_DISTANCE)

    return ProjectionFrustum(
        left=near * (-half_w - cx) / dist,
        right=near * (half_w - cx) / dist,
        top=near * (half_h - cy) / dist,
        bottom=near * (-half_h - cy) / dist,
        near=near,
        far=far,
    )


class ViewportProjector:
    """
    Maintains the smoothed camera and produces a transform per frame.

    Smoothing moves the camera a fixed fraction of the way to its target
    every frame, so the response speed depends on the display refresh
    rate. Sensitivities are calibrated under that assumption.
    """

    def __init__(self, view: Optional[ViewConfig] = None, base_z: float = 70.8):
        self.view = view or ViewConfig()
        self._initial_z = base_z
        self.position = np.array([0.0, 0.0, base_z])

    def reset(self, base_z: Optional[float] = None) -> None:
        if base_z is not None:
            self._initial_z = base_z
        self.position = np.array([0.0, 0.0, self._initial_z])

    def project(
        self,
        pose: PoseSample,
        profile: CalibrationProfile,
        smoothing: Optional[float] = None,
    ) -> CameraTransform:
        """
        Advance the camera one frame toward the pose and build its transform.

        Args:
            pose: Latest pose snapshot
            profile: Calibration to apply
            smoothing: Per-frame interpolation factor override

        Returns:
            Camera transform for this frame
        """
        factor = self.view.smoothing if smoothing is None else smoothing
        target = target_position(pose, profile, self.view)
        self.position = lerp(self.position, target, factor)

        logger.debug(f"Camera target={target.round(3)} position={self.position.round(3)}")

        if profile.look_at_center:
            return CameraTransform(
                position=self.position.copy(),
                rotation=look_at_rotation(self.position, ORIGIN),
                frustum=ProjectionFrustum.symmetric(
                    self.view.fov_deg, profile.aspect_ratio, self.view.near, self.view.look_at_far
                ),
                look_at=ORIGIN.copy(),
            )

        return CameraTransform(
            position=self.position.copy(),
            rotation=np.eye(3),
            frustum=off_axis_frustum(self.position, profile, self.view.near, self.view.far),
        )

    def project_timed(
        self,
        pose: PoseSample,
        profile: CalibrationProfile,
        dt: float,
        reference_fps: float = 60.0,
    ) -> CameraTransform:
        """
        Frame-rate independent variant of project().

        Rescales the per-frame factor so that the convergence per second
        matches project() running at ``reference_fps``.
        """
        factor = 1.0 - (1.0 - self.view.smoothing) ** (max(dt, 0.0) * reference_fps)
        return self.project(pose, profile, smoothing=factor)
