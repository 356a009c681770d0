"""
Motion retargeting from foreign bone names and axis conventions onto a
humanoid target skeleton.

Pipeline stages, in this exact order:
1. Group samples by source bone
2. Stable sort each channel by frame index
3. Drop channels with no humanoid role (counted, not an error)
4. Axis permutation (position and rotation vector)
5. Hip scale
6. Hip height offset (hips only)
7. Handedness flip (negate position Z)
8. Mirroring (position axis plus the two off-axis rotation components)
9. Rotation-vector invert flags
10. Global rotation offset (intrinsic XYZ, right-multiplied)
11. Arm pose correction about +Z (shoulders and arms only)
12. Emit tracks (translation only on hips)
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from parallax.core.config import AxisMap, RetargetConfig
from parallax.core.errors import (
    MalformedSourceError,
    MissingTargetError,
    RetargetInProgressError,
)
from parallax.core.types import (
    MotionChannel,
    MotionSample,
    RetargetedClip,
    RetargetedTrack,
)
from parallax.motion.bone_map import HumanoidBone, lookup
from parallax.motion.skeleton import TargetSkeleton
from parallax.utils.math_utils import (
    EPSILON,
    axis_angle_to_quaternion,
    euler_to_quaternion,
    quaternion_multiply,
)

logger = logging.getLogger(__name__)

# Source motion is keyed at 30 frames per second
SOURCE_FPS = 30.0

# Offsets smaller than this (degrees) are treated as disabled
ANGLE_EPSILON = 0.01

FORWARD_AXIS = (0.0, 0.0, 1.0)

IDENTITY_ROTATION = (0.0, 0.0, 0.0, 1.0)

Vector3 = Tuple[float, float, float]


def group_samples(samples: Iterable[MotionSample]) -> Dict[str, MotionChannel]:
    """Bucket samples by source bone name, preserving first-seen order."""
    channels: Dict[str, MotionChannel] = {}
    for sample in samples:
        channel = channels.get(sample.bone_name)
        if channel is None:
            channel = channels[sample.bone_name] = MotionChannel(sample.bone_name)
        channel.samples.append(sample)
    return channels


def validate_sample(sample: MotionSample) -> None:
    """Raise MalformedSourceError for samples the pipeline cannot use."""
    if not isinstance(sample.bone_name, str) or not sample.bone_name:
        raise MalformedSourceError(f"Sample has no bone name: {sample!r}")
    if len(sample.position) != 3:
        raise MalformedSourceError(
            f"{sample.bone_name}: position needs 3 components, got {len(sample.position)}"
        )
    if len(sample.rotation) != 4:
        raise MalformedSourceError(
            f"{sample.bone_name}: rotation needs 4 components, got {len(sample.rotation)}"
        )
    values = (sample.frame_index, *sample.position, *sample.rotation)
    try:
        finite = all(math.isfinite(float(v)) for v in values)
    except (TypeError, ValueError) as exc:
        raise MalformedSourceError(f"{sample.bone_name}: non-numeric sample data") from exc
    if not finite:
        raise MalformedSourceError(f"{sample.bone_name}: non-finite sample data")
    if float(sample.frame_index) < 0:
        raise MalformedSourceError(
            f"{sample.bone_name}: negative frame index {sample.frame_index}"
        )


def mirror_position(position: Vector3, config: RetargetConfig) -> Vector3:
    px, py, pz = position
    if config.mirror_x:
        px = -px
    if config.mirror_y:
        py = -py
    if config.mirror_z:
        pz = -pz
    return px, py, pz


def mirror_rotation(vector: Vector3, config: RetargetConfig) -> Vector3:
    """Flip the two rotation components orthogonal to each mirrored axis."""
    rx, ry, rz = vector
    if config.mirror_x:
        ry, rz = -ry, -rz
    if config.mirror_y:
        rx, rz = -rx, -rz
    if config.mirror_z:
        rx, ry = -rx, -ry
    return rx, ry, rz


def invert_rotation(vector: Vector3, config: RetargetConfig) -> Vector3:
    rx, ry, rz = vector
    if config.invert_x:
        rx = -rx
    if config.invert_y:
        ry = -ry
    if config.invert_z:
        rz = -rz
    return rx, ry, rz


def global_offset(config: RetargetConfig) -> Optional[np.ndarray]:
    """Shared bone rotation offset, or None when all angles are ~0."""
    angles = (config.bone_rot_x, config.bone_rot_y, config.bone_rot_z)
    if all(abs(a) <= ANGLE_EPSILON for a in angles):
        return None
    return euler_to_quaternion(angles, order="XYZ")


def arm_offset(config: RetargetConfig) -> Optional[np.ndarray]:
    if abs(config.arm_pose_offset) <= ANGLE_EPSILON:
        return None
    return axis_angle_to_quaternion(FORWARD_AXIS, config.arm_pose_offset)


class MotionRetargeter:
    """
    Converts raw motion samples into keyframe tracks for a target skeleton.

    Each call rebuilds the whole track set from scratch. Calls are
    single-flight per retargeter: starting a second retarget before the
    first returns raises RetargetInProgressError.
    """

    def __init__(self, source_fps: float = SOURCE_FPS):
        self.source_fps = source_fps
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def retarget(
        self,
        samples: Iterable[MotionSample],
        config: RetargetConfig,
        skeleton: Optional[TargetSkeleton],
        source_fps: Optional[float] = None,
    ) -> RetargetedClip:
        """
        Retarget a flat list of source samples.

        Args:
            samples: Source samples in any order
            config: Retarget settings
            skeleton: Loaded target skeleton
            source_fps: Override for the source frame rate

        Returns:
            Clip with one track per mapped bone present on the skeleton

        Raises:
            MissingTargetError: No skeleton is loaded
            MalformedSourceError: A sample is unusable; nothing is emitted
            RetargetInProgressError: Another retarget is running
        """
        if self._busy:
            raise RetargetInProgressError("A retarget is already in progress")
        if skeleton is None or len(skeleton) == 0:
            raise MissingTargetError("No target skeleton loaded")

        fps = source_fps if source_fps is not None else self.source_fps
        if fps <= 0:
            raise MalformedSourceError(f"Invalid source frame rate: {fps}")
        config.validate()

        self._busy = True
        try:
            return self._retarget(list(samples), config, skeleton, fps)
        finally:
            self._busy = False

    def _retarget(
        self,
        samples: List[MotionSample],
        config: RetargetConfig,
        skeleton: TargetSkeleton,
        fps: float,
    ) -> RetargetedClip:
        for sample in samples:
            validate_sample(sample)

        channels = group_samples(samples)

        q_global = global_offset(config)
        q_arm = arm_offset(config)

        tracks: Dict[HumanoidBone, RetargetedTrack] = {}
        unmatched = 0
        for name, channel in channels.items():
            role = lookup(name)
            if role is None:
                unmatched += 1
                logger.debug(f"Skipping unmapped source bone: {name}")
                continue
            node_name = skeleton.node_name(role)
            if node_name is None:
                unmatched += 1
                logger.debug(f"Target skeleton has no {role.value} bone for {name}")
                continue

            if role in tracks:
                logger.debug(f"{name} replaces earlier channel for {role.value}")
            tracks[role] = self._build_track(
                channel, role, node_name, config, fps, q_global, q_arm
            )

        # Whole-clip length, including channels that were not retargeted
        duration = max((c.last_frame for c in channels.values()), default=0.0) / fps

        matched = len(channels) - unmatched
        logger.info(
            f"Retargeted {matched} of {len(channels)} source bones "
            f"({len(tracks)} tracks, {duration:.2f}s)"
        )

        return RetargetedClip(
            tracks=tracks,
            duration=duration,
            loop=config.loop,
            playback_speed=config.playback_speed,
            matched_channels=matched,
            unmatched_channels=unmatched,
        )

    def _build_track(
        self,
        channel: MotionChannel,
        role: HumanoidBone,
        node_name: str,
        config: RetargetConfig,
        fps: float,
        q_global: Optional[np.ndarray],
        q_arm: Optional[np.ndarray],
    ) -> RetargetedTrack:
        ordered = channel.sorted_samples()
        n = len(ordered)

        times = np.empty(n)
        positions = np.empty((n, 3))
        rotations = np.empty((n, 4))

        for i, sample in enumerate(ordered):
            times[i] = sample.frame_index / fps
            position, rotation = convert_sample(sample, role, config)

            if q_global is not None:
                rotation = quaternion_multiply(rotation, q_global)
            if q_arm is not None and role.is_arm:
                rotation = quaternion_multiply(rotation, q_arm)

            positions[i] = position
            rotations[i] = rotation

        return RetargetedTrack(
            bone=role,
            node_name=node_name,
            times=times,
            rotations=rotations,
            positions=positions if role.is_root else None,
        )


def convert_sample(
    sample: MotionSample, role: HumanoidBone, config: RetargetConfig
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Apply the per-sample sign and axis stages (4-9) to one sample.

    Returns:
        Tuple of (position (3,), rotation [x, y, z, w])
    """
    axis_map: AxisMap = config.axis_map
    px, py, pz = axis_map.apply(*sample.position)
    rotation = sample.rotation
    if np.linalg.norm(rotation) < EPSILON:
        rotation = IDENTITY_ROTATION
    rx, ry, rz, rw = rotation
    rx, ry, rz = axis_map.apply(rx, ry, rz)

    px *= config.hip_scale
    py *= config.hip_scale
    pz *= config.hip_scale

    if role.is_root:
        py += config.hip_height_offset

    # Source is left-handed
    pz = -pz

    px, py, pz = mirror_position((px, py, pz), config)
    rx, ry, rz = mirror_rotation((rx, ry, rz), config)
    rx, ry, rz = invert_rotation((rx, ry, rz), config)

    return np.array([px, py, pz]), np.array([rx, ry, rz, rw])
