"""
Core data types for the parallax window.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from parallax.motion.bone_map import HumanoidBone
from parallax.utils.math_utils import perspective_matrix


@dataclass(frozen=True)
class PoseSample:
    """
    Normalized head (or handheld object) position.

    x, y are roughly in [-1.5, 1.5]; depth is a ratio where 1.0 is the
    calibrated neutral distance (< 1 closer, > 1 farther).
    """

    x: float = 0.0
    y: float = 0.0
    depth: float = 1.0


@dataclass
class ProjectionFrustum:
    """Near-plane bounds of the camera frustum, recomputed every frame."""

    left: float
    right: float
    top: float
    bottom: float
    near: float
    far: float

    @property
    def is_symmetric(self) -> bool:
        return bool(np.isclose(self.left, -self.right) and np.isclose(self.bottom, -self.top))

    def to_matrix(self) -> NDArray[np.float64]:
        """4x4 projection matrix for these bounds."""
        return perspective_matrix(
            self.left, self.right, self.top, self.bottom, self.near, self.far
        )

    @classmethod
    def symmetric(
        cls, fov_deg: float, aspect: float, near: float, far: float
    ) -> "ProjectionFrustum":
        """Standard perspective frustum from a vertical field of view."""
        top = near * np.tan(np.radians(fov_deg) / 2)
        right = top * aspect
        return cls(left=-right, right=right, top=top, bottom=-top, near=near, far=far)


@dataclass
class CameraTransform:
    """Camera state handed to the renderer each frame."""

    position: NDArray[np.float64]  # Shape: (3,)
    rotation: NDArray[np.float64]  # Shape: (3, 3)
    frustum: ProjectionFrustum

    # Set only in look-at mode
    look_at: Optional[NDArray[np.float64]] = None

    def to_dict(self) -> Dict:
        return {
            "position": self.position.tolist(),
            "rotation": self.rotation.tolist(),
            "look_at": self.look_at.tolist() if self.look_at is not None else None,
            "frustum": {
                "left": float(self.frustum.left),
                "right": float(self.frustum.right),
                "top": float(self.frustum.top),
                "bottom": float(self.frustum.bottom),
                "near": float(self.frustum.near),
                "far": float(self.frustum.far),
            },
        }


@dataclass(frozen=True)
class MotionSample:
    """One keyframe of a source bone as delivered by the motion parser."""

    bone_name: str
    frame_index: float
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]  # x, y, z, w


@dataclass
class MotionChannel:
    """All samples of one source bone, in arrival order."""

    bone_name: str
    samples: List[MotionSample] = field(default_factory=list)

    def sorted_samples(self) -> List[MotionSample]:
        # sorted() is stable: equal frame indices keep arrival order
        return sorted(self.samples, key=lambda s: s.frame_index)

    @property
    def last_frame(self) -> float:
        return max((s.frame_index for s in self.samples), default=0.0)


@dataclass
class RetargetedTrack:
    """Keyframes for one target bone."""

    bone: HumanoidBone
    node_name: str
    times: NDArray[np.float64]  # Shape: (N,), non-decreasing seconds
    rotations: NDArray[np.float64]  # Shape: (N, 4) - (x, y, z, w)

    # Only the root (hips) track carries translation
    positions: Optional[NDArray[np.float64]] = None  # Shape: (N, 3)

    def __post_init__(self):
        assert self.rotations.shape == (len(self.times), 4), "Rotations must be (N, 4)"
        if self.positions is not None:
            assert self.positions.shape == (len(self.times), 3), "Positions must be (N, 3)"

    @property
    def num_keys(self) -> int:
        return len(self.times)

    def to_dict(self) -> Dict:
        result = {
            "bone": self.bone.value,
            "node": self.node_name,
            "times": self.times.tolist(),
            "rotations": self.rotations.tolist(),
        }
        if self.positions is not None:
            result["positions"] = self.positions.tolist()
        return result


@dataclass
class RetargetedClip:
    """Complete retargeting result consumed by the animation player."""

    tracks: Dict[HumanoidBone, RetargetedTrack]
    duration: float
    loop: bool = True
    playback_speed: float = 1.0
    name: str = "retargeted"

    # Diagnostics
    matched_channels: int = 0
    unmatched_channels: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    def local_time(self, elapsed: float) -> float:
        """
        Map player time to clip time.

        Looping clips wrap back to 0; one-shot clips clamp at the end
        and hold the final pose.
        """
        t = max(elapsed, 0.0) * self.playback_speed
        if self.duration <= 0:
            return 0.0
        if self.loop:
            return t % self.duration
        return min(t, self.duration)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "duration": float(self.duration),
            "loop": bool(self.loop),
            "playback_speed": float(self.playback_speed),
            "matched_channels": int(self.matched_channels),
            "unmatched_channels": int(self.unmatched_channels),
            "tracks": [track.to_dict() for track in self.tracks.values()],
        }
