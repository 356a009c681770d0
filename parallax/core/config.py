"""
Configuration system for the parallax window.

Every operation receives its configuration explicitly
(``ViewportProjector.project(pose, profile)``,
``MotionRetargeter.retarget(samples, config, skeleton)``); nothing here
is read through module-level state.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Tuple

import yaml

from parallax.core.errors import ConfigurationError


class AxisMap(Enum):
    """Relabeling of source X/Y/Z components (no sign change)."""

    XYZ = "XYZ"
    XZY = "XZY"
    YXZ = "YXZ"
    YZX = "YZX"
    ZXY = "ZXY"
    ZYX = "ZYX"

    @property
    def order(self) -> Tuple[int, int, int]:
        """Source component index feeding each output slot."""
        return tuple("XYZ".index(axis) for axis in self.value)

    def apply(self, x: float, y: float, z: float) -> Tuple[float, float, float]:
        source = (x, y, z)
        i, j, k = self.order
        return source[i], source[j], source[k]

    def inverse(self) -> "AxisMap":
        inverse_order = [0, 0, 0]
        for slot, source_index in enumerate(self.order):
            inverse_order[source_index] = slot
        return AxisMap("".join("XYZ"[i] for i in inverse_order))


@dataclass
class CalibrationProfile:
    """Head-to-camera mapping parameters (physical units are cm)."""

    # Additive offsets in raw pose space
    offset_x: float = 0.0
    offset_y: float = 0.0

    # Per-quadrant gains
    sensitivity_x_left: float = 1.0
    sensitivity_x_right: float = 1.0
    sensitivity_y_top: float = 1.0
    sensitivity_y_bottom: float = 1.0

    invert_x: bool = False
    invert_y: bool = False
    invert_z: bool = False
    look_at_center: bool = False

    # Physical screen
    screen_height: float = 20.0
    aspect_ratio: float = 1.0
    base_z: float = 70.8
    z_sensitivity: float = 0.8

    @property
    def screen_width(self) -> float:
        return self.screen_height * self.aspect_ratio

    @property
    def sensitivities(self) -> Dict[str, float]:
        return {
            "sensitivity_x_left": self.sensitivity_x_left,
            "sensitivity_x_right": self.sensitivity_x_right,
            "sensitivity_y_top": self.sensitivity_y_top,
            "sensitivity_y_bottom": self.sensitivity_y_bottom,
        }

    def issues(self) -> List[str]:
        """Return invariant violations, empty when the profile is usable."""
        issues = []
        for name, value in self.sensitivities.items():
            if value <= 0:
                issues.append(f"{name} must be > 0 (got {value})")
        if self.screen_height <= 0:
            issues.append(f"screen_height must be > 0 (got {self.screen_height})")
        if self.base_z <= 0:
            issues.append(f"base_z must be > 0 (got {self.base_z})")
        if self.aspect_ratio <= 0:
            issues.append(f"aspect_ratio must be > 0 (got {self.aspect_ratio})")
        return issues

    def validate(self) -> None:
        issues = self.issues()
        if issues:
            raise ConfigurationError("; ".join(issues))

    def copy(self) -> "CalibrationProfile":
        return replace(self)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "CalibrationProfile":
        """Create from dictionary, ignoring unknown keys."""
        profile = cls()
        for key, value in data.items():
            if hasattr(profile, key):
                setattr(profile, key, value)
        return profile


@dataclass
class RetargetConfig:
    """Source-to-target motion conversion settings."""

    axis_map: AxisMap = AxisMap.XYZ

    # Reflection of position plus the paired rotation-vector flips
    mirror_x: bool = True
    mirror_y: bool = False
    mirror_z: bool = True

    # Plain rotation-vector component negation
    invert_x: bool = True
    invert_y: bool = True
    invert_z: bool = False

    hip_scale: float = 0.1
    hip_height_offset: float = 0.0

    # Degrees
    arm_pose_offset: float = 0.0
    bone_rot_x: float = 0.0
    bone_rot_y: float = 0.0
    bone_rot_z: float = 0.0

    playback_speed: float = 1.0
    loop: bool = True

    def issues(self) -> List[str]:
        issues = []
        if self.hip_scale <= 0:
            issues.append(f"hip_scale must be > 0 (got {self.hip_scale})")
        if self.playback_speed <= 0:
            issues.append(f"playback_speed must be > 0 (got {self.playback_speed})")
        return issues

    def validate(self) -> None:
        issues = self.issues()
        if issues:
            raise ConfigurationError("; ".join(issues))

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["axis_map"] = self.axis_map.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "RetargetConfig":
        config = cls()
        for key, value in data.items():
            if key == "axis_map":
                try:
                    value = AxisMap(value)
                except ValueError:
                    raise ConfigurationError(
                        f"Unknown axis_map: {value!r}. Available: {[m.value for m in AxisMap]}"
                    ) from None
            if hasattr(config, key):
                setattr(config, key, value)
        return config


@dataclass
class TrackingConfig:
    """Pose signal sampling configuration."""

    mode: Literal["face", "object"] = "face"
    object_label: str = "cell phone"

    # Minimum time between detector runs (~30 FPS)
    sample_interval_ms: float = 33.0

    # Webcam
    device_index: int = 0
    frame_width: int = 640
    frame_height: int = 480


@dataclass
class ViewConfig:
    """Camera smoothing and projection constants."""

    smoothing: float = 0.15
    min_z: float = 1.0
    max_z: float = 200.0
    near: float = 0.1
    far: float = 1000.0

    # Symmetric frustum used in look-at mode
    fov_deg: float = 50.0
    look_at_far: float = 100.0


@dataclass
class AppConfig:
    """Main application configuration."""

    calibration: CalibrationProfile = field(default_factory=CalibrationProfile)
    retarget: RetargetConfig = field(default_factory=RetargetConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    view: ViewConfig = field(default_factory=ViewConfig)

    # Source motion frame rate
    motion_fps: float = 30.0

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: top level must be a mapping")

        config = cls()

        try:
            if "calibration" in data:
                config.calibration = CalibrationProfile.from_dict(data["calibration"])
            if "retarget" in data:
                config.retarget = RetargetConfig.from_dict(data["retarget"])
            if "tracking" in data:
                config.tracking = TrackingConfig(**data["tracking"])
            if "view" in data:
                config.view = ViewConfig(**data["view"])
            if "motion_fps" in data:
                config.motion_fps = float(data["motion_fps"])
        except ConfigurationError as exc:
            raise ConfigurationError(f"{path}: {exc}") from exc
        except (TypeError, ValueError, AttributeError) as exc:
            raise ConfigurationError(f"{path}: invalid configuration: {exc}") from exc

        return config

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        data = {
            "calibration": self.calibration.to_dict(),
            "retarget": self.retarget.to_dict(),
            "tracking": dict(self.tracking.__dict__),
            "view": dict(self.view.__dict__),
            "motion_fps": self.motion_fps,
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        issues = self.calibration.issues() + self.retarget.issues()

        if self.tracking.mode not in ("face", "object"):
            issues.append(f"Unknown tracking mode: {self.tracking.mode}")
        if self.tracking.sample_interval_ms < 0:
            issues.append("sample_interval_ms must not be negative")
        if not 0.0 < self.view.smoothing <= 1.0:
            issues.append("view.smoothing must be in (0, 1]")
        if min(self.view.far, self.view.look_at_far) <= self.view.near:
            issues.append("view far planes must be beyond view.near")
        if self.view.min_z >= self.view.max_z:
            issues.append("view.min_z must be below view.max_z")
        if self.motion_fps <= 0:
            issues.append("motion_fps must be > 0")

        return issues


# Desktop webcam at arm's length
PC_DEFAULTS = CalibrationProfile(
    sensitivity_x_left=1.691377,
    sensitivity_x_right=1.652277,
    sensitivity_y_top=1.943930,
    sensitivity_y_bottom=1.2780,
    screen_height=20.0,
    aspect_ratio=1.0,
    base_z=70.8,
    z_sensitivity=0.8,
)

# Handheld, closer to the face
MOBILE_DEFAULTS = CalibrationProfile(
    sensitivity_x_left=1.5574,
    sensitivity_x_right=1.5574,
    sensitivity_y_top=1.7548,
    sensitivity_y_bottom=2.6053,
    screen_height=20.0,
    aspect_ratio=1.0,
    base_z=50.0,
    z_sensitivity=0.8,
)

PRESETS: Dict[str, CalibrationProfile] = {
    "pc": PC_DEFAULTS,
    "mobile": MOBILE_DEFAULTS,
}


def preset(name: str) -> CalibrationProfile:
    """Return a fresh copy of a named calibration preset."""
    try:
        return PRESETS[name].copy()
    except KeyError:
        raise ConfigurationError(
            f"Unknown preset: {name}. Available: {list(PRESETS.keys())}"
        ) from None
