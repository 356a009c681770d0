"""
Calibration profile storage and the 5-step quadrant calibration.

The viewer looks at the screen centre, then at each corner. The centre
step zeroes the offsets; each corner step sets the two sensitivities
for its quadrant so that looking at that corner maps to the screen edge.
Steps can be run in any order and repeated.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from parallax.core.config import CalibrationProfile
from parallax.core.errors import ConfigurationError
from parallax.core.types import PoseSample

logger = logging.getLogger(__name__)

# Corrected offsets at or below this are not used as sensitivity denominators
MIN_DENOMINATOR = 0.01

# Fields that may be adjusted with nudge()
TUNABLE_FIELDS = (
    "screen_height",
    "aspect_ratio",
    "base_z",
    "z_sensitivity",
    "offset_x",
    "offset_y",
    "sensitivity_x_left",
    "sensitivity_x_right",
    "sensitivity_y_top",
    "sensitivity_y_bottom",
)


class Corner(Enum):
    """Screen corners used by steps 2-5."""

    TOP_LEFT = ("sensitivity_x_left", "sensitivity_y_top")
    TOP_RIGHT = ("sensitivity_x_right", "sensitivity_y_top")
    BOTTOM_RIGHT = ("sensitivity_x_right", "sensitivity_y_bottom")
    BOTTOM_LEFT = ("sensitivity_x_left", "sensitivity_y_bottom")

    @property
    def horizontal(self) -> str:
        return self.value[0]

    @property
    def vertical(self) -> str:
        return self.value[1]


def corrected_offset(pose: PoseSample, profile: CalibrationProfile) -> Tuple[float, float]:
    """Pose position after offsets and invert flags."""
    x = pose.x + profile.offset_x
    y = pose.y + profile.offset_y
    if profile.invert_x:
        x = -x
    if profile.invert_y:
        y = -y
    return x, y


class CalibrationStore:
    """
    Owns the session's calibration profile.

    The profile is only changed by the calibration steps, nudge() and
    reset(); it is never reset automatically.
    """

    def __init__(self, profile: Optional[CalibrationProfile] = None) -> None:
        self.profile = profile.copy() if profile is not None else CalibrationProfile()
        self.profile.validate()
        self._defaults = self.profile.copy()

    def calibrate_center(self, pose: PoseSample) -> None:
        """Step 1: map the current neutral gaze to the world origin."""
        self.profile.offset_x = -pose.x
        self.profile.offset_y = -pose.y
        logger.info(
            f"Center calibrated: offset_x={self.profile.offset_x:.4f}, "
            f"offset_y={self.profile.offset_y:.4f}"
        )

    def calibrate_corner(self, corner: Corner, pose: PoseSample) -> None:
        """Steps 2-5: set the quadrant's horizontal and vertical gain."""
        final_x, final_y = corrected_offset(pose, self.profile)

        if abs(final_x) > MIN_DENOMINATOR:
            setattr(self.profile, corner.horizontal, 1.0 / abs(final_x))
        if abs(final_y) > MIN_DENOMINATOR:
            setattr(self.profile, corner.vertical, 1.0 / abs(final_y))

        logger.info(
            f"{corner.name} calibrated: {corner.horizontal}="
            f"{getattr(self.profile, corner.horizontal):.4f}, {corner.vertical}="
            f"{getattr(self.profile, corner.vertical):.4f}"
        )

    def calibrate_top_left(self, pose: PoseSample) -> None:
        self.calibrate_corner(Corner.TOP_LEFT, pose)

    def calibrate_top_right(self, pose: PoseSample) -> None:
        self.calibrate_corner(Corner.TOP_RIGHT, pose)

    def calibrate_bottom_right(self, pose: PoseSample) -> None:
        self.calibrate_corner(Corner.BOTTOM_RIGHT, pose)

    def calibrate_bottom_left(self, pose: PoseSample) -> None:
        self.calibrate_corner(Corner.BOTTOM_LEFT, pose)

    def nudge(self, field_name: str, step: float, sign: int = 1) -> float:
        """
        Fine-tune one numeric profile field by ``step * sign``.

        Returns:
            The new value

        Raises:
            ConfigurationError: Unknown field, or the result breaks an invariant
        """
        if field_name not in TUNABLE_FIELDS:
            raise ConfigurationError(
                f"Cannot tune {field_name}. Tunable fields: {list(TUNABLE_FIELDS)}"
            )

        candidate = self.profile.copy()
        setattr(candidate, field_name, getattr(candidate, field_name) + step * sign)
        candidate.validate()

        self.profile = candidate
        return getattr(candidate, field_name)

    def save_defaults(self) -> None:
        """Make the current profile the target of reset()."""
        self._defaults = self.profile.copy()

    def reset(self) -> None:
        self.profile = self._defaults.copy()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.profile.to_dict(), indent=2))

    @classmethod
    def load(cls, path: Path) -> "CalibrationStore":
        """Load a store from a JSON profile, or defaults if the file is missing."""
        path = Path(path)
        if not path.exists():
            return cls()
        data = json.loads(path.read_text())
        return cls(CalibrationProfile.from_dict(data))
