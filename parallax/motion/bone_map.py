"""
Humanoid bone roles and the static source-name lookup table.

Source names come from MMD-style motion data (Japanese bone names).
Names that are not in ``SOURCE_TO_HUMANOID`` are dropped by the
retargeter; that is the designed behavior, not an error path.
"""

from enum import Enum
from typing import Dict, Optional


class HumanoidBone(Enum):
    """Closed set of target bone roles."""

    HIPS = "hips"
    SPINE = "spine"
    CHEST = "chest"
    NECK = "neck"
    HEAD = "head"
    LEFT_SHOULDER = "leftShoulder"
    LEFT_UPPER_ARM = "leftUpperArm"
    LEFT_LOWER_ARM = "leftLowerArm"
    LEFT_HAND = "leftHand"
    RIGHT_SHOULDER = "rightShoulder"
    RIGHT_UPPER_ARM = "rightUpperArm"
    RIGHT_LOWER_ARM = "rightLowerArm"
    RIGHT_HAND = "rightHand"
    LEFT_UPPER_LEG = "leftUpperLeg"
    LEFT_LOWER_LEG = "leftLowerLeg"
    LEFT_FOOT = "leftFoot"
    RIGHT_UPPER_LEG = "rightUpperLeg"
    RIGHT_LOWER_LEG = "rightLowerLeg"
    RIGHT_FOOT = "rightFoot"

    @property
    def is_root(self) -> bool:
        return self is HumanoidBone.HIPS

    @property
    def is_arm(self) -> bool:
        """Shoulders and arms receive the arm pose correction; hands do not."""
        return self in ARM_BONES


ARM_BONES = frozenset({
    HumanoidBone.LEFT_SHOULDER,
    HumanoidBone.LEFT_UPPER_ARM,
    HumanoidBone.LEFT_LOWER_ARM,
    HumanoidBone.RIGHT_SHOULDER,
    HumanoidBone.RIGHT_UPPER_ARM,
    HumanoidBone.RIGHT_LOWER_ARM,
})


SOURCE_TO_HUMANOID: Dict[str, HumanoidBone] = {
    "全ての親": HumanoidBone.HIPS,  # root / "parent of all"
    "センター": HumanoidBone.HIPS,  # center
    "上半身": HumanoidBone.SPINE,
    "上半身2": HumanoidBone.CHEST,
    "首": HumanoidBone.NECK,
    "頭": HumanoidBone.HEAD,
    "左肩": HumanoidBone.LEFT_SHOULDER,
    "左腕": HumanoidBone.LEFT_UPPER_ARM,
    "左ひじ": HumanoidBone.LEFT_LOWER_ARM,
    "左手首": HumanoidBone.LEFT_HAND,
    "右肩": HumanoidBone.RIGHT_SHOULDER,
    "右腕": HumanoidBone.RIGHT_UPPER_ARM,
    "右ひじ": HumanoidBone.RIGHT_LOWER_ARM,
    "右手首": HumanoidBone.RIGHT_HAND,
    "左足": HumanoidBone.LEFT_UPPER_LEG,
    "左ひざ": HumanoidBone.LEFT_LOWER_LEG,
    "左足首": HumanoidBone.LEFT_FOOT,
    "右足": HumanoidBone.RIGHT_UPPER_LEG,
    "右ひざ": HumanoidBone.RIGHT_LOWER_LEG,
    "右足首": HumanoidBone.RIGHT_FOOT,
}


def lookup(source_name: str) -> Optional[HumanoidBone]:
    """Target role for a source bone name, or None when unmapped."""
    return SOURCE_TO_HUMANOID.get(source_name)
