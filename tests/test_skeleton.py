from parallax.motion.bone_map import HumanoidBone
from parallax.motion.skeleton import BoneNode, TargetSkeleton, humanoid_skeleton


def test_humanoid_skeleton_binds_every_role():
    skeleton = humanoid_skeleton()

    assert len(skeleton) == len(HumanoidBone)
    assert skeleton.node_name(HumanoidBone.LEFT_UPPER_ARM) == "Normalized_leftUpperArm"


def test_partial_skeleton_reports_missing_roles():
    skeleton = TargetSkeleton.from_roles([HumanoidBone.HIPS, HumanoidBone.HEAD], prefix="J_")

    assert HumanoidBone.HEAD in skeleton
    assert HumanoidBone.NECK not in skeleton
    assert skeleton.node_name(HumanoidBone.NECK) is None
    assert skeleton.nodes[HumanoidBone.HIPS] == BoneNode(HumanoidBone.HIPS, "J_hips")
