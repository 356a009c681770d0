"""
Target skeleton description.

Loading the avatar model itself happens elsewhere; the retargeter only
needs to know which humanoid roles the loaded model exposes and the node
name each track should be bound to.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from parallax.motion.bone_map import HumanoidBone


@dataclass
class BoneNode:
    """A humanoid role bound to a concrete node of the loaded model."""

    role: HumanoidBone
    node_name: str


@dataclass
class TargetSkeleton:
    """Humanoid bones available on the loaded avatar."""

    name: str = "avatar"
    nodes: Dict[HumanoidBone, BoneNode] = field(default_factory=dict)

    def __contains__(self, role: HumanoidBone) -> bool:
        return role in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def node_name(self, role: HumanoidBone) -> Optional[str]:
        node = self.nodes.get(role)
        return node.node_name if node is not None else None

    @classmethod
    def from_roles(
        cls,
        roles: Iterable[HumanoidBone],
        name: str = "avatar",
        prefix: str = "Normalized_",
    ) -> "TargetSkeleton":
        """Build a skeleton whose node names are derived from role names."""
        nodes = {role: BoneNode(role=role, node_name=f"{prefix}{role.value}") for role in roles}
        return cls(name=name, nodes=nodes)


def humanoid_skeleton(name: str = "avatar") -> TargetSkeleton:
    """Skeleton exposing every humanoid role."""
    return TargetSkeleton.from_roles(HumanoidBone, name=name)
