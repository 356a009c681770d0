"""
Motion retargeting onto humanoid skeletons.

Import from the submodules directly (``parallax.motion.retarget``,
``parallax.motion.bone_map``); core types depend on the bone roles, so
this package does not import its modules eagerly.
"""
