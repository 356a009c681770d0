"""
Mathematical utilities for camera and rotation data.

Provides functions for:
- Quaternion products and Euler/axis-angle construction ([x, y, z, w] order)
- Look-at orientation and perspective matrices
- Scalar/vector interpolation helpers
"""

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

# Guard for near-zero norms
EPSILON = 1e-8


def normalize_vector(v: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Args:
        v: Input vector

    Returns:
        Normalized vector (or zero vector if input is zero)
    """
    norm = np.linalg.norm(v)
    if norm < EPSILON:
        return np.zeros_like(v, dtype=float)
    return v / norm


def quaternion_multiply(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """
    Hamilton product ``a * b`` of two [x, y, z, w] quaternions.

    Right-multiplying ``b`` applies it in the local frame of ``a``.
    """
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array([
        ax * bw + aw * bx + ay * bz - az * by,
        ay * bw + aw * by + az * bx - ax * bz,
        az * bw + aw * bz + ax * by - ay * bx,
        aw * bw - ax * bx - ay * by - az * bz,
    ])


def euler_to_quaternion(euler_deg: Sequence[float], order: str = "XYZ") -> np.ndarray:
    """
    Convert intrinsic Euler angles to a quaternion.

    Args:
        euler_deg: Angles in degrees, one per axis of ``order``
        order: Intrinsic rotation order (upper case, e.g. "XYZ")

    Returns:
        Quaternion [x, y, z, w]
    """
    return Rotation.from_euler(order, euler_deg, degrees=True).as_quat()


def axis_angle_to_quaternion(axis: Sequence[float], angle_deg: float) -> np.ndarray:
    """Quaternion [x, y, z, w] for a rotation of ``angle_deg`` about ``axis``."""
    axis = normalize_vector(np.asarray(axis, dtype=float))
    return Rotation.from_rotvec(axis * np.radians(angle_deg)).as_quat()


def look_at_rotation(
    eye: np.ndarray,
    target: np.ndarray,
    up: np.ndarray = np.array([0.0, 1.0, 0.0])
) -> np.ndarray:
    """
    Rotation matrix for a camera at ``eye`` looking at ``target``.

    The camera looks down its local -Z axis with +Y up.

    Returns:
        3x3 rotation matrix whose columns are the camera's right, up and
        back axes in world space
    """
    back = normalize_vector(np.asarray(eye, dtype=float) - np.asarray(target, dtype=float))
    if not back.any():
        return np.eye(3)

    right = normalize_vector(np.cross(up, back))
    if not right.any():
        # Looking straight along the up vector
        right = normalize_vector(np.cross(np.array([0.0, 0.0, 1.0]), back))
    actual_up = np.cross(back, right)

    return np.column_stack([right, actual_up, back])


def perspective_matrix(
    left: float,
    right: float,
    top: float,
    bottom: float,
    near: float,
    far: float
) -> np.ndarray:
    """OpenGL-style 4x4 projection matrix for an (off-axis) frustum."""
    width = right - left
    height = top - bottom
    depth = far - near

    return np.array([
        [2 * near / width, 0.0, (right + left) / width, 0.0],
        [0.0, 2 * near / height, (top + bottom) / height, 0.0],
        [0.0, 0.0, -(far + near) / depth, -2 * far * near / depth],
        [0.0, 0.0, -1.0, 0.0],
    ])


def lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a + (b - a) * t


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
