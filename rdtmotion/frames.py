"""Cartesian poses and rigid-frame transformations.

Orientations use the ZYX Euler convention: a pose's rotation is
``Rz(rz) @ Ry(ry) @ Rx(rx)``. When a transformation matrix is turned back
into a pose, the yaw/pitch/roll triple is taken so that yaw lies in
``[0, pi]``. The pitch and roll then follow from that choice.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

__all__ = [
    "CartPose",
    "normalize_angle",
    "transform_pose_to_world",
    "transform_pose_from_world",
    "calculate_tcp_in_world",
    "calculate_flange_in_world",
    "combine_transforms",
    "invert_transform",
    "poses_approximately_equal",
]

DEFAULT_POS_TOL = 0.00001
DEFAULT_ANG_TOL = math.radians(0.001)


@dataclass(frozen=True)
class CartPose:
    """A Cartesian pose: position in metres, ZYX Euler angles in radians."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0

    def describe(self) -> str:
        """Return a readable one-line form, with angles in degrees."""
        return (
            f"X:{self.x:.4f} m Y:{self.y:.4f} m Z:{self.z:.4f} m "
            f"Rx:{math.degrees(self.rx):.2f} deg "
            f"Ry:{math.degrees(self.ry):.2f} deg "
            f"Rz:{math.degrees(self.rz):.2f} deg"
        )


def normalize_angle(angle: float) -> float:
    """Wrap an angle in radians into the range [-pi, pi]."""
    return math.remainder(angle, 2.0 * math.pi)


def _rotation(rx: float, ry: float, rz: float) -> np.ndarray:
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    rot_x = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    rot_y = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rot_z = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return rot_z @ rot_y @ rot_x


def _to_matrix(pose: CartPose) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, :3] = _rotation(pose.rx, pose.ry, pose.rz)
    matrix[:3, 3] = (pose.x, pose.y, pose.z)
    return matrix


def _zyx_angles(m: np.ndarray) -> tuple[float, float, float]:
    """Extract (yaw, pitch, roll) from a rotation matrix, yaw in [0, pi]."""
    yaw = math.atan2(m[1, 0], m[0, 0])
    c2 = math.hypot(m[2, 2], m[2, 1])
    if yaw < 0.0:
        yaw += math.pi
        pitch = math.atan2(-m[2, 0], -c2)
    else:
        pitch = math.atan2(-m[2, 0], c2)
    s1, c1 = math.sin(yaw), math.cos(yaw)
    roll = math.atan2(s1 * m[0, 2] - c1 * m[1, 2], c1 * m[1, 1] - s1 * m[0, 1])
    return yaw, pitch, roll


def _from_matrix(matrix: np.ndarray) -> CartPose:
    yaw, pitch, roll = _zyx_angles(matrix[:3, :3])
    x, y, z = (float(v) for v in matrix[:3, 3])
    return CartPose(x, y, z, rx=roll, ry=pitch, rz=yaw)


def _inverse(matrix: np.ndarray) -> np.ndarray:
    rot_t = matrix[:3, :3].T
    inverse = np.eye(4)
    inverse[:3, :3] = rot_t
    inverse[:3, 3] = -rot_t @ matrix[:3, 3]
    return inverse


def transform_pose_to_world(
    pose_in_local_frame: CartPose, local_frame_in_world: CartPose
) -> CartPose:
    """Express a pose given in a local frame in world coordinates."""
    return _from_matrix(
        _to_matrix(local_frame_in_world) @ _to_matrix(pose_in_local_frame)
    )


def transform_pose_from_world(
    pose_in_world: CartPose, local_frame_in_world: CartPose
) -> CartPose:
    """Express a world pose relative to a local frame."""
    return _from_matrix(
        _inverse(_to_matrix(local_frame_in_world)) @ _to_matrix(pose_in_world)
    )


def calculate_tcp_in_world(
    flange_pose_in_world: CartPose, tool_transform_on_flange: CartPose
) -> CartPose:
    """Return the tool centre point in world: T_world_flange @ T_flange_tcp."""
    return _from_matrix(
        _to_matrix(flange_pose_in_world) @ _to_matrix(tool_transform_on_flange)
    )


def calculate_flange_in_world(
    tcp_pose_in_world: CartPose, tool_transform_on_flange: CartPose
) -> CartPose:
    """Return the flange in world: T_world_tcp @ inv(T_flange_tcp)."""
    return _from_matrix(
        _to_matrix(tcp_pose_in_world)
        @ _inverse(_to_matrix(tool_transform_on_flange))
    )


def combine_transforms(t_world_a: CartPose, t_a_b: CartPose) -> CartPose:
    """Chain two transformations: T_world_B = T_world_A @ T_A_B."""
    return _from_matrix(_to_matrix(t_world_a) @ _to_matrix(t_a_b))


def invert_transform(transform: CartPose) -> CartPose:
    """Invert a transformation T_A_B into T_B_A."""
    return _from_matrix(_inverse(_to_matrix(transform)))


def poses_approximately_equal(
    p1: CartPose,
    p2: CartPose,
    pos_tol: float = DEFAULT_POS_TOL,
    ang_tol: float = DEFAULT_ANG_TOL,
) -> bool:
    """Compare two poses component-wise within tolerances.

    Angle differences are wrapped before comparison, so angles that differ
    by a full turn count as equal.
    """
    pos_equal = all(
        abs(a - b) <= pos_tol
        for a, b in ((p1.x, p2.x), (p1.y, p2.y), (p1.z, p2.z))
    )
    ang_equal = all(
        abs(normalize_angle(a - b)) <= ang_tol
        for a, b in ((p1.rx, p2.rx), (p1.ry, p2.ry), (p1.rz, p2.rz))
    )
    return pos_equal and ang_equal