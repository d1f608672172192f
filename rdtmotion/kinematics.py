"""Kinematics and interpolation interfaces, and waypoint frame conversion.

A waypoint given by a user names its tool (flange to tool centre point)
and its base (user frame relative to the robot base). Planning works on
the flange pose in the robot base frame. :func:`transform_waypoint_to_base_flange`
converts the one into the other.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Sequence

from rdtmotion.frames import CartPose, calculate_flange_in_world, combine_transforms
from rdtmotion.points import (
    ZERO_JOINTS,
    BaseFrame,
    MotionType,
    ToolFrame,
    TrajectoryPoint,
)

__all__ = [
    "KinematicSolver",
    "TrajectoryInterpolator",
    "transform_waypoint_to_base_flange",
]

_log = logging.getLogger(__name__)


class KinematicSolver(ABC):
    """Forward and inverse kinematics of the robot's flange in its base frame."""

    @abstractmethod
    def solve_fk(self, joints: Sequence[float]) -> CartPose:
        """Return the flange pose for the given joint angles (radians).

        Raises an exception if the pose cannot be computed.
        """

    @abstractmethod
    def solve_ik(
        self, target: CartPose, seed: Sequence[float]
    ) -> tuple[float, ...] | None:
        """Return joint angles reaching the flange pose, or None if unreachable.

        The seed joints pick the solution branch nearest to them.
        """


class TrajectoryInterpolator(ABC):
    """Produces time-stepped points along one motion segment."""

    @abstractmethod
    def load_segment(self, start: TrajectoryPoint, end: TrajectoryPoint) -> None:
        """Load a segment from start to end; raise if it cannot be planned.

        The end point's motion type selects joint-space or Cartesian
        interpolation, and its command carries the speed parameters.
        """

    @abstractmethod
    def next_point(self, dt: float) -> TrajectoryPoint:
        """Advance by ``dt`` seconds and return the interpolated point."""

    @property
    @abstractmethod
    def is_idle(self) -> bool:
        """True when no segment is loaded or the loaded one is finished."""

    @property
    @abstractmethod
    def current_profile_duration(self) -> float:
        """Total duration in seconds of the loaded segment."""


def transform_waypoint_to_base_flange(
    waypoint_in_user_frame: TrajectoryPoint, solver: KinematicSolver
) -> TrajectoryPoint:
    """Turn a user-frame TCP waypoint into a flange target in the robot base.

    The Cartesian target is taken as the TCP pose in the waypoint's user
    frame; the result holds the flange pose in the robot base frame, with
    default (identity) tool and base. For JOINT and PTP motions the joint
    target is kept and the Cartesian target is recomputed by forward
    kinematics where possible. For LIN motions the joint target is cleared.
    """
    header = waypoint_in_user_frame.header
    command = waypoint_in_user_frame.command
    _log.debug(
        "Transforming waypoint. User Base: '%s', User Tool: '%s'",
        header.base.name,
        header.tool.name,
    )

    tcp_in_robot_base = combine_transforms(
        header.base.transform, command.cartesian_target
    )
    flange_in_robot_base = calculate_flange_in_world(
        tcp_in_robot_base, header.tool.transform
    )
    _log.debug("  Flange in robot base: %s", flange_in_robot_base.describe())

    joint_target = command.joint_target
    cartesian_target = flange_in_robot_base

    if header.motion_type in (MotionType.JOINT, MotionType.PTP):
        try:
            cartesian_target = solver.solve_fk(joint_target)
        except Exception as exc:  # noqa: BLE001 - any solver failure
            _log.warning(
                "  JOINT/PTP target: FK failed for joint target: %s. "
                "Cartesian part might be inconsistent.",
                exc,
            )
    elif header.motion_type is MotionType.LIN:
        joint_target = ZERO_JOINTS

    return replace(
        waypoint_in_user_frame,
        header=replace(header, base=BaseFrame(), tool=ToolFrame()),
        command=replace(
            command, joint_target=joint_target, cartesian_target=cartesian_target
        ),
    )