"""Trajectory points and the data they carry.

A trajectory point bundles a header (metadata), a command (targets sent
towards the robot) and feedback (what the robot reported). Joint values
are tuples of ``ROBOT_AXES_COUNT`` angles in radians. All records are
immutable; derive changed copies with :func:`dataclasses.replace`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterable

from rdtmotion.frames import CartPose

__all__ = [
    "ROBOT_AXES_COUNT",
    "ZERO_JOINTS",
    "RobotMode",
    "RTState",
    "MotionType",
    "WaypointDataType",
    "ToolFrame",
    "BaseFrame",
    "Header",
    "Command",
    "Feedback",
    "TrajectoryPoint",
    "joint_pose_string",
]

ROBOT_AXES_COUNT = 6
ZERO_JOINTS: tuple[float, ...] = (0.0,) * ROBOT_AXES_COUNT


class RobotMode(IntEnum):
    """Overall operational mode of the robot."""

    IDLE = 0
    INITIALIZING = 1
    RUNNING = 2
    JOGGING = 3
    ESTOP = 4
    ERROR = 5


class RTState(IntEnum):
    """State of the real-time motion cycle."""

    IDLE = 0
    MOVING = 1
    ERROR = 2


class MotionType(Enum):
    """Kind of motion towards a waypoint."""

    JOINT = "JOINT"
    PTP = "PTP"
    LIN = "LIN"


class WaypointDataType(Enum):
    """Which part of a point is authoritative."""

    JOINT_DOMINANT_CMD = "JOINT_DOMINANT_CMD"
    CARTESIAN_DOMINANT_CMD = "CARTESIAN_DOMINANT_CMD"
    FULL_FB = "FULL_FB"


def _joints(values: Iterable[float]) -> tuple[float, ...]:
    return tuple(float(v) for v in values)


@dataclass(frozen=True)
class ToolFrame:
    """A tool: the transformation from the flange to the tool centre point."""

    name: str = "DefaultTool"
    transform: CartPose = field(default_factory=CartPose)


@dataclass(frozen=True)
class BaseFrame:
    """A user frame: its transformation relative to the robot base."""

    name: str = "DefaultBase"
    transform: CartPose = field(default_factory=CartPose)


@dataclass(frozen=True)
class Header:
    """Metadata of a trajectory point."""

    trajectory_id: int = 0
    sequence_index: int = 0
    motion_type: MotionType = MotionType.JOINT
    data_type: WaypointDataType = WaypointDataType.JOINT_DOMINANT_CMD
    segment_duration: float = 0.0
    tool: ToolFrame = field(default_factory=ToolFrame)
    base: BaseFrame = field(default_factory=BaseFrame)
    is_target_reached_for_this_point: bool = False
    has_error_at_this_point: bool = False


@dataclass(frozen=True)
class Command:
    """Targets commanded for a point."""

    joint_target: tuple[float, ...] = ZERO_JOINTS
    cartesian_target: CartPose = field(default_factory=CartPose)
    speed_ratio: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "joint_target", _joints(self.joint_target))


@dataclass(frozen=True)
class Feedback:
    """State reported back by the robot for a point."""

    joint_actual: tuple[float, ...] = ZERO_JOINTS
    cartesian_actual: CartPose = field(default_factory=CartPose)
    rt_state: RTState = RTState.IDLE
    target_reached: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "joint_actual", _joints(self.joint_actual))


@dataclass(frozen=True)
class TrajectoryPoint:
    """A header, a command and feedback travelling together."""

    header: Header = field(default_factory=Header)
    command: Command = field(default_factory=Command)
    feedback: Feedback = field(default_factory=Feedback)


def joint_pose_string(joints: Iterable[float]) -> str:
    """Format joint angles (radians) as degrees, one labelled entry per axis."""
    parts = (
        f"A{index}: {math.degrees(angle):.2f}"
        for index, angle in enumerate(joints, start=1)
    )
    return "[" + ", ".join(parts) + "]"