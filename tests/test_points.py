import dataclasses
import math

import pytest

from rdtmotion.frames import CartPose
from rdtmotion.points import (
    ROBOT_AXES_COUNT,
    BaseFrame,
    Command,
    Feedback,
    Header,
    MotionType,
    RTState,
    ToolFrame,
    TrajectoryPoint,
    WaypointDataType,
    joint_pose_string,
)


def test_default_point_has_zero_joints_of_axis_count():
    point = TrajectoryPoint()
    assert point.command.joint_target == (0.0,) * ROBOT_AXES_COUNT
    assert point.feedback.joint_actual == (0.0,) * ROBOT_AXES_COUNT
    assert len(point.command.joint_target) == 6


def test_defaults_of_header_and_feedback():
    point = TrajectoryPoint()
    assert point.header.motion_type is MotionType.JOINT
    assert point.header.data_type is WaypointDataType.JOINT_DOMINANT_CMD
    assert point.feedback.rt_state is RTState.IDLE
    assert point.header.has_error_at_this_point is False
    assert point.command.speed_ratio == 1.0


def test_joint_lists_become_tuples():
    command = Command(joint_target=[1, 2, 3, 4, 5, 6])
    feedback = Feedback(joint_actual=[0.5] * 6)
    assert command.joint_target == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
    assert feedback.joint_actual == (0.5,) * 6


def test_points_are_immutable():
    point = TrajectoryPoint()
    with pytest.raises(dataclasses.FrozenInstanceError):
        point.header = Header(sequence_index=3)  # type: ignore[misc]


def test_replace_leaves_original_untouched():
    original = TrajectoryPoint()
    changed = dataclasses.replace(
        original,
        header=dataclasses.replace(original.header, sequence_index=7),
    )
    assert changed.header.sequence_index == 7
    assert original.header.sequence_index == 0


def test_frames_compare_by_value():
    pose = CartPose(0.0, 0.0, 0.25)
    assert ToolFrame("Gripper", pose) == ToolFrame("Gripper", CartPose(z=0.25))
    assert BaseFrame() == BaseFrame()
    assert ToolFrame("A") != ToolFrame("B")


def test_default_frames_are_identity():
    assert ToolFrame().transform == CartPose()
    assert BaseFrame().transform == CartPose()


def test_joint_pose_string_in_degrees():
    text = joint_pose_string((math.pi / 2, 0.0, 0.0, 0.0, 0.0, -math.pi))
    assert "A1: 90.00" in text
    assert "A6: -180.00" in text
    assert text.count("A") == 6


def test_joint_pose_string_orders_axes():
    text = joint_pose_string((0.0,) * ROBOT_AXES_COUNT)
    positions = [text.index(f"A{i}:") for i in range(1, 7)]
    assert positions == sorted(positions)