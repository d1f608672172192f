import math
from dataclasses import replace

import pytest

from rdtmotion.frames import (
    CartPose,
    calculate_tcp_in_world,
    combine_transforms,
    poses_approximately_equal,
)
from rdtmotion.kinematics import (
    KinematicSolver,
    TrajectoryInterpolator,
    transform_waypoint_to_base_flange,
)
from rdtmotion.points import (
    ZERO_JOINTS,
    BaseFrame,
    Command,
    Feedback,
    Header,
    MotionType,
    ToolFrame,
    TrajectoryPoint,
)


class _FakeSolver(KinematicSolver):
    def __init__(self, fail_fk=False):
        self.fail_fk = fail_fk
        self.fk_calls = []

    def solve_fk(self, joints):
        self.fk_calls.append(tuple(joints))
        if self.fail_fk:
            raise RuntimeError("fk failure")
        j = tuple(joints)
        return CartPose(x=j[0], y=j[1], z=j[2], rx=j[3], ry=j[4], rz=j[5])

    def solve_ik(self, target, seed):
        return (target.x, target.y, target.z, target.rx, target.ry, target.rz)


JOINTS = (0.4, -0.2, 0.3, 0.0, 1.2, 0.0)
TARGET = CartPose(0.3, 0.2, 0.4, 0.0, 1.5708, 0.0)
TOOL = ToolFrame("Gripper", CartPose(0.0, 0.0, 0.25, 0.0, 0.0, 0.0))
BASE = BaseFrame("Table", CartPose(1.0, 0.0, 0.0, 0.0, 0.0, math.radians(90.0)))


def _point(motion_type, tool=None, base=None, joints=JOINTS, speed=0.5):
    return TrajectoryPoint(
        header=Header(
            trajectory_id=7,
            sequence_index=3,
            motion_type=motion_type,
            tool=tool or ToolFrame(),
            base=base or BaseFrame(),
        ),
        command=Command(
            joint_target=joints, cartesian_target=TARGET, speed_ratio=speed
        ),
        feedback=Feedback(joint_actual=JOINTS),
    )


def test_lin_identity_frames_keeps_pose_and_clears_joints():
    solver = _FakeSolver()
    result = transform_waypoint_to_base_flange(_point(MotionType.LIN), solver)
    assert poses_approximately_equal(result.command.cartesian_target, TARGET)
    assert result.command.joint_target == ZERO_JOINTS
    assert solver.fk_calls == []


def test_result_header_has_default_frames_and_keeps_metadata():
    waypoint = _point(MotionType.LIN, tool=TOOL, base=BASE)
    result = transform_waypoint_to_base_flange(waypoint, _FakeSolver())
    assert result.header.tool == ToolFrame()
    assert result.header.base == BaseFrame()
    assert result.header.trajectory_id == 7
    assert result.header.sequence_index == 3
    assert result.header.motion_type is MotionType.LIN
    assert result.command.speed_ratio == 0.5
    assert result.feedback == waypoint.feedback


def test_lin_with_tool_and_base_round_trips_to_tcp():
    waypoint = _point(MotionType.LIN, tool=TOOL, base=BASE)
    result = transform_waypoint_to_base_flange(waypoint, _FakeSolver())
    tcp_back = calculate_tcp_in_world(result.command.cartesian_target, TOOL.transform)
    expected_tcp = combine_transforms(BASE.transform, TARGET)
    assert poses_approximately_equal(tcp_back, expected_tcp)


def test_lin_tool_offset_moves_flange_away_from_tcp():
    waypoint = _point(MotionType.LIN, tool=TOOL)
    result = transform_waypoint_to_base_flange(waypoint, _FakeSolver())
    flange = result.command.cartesian_target
    distance = math.dist((flange.x, flange.y, flange.z), (TARGET.x, TARGET.y, TARGET.z))
    assert distance == pytest.approx(TOOL.transform.z)


@pytest.mark.parametrize("motion_type", [MotionType.JOINT, MotionType.PTP])
def test_joint_motion_uses_forward_kinematics(motion_type):
    solver = _FakeSolver()
    waypoint = _point(motion_type, tool=TOOL, base=BASE)
    result = transform_waypoint_to_base_flange(waypoint, solver)
    assert result.command.joint_target == JOINTS
    assert solver.fk_calls == [JOINTS]
    assert result.command.cartesian_target == solver.solve_fk(JOINTS)


def test_joint_motion_fk_failure_keeps_transformed_pose():
    solver = _FakeSolver(fail_fk=True)
    waypoint = _point(MotionType.PTP)
    result = transform_waypoint_to_base_flange(waypoint, solver)
    assert result.command.joint_target == JOINTS
    assert poses_approximately_equal(result.command.cartesian_target, TARGET)


def test_input_waypoint_is_unchanged():
    waypoint = _point(MotionType.LIN, tool=TOOL, base=BASE)
    snapshot = replace(waypoint)
    transform_waypoint_to_base_flange(waypoint, _FakeSolver())
    assert waypoint == snapshot


def test_interfaces_are_abstract():
    with pytest.raises(TypeError):
        KinematicSolver()
    with pytest.raises(TypeError):
        TrajectoryInterpolator()