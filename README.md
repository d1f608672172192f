# rdtmotion

Building blocks for planning the motion of a six-axis robot arm. The
package takes a target pose given in a user frame with a tool. It turns
that pose into a flange target in the robot base frame, and then hands out
windows of joint setpoints along the way to it.

Positions are in metres, angles in radians and times in seconds throughout.

## Modules

### `rdtmotion.frames`

`CartPose` is an immutable pose made of `x`, `y`, `z` and the ZYX Euler
angles `rx`, `ry`, `rz`. The rotation is `Rz(rz) · Ry(ry) · Rx(rx)`.
`CartPose.describe()` returns a one-line text form with the angles in
degrees.

Transformations between frames:

- `transform_pose_to_world(pose_in_local_frame, local_frame_in_world)`
- `transform_pose_from_world(pose_in_world, local_frame_in_world)`
- `calculate_tcp_in_world(flange_pose_in_world, tool_transform_on_flange)`
- `calculate_flange_in_world(tcp_pose_in_world, tool_transform_on_flange)`
- `combine_transforms(t_world_a, t_a_b)`
- `invert_transform(transform)`

A result pose has its yaw in `[0, pi]`, so the same rotation can come back
with different Euler angles from the ones you put in. To compare poses,
use `poses_approximately_equal(p1, p2, pos_tol, ang_tol)`. It checks each
position within `pos_tol` and each angle difference, wrapped by
`normalize_angle` into `[-pi, pi]`, within `ang_tol`. The defaults are
0.01 mm and 0.001°.

### `rdtmotion.points`

These are the immutable records that travel through planning.
`TrajectoryPoint` holds a `Header`, a `Command` and a `Feedback`.
`ToolFrame` and `BaseFrame` each hold a name and a `CartPose` transform.
There are four enums:

- `RobotMode`
- `RTState`
- `MotionType`, with the members `JOINT`, `PTP` and `LIN`
- `WaypointDataType`

Joint values are tuples of `ROBOT_AXES_COUNT` (6) angles. `ZERO_JOINTS` is
all zeros. `joint_pose_string(joints)` formats joint angles as labelled
degrees. Use `dataclasses.replace` to derive a changed copy of a record.

### `rdtmotion.state_data`

`StateData` is a lock-protected store that any thread can read and write.
It holds the following properties:

- `cmd_point` and `fb_point`
- `active_tool` and `active_base`
- `robot_mode`
- `actual_joint_state`
- `global_speed_ratio`, clamped to `[0, 1]`
- `physically_connected`

Three more values are read-only properties with their own setter method:

- `system_message` and `has_active_error` are set together by
  `set_system_message(msg, is_active_error)`.
- `estop_active` is set by `set_estop_state(is_estopped)`. Activating the
  E-Stop also switches `robot_mode` to `RobotMode.ESTOP`.

### `rdtmotion.kinematics`

This module defines two abstract interfaces for you to implement:

- `KinematicSolver`, with `solve_fk(joints)` and `solve_ik(target, seed)`.
  `solve_ik` returns `None` when the pose cannot be reached.
- `TrajectoryInterpolator`, with `load_segment(start, end)`,
  `next_point(dt)`, and the properties `is_idle` and
  `current_profile_duration`.

It also provides `transform_waypoint_to_base_flange(waypoint, solver)`.
This function maps a TCP pose in a user frame to the flange pose in the
robot base frame, and resets the tool and base to identity. For `JOINT`
and `PTP` waypoints it keeps the joint target and recomputes the pose by
forward kinematics. For `LIN` waypoints it clears the joint target.

### `rdtmotion.planner`

`TrajectoryPlanner(solver, interpolator)` raises `ValueError` if either
argument is `None`. Its methods and properties:

- `set_current_robot_state(point)` takes the point's joint target as the
  start of the next segment.
- `add_target_waypoint(waypoint)` transforms the target. For `LIN`
  waypoints it solves IK for the target. It then loads the segment.
- `next_point_window(dt_sample, window_duration)` returns the next window
  of points. Each point carries a joint command and its flange pose.
  `LIN` segments are solved by IK point by point. Joint segments get the
  flange pose by FK.
- `is_current_segment_done()` reports whether the segment is finished.
- `current_robot_state` is the planner's current state.

Failures do not raise. They set a sticky error, which you can read from
`has_error` and `error_message` and clear with `clear_error()`.

## Example

```python
import math
from rdtmotion.frames import CartPose, combine_transforms, invert_transform

base_in_world = CartPose(x=1.0, rz=math.pi / 2)
object_in_base = CartPose(y=0.5)

object_in_world = combine_transforms(base_in_world, object_in_base)
# x=0.5, y=0.0, z=0.0, rotated 90 degrees about Z

back = combine_transforms(object_in_world, invert_transform(object_in_base))
```

## Installing

```
pip install .
pip install ".[test]"
pytest
```

## What this package does not do

- It has no kinematic model of any particular arm and no motion profile.
  `KinematicSolver` and `TrajectoryInterpolator` are interfaces only, and
  the planner needs your implementations of both.
- It does not execute motion. There is no real-time cycle, no link to
  robot hardware or a simulator, and no controller loop that feeds the
  planner's windows to a drive and reads feedback back into `StateData`.
- It has no command-line program.