"""Trajectory planning from user waypoints to real-time joint commands.

The planner holds the robot's current state as a flange pose in the robot
base frame. A target waypoint, given as a TCP pose in a user frame, is
converted into a flange target in the base frame and loaded into an
interpolator. Windows of interpolated points are then handed out, each
carrying a joint command (solved by inverse kinematics for LIN motions)
and the matching flange pose, with identity tool and base.

Failures do not raise: they set a sticky error that keeps its first
message until :meth:`TrajectoryPlanner.clear_error` or a new request.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from rdtmotion.kinematics import (
    KinematicSolver,
    TrajectoryInterpolator,
    transform_waypoint_to_base_flange,
)
from rdtmotion.points import (
    ROBOT_AXES_COUNT,
    ZERO_JOINTS,
    BaseFrame,
    Command,
    MotionType,
    ToolFrame,
    TrajectoryPoint,
    WaypointDataType,
    joint_pose_string,
)

__all__ = ["TrajectoryPlanner"]

_log = logging.getLogger(__name__)


class TrajectoryPlanner:
    """Plans segments between the current robot state and target waypoints."""

    def __init__(
        self,
        solver: KinematicSolver | None,
        interpolator: TrajectoryInterpolator | None,
    ) -> None:
        if solver is None:
            _log.critical("KinematicSolver cannot be None.")
            raise ValueError("TrajectoryPlanner: KinematicSolver cannot be None.")
        if interpolator is None:
            _log.critical("TrajectoryInterpolator cannot be None.")
            raise ValueError(
                "TrajectoryPlanner: TrajectoryInterpolator cannot be None."
            )
        self._solver = solver
        self._interpolator = interpolator
        self._current_state = TrajectoryPoint()
        self._state_is_set = False
        self._segment_active = False
        self._has_error = False
        self._error_message = ""
        self._ik_seed: tuple[float, ...] = ZERO_JOINTS
        self._user_target = TrajectoryPoint()
        _log.info("TrajectoryPlanner initialized.")

    # --- state ---

    @property
    def has_error(self) -> bool:
        """True while the planner is in an error state."""
        return self._has_error

    @property
    def error_message(self) -> str:
        """The first error message since the error was last cleared."""
        return self._error_message

    @property
    def current_robot_state(self) -> TrajectoryPoint:
        """The planner's current state: flange pose and joints in the base frame."""
        return self._current_state

    def _set_error(self, message: str) -> None:
        if not self._has_error:
            self._error_message = message
            self._has_error = True
            _log.error("Error set: %s", message)
        else:
            _log.warning("Additional error context (ignored): %s", message)

    def clear_error(self) -> None:
        """Leave the error state and forget its message."""
        if self._has_error:
            _log.info("Clearing error state. Previous error: %s", self._error_message)
        self._has_error = False
        self._error_message = ""

    # --- planning ---

    def set_current_robot_state(self, current_robot_state: TrajectoryPoint) -> None:
        """Take the robot's joint positions as the start of the next segment.

        The Cartesian part is recomputed by forward kinematics, and tool and
        base are reset to identity. Any active segment is dropped.
        """
        self.clear_error()
        state = replace(
            current_robot_state,
            header=replace(
                current_robot_state.header, tool=ToolFrame(), base=BaseFrame()
            ),
        )
        joints = state.command.joint_target
        if len(joints) != ROBOT_AXES_COUNT:
            self._set_error(
                "set_current_robot_state: initial state must have valid joint_target size."
            )
            self._state_is_set = False
            return
        try:
            flange = self._solver.solve_fk(joints)
        except Exception as exc:  # noqa: BLE001 - any solver failure
            self._set_error(
                f"set_current_robot_state: FK failed for initial joint positions: {exc}"
            )
            self._state_is_set = False
            return

        self._current_state = replace(
            state, command=replace(state.command, cartesian_target=flange)
        )
        self._ik_seed = joints
        self._state_is_set = True
        self._segment_active = False
        _log.info(
            "Current robot state set. Flange base: %s, Joints (deg): %s",
            flange.describe(),
            joint_pose_string(joints),
        )

    def add_target_waypoint(self, next_target_waypoint: TrajectoryPoint) -> bool:
        """Load the segment from the current state to a target waypoint.

        Returns False if the planner is still busy with a segment (no error
        is set then), or if the state is not set, the target is unreachable
        or the segment cannot be loaded (the error is set).
        """
        self.clear_error()
        if not self._state_is_set:
            self._set_error("Cannot add target: current robot state not set.")
            return False
        if self._segment_active and not self._interpolator.is_idle:
            _log.warning(
                "Cannot add new target: current segment interpolation is still active."
            )
            return False

        self._user_target = next_target_waypoint
        try:
            target = transform_waypoint_to_base_flange(
                next_target_waypoint, self._solver
            )
        except Exception as exc:  # noqa: BLE001
            self._set_error(
                f"Failed to transform target waypoint to robot base: {exc}"
            )
            return False

        if target.header.motion_type is MotionType.LIN:
            ik = self._solver.solve_ik(target.command.cartesian_target, self._ik_seed)
            if ik is None:
                self._set_error(
                    "IK failed for LIN target's Cartesian pose (flange in base). "
                    "Target may be unreachable."
                )
                return False
            target = replace(target, command=replace(target.command, joint_target=ik))
            _log.debug("  IK for LIN target success: %s", joint_pose_string(ik))

        return self._load_segment(self._current_state, target)

    def _load_segment(self, start: TrajectoryPoint, end: TrajectoryPoint) -> bool:
        try:
            self._interpolator.load_segment(start, end)
        except Exception as exc:  # noqa: BLE001
            self._set_error(f"Failed to load segment into interpolator: {exc}")
            self._segment_active = False
            return False
        self._segment_active = True
        return True

    def next_point_window(
        self, dt_sample: float, window_duration: float
    ) -> list[TrajectoryPoint]:
        """Generate the next window of points of the active segment.

        Points are taken every ``dt_sample`` seconds while less than
        ``window_duration`` has accumulated. Returns an empty list when no
        segment is active or the planner is in error.
        """
        points: list[TrajectoryPoint] = []
        if not self._segment_active or self._has_error:
            if self._has_error:
                _log.warning(
                    "next_point_window called while in error state: %s",
                    self._error_message,
                )
            else:
                _log.debug("next_point_window called but no segment is active.")
            return points
        if dt_sample <= 0.0 or window_duration <= 0.0:
            self._set_error(
                "dt_sample and window_duration must be positive for next_point_window."
            )
            return points

        accumulated = 0.0
        while (
            accumulated < window_duration
            and not self._interpolator.is_idle
            and not self._has_error
        ):
            try:
                interpolated = self._interpolator.next_point(dt_sample)
            except Exception as exc:  # noqa: BLE001
                self._set_error(f"Error from interpolator next_point(): {exc}")
                break

            header = replace(
                self._user_target.header,
                segment_duration=self._interpolator.current_profile_duration,
                is_target_reached_for_this_point=(
                    interpolated.header.is_target_reached_for_this_point
                ),
                data_type=WaypointDataType.JOINT_DOMINANT_CMD,
                tool=ToolFrame(),
                base=BaseFrame(),
            )

            if interpolated.header.motion_type is MotionType.LIN:
                flange = interpolated.command.cartesian_target
                ik = self._solver.solve_ik(flange, self._ik_seed)
                if ik is None:
                    self._set_error(
                        "IK FAILED for interpolated LIN point (flange): "
                        + flange.describe()
                    )
                    break
                joints, cartesian = tuple(ik), flange
            else:
                joints = interpolated.command.joint_target
                try:
                    cartesian = self._solver.solve_fk(joints)
                except Exception as exc:  # noqa: BLE001
                    _log.warning(
                        "  FK failed for interpolated JOINT point: %s. "
                        "Cartesian part may be stale.",
                        exc,
                    )
                    cartesian = interpolated.command.cartesian_target
            self._ik_seed = tuple(joints)

            points.append(
                TrajectoryPoint(
                    header=header,
                    command=Command(joint_target=joints, cartesian_target=cartesian),
                )
            )
            accumulated += dt_sample

        if points and not self._has_error:
            self._current_state = replace(
                self._current_state, command=points[-1].command
            )
        elif self._has_error:
            _log.warning(
                "Window generation ended with error. Robot state not advanced."
            )

        if self._interpolator.is_idle:
            self._segment_active = False
            _log.info(
                "Current segment interpolation complete. Points in window: %d",
                len(points),
            )
            if not self._has_error:
                self._finish_segment()
        return points

    def _finish_segment(self) -> None:
        """Snap the current state to the exact segment target."""
        final_command = self._current_state.command
        try:
            final = transform_waypoint_to_base_flange(self._user_target, self._solver)
            final_command = final.command
            if self._user_target.header.motion_type is MotionType.LIN:
                ik = self._solver.solve_ik(final_command.cartesian_target, self._ik_seed)
                if ik is not None:
                    final_command = replace(final_command, joint_target=ik)
                else:
                    _log.warning(
                        "IK failed for final LIN target on segment completion. "
                        "Joint state might be approximate."
                    )
        except Exception as exc:  # noqa: BLE001
            _log.error(
                "Error re-transforming final segment target: %s. "
                "Using last interpolated point as current state.",
                exc,
            )
            final_command = self._current_state.command
        self._current_state = replace(self._current_state, command=final_command)
        self._ik_seed = final_command.joint_target
        _log.info(
            "Robot state updated to segment end. Flange: %s",
            final_command.cartesian_target.describe(),
        )

    def is_current_segment_done(self) -> bool:
        """True if no segment is active, the segment is finished, or in error."""
        if self._has_error:
            return True
        return not self._segment_active or self._interpolator.is_idle