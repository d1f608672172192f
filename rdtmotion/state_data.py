"""Thread-safe store of the robot's shared state."""

from __future__ import annotations

import threading
import logging

from rdtmotion.points import (
    ZERO_JOINTS,
    BaseFrame,
    RobotMode,
    ToolFrame,
    TrajectoryPoint,
)

__all__ = ["StateData"]

_log = logging.getLogger(__name__)


class StateData:
    """Shared robot and system state, safe to read and write from any thread.

    Stored values are immutable, so a value read out is a consistent
    snapshot that later writes cannot change.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._cmd_point = TrajectoryPoint()
        self._fb_point = TrajectoryPoint()
        self._active_tool = ToolFrame()
        self._active_base = BaseFrame()
        self._robot_mode = RobotMode.IDLE
        self._actual_joint_state: tuple[float, ...] = ZERO_JOINTS
        self._system_message = ""
        self._has_error = False
        self._speed_ratio = 1.0
        self._estop_active = False
        self._physically_connected = False
        _log.debug("StateData created with default values.")

    @property
    def cmd_point(self) -> TrajectoryPoint:
        """The point most recently commanded."""
        with self._lock:
            return self._cmd_point

    @cmd_point.setter
    def cmd_point(self, point: TrajectoryPoint) -> None:
        with self._lock:
            self._cmd_point = point

    @property
    def fb_point(self) -> TrajectoryPoint:
        """The latest feedback point."""
        with self._lock:
            return self._fb_point

    @fb_point.setter
    def fb_point(self, point: TrajectoryPoint) -> None:
        with self._lock:
            self._fb_point = point

    @property
    def active_tool(self) -> ToolFrame:
        with self._lock:
            return self._active_tool

    @active_tool.setter
    def active_tool(self, tool: ToolFrame) -> None:
        with self._lock:
            self._active_tool = tool

    @property
    def active_base(self) -> BaseFrame:
        with self._lock:
            return self._active_base

    @active_base.setter
    def active_base(self, base: BaseFrame) -> None:
        with self._lock:
            self._active_base = base

    @property
    def robot_mode(self) -> RobotMode:
        with self._lock:
            return self._robot_mode

    @robot_mode.setter
    def robot_mode(self, mode: RobotMode) -> None:
        with self._lock:
            self._robot_mode = mode

    @property
    def actual_joint_state(self) -> tuple[float, ...]:
        with self._lock:
            return self._actual_joint_state

    @actual_joint_state.setter
    def actual_joint_state(self, joints) -> None:
        values = tuple(float(v) for v in joints)
        with self._lock:
            self._actual_joint_state = values

    @property
    def system_message(self) -> str:
        with self._lock:
            return self._system_message

    @property
    def has_active_error(self) -> bool:
        """True if the current system message describes an active error."""
        with self._lock:
            return self._has_error

    def set_system_message(self, msg: str, is_active_error: bool) -> None:
        """Set the system message together with its error flag."""
        with self._lock:
            self._system_message = msg
            self._has_error = is_active_error

    @property
    def global_speed_ratio(self) -> float:
        """Global speed override, a ratio clamped to [0, 1]."""
        with self._lock:
            return self._speed_ratio

    @global_speed_ratio.setter
    def global_speed_ratio(self, ratio: float) -> None:
        clamped = max(0.0, min(1.0, float(ratio)))
        with self._lock:
            self._speed_ratio = clamped

    @property
    def estop_active(self) -> bool:
        with self._lock:
            return self._estop_active

    def set_estop_state(self, is_estopped: bool) -> None:
        """Set the E-Stop flag; activating it also puts the robot in ESTOP mode."""
        with self._lock:
            self._estop_active = is_estopped
            if is_estopped:
                self._robot_mode = RobotMode.ESTOP

    @property
    def physically_connected(self) -> bool:
        with self._lock:
            return self._physically_connected

    @physically_connected.setter
    def physically_connected(self, connected: bool) -> None:
        with self._lock:
            self._physically_connected = connected