"""Robot motion planning: frame transforms, trajectory points, shared state and a trajectory planner."""

__version__ = "0.1.0"

__all__ = ["frames", "points", "state_data", "kinematics", "planner"]