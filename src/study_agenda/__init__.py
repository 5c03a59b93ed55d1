"""Study agenda planner: priority scoring, spaced review and calendar scheduling."""

__version__ = "0.1.0"
