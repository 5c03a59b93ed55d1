"""Exceptions raised at the edges of the planner."""


class AgendaError(Exception):
    """Base class for study agenda errors."""


class SettingsError(AgendaError, ValueError):
    """Settings failed validation."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid settings: " + "; ".join(problems))


class DocumentError(AgendaError, ValueError):
    """An agenda document could not be read or decoded."""


class TaskNotFoundError(AgendaError, KeyError):
    def __str__(self) -> str:
        return f"Task not found: {self.args[0]}"


class UnitNotFoundError(AgendaError, KeyError):
    def __str__(self) -> str:
        return f"Unit not found: {self.args[0]}"
