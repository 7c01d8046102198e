from __future__ import annotations

from typing import Iterable, Optional


class GameCenterError(Exception):
    """Base exception for the Game Center input layer."""


class ValidationError(GameCenterError):
    """Raised when the mapping catalog or its definitions are malformed.

    This is the only error allowed to abort startup. All detected problems are
    collected so a broken definition file can be fixed in one pass.
    """

    def __init__(self, message: str, problems: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.problems = list(problems or [])

    def to_human(self) -> str:
        parts = [str(self)]
        for problem in self.problems:
            parts.append(f" - {problem}")
        return "\n".join(parts)


class HostBindingError(GameCenterError):
    """Raised when the host rejects a registration, activation or release call."""

    def __init__(self, operation: str, message: str = "") -> None:
        super().__init__(f"{operation}: {message}" if message else operation)
        self.operation = operation


class UnsupportedHostError(GameCenterError):
    """Signals that the host cannot remap input (degraded mode, not a failure)."""
