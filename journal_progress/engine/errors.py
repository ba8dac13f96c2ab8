"""Exceptions raised by the progress engine."""

from typing import Any


class ProgressEngineError(Exception):
    """Base exception for streak and milestone computations."""
    pass


class DateParseError(ProgressEngineError, ValueError):
    """Input is neither a YYYY-MM-DD date nor a recognisable timestamp."""

    def __init__(self, value: Any, message: str):
        self.value = value
        super().__init__(message)


class StreakContractError(ProgressEngineError, ValueError):
    """Caller passed a streak value the engine does not accept."""
    pass


def require_non_negative(name: str, value: int) -> None:
    """Raise StreakContractError unless value is a non-negative int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise StreakContractError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise StreakContractError(f"{name} must be >= 0, got {value}")
