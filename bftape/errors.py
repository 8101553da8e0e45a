from __future__ import annotations


class InterpreterError(RuntimeError):
    """Base class for failures raised by the tape machine itself."""


class MismatchedBracket(InterpreterError):
    """Raised when a loop boundary has no partner to jump to."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.message = message
        self.position = position


class MaxSizeExceeded(InterpreterError):
    """Raised when growing the tape would exceed its configured cell count."""

    def __init__(self, max_size: int) -> None:
        super().__init__(
            f"moving the pointer would grow the tape past its maximum size of {max_size} cells"
        )
        self.max_size = max_size


class RunFailed(Exception):
    """A run stopped on an error after ``steps`` successful steps."""

    def __init__(self, steps: int, error: BaseException) -> None:
        super().__init__(f"{error} (after {steps} steps)")
        self.steps = steps
        self.error = error


class StepLimitExceeded(RuntimeError):
    """Raised when an inspector session exceeds its configured step budget."""


__all__ = [
    "InterpreterError",
    "MaxSizeExceeded",
    "MismatchedBracket",
    "RunFailed",
    "StepLimitExceeded",
]
