from typing import Optional


class HarnessError(Exception):
    """Base class for failures raised while driving the translator UI."""


class PreconditionFailure(HarnessError, RuntimeError):
    """A required element was not visible or writable before interaction."""

    def __init__(self, message: str, locator: Optional[str] = None):
        super().__init__(message)
        self.locator = locator


class TransientReadFailure(HarnessError):
    """A single poll read timed out or errored. Recovered inside the waiter."""

    def __init__(self, attempt: int, cause: BaseException):
        super().__init__(f"read failed on attempt {attempt}: {cause}")
        self.attempt = attempt
        self.cause = cause


class TimeoutFailure(HarnessError, TimeoutError):
    """The output never settled on non-empty text within the wait budget."""

    def __init__(self, message: str, last_text: Optional[str], attempts: int):
        super().__init__(message)
        self.last_text = last_text
        self.attempts = attempts


class AssertionMismatch(HarnessError, AssertionError):
    def __init__(self, kind: str, expected: str, actual: Optional[str]):
        super().__init__(
            f"Expected output to {kind.replace('_', ' ')} {expected!r}, got {actual!r}"
        )
        self.kind = kind
        self.expected = expected
        self.actual = actual
