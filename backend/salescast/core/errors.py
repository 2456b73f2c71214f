"""Exceptions raised by the analytical services.

Both derive from ``ValueError`` so callers that only care about "bad input"
can keep catching that.
"""

from __future__ import annotations


class InvalidParameterError(ValueError):
    """A forecast parameter is outside the range the models accept."""

    def __init__(self, name: str, value: object, requirement: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be {requirement} (got {value!r})")


class InsufficientDataError(ValueError):
    """The supplied history is shorter than an operation requires."""

    def __init__(self, minimum: int, available: int, what: str = "forecast") -> None:
        self.minimum = minimum
        self.available = available
        super().__init__(
            f"Not enough data to {what}: need at least {minimum} data points, got {available}."
        )
