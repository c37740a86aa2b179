"""Input validation errors for capaplan.

Only malformed input is raised. Infeasibility (no room, not enough to defer,
overlaps) is always returned as data in the result models.
"""

from typing import Optional


class SchedulingInputError(ValueError):
    """Structured input error that can be surfaced as a 400."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidFormat(SchedulingInputError):
    """A clock-time string (or minute offset) could not be interpreted."""


class InvalidDuration(SchedulingInputError):
    """A duration was zero, negative or otherwise unusable."""
