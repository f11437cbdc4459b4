"""Local precondition errors — raised before any remote call is made."""

from __future__ import annotations


class ValidationError(Exception):
    """A local precondition failed. Never reaches the remote service."""


class CapacityExceeded(ValidationError):
    """The mentor already holds the maximum number of preset schedules."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"You can only create a maximum of {limit} preset schedules")
        self.limit = limit
