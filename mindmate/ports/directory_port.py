"""Person-directory port — raw mentor and learner profile lists.

The identity reconciler depends on this protocol, never on the HTTP API.
"""

from __future__ import annotations

from typing import Protocol

from mindmate.ports.errors import RemoteFailure


class DirectoryError(RemoteFailure):
    """Raised when the person directory cannot be read."""


class DirectoryPort(Protocol):
    """Abstract person-directory interface used by core modules."""

    async def list_mentors(self) -> list[dict]: ...

    async def list_learners(self) -> list[dict]: ...
