"""Scheduling port — abstract interface for session operations.

Core modules depend on this protocol, never on a specific transport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from mindmate.ports.errors import RemoteFailure

if TYPE_CHECKING:
    from mindmate.data.models import Session


class SchedulingError(RemoteFailure):
    """Raised when any scheduling service operation fails."""


class SchedulingPort(Protocol):
    """Abstract scheduling interface used by core modules."""

    async def list_sessions(self) -> tuple[list[Session], list[Session]]:
        """Return (today, upcoming) as bucketed by the service."""
        ...

    async def send_reminder(self, session_id: str) -> None: ...

    async def reschedule(
        self, session_id: str, new_date: str, new_time: str
    ) -> None: ...

    async def cancel(self, session_id: str) -> None: ...
