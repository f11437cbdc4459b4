"""Preset-schedule port — recurring weekly templates scoped to a mentor.

Core modules depend on this protocol, never on a specific transport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from mindmate.ports.errors import RemoteFailure

if TYPE_CHECKING:
    from mindmate.core.preset_manager import PresetScheduleDraft
    from mindmate.data.models import PresetSchedule


class PresetScheduleError(RemoteFailure):
    """Raised when any preset-schedule service operation fails."""


class PresetSchedulePort(Protocol):
    """Abstract preset-schedule interface used by core modules."""

    async def list_presets(self) -> list[PresetSchedule]: ...

    async def create_preset(
        self, draft: PresetScheduleDraft
    ) -> PresetSchedule | None:
        """Return the created template, or None if the service sent no body."""
        ...

    async def update_preset(
        self, preset_id: str, draft: PresetScheduleDraft
    ) -> PresetSchedule | None:
        """Return the updated template, or None if the service sent no body."""
        ...

    async def delete_preset(self, preset_id: str) -> None: ...

    async def join_preset(self, preset_id: str) -> None: ...

    async def leave_preset(self, preset_id: str) -> None: ...
