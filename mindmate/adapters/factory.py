"""Adapter factory — builds the HTTP adapters from config."""

from __future__ import annotations

from mindmate.adapters.directory_api import HttpDirectoryAdapter
from mindmate.adapters.preset_api import HttpPresetScheduleAdapter
from mindmate.adapters.scheduling_api import HttpSchedulingAdapter
from mindmate.config import settings
from mindmate.core.action_service import ActionService
from mindmate.core.preset_manager import PresetScheduleManager
from mindmate.data.models import MENTOR


def create_directory_adapter() -> HttpDirectoryAdapter:
    return HttpDirectoryAdapter()


def create_action_service(role: str | None = None, mentor_id: str = "") -> ActionService:
    """Return an ActionService wired to the MindMate API for one view.

    Args:
        role: "mentor" or "learner"; defaults to the VIEWER_ROLE setting.
        mentor_id: Owner of the preset schedules (mentor views only).
    """
    role = (role or settings.VIEWER_ROLE).lower()
    if role not in ("mentor", "learner"):
        raise ValueError(f"Unknown viewer role: {role!r}")

    preset_adapter = HttpPresetScheduleAdapter()
    presets = PresetScheduleManager(preset_adapter, mentor_id=mentor_id) if role == MENTOR else None
    return ActionService(
        scheduling=HttpSchedulingAdapter(role=role),
        presets=presets,
        enrollment=preset_adapter,
        viewer_role=role,
    )
