"""Preset-schedule adapter — implements PresetSchedulePort via the MindMate API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mindmate.data.models import PresetSchedule
from mindmate.integrations.mindmate_api import request_json
from mindmate.ports.preset_port import PresetScheduleError

if TYPE_CHECKING:
    from mindmate.core.preset_manager import PresetScheduleDraft

logger = logging.getLogger(__name__)

_BASE = "/api/mentor/schedules/preset"


def _ref_id(value: object) -> str:
    """Participants and owners arrive either as ids or as populated objects."""
    if isinstance(value, dict):
        return str(value.get("_id") or value.get("id") or "")
    return "" if value is None else str(value)


def parse_preset(data: dict) -> PresetSchedule:
    """Normalize an API preset schedule object to a PresetSchedule."""
    mentor = data.get("mentor")
    mentor_name = data.get("mentorName") or ""
    if isinstance(mentor, dict) and not mentor_name:
        mentor_name = mentor.get("name") or ""
    return PresetSchedule(
        id=_ref_id(data.get("_id") or data.get("id")),
        mentor=_ref_id(mentor),
        mentor_name=str(mentor_name),
        days=[str(d).lower() for d in data.get("days") or []],
        time=str(data.get("time") or ""),
        subject=str(data.get("subject") or ""),
        specialization=str(data.get("specialization") or ""),
        course=str(data.get("course") or "BSIT"),
        participants=[p for p in map(_ref_id, data.get("participants") or []) if p],
        created_at=str(data.get("createdAt") or ""),
        updated_at=str(data.get("updatedAt") or ""),
    )


def _unwrap(data: object) -> PresetSchedule | None:
    """Pull a template out of a create/update response, if it carries one."""
    if not isinstance(data, dict):
        return None
    payload = data.get("presetSchedule") or data.get("schedule") or data
    if not isinstance(payload, dict) or not (payload.get("_id") or payload.get("id")):
        return None
    return parse_preset(payload)


class HttpPresetScheduleAdapter:
    """MindMate API implementation of PresetSchedulePort."""

    async def list_presets(self) -> list[PresetSchedule]:
        data = await request_json("GET", _BASE, error_cls=PresetScheduleError)
        raw = data.get("presetSchedules") if isinstance(data, dict) else data
        try:
            presets = [parse_preset(p) for p in raw or []]
        except (TypeError, AttributeError) as exc:
            raise PresetScheduleError(f"Malformed preset list: {exc}") from exc
        logger.info("Fetched %d preset schedule(s)", len(presets))
        return presets

    async def create_preset(self, draft: PresetScheduleDraft) -> PresetSchedule | None:
        data = await request_json(
            "POST", _BASE, error_cls=PresetScheduleError, json=draft.model_dump(),
        )
        return _unwrap(data)

    async def update_preset(
        self, preset_id: str, draft: PresetScheduleDraft,
    ) -> PresetSchedule | None:
        data = await request_json(
            "PATCH", f"{_BASE}/{preset_id}",
            error_cls=PresetScheduleError, json=draft.model_dump(),
        )
        return _unwrap(data)

    async def delete_preset(self, preset_id: str) -> None:
        await request_json("DELETE", f"{_BASE}/{preset_id}", error_cls=PresetScheduleError)

    async def join_preset(self, preset_id: str) -> None:
        await request_json(
            "POST", f"/api/learner/preset/join/{preset_id}", error_cls=PresetScheduleError,
        )

    async def leave_preset(self, preset_id: str) -> None:
        await request_json(
            "POST", f"/api/learner/preset/leave/{preset_id}", error_cls=PresetScheduleError,
        )
