"""
MindMate — Preset Schedule Manager.

A mentor may publish up to three recurring weekly templates ("preset
schedules") that learners can join. This manager keeps the mentor's
templates for the lifetime of the view and mirrors create/update/delete
against the preset-schedule service.

Capacity and field checks always run before any network call, so a
rejected draft and a failed remote call both leave local state unchanged.
Participants are owned by the service and only ever refreshed by list().
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from pydantic import BaseModel, field_validator

from mindmate.core.errors import CapacityExceeded, ValidationError
from mindmate.core.responses import Err, Ok, ResponseKind
from mindmate.ports.errors import RemoteFailure

if TYPE_CHECKING:
    from mindmate.data.models import PresetSchedule
    from mindmate.ports.preset_port import PresetSchedulePort

logger = logging.getLogger(__name__)

MAX_PRESET_SCHEDULES = 3

WEEKDAYS = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)
COURSES = ("BSIT", "BSCS", "BSEMC")


class PresetScheduleDraft(BaseModel):
    """Editable fields of a preset schedule, as sent to the service.

    JSON example:
    {
        "days": ["monday", "thursday"],
        "time": "15:00",
        "subject": "Algebra",
        "specialization": "math",
        "course": "BSIT"
    }
    """
    days: list[str] = []
    time: str = ""
    subject: str = ""
    specialization: str = ""
    course: str = "BSIT"

    @field_validator("days", mode="before")
    @classmethod
    def normalize_days(cls, v: list[str] | None) -> list[str]:
        """Lower-case, drop duplicates, and sort known weekdays in week order."""
        if not v:
            return []
        seen: list[str] = []
        for token in v:
            token = str(token).strip().lower()
            if token and token not in seen:
                seen.append(token)
        known = [d for d in WEEKDAYS if d in seen]
        unknown = [d for d in seen if d not in WEEKDAYS]
        return known + unknown

    @field_validator("time", "subject", "specialization", mode="before")
    @classmethod
    def strip_text(cls, v: str | None) -> str:
        return (v or "").strip()


def validate_draft(draft: PresetScheduleDraft) -> None:
    """Raise ValidationError unless every required field is filled in."""
    missing = [
        name
        for name, value in (
            ("days", draft.days),
            ("time", draft.time),
            ("subject", draft.subject),
            ("specialization", draft.specialization),
        )
        if not value
    ]
    if missing:
        raise ValidationError(
            f"Please fill in all required fields (missing: {', '.join(missing)})"
        )

    unknown = [d for d in draft.days if d not in WEEKDAYS]
    if unknown:
        raise ValidationError(f"Unknown day(s): {', '.join(unknown)}")

    if draft.course not in COURSES:
        raise ValidationError(f"Unknown course: {draft.course}")


class PresetScheduleManager:
    """One mentor's preset schedules, mirrored from the service."""

    def __init__(
        self,
        presets: PresetSchedulePort,
        mentor_id: str = "",
        limit: int = MAX_PRESET_SCHEDULES,
    ) -> None:
        self._presets = presets
        self.mentor_id = mentor_id
        self.limit = limit
        self._schedules: list[PresetSchedule] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def schedules(self) -> tuple[PresetSchedule, ...]:
        return tuple(self._schedules)

    def get(self, preset_id: str) -> PresetSchedule | None:
        for schedule in self._schedules:
            if schedule.id == preset_id:
                return schedule
        return None

    @property
    def at_capacity(self) -> bool:
        return len(self._schedules) >= self.limit

    @property
    def remaining_slots(self) -> int:
        return max(self.limit - len(self._schedules), 0)

    @property
    def total_participants(self) -> int:
        return sum(len(s.participants) for s in self._schedules)

    @property
    def average_participants(self) -> float:
        if not self._schedules:
            return 0.0
        return round(self.total_participants / len(self._schedules), 1)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def list(self) -> Ok | Err:
        """Fetch the templates and replace local state wholesale."""
        try:
            fetched = await self._presets.list_presets()
        except RemoteFailure as exc:
            logger.error("Failed to fetch preset schedules: %s", exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message="Failed to fetch preset schedules",
                error=exc,
            )

        self._schedules = list(fetched)
        logger.info("Loaded %d preset schedule(s) for mentor %s", len(fetched), self.mentor_id)
        return Ok(kind=ResponseKind.SUCCESS, message="", value=self.schedules)

    async def create(self, draft: PresetScheduleDraft) -> Ok | Err:
        try:
            if self.at_capacity:
                raise CapacityExceeded(self.limit)
            validate_draft(draft)
        except ValidationError as exc:
            return Err(kind=ResponseKind.VALIDATION_ERROR, message=str(exc), error=exc)

        try:
            created = await self._presets.create_preset(draft)
        except RemoteFailure as exc:
            logger.error("Failed to create preset schedule '%s': %s", draft.subject, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message=str(exc) or "Failed to create preset schedule",
                error=exc,
            )

        if created is None:
            # Service acknowledged without a body; the list is authoritative.
            refreshed = await self.list()
            if isinstance(refreshed, Err):
                return Ok(
                    kind=ResponseKind.SUCCESS,
                    message="Preset schedule created. Reload to see it.",
                )
            logger.info("Preset schedule '%s' created (refetched)", draft.subject)
            return Ok(kind=ResponseKind.SUCCESS, message="Preset schedule created successfully")

        self._schedules.append(created)
        logger.info("Preset schedule %s created: %s", created.id, created.subject)
        return Ok(
            kind=ResponseKind.SUCCESS,
            message="Preset schedule created successfully",
            value=created,
        )

    async def update(self, preset_id: str, draft: PresetScheduleDraft) -> Ok | Err:
        try:
            if self.get(preset_id) is None:
                raise ValidationError("Preset schedule not found")
            validate_draft(draft)
        except ValidationError as exc:
            return Err(kind=ResponseKind.VALIDATION_ERROR, message=str(exc), error=exc)

        try:
            updated = await self._presets.update_preset(preset_id, draft)
        except RemoteFailure as exc:
            logger.error("Failed to update preset schedule %s: %s", preset_id, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message=str(exc) or "Failed to update preset schedule",
                error=exc,
            )

        current = self.get(preset_id)
        if current is None:
            logger.debug("Preset %s vanished before update was applied", preset_id)
            return Ok(kind=ResponseKind.SUCCESS, message="Preset schedule updated successfully")

        if updated is None:
            updated = replace(
                current,
                days=list(draft.days),
                time=draft.time,
                subject=draft.subject,
                specialization=draft.specialization,
                course=draft.course,
            )
        # Participants only change through list().
        updated = replace(updated, participants=list(current.participants))

        self._schedules = [updated if s.id == preset_id else s for s in self._schedules]
        logger.info("Preset schedule %s updated", preset_id)
        return Ok(
            kind=ResponseKind.SUCCESS,
            message="Preset schedule updated successfully",
            value=updated,
        )

    async def delete(self, preset_id: str) -> Ok | Err:
        try:
            await self._presets.delete_preset(preset_id)
        except RemoteFailure as exc:
            logger.error("Failed to delete preset schedule %s: %s", preset_id, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message=str(exc) or "Failed to delete preset schedule",
                error=exc,
            )

        before = len(self._schedules)
        self._schedules = [s for s in self._schedules if s.id != preset_id]
        if len(self._schedules) == before:
            logger.debug("Preset %s already gone locally", preset_id)
        else:
            logger.info("Preset schedule %s deleted", preset_id)
        return Ok(kind=ResponseKind.SUCCESS, message="Preset schedule deleted successfully")
