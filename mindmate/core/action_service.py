"""
MindMate — UI-Agnostic Action Service.

Coordinates every mutating user action against the remote services:
send a reminder, reschedule or cancel a session, and create, update,
delete, join or leave a preset schedule.

Each action runs the same three phases:
    1. validate locally; invalid input never reaches the network
    2. make exactly one remote call (no retries)
    3. on success apply the local mutation; on failure leave state as is

Whatever the outcome, the target id is released from the in-flight set,
so a second action on the same id can run once the first has finished.
A confirmed prompt is closed on every outcome, BUSY included, unless a
newer prompt has replaced it in the meantime.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING

from mindmate.core.errors import ValidationError
from mindmate.core.responses import (
    ActionType,
    ConfirmPromptResponse,
    Err,
    Ok,
    PendingAction,
    ResponseKind,
    ServiceResponse,
)
from mindmate.core.session_store import SessionStore, counterpart_name
from mindmate.data.models import LEARNER, MENTOR
from mindmate.ports.errors import RemoteFailure

if TYPE_CHECKING:
    from mindmate.core.preset_manager import PresetScheduleDraft, PresetScheduleManager
    from mindmate.ports.preset_port import PresetSchedulePort
    from mindmate.ports.scheduling_port import SchedulingPort

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^\d{1,2}:\d{2}$")


def _validation_error(exc: ValidationError) -> Err:
    return Err(kind=ResponseKind.VALIDATION_ERROR, message=str(exc), error=exc)


def _busy(target: str) -> Err:
    return Err(
        kind=ResponseKind.BUSY,
        message=f"An action on {target} is already in progress. Please wait.",
    )


def validate_date_time(new_date: str, new_time: str) -> tuple[str, str]:
    """Return stripped (date, time) or raise ValidationError."""
    new_date = (new_date or "").strip()
    new_time = (new_time or "").strip()
    if not new_date or not new_time:
        raise ValidationError("Please pick both a date and a time.")
    try:
        datetime.strptime(new_date, "%Y-%m-%d")
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {new_date}. Use YYYY-MM-DD.") from exc
    if not _TIME_RE.match(new_time):
        raise ValidationError(f"Invalid time: {new_time}. Use HH:MM (e.g. 15:30).")
    hours, minutes = (int(p) for p in new_time.split(":"))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time: {new_time}. Use HH:MM (e.g. 15:30).")
    return new_date, f"{hours:02d}:{minutes:02d}"


class ActionService:
    """Runs user actions for one view and keeps its local state consistent.

    Returns response objects and never raises for validation or remote
    failures.
    """

    def __init__(
        self,
        scheduling: SchedulingPort,
        store: SessionStore | None = None,
        presets: PresetScheduleManager | None = None,
        enrollment: PresetSchedulePort | None = None,
        viewer_role: str = MENTOR,
    ) -> None:
        self._scheduling = scheduling
        self.store = store or SessionStore()
        self.presets = presets
        self._enrollment = enrollment
        self.viewer_role = viewer_role
        self.pending: PendingAction | None = None
        self._in_flight: set[str] = set()

    # ------------------------------------------------------------------
    # In-flight bookkeeping
    # ------------------------------------------------------------------

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    def _acquire(self, key: str) -> bool:
        if key in self._in_flight:
            logger.info("Rejected duplicate action on %s", key)
            return False
        self._in_flight.add(key)
        return True

    def _release(self, key: str) -> None:
        self._in_flight.discard(key)

    # ------------------------------------------------------------------
    # Public: load
    # ------------------------------------------------------------------

    async def load_sessions(self) -> ServiceResponse:
        """Fetch today/upcoming lists and replace the store's contents."""
        try:
            today, upcoming = await self._scheduling.list_sessions()
        except RemoteFailure as exc:
            logger.error("Error fetching schedules: %s", exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message="Couldn't fetch your sessions. Please try again later.",
                error=exc,
            )
        self.store.load(today, upcoming)
        return Ok(
            kind=ResponseKind.SUCCESS,
            message="",
            value=(self.store.today_sessions, self.store.upcoming_sessions),
        )

    # ------------------------------------------------------------------
    # Public: confirmation prompts
    # ------------------------------------------------------------------

    def _session_prompt(
        self, action: ActionType, session_id: str,
        new_date: str | None = None, new_time: str | None = None,
    ) -> ServiceResponse:
        session = self.store.get(session_id)
        if session is None:
            return _validation_error(ValidationError("Session not found."))

        self.pending = PendingAction(
            action=action,
            target_id=session_id,
            subject=session.subject,
            counterpart_name=counterpart_name(session, self.viewer_role),
            new_date=new_date,
            new_time=new_time,
        )
        who = self.pending.counterpart_name or "your counterpart"
        if action is ActionType.REMIND:
            question = f"Send a reminder to {who} about {session.subject}?"
        elif action is ActionType.CANCEL:
            question = f"Cancel {session.subject} with {who}?"
        else:
            question = f"Move {session.subject} with {who} to {new_date} at {new_time}?"
        return ConfirmPromptResponse(
            kind=ResponseKind.CONFIRM_PROMPT, message=question, pending=self.pending,
        )

    def request_remind(self, session_id: str) -> ServiceResponse:
        return self._session_prompt(ActionType.REMIND, session_id)

    def request_cancel(self, session_id: str) -> ServiceResponse:
        return self._session_prompt(ActionType.CANCEL, session_id)

    def request_reschedule(
        self, session_id: str, new_date: str, new_time: str,
    ) -> ServiceResponse:
        try:
            new_date, new_time = validate_date_time(new_date, new_time)
        except ValidationError as exc:
            return _validation_error(exc)
        return self._session_prompt(ActionType.RESCHEDULE, session_id, new_date, new_time)

    def request_delete_preset(self, preset_id: str) -> ServiceResponse:
        schedule = self.presets.get(preset_id) if self.presets else None
        if schedule is None:
            return _validation_error(ValidationError("Preset schedule not found."))

        self.pending = PendingAction(
            action=ActionType.DELETE_PRESET,
            target_id=preset_id,
            subject=schedule.subject,
        )
        message = f"Delete the {schedule.subject} preset schedule?"
        if schedule.participants:
            message += (
                f"\n⚠️ This schedule has {len(schedule.participants)} "
                "enrolled participant(s). They will be removed."
            )
        return ConfirmPromptResponse(
            kind=ResponseKind.CONFIRM_PROMPT, message=message, pending=self.pending,
        )

    async def confirm(self, pending: PendingAction | None = None) -> ServiceResponse:
        """Run the action behind the current (or given) confirmation prompt."""
        pending = pending or self.pending
        if pending is None:
            return _validation_error(ValidationError("Nothing to confirm."))

        try:
            return await self._dispatch(pending)
        finally:
            # Only close this prompt; another one may have been opened meanwhile.
            if self.pending is pending:
                self.pending = None

    async def _dispatch(self, pending: PendingAction) -> ServiceResponse:
        if pending.action is ActionType.REMIND:
            return await self.send_reminder(pending.target_id)
        if pending.action is ActionType.CANCEL:
            return await self.cancel_session(pending.target_id)
        if pending.action is ActionType.RESCHEDULE:
            return await self.reschedule_session(
                pending.target_id, pending.new_date or "", pending.new_time or "",
            )
        if pending.action is ActionType.DELETE_PRESET:
            return await self.delete_preset(pending.target_id)
        return _validation_error(ValidationError(f"Cannot confirm {pending.action.value}."))

    def dismiss(self) -> ServiceResponse:
        """Close the confirmation prompt without doing anything."""
        self.pending = None
        return Ok(kind=ResponseKind.DISMISSED, message="")

    # ------------------------------------------------------------------
    # Public: session actions
    # ------------------------------------------------------------------

    async def send_reminder(self, session_id: str) -> ServiceResponse:
        if self.viewer_role != MENTOR:
            return _validation_error(ValidationError("Only mentors can send reminders."))
        if not session_id:
            return _validation_error(ValidationError("Missing session id."))

        key = f"session:{session_id}"
        if not self._acquire(key):
            return _busy("this session")
        try:
            await self._scheduling.send_reminder(session_id)
        except RemoteFailure as exc:
            logger.error("Error sending reminder for %s: %s", session_id, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message="Failed to send reminder. Please try again.",
                error=exc,
            )
        finally:
            self._release(key)

        logger.info("Reminder sent for session %s", session_id)
        return Ok(kind=ResponseKind.SUCCESS, message="Reminder sent successfully!")

    async def cancel_session(self, session_id: str) -> ServiceResponse:
        if not session_id:
            return _validation_error(ValidationError("Missing session id."))

        key = f"session:{session_id}"
        if not self._acquire(key):
            return _busy("this session")
        try:
            await self._scheduling.cancel(session_id)
            if not self.store.apply_cancel(session_id):
                logger.info("Session %s already removed locally", session_id)
        except RemoteFailure as exc:
            logger.error("Error cancelling session %s: %s", session_id, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message="Failed to cancel session. Please try again.",
                error=exc,
            )
        finally:
            self._release(key)

        logger.info("Session %s cancelled", session_id)
        return Ok(kind=ResponseKind.SUCCESS, message="Session cancelled successfully!")

    async def reschedule_session(
        self, session_id: str, new_date: str, new_time: str,
    ) -> ServiceResponse:
        try:
            if not session_id:
                raise ValidationError("Missing session id.")
            new_date, new_time = validate_date_time(new_date, new_time)
        except ValidationError as exc:
            return _validation_error(exc)

        key = f"session:{session_id}"
        if not self._acquire(key):
            return _busy("this session")
        try:
            await self._scheduling.reschedule(session_id, new_date, new_time)
            if not self.store.apply_reschedule(session_id, new_date, new_time):
                logger.info("Session %s not in store; nothing to update", session_id)
        except RemoteFailure as exc:
            logger.error("Error rescheduling session %s: %s", session_id, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message="Failed to reschedule session. Please try again.",
                error=exc,
            )
        finally:
            self._release(key)

        logger.info("Session %s rescheduled to %s %s", session_id, new_date, new_time)
        return Ok(
            kind=ResponseKind.SUCCESS,
            message=f"Session rescheduled to {new_date} at {new_time}!",
            value=self.store.get(session_id),
        )

    # ------------------------------------------------------------------
    # Public: preset schedule actions (mentor)
    # ------------------------------------------------------------------

    def _require_presets(self) -> PresetScheduleManager:
        if self.presets is None:
            raise ValidationError("Preset schedules are not available in this view.")
        return self.presets

    async def _run_preset(self, key: str, operation) -> ServiceResponse:
        if not self._acquire(key):
            return _busy("this preset schedule")
        try:
            return await operation()
        finally:
            self._release(key)

    async def create_preset(self, draft: PresetScheduleDraft) -> ServiceResponse:
        try:
            manager = self._require_presets()
        except ValidationError as exc:
            return _validation_error(exc)
        # One create at a time per mentor, so two quick clicks can't pass the cap.
        return await self._run_preset(
            f"preset:create:{manager.mentor_id}", lambda: manager.create(draft),
        )

    async def update_preset(
        self, preset_id: str, draft: PresetScheduleDraft,
    ) -> ServiceResponse:
        try:
            manager = self._require_presets()
        except ValidationError as exc:
            return _validation_error(exc)
        return await self._run_preset(
            f"preset:{preset_id}", lambda: manager.update(preset_id, draft),
        )

    async def delete_preset(self, preset_id: str) -> ServiceResponse:
        try:
            manager = self._require_presets()
        except ValidationError as exc:
            return _validation_error(exc)
        return await self._run_preset(
            f"preset:{preset_id}", lambda: manager.delete(preset_id),
        )

    # ------------------------------------------------------------------
    # Public: preset enrollment (learner)
    # ------------------------------------------------------------------

    async def _enroll(self, action: ActionType, preset_id: str) -> ServiceResponse:
        if self.viewer_role != LEARNER:
            return _validation_error(ValidationError("Only learners can join group sessions."))
        if self._enrollment is None or not preset_id:
            return _validation_error(ValidationError("Preset schedule not found."))

        key = f"preset:{preset_id}"
        if not self._acquire(key):
            return _busy("this group session")
        try:
            if action is ActionType.JOIN_PRESET:
                await self._enrollment.join_preset(preset_id)
            else:
                await self._enrollment.leave_preset(preset_id)
        except RemoteFailure as exc:
            verb = "join" if action is ActionType.JOIN_PRESET else "leave"
            logger.error("Error trying to %s preset %s: %s", verb, preset_id, exc)
            return Err(
                kind=ResponseKind.REMOTE_FAILURE,
                message=str(exc) or f"Failed to {verb} group session",
                error=exc,
            )
        finally:
            self._release(key)

        if action is ActionType.JOIN_PRESET:
            return Ok(kind=ResponseKind.SUCCESS, message="Successfully joined the group session!")
        return Ok(kind=ResponseKind.SUCCESS, message="Successfully left the group session")

    async def join_preset(self, preset_id: str) -> ServiceResponse:
        return await self._enroll(ActionType.JOIN_PRESET, preset_id)

    async def leave_preset(self, preset_id: str) -> ServiceResponse:
        return await self._enroll(ActionType.LEAVE_PRESET, preset_id)
