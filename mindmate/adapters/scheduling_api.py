"""Scheduling adapter — implements SchedulingPort via the MindMate API.

Mentors and learners hit the same operations under their own prefix
(/api/mentor/... or /api/learner/...). Reminders exist only for mentors.
A session action counts as successful only on HTTP 200.
"""

from __future__ import annotations

import logging

from mindmate.data.models import GROUP, MENTOR, ONE_ON_ONE, PersonRef, Session
from mindmate.integrations.mindmate_api import request_json
from mindmate.ports.scheduling_port import SchedulingError

logger = logging.getLogger(__name__)

_OK = (200,)


def _text(value: object) -> str:
    return "" if value is None else str(value)


def _optional_int(value: object) -> int | None:
    """A count the API may send as int, numeric string, blank or junk."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_person(data: dict | None) -> PersonRef | None:
    """Normalize an embedded mentor/learner object to a PersonRef."""
    if not isinstance(data, dict):
        return None
    return PersonRef(
        id=_text(data.get("id") or data.get("_id")),
        name=_text(data.get("name")),
        program=_text(data.get("program")),
        year_level=_text(data.get("yearLevel")),
        image=_text(data.get("image")),
    )


def parse_session(data: dict) -> Session:
    """Normalize an API session object to a Session."""
    session_type = data.get("sessionType") or ONE_ON_ONE
    if session_type not in (ONE_ON_ONE, GROUP):
        session_type = ONE_ON_ONE
    return Session(
        id=_text(data.get("id") or data.get("_id")),
        subject=_text(data.get("subject")),
        date=_text(data.get("date")),
        time=_text(data.get("time")),
        location=_text(data.get("location")),
        session_type=session_type,
        mentor=parse_person(data.get("mentor")),
        learner=parse_person(data.get("learner")),
        learners=[p for p in map(parse_person, data.get("learners") or []) if p],
        group_name=_text(data.get("groupName")),
        max_participants=_optional_int(data.get("maxParticipants")),
    )


class HttpSchedulingAdapter:
    """MindMate API implementation of SchedulingPort."""

    def __init__(self, role: str = MENTOR) -> None:
        self.role = role

    async def list_sessions(self) -> tuple[list[Session], list[Session]]:
        data = await request_json(
            "GET", f"/api/{self.role}/schedules", error_cls=SchedulingError,
        )
        # Mentor endpoint buckets the sessions; the learner one sends a plain list.
        if isinstance(data, dict):
            today_raw = data.get("todaySchedule") or []
            upcoming_raw = data.get("upcomingSchedule") or []
        elif isinstance(data, list):
            today_raw, upcoming_raw = data, []
        else:
            today_raw, upcoming_raw = [], []

        try:
            today = [parse_session(s) for s in today_raw]
            upcoming = [parse_session(s) for s in upcoming_raw]
        except (TypeError, ValueError, AttributeError) as exc:
            raise SchedulingError(f"Malformed schedule list: {exc}") from exc

        logger.info(
            "Fetched %d today / %d upcoming session(s) for %s",
            len(today), len(upcoming), self.role,
        )
        return today, upcoming

    async def send_reminder(self, session_id: str) -> None:
        if self.role != MENTOR:
            raise SchedulingError("Reminders can only be sent by mentors.")
        await request_json(
            "POST", f"/api/mentor/remind-sched/{session_id}",
            error_cls=SchedulingError, json={}, expected=_OK,
        )

    async def reschedule(self, session_id: str, new_date: str, new_time: str) -> None:
        await request_json(
            "POST", f"/api/{self.role}/resched-sched/{session_id}",
            error_cls=SchedulingError,
            json={"date": new_date, "time": new_time},
            expected=_OK,
        )

    async def cancel(self, session_id: str) -> None:
        await request_json(
            "POST", f"/api/{self.role}/cancel-sched/{session_id}",
            error_cls=SchedulingError, json={}, expected=_OK,
        )
