"""
MindMate — Session Store.

Holds the two session lists a view shows: today and upcoming. The bucket a
session sits in is decided by the scheduling service when the lists are
loaded; it is never recomputed here. A rescheduled session stays in its
bucket until the next load().

Mutations are applied only after the matching remote call succeeded.
Applying a mutation to an id that is no longer present is a no-op and
returns False: the store already reflects the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from mindmate.data.models import LEARNER, MENTOR, TODAY, UPCOMING, Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Today/upcoming session lists for one view."""

    def __init__(self) -> None:
        self._today: list[Session] = []
        self._upcoming: list[Session] = []

    @property
    def today_sessions(self) -> tuple[Session, ...]:
        return tuple(self._today)

    @property
    def upcoming_sessions(self) -> tuple[Session, ...]:
        return tuple(self._upcoming)

    def load(self, today: Iterable[Session], upcoming: Iterable[Session]) -> None:
        """Replace both lists wholesale."""
        self._today = list(today)
        self._upcoming = list(upcoming)
        logger.debug(
            "Loaded %d today / %d upcoming session(s)",
            len(self._today), len(self._upcoming),
        )

    def get(self, session_id: str) -> Session | None:
        for session in self._today + self._upcoming:
            if session.id == session_id:
                return session
        return None

    def bucket_of(self, session_id: str) -> str | None:
        if any(s.id == session_id for s in self._today):
            return TODAY
        if any(s.id == session_id for s in self._upcoming):
            return UPCOMING
        return None

    def apply_cancel(self, session_id: str) -> bool:
        """Remove the session from every bucket. False if it was not there."""
        before = len(self._today) + len(self._upcoming)
        self._today = [s for s in self._today if s.id != session_id]
        self._upcoming = [s for s in self._upcoming if s.id != session_id]
        removed = before - len(self._today) - len(self._upcoming)
        if not removed:
            logger.debug("Cancel for %s: not in store, nothing to remove", session_id)
        return bool(removed)

    def apply_reschedule(self, session_id: str, new_date: str, new_time: str) -> bool:
        """Update date/time in place. The session keeps its bucket."""
        found = False
        for bucket in (self._today, self._upcoming):
            for i, session in enumerate(bucket):
                if session.id == session_id:
                    bucket[i] = replace(session, date=new_date, time=new_time)
                    found = True
        if not found:
            logger.debug("Reschedule for %s: not in store, nothing to update", session_id)
        return found


def counterpart_name(session: Session, viewer_role: str) -> str:
    """Name of the other party, as shown in confirmation prompts."""
    if viewer_role == LEARNER:
        return session.mentor.name if session.mentor else ""
    if viewer_role == MENTOR and session.is_group:
        if session.group_name:
            return session.group_name
        return ", ".join(p.name for p in session.learners if p.name)
    return session.learner.name if session.learner else ""
