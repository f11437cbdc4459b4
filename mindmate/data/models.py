"""
MindMate — Data Models.

Plain records shared by the core and the adapters. Sessions and preset
schedules are owned by the remote API; these are the client-side copies
held for the lifetime of one page/view.
"""

from __future__ import annotations

from dataclasses import dataclass, field

MENTOR = "mentor"
LEARNER = "learner"

ONE_ON_ONE = "one-on-one"
GROUP = "group"

TODAY = "today"
UPCOMING = "upcoming"


@dataclass
class PersonRef:
    """A reference to a mentor or learner as embedded in a session.

    Not an owned copy of the person, just enough to display a name.
    """

    id: str
    name: str = ""
    program: str = ""
    year_level: str = ""
    image: str = ""


@dataclass
class CanonicalUser:
    """One reconciled person, built from a mentor and/or learner profile."""

    key: str
    role: str              # declared primary role: "mentor" | "learner"
    profile_type: str      # source list of the winning record
    name: str = ""
    email: str = ""
    program: str = ""
    year_level: str = ""
    phone_number: str = ""
    address: str = ""
    sex: str = ""
    role_id: str = ""
    second_role: str | None = None
    student_id: str = ""


@dataclass
class Session:
    """One scheduled meeting instance.

    `id` is assigned by the API and never changes. Only `date` and `time`
    are mutated locally, and only after a successful reschedule.
    """

    id: str
    subject: str
    date: str              # ISO format YYYY-MM-DD
    time: str              # HH:MM in 24h format
    location: str = ""
    session_type: str = ONE_ON_ONE
    mentor: PersonRef | None = None
    learner: PersonRef | None = None
    learners: list[PersonRef] = field(default_factory=list)
    group_name: str = ""
    max_participants: int | None = None

    @property
    def is_group(self) -> bool:
        return self.session_type == GROUP


@dataclass
class PresetSchedule:
    """A recurring weekly session template owned by one mentor."""

    id: str
    mentor: str                       # owner id, immutable
    days: list[str]                   # weekday tokens, e.g. ["monday", "thursday"]
    time: str                         # HH:MM applied to every selected day
    subject: str
    specialization: str
    course: str = "BSIT"
    mentor_name: str = ""
    participants: list[str] = field(default_factory=list)  # learner ids, server-owned
    created_at: str = ""
    updated_at: str = ""
