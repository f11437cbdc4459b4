"""
MindMate — Identity Reconciler.

The admin dashboard reads two independently-sourced person lists: mentor
profiles and learner profiles. One human may appear in both. This module
collapses them into one CanonicalUser per person.

Merge rule: records are keyed by userId, then roleId, then email (first
non-empty wins). When two records share a key, a record acting in its
native role (declared role == the list it came from) replaces a stored
record that is not; in every other case the first one seen is kept.
Mentor records are processed before learner records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from mindmate.data.models import LEARNER, MENTOR, CanonicalUser

if TYPE_CHECKING:
    from mindmate.ports.directory_port import DirectoryPort

logger = logging.getLogger(__name__)


class PersonRecord(BaseModel):
    """Raw person record as returned by the directory service.

    JSON example:
    {
        "userId": "u1",
        "roleId": 7,
        "email": "ana@school.edu",
        "role": "mentor",
        "name": "Ana",
        "program": "BSIT",
        "yearLevel": "3rd Year"
    }
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: Any = Field(default=None, alias="userId")
    role_id: Any = Field(default=None, alias="roleId")
    email: Any = None
    role: Any = None
    name: Any = None
    program: Any = None
    year_level: Any = Field(default=None, alias="yearLevel")
    phone_number: Any = Field(default=None, alias="phoneNumber")
    address: Any = None
    sex: Any = None
    second_role: Any = Field(default=None, alias="secondRole")
    student_id: Any = Field(default=None, alias="studentId")


@dataclass(frozen=True)
class MentorSourced:
    record: PersonRecord
    profile_type: str = MENTOR


@dataclass(frozen=True)
class LearnerSourced:
    record: PersonRecord
    profile_type: str = LEARNER


Sourced = MentorSourced | LearnerSourced


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def identity_key(record: PersonRecord) -> str | None:
    """Return the first non-empty of userId, roleId, email — or None."""
    for candidate in (record.user_id, record.role_id, record.email):
        if candidate:
            return str(candidate)
    return None


def acts_in_native_role(entry: Sourced) -> bool:
    """True when the record's declared role matches the list it came from."""
    return entry.record.role == entry.profile_type


def _tag(
    mentor_records: Iterable[dict | PersonRecord],
    learner_records: Iterable[dict | PersonRecord],
) -> list[Sourced]:
    tagged: list[Sourced] = []
    for raw in mentor_records:
        tagged.append(MentorSourced(_parse(raw)))
    for raw in learner_records:
        tagged.append(LearnerSourced(_parse(raw)))
    return tagged


def _parse(raw: dict | PersonRecord) -> PersonRecord:
    if isinstance(raw, PersonRecord):
        return raw
    return PersonRecord.model_validate(raw)


def _project(key: str, entry: Sourced) -> CanonicalUser:
    rec = entry.record
    return CanonicalUser(
        key=key,
        role=_text(rec.role),
        profile_type=entry.profile_type,
        name=_text(rec.name),
        email=_text(rec.email),
        program=_text(rec.program),
        year_level=_text(rec.year_level),
        phone_number=_text(rec.phone_number),
        address=_text(rec.address),
        sex=_text(rec.sex),
        role_id=_text(rec.role_id),
        second_role=rec.second_role if rec.second_role else None,
        student_id=_text(rec.student_id),
    )


def reconcile(
    mentor_records: Iterable[dict | PersonRecord],
    learner_records: Iterable[dict | PersonRecord],
) -> list[CanonicalUser]:
    """Merge mentor- and learner-sourced records into canonical users.

    Output order follows the first appearance of each key. The function is
    pure: the same inputs in the same order always give the same output.
    """
    by_key: dict[str, Sourced] = {}
    keyless = 0

    for entry in _tag(mentor_records, learner_records):
        key = identity_key(entry.record)
        if key is None:
            # No identity fields at all: keep it on its own rather than
            # collapsing every such record into one.
            key = f"{entry.profile_type}:anonymous:{keyless}"
            keyless += 1
            logger.warning("Directory record without userId/roleId/email: %s", key)

        existing = by_key.get(key)
        if existing is None:
            by_key[key] = entry
            continue

        if acts_in_native_role(entry) and not acts_in_native_role(existing):
            logger.debug(
                "Key %s: %s profile replaces %s profile", key,
                entry.profile_type, existing.profile_type,
            )
            by_key[key] = entry

    return [_project(key, entry) for key, entry in by_key.items()]


async def load_directory(directory: DirectoryPort) -> list[CanonicalUser]:
    """Fetch both profile lists and reconcile them (admin dashboard load).

    Raises DirectoryError if either list cannot be fetched.
    """
    mentors = await directory.list_mentors()
    learners = await directory.list_learners()
    users = reconcile(mentors, learners)
    logger.info(
        "Reconciled %d mentor + %d learner record(s) into %d user(s)",
        len(mentors), len(learners), len(users),
    )
    return users
