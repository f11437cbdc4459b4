"""Tests for mindmate.core.identity — mentor/learner record merging."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from mindmate.core.identity import (
    LearnerSourced,
    MentorSourced,
    PersonRecord,
    acts_in_native_role,
    identity_key,
    load_directory,
    reconcile,
)


class TestIdentityKey:
    def test_user_id_wins(self):
        rec = PersonRecord(userId="u1", roleId=7, email="a@x.edu")
        assert identity_key(rec) == "u1"

    def test_falls_back_to_role_id(self):
        rec = PersonRecord(userId="", roleId=7, email="a@x.edu")
        assert identity_key(rec) == "7"

    def test_falls_back_to_email(self):
        rec = PersonRecord(email="a@x.edu")
        assert identity_key(rec) == "a@x.edu"

    def test_no_identity_fields(self):
        assert identity_key(PersonRecord(name="Ghost")) is None


class TestNativeRole:
    def test_mentor_record_acting_as_mentor(self):
        assert acts_in_native_role(MentorSourced(PersonRecord(role="mentor")))

    def test_learner_list_record_declaring_mentor(self):
        assert not acts_in_native_role(LearnerSourced(PersonRecord(role="mentor")))


class TestReconcile:
    def test_priority_native_role_kept_over_non_native(self):
        mentors = [{"role": "mentor", "userId": "k", "name": "From mentors"}]
        learners = [{"role": "mentor", "userId": "k", "name": "From learners"}]

        users = reconcile(mentors, learners)

        assert len(users) == 1
        assert users[0].profile_type == "mentor"
        assert users[0].name == "From mentors"

    def test_native_learner_replaces_non_native_mentor_record(self):
        mentors = [{"role": "learner", "userId": "k", "name": "Mentor copy"}]
        learners = [{"role": "learner", "userId": "k", "name": "Learner copy"}]

        users = reconcile(mentors, learners)

        assert len(users) == 1
        assert users[0].profile_type == "learner"
        assert users[0].name == "Learner copy"
        assert users[0].role == "learner"

    def test_tie_break_neither_native_first_seen_wins(self):
        mentors = [{"role": "learner", "userId": "k", "name": "Mentor-sourced"}]
        learners = [{"role": "mentor", "userId": "k", "name": "Learner-sourced"}]

        users = reconcile(mentors, learners)

        assert len(users) == 1
        assert users[0].profile_type == "mentor"
        assert users[0].name == "Mentor-sourced"

    def test_tie_break_both_native_first_seen_wins(self):
        mentors = [{"role": "mentor", "userId": "u1", "name": "A"}]
        learners = [{"role": "learner", "userId": "u1", "name": "A"}]

        users = reconcile(mentors, learners)

        assert len(users) == 1
        assert users[0].key == "u1"
        assert users[0].role == "mentor"
        assert users[0].profile_type == "mentor"

    def test_duplicates_within_one_list_collapse(self):
        mentors = [
            {"role": "mentor", "email": "a@x.edu", "name": "First"},
            {"role": "mentor", "email": "a@x.edu", "name": "Second"},
        ]
        users = reconcile(mentors, [])
        assert [u.name for u in users] == ["First"]

    def test_distinct_keys_all_survive_in_first_seen_order(self):
        mentors = [{"role": "mentor", "userId": "m1"}, {"role": "mentor", "userId": "m2"}]
        learners = [{"role": "learner", "userId": "l1"}, {"role": "learner", "userId": "m1"}]

        users = reconcile(mentors, learners)

        assert [u.key for u in users] == ["m1", "m2", "l1"]

    def test_idempotent(self):
        mentors = [
            {"role": "learner", "userId": "a"},
            {"role": "mentor", "roleId": 3, "name": "Rita"},
        ]
        learners = [
            {"role": "learner", "userId": "a", "name": "Ann"},
            {"role": "mentor", "roleId": 3},
            {"role": "learner", "email": "z@x.edu"},
        ]

        assert reconcile(mentors, learners) == reconcile(mentors, learners)

    def test_keyless_records_are_not_merged(self):
        users = reconcile([{"role": "mentor", "name": "X"}], [{"role": "learner", "name": "Y"}])
        assert [u.name for u in users] == ["X", "Y"]

    def test_projects_display_attributes(self):
        mentors = [{
            "role": "mentor",
            "userId": "u9",
            "roleId": 12,
            "name": "Dana",
            "email": "dana@x.edu",
            "program": "BSCS",
            "yearLevel": "3rd Year",
            "phoneNumber": "0917",
            "address": "Cebu",
            "sex": "female",
            "secondRole": "learner",
            "studentId": "2021-001",
            "bio": "ignored",
        }]

        user = reconcile(mentors, [])[0]

        assert user.key == "u9"
        assert user.role_id == "12"
        assert user.program == "BSCS"
        assert user.year_level == "3rd Year"
        assert user.phone_number == "0917"
        assert user.address == "Cebu"
        assert user.sex == "female"
        assert user.second_role == "learner"
        assert user.student_id == "2021-001"
        assert not hasattr(user, "bio")


class TestLoadDirectory:
    @pytest.mark.asyncio
    async def test_fetches_both_lists_and_reconciles(self):
        directory = MagicMock()
        directory.list_mentors = AsyncMock(return_value=[{"role": "mentor", "userId": "u1"}])
        directory.list_learners = AsyncMock(return_value=[
            {"role": "learner", "userId": "u1"},
            {"role": "learner", "userId": "u2"},
        ])

        users = await load_directory(directory)

        assert [u.key for u in users] == ["u1", "u2"]
        directory.list_mentors.assert_awaited_once()
        directory.list_learners.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_directory_error_propagates(self):
        from mindmate.ports.directory_port import DirectoryError

        directory = MagicMock()
        directory.list_mentors = AsyncMock(side_effect=DirectoryError("down"))
        directory.list_learners = AsyncMock(return_value=[])

        with pytest.raises(DirectoryError):
            await load_directory(directory)
