"""Shared test fixtures and configuration.

Sets up fake environment variables so mindmate.config doesn't sys.exit(),
and provides common fixtures like sample sessions and mocked ports.
"""

import os

# Patch env vars BEFORE any mindmate imports
os.environ.setdefault("MINDMATE_API_URL", "https://api.mindmate.test")
os.environ.setdefault("MINDMATE_API_TOKEN", "fake-token-for-tests")
os.environ.setdefault("VIEWER_ROLE", "mentor")

import pytest
from unittest.mock import AsyncMock, MagicMock


def make_session(session_id, subject="Algebra", date="2026-10-19", time="10:00", **kwargs):
    from mindmate.data.models import PersonRef, Session

    kwargs.setdefault("learner", PersonRef(id="l1", name="Lea"))
    kwargs.setdefault("mentor", PersonRef(id="m1", name="Marco"))
    return Session(id=session_id, subject=subject, date=date, time=time, **kwargs)


def make_preset(preset_id, subject="Algebra", participants=None, **kwargs):
    from mindmate.data.models import PresetSchedule

    kwargs.setdefault("days", ["monday"])
    kwargs.setdefault("time", "15:00")
    kwargs.setdefault("specialization", "math")
    return PresetSchedule(
        id=preset_id,
        mentor="m1",
        subject=subject,
        participants=list(participants or []),
        **kwargs,
    )


@pytest.fixture
def session_store():
    """Return a SessionStore with two today and one upcoming session."""
    from mindmate.core.session_store import SessionStore

    store = SessionStore()
    store.load(
        [make_session("s1"), make_session("s2", subject="Physics", time="13:00")],
        [make_session("s3", subject="Chemistry", date="2026-10-22")],
    )
    return store


@pytest.fixture
def scheduling_port():
    """Return a mocked SchedulingPort whose calls all succeed."""
    port = MagicMock()
    port.list_sessions = AsyncMock(return_value=([], []))
    port.send_reminder = AsyncMock(return_value=None)
    port.reschedule = AsyncMock(return_value=None)
    port.cancel = AsyncMock(return_value=None)
    return port


@pytest.fixture
def preset_port():
    """Return a mocked PresetSchedulePort whose calls all succeed."""
    port = MagicMock()
    port.list_presets = AsyncMock(return_value=[])
    port.create_preset = AsyncMock()
    port.update_preset = AsyncMock(return_value=None)
    port.delete_preset = AsyncMock(return_value=None)
    port.join_preset = AsyncMock(return_value=None)
    port.leave_preset = AsyncMock(return_value=None)
    return port
