"""
MindMate — Response types.

Every user action returns one of these instead of raising. The caller
renders the message (toast, modal, CLI line) and applies nothing itself:
local state has already been reconciled by the time an Ok comes back, and
is untouched when an Err comes back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResponseKind(Enum):
    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    REMOTE_FAILURE = "remote_failure"
    BUSY = "busy"
    CONFIRM_PROMPT = "confirm_prompt"
    DISMISSED = "dismissed"


class ActionType(Enum):
    REMIND = "remind"
    RESCHEDULE = "reschedule"
    CANCEL = "cancel"
    CREATE_PRESET = "create_preset"
    UPDATE_PRESET = "update_preset"
    DELETE_PRESET = "delete_preset"
    JOIN_PRESET = "join_preset"
    LEAVE_PRESET = "leave_preset"


@dataclass
class PendingAction:
    """What the confirmation prompt shows before an action is dispatched."""

    action: ActionType
    target_id: str
    subject: str = ""
    counterpart_name: str = ""
    new_date: str | None = None   # reschedule only
    new_time: str | None = None   # reschedule only


@dataclass
class ServiceResponse:
    kind: ResponseKind
    message: str


@dataclass
class Ok(ServiceResponse):
    value: Any = None


@dataclass
class Err(ServiceResponse):
    error: Exception | None = None


@dataclass
class ConfirmPromptResponse(ServiceResponse):
    pending: PendingAction | None = None
