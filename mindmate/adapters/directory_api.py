"""Directory adapter — implements DirectoryPort via the admin endpoints."""

from __future__ import annotations

import logging

from mindmate.integrations.mindmate_api import request_json
from mindmate.ports.directory_port import DirectoryError

logger = logging.getLogger(__name__)


def _as_records(data: object, path: str) -> list[dict]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise DirectoryError(f"Unexpected response from {path}: expected a list")
    return [r for r in data if isinstance(r, dict)]


class HttpDirectoryAdapter:
    """MindMate admin API implementation of DirectoryPort."""

    async def list_mentors(self) -> list[dict]:
        path = "/api/admin/mentors"
        records = _as_records(await request_json("GET", path, error_cls=DirectoryError), path)
        logger.info("Fetched %d mentor record(s)", len(records))
        return records

    async def list_learners(self) -> list[dict]:
        path = "/api/admin/learners"
        records = _as_records(await request_json("GET", path, error_cls=DirectoryError), path)
        logger.info("Fetched %d learner record(s)", len(records))
        return records
