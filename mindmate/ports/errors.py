"""Remote failure base type shared by every port."""

from __future__ import annotations


class RemoteFailure(Exception):
    """Raised when a remote call fails or returns a non-success status.

    Local state must be left exactly as it was before the call.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
