"""Publish session state for a single coordinator run."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pyiotcore.models.token import DeviceToken


class SessionState(enum.StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    TOKEN_MINTED = "token_minted"
    PUBLISHING = "publishing"
    REFRESHING = "refreshing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class PublishSession:
    """Mutable state owned by one publish run.

    ``token`` is replaced wholesale on refresh; the previous
    :class:`DeviceToken` is dropped.
    """

    token: DeviceToken | None = None
    messages_sent: int = 0
    refresh_count: int = 0
    state: SessionState = SessionState.UNAUTHENTICATED

    def require_token(self) -> DeviceToken:
        if self.token is None:
            raise RuntimeError("Session has no token; mint one before publishing")
        return self.token
