"""Publish request/response models.

A :class:`PublishRequest` is built fresh for every loop iteration and
knows how to render itself into the HTTP bridge JSON body.
"""

from __future__ import annotations

import base64
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyiotcore._constants import EVENT_PACING_SECONDS, STATE_PACING_SECONDS


class MessageType(StrEnum):
    EVENT = "event"
    STATE = "state"

    @property
    def url_suffix(self) -> str:
        """Custom method appended to the device path."""
        return "publishEvent" if self is MessageType.EVENT else "setState"

    @property
    def pacing_interval(self) -> float:
        """Seconds to wait after each publish of this type."""
        return EVENT_PACING_SECONDS if self is MessageType.EVENT else STATE_PACING_SECONDS


class PublishRequest(BaseModel):
    """One payload to deliver as an event or a state update."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    payload: bytes
    message_type: MessageType

    @property
    def encoded_payload(self) -> str:
        """Standard-alphabet base64 of the payload bytes."""
        return base64.b64encode(self.payload).decode("ascii")

    def body(self) -> dict[str, Any]:
        return build_body(self.encoded_payload, self.message_type)


def build_body(encoded_payload: str, message_type: MessageType) -> dict[str, Any]:
    """Wrap an already base64-encoded payload in the bridge JSON shape."""
    data = {"binary_data": encoded_payload}
    if message_type is MessageType.EVENT:
        return data
    return {"state": data}


class PublishResponse(BaseModel):
    """Status line returned by the HTTP bridge."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
