"""Data models for pyiotcore."""

from pyiotcore.models.requests import MessageType, PublishRequest, PublishResponse, build_body
from pyiotcore.models.token import DeviceToken

__all__ = [
    "DeviceToken",
    "MessageType",
    "PublishRequest",
    "PublishResponse",
    "build_body",
]
