"""HTTP bridge publish endpoint.

Endpoints:
  - {base}/{version}/projects/.../devices/{id}:publishEvent
  - {base}/{version}/projects/.../devices/{id}:setState
"""

from __future__ import annotations

from pyiotcore._constants import CACHE_CONTROL, CONTENT_TYPE
from pyiotcore.config import DeviceIdentity
from pyiotcore.models.requests import MessageType, PublishRequest


def build_publish_url(endpoint_base: str, identity: DeviceIdentity, message_type: MessageType) -> str:
    """Join ``{bridge}/{version}/``, the device path and the custom method."""
    return f"{endpoint_base}{identity.device_path}:{message_type.url_suffix}"


def build_publish_headers(bearer_token: str) -> dict[str, str]:
    return {
        "authorization": f"Bearer {bearer_token}",
        "content-type": CONTENT_TYPE,
        "cache-control": CACHE_CONTROL,
    }


def build_payload(identity: DeviceIdentity, sequence: int) -> str:
    """Application payload for the *sequence*-th (1-based) message."""
    return f"{identity.registry_id}/{identity.device_id}-payload-{sequence}"


def build_publish_request(identity: DeviceIdentity, sequence: int, message_type: MessageType) -> PublishRequest:
    return PublishRequest(
        payload=build_payload(identity, sequence).encode("utf-8"),
        message_type=message_type,
    )
