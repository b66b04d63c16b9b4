from __future__ import annotations

import base64
import json

import pytest

from pyiotcore._api.publish import (
    build_payload,
    build_publish_headers,
    build_publish_request,
    build_publish_url,
)
from pyiotcore.models.requests import MessageType, PublishRequest, PublishResponse, build_body


def test_device_path_and_event_url(identity) -> None:
    assert identity.device_path == "projects/proj/locations/europe-west1/registries/reg/devices/dev"
    url = build_publish_url("https://cloudiotdevice.googleapis.com/v1/", identity, MessageType.EVENT)
    assert url == (
        "https://cloudiotdevice.googleapis.com/v1/"
        "projects/proj/locations/europe-west1/registries/reg/devices/dev:publishEvent"
    )


def test_state_url_uses_set_state(identity) -> None:
    url = build_publish_url("http://localhost/v1/", identity, MessageType.STATE)
    assert url.endswith("/devices/dev:setState")


def test_headers_carry_bearer_token() -> None:
    assert build_publish_headers("abc.def.ghi") == {
        "authorization": "Bearer abc.def.ghi",
        "content-type": "application/json; charset=UTF-8",
        "cache-control": "no-cache",
    }


def test_event_and_state_bodies() -> None:
    assert build_body("cGF5bG9hZA==", MessageType.EVENT) == {"binary_data": "cGF5bG9hZA=="}
    assert build_body("cGF5bG9hZA==", MessageType.STATE) == {"state": {"binary_data": "cGF5bG9hZA=="}}


@pytest.mark.parametrize("payload", [b"reg/dev-payload-1", b"\xfb\xff\xfe binary ?>", "température".encode()])
def test_binary_data_decodes_to_original_payload(payload: bytes) -> None:
    request = PublishRequest(payload=payload, message_type=MessageType.STATE)
    body = json.loads(json.dumps(request.body()))

    encoded = body["state"]["binary_data"]
    assert base64.b64decode(encoded, validate=True) == payload
    assert "-" not in encoded and "_" not in encoded


def test_payloads_are_reproducible_and_distinct(identity) -> None:
    assert build_payload(identity, 7) == "reg/dev-payload-7"
    first = build_publish_request(identity, 1, MessageType.EVENT)
    again = build_publish_request(identity, 1, MessageType.EVENT)
    second = build_publish_request(identity, 2, MessageType.EVENT)
    assert first == again
    assert first.payload != second.payload


def test_message_type_pacing_and_suffix() -> None:
    assert MessageType.EVENT.pacing_interval == 1.0
    assert MessageType.STATE.pacing_interval == 5.0
    assert MessageType("state").url_suffix == "setState"


def test_publish_response_ok_range() -> None:
    assert PublishResponse(status_code=200).ok
    assert PublishResponse(status_code=204).ok
    assert not PublishResponse(status_code=401, reason="Unauthorized").ok
