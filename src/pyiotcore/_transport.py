"""HTTP transport for the device bridge."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyiotcore._api.publish import build_publish_headers, build_publish_url
from pyiotcore._redact import redact_headers
from pyiotcore.config import DeviceIdentity
from pyiotcore.exceptions import IotCoreTransportError
from pyiotcore.models.requests import MessageType, PublishResponse, build_body

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the publish coordinator.

    A retry or tracing wrapper only needs to implement ``send`` to be
    dropped in without touching the coordinator.
    """

    async def send(
        self,
        endpoint_base: str,
        identity: DeviceIdentity,
        message_type: MessageType,
        encoded_payload: str,
        bearer_token: str,
    ) -> PublishResponse: ...


class HttpBridgeTransport:
    """Posts publish requests to the HTTP bridge over a shared aiohttp session."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        request_timeout: float | None = None,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=request_timeout) if request_timeout else None

    async def send(
        self,
        endpoint_base: str,
        identity: DeviceIdentity,
        message_type: MessageType,
        encoded_payload: str,
        bearer_token: str,
    ) -> PublishResponse:
        """POST one message and return the bridge's status line.

        Non-2xx responses are returned, not raised; only connection-level
        failures raise :class:`IotCoreTransportError`.
        """
        url = build_publish_url(endpoint_base, identity, message_type)
        headers = build_publish_headers(bearer_token)
        body = json.dumps(build_body(encoded_payload, message_type))

        _logger.debug("POST %s headers=%s", url, redact_headers(headers))

        request_kwargs: dict[str, Any] = {"data": body.encode("utf-8"), "headers": headers}
        if self._timeout is not None:
            request_kwargs["timeout"] = self._timeout

        try:
            async with self._http.post(url, **request_kwargs) as resp:
                raw = await resp.read()
                response = PublishResponse(status_code=resp.status, reason=resp.reason or "")
        except aiohttp.ClientError as exc:
            raise IotCoreTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc
        except TimeoutError as exc:
            raise IotCoreTransportError(
                f"Request to {url} timed out",
                endpoint=url,
            ) from exc

        text = raw[:200].decode("utf-8", errors="replace")
        _logger.debug("HTTP %s %s from %s: %s", response.status_code, response.reason, url, text)
        return response
