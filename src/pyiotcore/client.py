"""High-level async client for the device HTTP bridge."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from pyiotcore._clock import Clock, Sleeper
from pyiotcore._crypto.tokens import SigningMaterial
from pyiotcore._transport import HttpBridgeTransport, Transport
from pyiotcore.config import IotCoreConfig
from pyiotcore.coordinator import PublishCoordinator
from pyiotcore.exceptions import IotCoreError
from pyiotcore.issuer import mint_token
from pyiotcore.models.requests import MessageType
from pyiotcore.models.token import DeviceToken
from pyiotcore.session import PublishSession

_logger = logging.getLogger(__name__)


class IotCoreClient:
    """Async client publishing device telemetry through the HTTP bridge.

    Usage::

        async with IotCoreClient(config) as client:
            await client.publish_messages()
    """

    def __init__(
        self,
        config: IotCoreConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        clock: Clock | None = None,
        sleeper: Sleeper | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        config.validate()
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._clock = clock
        self._sleeper = sleeper
        self._cancel_event = cancel_event
        self._transport: Transport | None = None
        self._material: SigningMaterial | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> IotCoreClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpBridgeTransport(
            self._http_session,
            request_timeout=self._config.request_timeout,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    @property
    def signing_material(self) -> SigningMaterial:
        """Key material, read from ``private_key_file`` on first use."""
        if self._material is None:
            self._material = SigningMaterial.from_file(self._config.private_key_file, self._config.algorithm)
        return self._material

    def create_token(self) -> DeviceToken:
        """Mint a standalone device JWT for the configured project."""
        return mint_token(self._config.device.project_id, self.signing_material, clock=self._clock)

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    async def publish_messages(
        self,
        num_messages: int | None = None,
        message_type: MessageType | str | None = None,
    ) -> PublishSession:
        """Run the publish loop using the configured (or overridden) settings."""
        if self._transport is None:
            raise IotCoreError("Client not initialized. Use 'async with IotCoreClient(...) as client:'")
        coordinator = PublishCoordinator(
            self._transport,
            clock=self._clock,
            sleeper=self._sleeper,
            cancel_event=self._cancel_event,
        )
        return await coordinator.run(
            self._config.device,
            self.signing_material,
            message_type if message_type is not None else self._config.message_type,
            self._config.num_messages if num_messages is None else num_messages,
            endpoint_base=self._config.endpoint_base,
            refresh_threshold=self._config.refresh_threshold,
        )
