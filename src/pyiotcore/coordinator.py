"""Publish loop with transparent device token refresh.

The coordinator is strictly sequential: check token age, re-mint if it
is too old, send one message, pace, repeat.  Nothing else touches the
session while a run is in progress, so no locking is involved.  Run one
coordinator per device task when publishing for several devices.
"""

from __future__ import annotations

import asyncio
import logging

from pyiotcore._api.publish import build_publish_request
from pyiotcore._clock import Clock, EventSleeper, Sleeper, SystemClock
from pyiotcore._constants import REFRESH_MARGIN, TOKEN_LIFETIME
from pyiotcore._crypto.tokens import SigningMaterial
from pyiotcore._transport import Transport
from pyiotcore.config import DeviceIdentity, validate_refresh_threshold
from pyiotcore.exceptions import IotCoreConfigError, IotCorePublishInterruptedError
from pyiotcore.issuer import TokenIssuer
from pyiotcore.models.requests import MessageType
from pyiotcore.session import PublishSession, SessionState

_logger = logging.getLogger(__name__)


def effective_refresh_threshold(refresh_threshold: float) -> float:
    """Clamp a configured threshold so refresh always precedes expiry."""
    ceiling = (TOKEN_LIFETIME - REFRESH_MARGIN).total_seconds()
    return min(refresh_threshold, ceiling)


class PublishCoordinator:
    """Drives a bounded publish run for one device.

    Parameters
    ----------
    transport : Transport
        Delivers each message; any exception it raises aborts the run.
    clock : Clock, optional
        Source of ``now`` for minting and age checks.
    sleeper : Sleeper, optional
        Pacing implementation.  Defaults to an :class:`EventSleeper`
        bound to *cancel_event*.
    cancel_event : asyncio.Event, optional
        External shutdown signal, checked at the top of every iteration.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        clock: Clock | None = None,
        sleeper: Sleeper | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self._transport = transport
        self._clock = clock or SystemClock()
        self._cancel_event = cancel_event
        self._sleeper = sleeper or EventSleeper(cancel_event)
        self._session: PublishSession | None = None

    @property
    def session(self) -> PublishSession | None:
        """Session of the current or most recent run."""
        return self._session

    async def run(
        self,
        identity: DeviceIdentity,
        material: SigningMaterial,
        message_type: MessageType | str,
        num_messages: int,
        *,
        endpoint_base: str,
        refresh_threshold: float,
        send_interval: float | None = None,
    ) -> PublishSession:
        """Publish *num_messages* messages, refreshing the token as needed.

        Parameters
        ----------
        identity : DeviceIdentity
            Device identity; ``project_id`` is the token audience.
        material : SigningMaterial
            Algorithm and private key used for every mint.
        message_type : MessageType or str
            ``event`` or ``state``; selects the URL suffix and cadence.
        num_messages : int
            Exact number of sends on success.
        endpoint_base : str
            ``{bridge}/{version}/`` prefix handed to the transport.
        refresh_threshold : float
            Token age in seconds beyond which a new token is minted.
        send_interval : float, optional
            Overrides the message type's pacing interval.

        Returns
        -------
        PublishSession
            Final session, in state ``DONE``.

        Raises
        ------
        IotCoreConfigError
            On invalid arguments, before any token is minted.
        IotCorePublishInterruptedError
            When *cancel_event* is set during the run.
        """
        try:
            message_type = MessageType(message_type)
        except ValueError as exc:
            raise IotCoreConfigError(f"Invalid message type {message_type!r}. Should be 'event' or 'state'.") from exc
        if num_messages < 0:
            raise IotCoreConfigError("num_messages must be >= 0")
        validate_refresh_threshold(refresh_threshold)
        identity.validate()
        issuer = TokenIssuer(identity.project_id, material, clock=self._clock)

        threshold = effective_refresh_threshold(refresh_threshold)
        interval = message_type.pacing_interval if send_interval is None else send_interval
        session = PublishSession()
        self._session = session

        try:
            session.token = issuer.mint()
            session.state = SessionState.TOKEN_MINTED
            _logger.info("Using URL: '%s'", endpoint_base)

            for sequence in range(1, num_messages + 1):
                if self._cancel_event is not None and self._cancel_event.is_set():
                    raise IotCorePublishInterruptedError(
                        f"Publish run cancelled before message {sequence}/{num_messages}"
                    )

                secs_since_issue = session.require_token().age(self._clock.now())
                if secs_since_issue > threshold:
                    session.state = SessionState.REFRESHING
                    _logger.info("Refreshing token after: %d seconds", secs_since_issue)
                    session.token = issuer.mint()
                    session.refresh_count += 1

                session.state = SessionState.PUBLISHING
                request = build_publish_request(identity, sequence, message_type)
                _logger.info(
                    "Publishing %s message %d/%d: '%s'",
                    message_type.value,
                    sequence,
                    num_messages,
                    request.payload.decode("utf-8"),
                )
                response = await self._transport.send(
                    endpoint_base,
                    identity,
                    message_type,
                    request.encoded_payload,
                    session.require_token().jwt,
                )
                session.messages_sent += 1
                if response.ok:
                    _logger.debug("Message %d accepted: %s %s", sequence, response.status_code, response.reason)
                else:
                    _logger.warning(
                        "Message %d rejected: %s %s", sequence, response.status_code, response.reason
                    )

                await self._sleeper.pause(interval)
        except BaseException:
            session.state = SessionState.FAILED
            raise

        session.state = SessionState.DONE
        _logger.info("Finished loop successfully after %d message(s)", session.messages_sent)
        return session
