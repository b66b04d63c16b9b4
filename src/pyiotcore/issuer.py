"""Device JWT minting.

Every token asserts the GCP project as its audience and is valid for a
fixed 20 minutes from the issuer clock's current instant.
"""

from __future__ import annotations

import logging

from pyiotcore._clock import Clock, SystemClock
from pyiotcore._constants import TOKEN_LIFETIME
from pyiotcore._crypto.tokens import SigningMaterial, resolve_algorithm
from pyiotcore.exceptions import IotCoreConfigError
from pyiotcore.models.token import DeviceToken

_logger = logging.getLogger(__name__)


def mint_token(audience: str, material: SigningMaterial, *, clock: Clock | None = None) -> DeviceToken:
    """Create a signed device JWT for *audience*.

    Parameters
    ----------
    audience : str
        Value of the ``aud`` claim; always the project id.
    material : SigningMaterial
        Algorithm name and private key bytes.
    clock : Clock, optional
        Source of ``now``; defaults to the system UTC clock.

    Returns
    -------
    DeviceToken
        The compact JWT paired with the ``issued_at`` instant used.

    Raises
    ------
    IotCoreConfigError
        If the algorithm name is not supported or *clock* returns a naive
        datetime.
    IotCoreKeyLoadError
        If the key bytes are not a private key of the algorithm's family.
    IotCoreSigningError
        If signing fails.
    """
    algorithm = resolve_algorithm(material.algorithm)
    now = (clock or SystemClock()).now()
    if now.tzinfo is None:
        raise IotCoreConfigError("Clock must return timezone-aware datetimes, got a naive value")
    expires_at = now + TOKEN_LIFETIME
    claims = {
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "aud": audience,
    }
    token = algorithm.sign(claims, material.private_key)
    _logger.debug("Minted %s token aud=%s exp=%s", algorithm.name, audience, expires_at.isoformat())
    return DeviceToken(jwt=token, algorithm=algorithm.name, issued_at=now, expires_at=expires_at)


class TokenIssuer:
    """Binds an audience, signing material and clock for repeated minting."""

    def __init__(self, audience: str, material: SigningMaterial, *, clock: Clock | None = None) -> None:
        # Fail on unsupported algorithms before the first mint is attempted.
        resolve_algorithm(material.algorithm)
        self._audience = audience
        self._material = material
        self._clock = clock or SystemClock()

    def mint(self) -> DeviceToken:
        return mint_token(self._audience, self._material, clock=self._clock)
