"""pyiotcore - Async device client for the cloud IoT HTTP bridge."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyiotcore")
except PackageNotFoundError:
    __version__ = "0+local"
from pyiotcore._clock import Clock, EventSleeper, Sleeper, SystemClock
from pyiotcore._crypto.tokens import ES256, RS256, SigningAlgorithm, SigningMaterial
from pyiotcore._transport import HttpBridgeTransport, Transport
from pyiotcore.client import IotCoreClient
from pyiotcore.config import DeviceIdentity, IotCoreConfig
from pyiotcore.coordinator import PublishCoordinator
from pyiotcore.exceptions import (
    IotCoreConfigError,
    IotCoreCryptoError,
    IotCoreError,
    IotCoreKeyLoadError,
    IotCorePublishInterruptedError,
    IotCoreSigningError,
    IotCoreTransportError,
)
from pyiotcore.issuer import TokenIssuer, mint_token
from pyiotcore.models import DeviceToken, MessageType, PublishRequest, PublishResponse
from pyiotcore.session import PublishSession, SessionState

__all__ = [
    "__version__",
    "Clock",
    "DeviceIdentity",
    "DeviceToken",
    "ES256",
    "EventSleeper",
    "HttpBridgeTransport",
    "IotCoreClient",
    "IotCoreConfig",
    "IotCoreConfigError",
    "IotCoreCryptoError",
    "IotCoreError",
    "IotCoreKeyLoadError",
    "IotCorePublishInterruptedError",
    "IotCoreSigningError",
    "IotCoreTransportError",
    "MessageType",
    "PublishCoordinator",
    "PublishRequest",
    "PublishResponse",
    "PublishSession",
    "RS256",
    "SessionState",
    "SigningAlgorithm",
    "SigningMaterial",
    "Sleeper",
    "SystemClock",
    "TokenIssuer",
    "Transport",
    "mint_token",
]
