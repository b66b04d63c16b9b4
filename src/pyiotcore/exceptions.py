"""Custom exception hierarchy for pyiotcore."""

from __future__ import annotations


class IotCoreError(Exception):
    """Base exception for all pyiotcore errors."""


class IotCoreConfigError(IotCoreError):
    """Invalid or missing configuration."""


class IotCoreCryptoError(IotCoreError):
    """Key handling or token signing failure."""


class IotCoreKeyLoadError(IotCoreCryptoError):
    """Private key could not be read or parsed for the requested algorithm."""


class IotCoreSigningError(IotCoreCryptoError):
    """The JWT signing operation itself failed."""


class IotCoreTransportError(IotCoreError):
    """HTTP-level failure (connection error, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class IotCorePublishInterruptedError(IotCoreError):
    """A publish run was stopped by its cancellation signal."""
