"""Client configuration for pyiotcore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyiotcore._constants import (
    API_VERSION,
    DEFAULT_CLOUD_REGION,
    HTTP_BRIDGE_ADDRESS,
    SUPPORTED_ALGORITHMS,
    TOKEN_LIFETIME,
)
from pyiotcore.exceptions import IotCoreConfigError
from pyiotcore.models.requests import MessageType


@dataclasses.dataclass(frozen=True)
class DeviceIdentity:
    """Identity of the publishing device within a cloud project."""

    project_id: str
    registry_id: str
    device_id: str
    cloud_region: str = DEFAULT_CLOUD_REGION

    @property
    def device_path(self) -> str:
        """Resource path of the device that is being authenticated."""
        return (
            f"projects/{self.project_id}/locations/{self.cloud_region}"
            f"/registries/{self.registry_id}/devices/{self.device_id}"
        )

    def validate(self) -> None:
        missing = [field.name for field in dataclasses.fields(self) if not str(getattr(self, field.name)).strip()]
        if missing:
            raise IotCoreConfigError(f"Missing required device field(s): {', '.join(missing)}")


@dataclasses.dataclass(frozen=True)
class IotCoreConfig:
    """Client configuration.

    Parameters
    ----------
    device : DeviceIdentity
        Project, region, registry and device ids.
    private_key_file : str
        Path to the device's PKCS#8 private key (PEM or DER).
    algorithm : str
        ``"RS256"`` or ``"ES256"``; must match the key.
    http_bridge_address : str
        Base address of the HTTP bridge.
    api_version : str
        Bridge API version segment of the URL.
    message_type : str
        ``"event"`` to publish telemetry, ``"state"`` to set device state.
    num_messages : int
        Number of messages to publish in one run.
    token_exp_minutes : int
        Age in minutes after which the JWT is proactively re-minted.
        Must be within the fixed 20 minute token lifetime.
    request_timeout : float
        Total timeout in seconds for each HTTP request.
    """

    device: DeviceIdentity
    private_key_file: str
    algorithm: str
    http_bridge_address: str = HTTP_BRIDGE_ADDRESS
    api_version: str = API_VERSION
    message_type: str = MessageType.EVENT.value
    num_messages: int = 100
    token_exp_minutes: int = 20
    request_timeout: float = 30.0

    @property
    def endpoint_base(self) -> str:
        return f"{self.http_bridge_address.rstrip('/')}/{self.api_version}/"

    @property
    def refresh_threshold(self) -> float:
        """Token refresh threshold in seconds."""
        return self.token_exp_minutes * 60.0

    def validate(self) -> None:
        """Raise :class:`IotCoreConfigError` if any field is unusable."""
        self.device.validate()
        if not self.private_key_file:
            raise IotCoreConfigError("private_key_file is required")
        if self.algorithm.strip().upper() not in SUPPORTED_ALGORITHMS:
            raise IotCoreConfigError(
                f"Invalid algorithm {self.algorithm!r}. Should be one of 'RS256' or 'ES256'."
            )
        if self.message_type not in {m.value for m in MessageType}:
            raise IotCoreConfigError(f"Invalid message type {self.message_type!r}. Should be 'event' or 'state'.")
        if self.num_messages < 0:
            raise IotCoreConfigError("num_messages must be >= 0")
        validate_refresh_threshold(self.refresh_threshold)
        if self.request_timeout <= 0:
            raise IotCoreConfigError("request_timeout must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> IotCoreConfig:
        """Create configuration from ``IOTCORE_*`` environment variables.

        Explicit keyword arguments override environment values.  Device
        fields may be overridden with ``device=`` as a dict or a
        :class:`DeviceIdentity`.
        """
        env = os.environ

        device_kwargs: dict[str, str] = {}
        _ENV_DEVICE_MAP = {
            "IOTCORE_PROJECT_ID": "project_id",
            "IOTCORE_CLOUD_REGION": "cloud_region",
            "IOTCORE_REGISTRY_ID": "registry_id",
            "IOTCORE_DEVICE_ID": "device_id",
        }
        for env_key, field_name in _ENV_DEVICE_MAP.items():
            val = env.get(env_key)
            if val is not None:
                device_kwargs[field_name] = val

        device_overrides = overrides.pop("device", None)
        if isinstance(device_overrides, dict):
            device_kwargs.update(device_overrides)
        elif isinstance(device_overrides, DeviceIdentity):
            device_kwargs = dataclasses.asdict(device_overrides)

        device_kwargs.setdefault("project_id", "")
        device_kwargs.setdefault("registry_id", "")
        device_kwargs.setdefault("device_id", "")

        _ENV_CONFIG_MAP = {
            "IOTCORE_PRIVATE_KEY_FILE": "private_key_file",
            "IOTCORE_ALGORITHM": "algorithm",
            "IOTCORE_HTTP_BRIDGE_ADDRESS": "http_bridge_address",
            "IOTCORE_API_VERSION": "api_version",
            "IOTCORE_MESSAGE_TYPE": "message_type",
        }
        config_kwargs: dict[str, Any] = {
            "device": DeviceIdentity(**device_kwargs),
            "private_key_file": "",
            "algorithm": "",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            num_env = env.get("IOTCORE_NUM_MESSAGES")
            if num_env is not None and "num_messages" not in overrides:
                config_kwargs["num_messages"] = int(num_env)

            exp_env = env.get("IOTCORE_TOKEN_EXP_MINUTES")
            if exp_env is not None and "token_exp_minutes" not in overrides:
                config_kwargs["token_exp_minutes"] = int(exp_env)

            timeout_env = env.get("IOTCORE_REQUEST_TIMEOUT")
            if timeout_env is not None and "request_timeout" not in overrides:
                config_kwargs["request_timeout"] = float(timeout_env)
        except ValueError as exc:
            raise IotCoreConfigError(f"Invalid numeric environment value: {exc}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


def validate_refresh_threshold(seconds: float) -> None:
    """Ensure a refresh threshold lies within ``(0, TOKEN_LIFETIME]``."""
    lifetime = TOKEN_LIFETIME.total_seconds()
    if not 0 < seconds <= lifetime:
        raise IotCoreConfigError(
            f"Token refresh threshold must be within (0, {lifetime:.0f}] seconds, got {seconds:g}"
        )
