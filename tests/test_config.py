from __future__ import annotations

import pytest

from pyiotcore.config import DeviceIdentity, IotCoreConfig
from pyiotcore.exceptions import IotCoreConfigError


def _config(**overrides) -> IotCoreConfig:
    values = {
        "device": DeviceIdentity(project_id="proj", registry_id="reg", device_id="dev"),
        "private_key_file": "/keys/rsa_private_pkcs8",
        "algorithm": "RS256",
    }
    values.update(overrides)
    return IotCoreConfig(**values)


def test_defaults_match_http_bridge() -> None:
    config = _config()
    config.validate()
    assert config.device.cloud_region == "us-central1"
    assert config.endpoint_base == "https://cloudiotdevice.googleapis.com/v1/"
    assert config.message_type == "event"
    assert config.num_messages == 100
    assert config.refresh_threshold == 1200.0


def test_endpoint_base_tolerates_trailing_slash() -> None:
    config = _config(http_bridge_address="http://localhost:8080/", api_version="v1beta1")
    assert config.endpoint_base == "http://localhost:8080/v1beta1/"


@pytest.mark.parametrize(
    ("overrides", "match"),
    [
        ({"algorithm": "HS256"}, "Invalid algorithm"),
        ({"message_type": "telemetry"}, "message type"),
        ({"num_messages": -1}, "num_messages"),
        ({"token_exp_minutes": 0}, "refresh threshold"),
        ({"token_exp_minutes": 21}, "refresh threshold"),
        ({"private_key_file": ""}, "private_key_file"),
        ({"device": DeviceIdentity(project_id="proj", registry_id="", device_id="dev")}, "registry_id"),
        ({"request_timeout": 0}, "request_timeout"),
    ],
)
def test_validate_rejects_bad_fields(overrides, match: str) -> None:
    with pytest.raises(IotCoreConfigError, match=match):
        _config(**overrides).validate()


def test_from_env_reads_iotcore_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IOTCORE_PROJECT_ID", "env-proj")
    monkeypatch.setenv("IOTCORE_REGISTRY_ID", "env-reg")
    monkeypatch.setenv("IOTCORE_DEVICE_ID", "env-dev")
    monkeypatch.setenv("IOTCORE_PRIVATE_KEY_FILE", "/keys/ec_private.pem")
    monkeypatch.setenv("IOTCORE_ALGORITHM", "ES256")
    monkeypatch.setenv("IOTCORE_MESSAGE_TYPE", "state")
    monkeypatch.setenv("IOTCORE_NUM_MESSAGES", "7")
    monkeypatch.setenv("IOTCORE_TOKEN_EXP_MINUTES", "15")

    config = IotCoreConfig.from_env(device={"cloud_region": "asia-east1"}, num_messages=3)
    config.validate()

    assert config.device == DeviceIdentity(
        project_id="env-proj", registry_id="env-reg", device_id="env-dev", cloud_region="asia-east1"
    )
    assert config.algorithm == "ES256"
    assert config.message_type == "state"
    assert config.num_messages == 3
    assert config.token_exp_minutes == 15


def test_from_env_without_identity_fails_validation(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("IOTCORE_PROJECT_ID", "IOTCORE_REGISTRY_ID", "IOTCORE_DEVICE_ID"):
        monkeypatch.delenv(key, raising=False)

    config = IotCoreConfig.from_env(private_key_file="k", algorithm="RS256")
    with pytest.raises(IotCoreConfigError, match="project_id, registry_id, device_id"):
        config.validate()


def test_from_env_rejects_non_numeric_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IOTCORE_NUM_MESSAGES", "lots")
    with pytest.raises(IotCoreConfigError, match="numeric"):
        IotCoreConfig.from_env()
