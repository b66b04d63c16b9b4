from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pyiotcore.config import DeviceIdentity
from pyiotcore.models.requests import MessageType, PublishResponse


def _pkcs8(key: object, encoding: serialization.Encoding) -> bytes:
    return key.private_bytes(  # type: ignore[attr-defined]
        encoding=encoding,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def rsa_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    return _pkcs8(rsa_private_key, serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def rsa_der(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    return _pkcs8(rsa_private_key, serialization.Encoding.DER)


@pytest.fixture(scope="session")
def ec_pem(ec_private_key: ec.EllipticCurvePrivateKey) -> bytes:
    return _pkcs8(ec_private_key, serialization.Encoding.PEM)


@pytest.fixture
def identity() -> DeviceIdentity:
    return DeviceIdentity(project_id="proj", registry_id="reg", device_id="dev", cloud_region="europe-west1")


class FakeClock:
    """Settable UTC clock; starts on a whole second so ``iat`` claims match exactly."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime.now(UTC).replace(microsecond=0)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


@dataclass
class RecordingSleeper:
    """Records pauses and advances the fake clock by the paused amount plus *extra*."""

    clock: FakeClock
    extra: dict[int, float] = field(default_factory=dict)
    pauses: list[float] = field(default_factory=list)

    async def pause(self, seconds: float) -> None:
        self.pauses.append(seconds)
        self.clock.advance(seconds + self.extra.get(len(self.pauses), 0.0))


@dataclass
class SentMessage:
    endpoint_base: str
    identity: DeviceIdentity
    message_type: MessageType
    encoded_payload: str
    bearer_token: str
    sent_at: datetime

    @property
    def claims(self) -> dict[str, object]:
        return jwt.decode(self.bearer_token, options={"verify_signature": False})


@dataclass
class RecordingTransport:
    clock: FakeClock
    status_code: int = 200
    fail_on: int | None = None
    sent: list[SentMessage] = field(default_factory=list)

    async def send(
        self,
        endpoint_base: str,
        identity: DeviceIdentity,
        message_type: MessageType,
        encoded_payload: str,
        bearer_token: str,
    ) -> PublishResponse:
        if self.fail_on is not None and len(self.sent) + 1 == self.fail_on:
            raise ConnectionResetError("bridge went away")
        self.sent.append(
            SentMessage(endpoint_base, identity, message_type, encoded_payload, bearer_token, self.clock.now())
        )
        return PublishResponse(status_code=self.status_code, reason="OK" if self.status_code == 200 else "Nope")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper(clock: FakeClock) -> RecordingSleeper:
    return RecordingSleeper(clock)


@pytest.fixture
def transport(clock: FakeClock) -> RecordingTransport:
    return RecordingTransport(clock)
