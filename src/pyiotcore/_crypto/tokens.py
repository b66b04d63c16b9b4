"""JWT signing for device authentication.

RS256 and ES256 tokens carry identical claim sets; the only difference is
the key family and the signature primitive.  Both are modelled as
instances of :class:`PyJwtSigningAlgorithm` behind the
:class:`SigningAlgorithm` protocol.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyiotcore._constants import SUPPORTED_ALGORITHMS
from pyiotcore.exceptions import IotCoreConfigError, IotCoreKeyLoadError, IotCoreSigningError

_PEM_MARKER = b"-----BEGIN"


class SigningAlgorithm(Protocol):
    """Turns a claim set into a compact signed JWT."""

    @property
    def name(self) -> str: ...

    def sign(self, claims: Mapping[str, Any], private_key: bytes) -> str: ...


def load_private_key(private_key: bytes) -> Any:
    """Parse PEM or DER (PKCS#8) private key bytes.

    Raises
    ------
    IotCoreKeyLoadError
        If the bytes are not an unencrypted private key.
    """
    try:
        if private_key.lstrip().startswith(_PEM_MARKER):
            return serialization.load_pem_private_key(private_key, password=None)
        return serialization.load_der_private_key(private_key, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise IotCoreKeyLoadError(f"Could not parse private key: {exc}") from exc


@dataclasses.dataclass(frozen=True, slots=True)
class PyJwtSigningAlgorithm:
    """A JWS algorithm bound to the private key family it requires."""

    name: str
    key_type: type
    curve: str | None = None

    def _load_key(self, private_key: bytes) -> Any:
        key = load_private_key(private_key)
        if not isinstance(key, self.key_type):
            raise IotCoreKeyLoadError(
                f"{self.name} requires a {self.key_type.__name__}, got {type(key).__name__}"
            )
        if self.curve is not None and key.curve.name != self.curve:
            raise IotCoreKeyLoadError(f"{self.name} requires curve {self.curve}, got {key.curve.name}")
        return key

    def sign(self, claims: Mapping[str, Any], private_key: bytes) -> str:
        key = self._load_key(private_key)
        try:
            return jwt.encode(dict(claims), key, algorithm=self.name)
        except (jwt.PyJWTError, ValueError, TypeError, NotImplementedError) as exc:
            raise IotCoreSigningError(f"{self.name} signing failed: {exc}") from exc


RS256 = PyJwtSigningAlgorithm("RS256", rsa.RSAPrivateKey)
ES256 = PyJwtSigningAlgorithm("ES256", ec.EllipticCurvePrivateKey, curve="secp256r1")

_ALGORITHMS: dict[str, SigningAlgorithm] = {"RS256": RS256, "ES256": ES256}


def resolve_algorithm(name: str) -> SigningAlgorithm:
    """Return the signing capability registered under *name*."""
    algorithm = _ALGORITHMS.get(name.strip().upper()) if isinstance(name, str) else None
    if algorithm is None:
        raise IotCoreConfigError(
            f"Invalid algorithm {name!r}. Should be one of {', '.join(repr(a) for a in SUPPORTED_ALGORITHMS)}."
        )
    return algorithm


class SigningMaterial(BaseModel):
    """Algorithm name plus the raw private key bytes, loaded once."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    algorithm: str
    private_key: bytes = Field(repr=False)

    @field_validator("algorithm")
    @classmethod
    def _normalize_algorithm(cls, value: str) -> str:
        return value.strip().upper()

    @classmethod
    def from_file(cls, path: str | Path, algorithm: str) -> SigningMaterial:
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise IotCoreKeyLoadError(f"Could not read private key file {path}: {exc}") from exc
        return cls(algorithm=algorithm, private_key=data)
