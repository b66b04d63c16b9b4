"""Cryptographic primitives for device authentication."""

from __future__ import annotations

from pyiotcore._crypto.tokens import (
    ES256,
    RS256,
    PyJwtSigningAlgorithm,
    SigningAlgorithm,
    SigningMaterial,
    load_private_key,
    resolve_algorithm,
)

__all__ = [
    "ES256",
    "RS256",
    "PyJwtSigningAlgorithm",
    "SigningAlgorithm",
    "SigningMaterial",
    "load_private_key",
    "resolve_algorithm",
]
