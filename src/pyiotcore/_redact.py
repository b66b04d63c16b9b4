"""Masking of device credentials in debug logs.

The bearer JWT is a live credential for up to 20 minutes; only the auth
scheme is kept when headers are logged.
"""

from __future__ import annotations

from collections.abc import Mapping

_REDACTED = "<redacted>"


def redact_authorization(value: str) -> str:
    """Keep the auth scheme of an ``authorization`` value, mask the credential."""
    scheme, sep, _credential = value.partition(" ")
    if not sep:
        return _REDACTED
    return f"{scheme} {_REDACTED}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy of *headers* with the ``authorization`` value masked."""
    return {
        name: redact_authorization(value) if name.lower() == "authorization" else value
        for name, value in headers.items()
    }
