"""Device authentication token model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeviceToken(BaseModel):
    """A minted JWT together with the instant it was issued.

    Parameters
    ----------
    jwt : str
        Compact ``header.claims.signature`` token string.
    algorithm : str
        JWS algorithm used to sign it (``RS256`` or ``ES256``).
    issued_at : datetime
        UTC instant captured by the issuer's clock; also the ``iat`` claim.
    expires_at : datetime
        ``issued_at`` plus the fixed token lifetime; also the ``exp`` claim.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    jwt: str = Field(repr=False)
    algorithm: str
    issued_at: datetime
    expires_at: datetime

    @field_validator("issued_at", "expires_at")
    @classmethod
    def _require_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("token timestamps must be timezone-aware")
        return value

    def age(self, now: datetime) -> float:
        """Seconds elapsed between issue and *now*."""
        return (now - self.issued_at).total_seconds()
