"""Internal constants shared across the library."""

from datetime import timedelta

HTTP_BRIDGE_ADDRESS = "https://cloudiotdevice.googleapis.com"
API_VERSION = "v1"
DEFAULT_CLOUD_REGION = "us-central1"

#: Lifetime of every minted device JWT. Not configurable.
TOKEN_LIFETIME = timedelta(minutes=20)

#: A token is always refreshed at least this long before it expires.
REFRESH_MARGIN = timedelta(seconds=60)

#: Pacing between consecutive publishes, per message type.
EVENT_PACING_SECONDS = 1.0
STATE_PACING_SECONDS = 5.0

CONTENT_TYPE = "application/json; charset=UTF-8"
CACHE_CONTROL = "no-cache"

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("RS256", "ES256")
