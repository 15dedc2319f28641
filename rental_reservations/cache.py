"""
In-memory access token cache with TTL.

Payment gateway tokens are short-lived and requesting one costs a round trip,
so they are cached per gateway application ID and dropped when they expire or
when a fresh token is explicitly requested.

For deployments with multiple instances each process keeps its own cache.
"""

from datetime import datetime, timedelta

from rental_reservations.config import PAYMENT_TOKEN_TTL_SECONDS
from rental_reservations.utils.datetime import utc_now


class TokenCache:
    """
    In-memory token cache with time-to-live (TTL) expiration.

    Attributes:
        ttl: Time-to-live for cached tokens
        _cache: Internal storage mapping application ID to (token, expires_at) tuples

    Example:
        >>> cache = TokenCache(ttl_seconds=1800)
        >>> cache.set("app-1", "token-abc-123")
        >>> token = cache.get("app-1")
        >>> cache.invalidate("app-1")
    """

    def __init__(self, ttl_seconds: int = 1800):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._cache: dict[str, tuple[str, datetime]] = {}

    def get(self, key: str) -> str | None:
        """
        Get cached token if not expired.

        Args:
            key: Gateway application ID

        Returns:
            Cached token string if found and not expired, None otherwise
        """
        if key in self._cache:
            token, expires_at = self._cache[key]
            if utc_now() < expires_at:
                return token
            del self._cache[key]
        return None

    def set(self, key: str, token: str) -> None:
        self._cache[key] = (token, utc_now() + self.ttl)

    def invalidate(self, key: str) -> None:
        """
        Remove token from cache so the next lookup requests a new one.
        """
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    def size(self) -> int:
        return len(self._cache)


# Gateway tokens expire after 30 minutes; the TTL keeps us inside that window.
token_cache = TokenCache(ttl_seconds=PAYMENT_TOKEN_TTL_SECONDS)
