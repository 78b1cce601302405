from __future__ import annotations

from typing import Any

from redis import Redis

from mcp_calendar.app.config import NONCE_TTL


class NonceStore:
    """
    Single-use nonce tracking for HMAC-signed requests.

    Callers provide a configured Redis client (e.g., via Redis.from_url), which keeps
    the store injectable in tests.

    Args:
        redis_client: A configured Redis client instance.
        namespace (str): Key namespace/prefix for generated keys.
        default_nonce_ttl (int): TTL in seconds for nonce uniqueness tracking.
    """

    def __init__(
        self,
        redis_client: Any,
        *,
        namespace: str = "mcp:calendar",
        default_nonce_ttl: int = NONCE_TTL,
    ) -> None:
        self._redis = redis_client
        self._namespace: str = namespace.rstrip(":")
        self._default_nonce_ttl: int = default_nonce_ttl

    def is_nonce_unique(self, nonce: str, *, ttl: int | None = None) -> bool:
        """
        Check and record nonce uniqueness for a limited time window.

        Args:
            nonce (str): The nonce value.
            ttl (int | None): TTL in seconds; defaults to the store's nonce TTL.

        Returns:
            bool: True if nonce not seen in window and now recorded; False otherwise.
        """
        ttl_to_use = ttl if ttl is not None else self._default_nonce_ttl
        key = f"{self._namespace}:x-agent-nonce:{nonce}"
        # SET NX EX is atomic; a falsy reply means the key already existed
        return bool(self._redis.set(key, "used", nx=True, ex=ttl_to_use))


def build_nonce_store(
    redis_url: str | None = None,
    *,
    redis_client: Any | None = None,
    namespace: str = "mcp:calendar",
    default_nonce_ttl: int = NONCE_TTL,
) -> NonceStore | None:
    """
    Create a NonceStore from a Redis URL or an existing client.

    Returns None when neither is given; replay protection is then disabled.
    """
    if redis_client is None:
        if not redis_url:
            return None
        redis_client = Redis.from_url(redis_url, decode_responses=True)

    return NonceStore(redis_client, namespace=namespace, default_nonce_ttl=default_nonce_ttl)
