"""Session store: maps an opaque auth token to a user id, with expiry.

Keys are ``auth_<token>``. The concrete store is Redis; anything implementing
:class:`SessionStore` can be injected instead (see ``get_session_store``).
"""

import logging
from typing import Optional, Protocol

import redis.asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

log = logging.getLogger(__name__)

KEY_PREFIX = "auth_"


def session_key(token: str) -> str:
    return f"{KEY_PREFIX}{token}"


class SessionStore(Protocol):
    async def get_user_id(self, token: str) -> Optional[str]: ...

    async def create(self, token: str, user_id: str, ttl_seconds: int) -> None: ...

    async def delete(self, token: str) -> bool: ...

    async def is_alive(self) -> bool: ...

    async def close(self) -> None: ...


class RedisSessionStore:
    """Redis-backed session store."""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    @classmethod
    def from_url(cls, url: str) -> "RedisSessionStore":
        """Build a store; the connection is opened lazily on first command."""
        return cls(aioredis.from_url(url, encoding="utf-8", decode_responses=True))

    async def get_user_id(self, token: str) -> Optional[str]:
        """Return the user id for token, or None if unknown or expired."""
        if not token:
            return None
        return await self.redis.get(session_key(token))

    async def create(self, token: str, user_id: str, ttl_seconds: int) -> None:
        await self.redis.setex(session_key(token), ttl_seconds, user_id)

    async def delete(self, token: str) -> bool:
        """Remove a session. Returns False if the token was not stored."""
        return await self.redis.delete(session_key(token)) > 0

    async def is_alive(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as e:
            log.warning("Session store not reachable: %s", e)
            return False

    async def close(self) -> None:
        await self.redis.aclose()
