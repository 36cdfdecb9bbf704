# repository/redis_state_store.py
from typing import Optional
from redis.asyncio import Redis
from config.cache import get_redis


class RedisStateStore:
    """
    Redis-backed StateStore for one named cache store.

    Flow:
    - Values are JSON strings written with SET ... EX ttl (last writer wins).
    - ttl=None writes without expiry.
    """

    def __init__(self, store: str = "default") -> None:
        self._store = store

    async def _client(self) -> Redis:
        return await get_redis(self._store)

    async def get(self, key: str) -> Optional[bytes]:
        r = await self._client()
        return await r.get(key)

    async def put(self, key: str, value: str, ttl: Optional[int]) -> None:
        r = await self._client()
        payload = value.encode("utf-8")
        if ttl is None:
            await r.set(key, payload)
        else:
            await r.set(key, payload, ex=int(ttl))
