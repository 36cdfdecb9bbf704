# config/cache.py
from redis.asyncio import Redis, from_url
from config.settings import settings

_clients: dict[str, Redis] = {}


async def get_redis(store: str = "default") -> Redis:
    """One lazily created client per named cache store."""
    client = _clients.get(store)
    if client is None:
        client = from_url(
            settings.store_url(store),
            encoding="utf-8",
            decode_responses=False,  # repositories get raw bytes
            socket_keepalive=True,
            health_check_interval=30,
        )
        # Fail fast on startup if Redis is unreachable.
        await client.ping()
        # Another caller may have connected while we awaited the ping.
        winner = _clients.setdefault(store, client)
        if winner is not client:
            await client.aclose()
        client = winner
    return client


async def close_redis() -> None:
    while _clients:
        _, client = _clients.popitem()
        await client.aclose()
