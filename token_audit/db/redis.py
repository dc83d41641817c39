"""Shared async Redis clients, one per configured URL."""

from loguru import logger
from redis.asyncio import Redis

_clients: dict[str, Redis] = {}


async def get_redis(url: str) -> Redis:
    """Return the process-wide client for ``url``, creating it on first use."""
    client = _clients.get(url)
    if client is None:
        client = Redis.from_url(url, decode_responses=True)
        _clients[url] = client
        logger.debug(f"[REDIS] Client created for {url}")
    return client


async def close_redis() -> None:
    while _clients:
        _, client = _clients.popitem()
        await client.aclose()
