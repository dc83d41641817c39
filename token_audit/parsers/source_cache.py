"""Redis cache for verified source text.

Verified source never changes for a deployed address, so hits are served
until the TTL expires. Keys include a digest of the RPC and explorer endpoints
so differently configured chains never share entries. Only verified source is
cached: an unverified contract may be verified at any moment.
"""

from __future__ import annotations

import hashlib

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

KEY_PREFIX = "token_audit:source"


class SourceCache:
    def __init__(
        self,
        redis: Redis,
        endpoint: str,
        ttl_sec: int = 24 * 3600,
        *,
        rpc_url: str = "",
    ) -> None:
        self._redis = redis
        self._ttl_sec = ttl_sec
        scope = f"{rpc_url.rstrip('/')}|{endpoint.rstrip('/')}"
        self._namespace = hashlib.sha256(scope.encode()).hexdigest()[:16]

    def key(self, address: str) -> str:
        return f"{KEY_PREFIX}:{self._namespace}:{address.lower()}"

    async def get(self, address: str) -> str | None:
        try:
            value = await self._redis.get(self.key(address))
        except RedisError as e:
            logger.debug(f"[CACHE] get failed for {address}: {e}")
            return None
        if value:
            logger.debug(f"[CACHE] Source hit for {address}")
        return value or None

    async def put(self, address: str, source: str) -> None:
        if not source:
            return
        try:
            await self._redis.set(self.key(address), source, ex=self._ttl_sec)
        except RedisError as e:
            logger.debug(f"[CACHE] set failed for {address}: {e}")
