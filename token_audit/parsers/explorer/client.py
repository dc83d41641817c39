"""Block explorer client: verified contract source via the Blockscout v2 API."""

import asyncio

import httpx
from loguru import logger

from token_audit.parsers.rate_limiter import RateLimiter

MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class ExplorerClient:
    """Async HTTP client for ``/api/v2/smart-contracts/{address}``."""

    def __init__(self, base_url: str, max_rps: float = 5.0, timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_verified_source(self, address: str) -> str | None:
        """Return verified source text, or None when the contract is unverified
        or the explorer cannot be reached."""
        url = f"{self.base_url}/{address}"

        for attempt in range(MAX_RETRIES + 1):
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.get(url)

                if resp.status_code == 429:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[EXPLORER] Rate limited, waiting {delay}s")
                    await asyncio.sleep(delay)
                    continue

                if resp.status_code == 404:
                    return None
                if resp.status_code != 200:
                    logger.debug(f"[EXPLORER] HTTP {resp.status_code} for {address}")
                    return None

                return _parse_source(resp.json())

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[EXPLORER] {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                else:
                    logger.warning(f"[EXPLORER] Failed after retries for {address}: {e}")
                    return None
            except ValueError as e:
                logger.debug(f"[EXPLORER] Bad JSON for {address}: {e}")
                return None

        return None


def _parse_source(data: object) -> str | None:
    """Main ``source_code`` plus any ``additional_sources`` files, joined."""
    if not isinstance(data, dict):
        return None
    main = data.get("source_code") or ""
    if not isinstance(main, str) or not main:
        return None

    parts = [main]
    for extra in data.get("additional_sources") or []:
        if isinstance(extra, dict) and isinstance(extra.get("source_code"), str):
            parts.append(extra["source_code"])
    return "\n".join(parts)
