"""Price subgraph client: token ``derivedUSD`` for the peg ratio."""

import asyncio
from decimal import Decimal, InvalidOperation

import httpx
from loguru import logger

from token_audit.parsers.rate_limiter import RateLimiter

MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]

TOKEN_PRICE_QUERY = """
query TokenPrice($id: ID!) {
  tokens(where: { id: $id }) {
    id
    symbol
    derivedUSD
  }
}
"""


class SubgraphClient:
    """Async GraphQL client for a Uniswap-v3-style exchange subgraph."""

    def __init__(self, url: str, max_rps: float = 2.0, timeout: float = 10.0) -> None:
        self.url = url
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_derived_usd(self, address: str) -> Decimal | None:
        """USD value of one token, None if unlisted or the subgraph is down."""
        payload = {
            "query": TOKEN_PRICE_QUERY,
            "variables": {"id": address.lower()},
        }

        for attempt in range(MAX_RETRIES + 1):
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.post(self.url, json=payload)

                if resp.status_code == 429:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[SUBGRAPH] Rate limited, waiting {delay}s")
                    await asyncio.sleep(delay)
                    continue

                if resp.status_code != 200:
                    logger.debug(f"[SUBGRAPH] HTTP {resp.status_code} for {address}")
                    return None

                return _parse_derived_usd(resp.json(), address)

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(f"[SUBGRAPH] {type(e).__name__}, retry in {delay}s")
                    await asyncio.sleep(delay)
                else:
                    logger.warning(f"[SUBGRAPH] Failed after retries for {address}: {e}")
                    return None
            except ValueError as e:
                logger.debug(f"[SUBGRAPH] Bad JSON for {address}: {e}")
                return None

        return None


def _parse_derived_usd(data: object, address: str) -> Decimal | None:
    if not isinstance(data, dict):
        return None
    if data.get("errors"):
        logger.debug(f"[SUBGRAPH] GraphQL errors for {address}: {data['errors']}")
        return None

    tokens = (data.get("data") or {}).get("tokens") or []
    if not tokens:
        return None

    raw = tokens[0].get("derivedUSD")
    if raw is None:
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        return None
