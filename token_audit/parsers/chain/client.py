"""Read-only ERC-20 probes over JSON-RPC (web3.py async provider)."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from web3 import AsyncWeb3, Web3

from token_audit.parsers.chain.models import MetadataReads
from token_audit.parsers.errors import ChainUnavailableError, InvalidAddressError
from token_audit.parsers.probe_result import CALL_FAILED_VALUE, CallFailed, is_call_failed


def _view(name: str, output: str) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": output}],
    }


# Only the read-only accessors the probes use
ERC20_PROBE_ABI: list[dict[str, Any]] = [
    _view("name", "string"),
    _view("symbol", "string"),
    _view("decimals", "uint8"),
    _view("totalSupply", "uint256"),
    _view("owner", "address"),
    _view("getOwner", "address"),
    _view("paused", "bool"),
]


def normalize_address(address: str | None) -> str:
    """Checksum a user-supplied address or raise InvalidAddressError."""
    if not address:
        raise InvalidAddressError("Token address is required")
    if not Web3.is_address(address):
        raise InvalidAddressError("Invalid token address")
    return Web3.to_checksum_address(address)


class TokenProbe:
    """Chain probes bound to one token contract.

    Every read returns the decoded value or ``CALL_FAILED_VALUE`` (reverted,
    missing function, undecodable output or timeout); nothing here raises.
    """

    def __init__(self, w3: AsyncWeb3, address: str, timeout: float) -> None:
        self.address = address
        self._timeout = timeout
        self._contract = w3.eth.contract(address=address, abi=ERC20_PROBE_ABI)

    async def _call(self, fn_name: str) -> Any:
        try:
            fn = getattr(self._contract.functions, fn_name)()
            return await asyncio.wait_for(fn.call(), timeout=self._timeout)
        except Exception as e:
            logger.debug(f"[CHAIN] {fn_name}() failed for {self.address}: {type(e).__name__}: {e}")
            return CALL_FAILED_VALUE

    async def read_owner(self) -> str | CallFailed:
        """``owner()``, falling back to the legacy ``getOwner()`` accessor."""
        owner = await self._call("owner")
        if is_call_failed(owner):
            owner = await self._call("getOwner")
        return owner

    async def read_paused(self) -> bool | CallFailed:
        paused = await self._call("paused")
        if is_call_failed(paused):
            return paused
        return bool(paused)

    async def read_metadata(self) -> MetadataReads:
        name, symbol, decimals, total_supply = await asyncio.gather(
            self._call("name"),
            self._call("symbol"),
            self._call("decimals"),
            self._call("totalSupply"),
        )
        return MetadataReads(
            name=name, symbol=symbol, decimals=decimals, total_supply=total_supply
        )


class ChainClient:
    """Async JSON-RPC client for one chain endpoint."""

    def __init__(
        self,
        rpc_url: str,
        *,
        call_timeout: float = 10.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._call_timeout = call_timeout
        self._w3 = w3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(rpc_url)
        )

    def probe(self, address: str) -> TokenProbe:
        return TokenProbe(self._w3, address, self._call_timeout)

    async def is_contract(self, address: str) -> bool:
        """True if ``address`` holds bytecode.

        Raises ChainUnavailableError when the endpoint cannot be queried.
        """
        try:
            code = await asyncio.wait_for(
                self._w3.eth.get_code(address), timeout=self._call_timeout
            )
        except Exception as e:
            logger.warning(f"[CHAIN] get_code failed for {address}: {type(e).__name__}: {e}")
            raise ChainUnavailableError(f"Chain RPC unreachable: {e}") from e
        return len(code) > 0

    async def close(self) -> None:
        provider = self._w3.provider
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
