"""Solana JSON-RPC connection using aiohttp."""
import asyncio
import base64
import itertools
import logging
from typing import Any

import aiohttp

from agentguard.collectors.solana.parsers import (
    parse_mint_account,
    parse_largest_accounts,
    parse_simulation,
)
from agentguard.models import TokenMetadata, SimulationResult

logger = logging.getLogger(__name__)


class RpcError(Exception):
    """Raised when an RPC call fails at the transport or protocol level."""

    pass


class SolanaRpcConnection:
    """Ledger client backed by a Solana JSON-RPC endpoint.

    Implements the LedgerClient protocol. Transactions arrive already built
    and signed; this class only relays them.

    Attributes:
        url: RPC endpoint URL
        commitment: Commitment level for reads and simulations
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        url: str = "https://api.mainnet-beta.solana.com",
        commitment: str = "confirmed",
        timeout: float = 30.0,
    ):
        """Initialize the connection.

        Args:
            url: RPC endpoint URL
            commitment: processed, confirmed or finalized (default: confirmed)
            timeout: Per-request timeout in seconds (default: 30)
        """
        self.url = url
        self.commitment = commitment
        self.timeout = timeout

        self._session: aiohttp.ClientSession | None = None
        self._ids = itertools.count(1)

        logger.debug(
            "INIT: SolanaRpcConnection initialized",
            extra={
                "extra_data": {
                    "action": "connection_init",
                    "url": url,
                    "commitment": commitment,
                    "timeout": timeout,
                }
            },
        )

    async def __aenter__(self) -> "SolanaRpcConnection":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def is_open(self) -> bool:
        """Check if an HTTP session is currently open."""
        return self._session is not None and not self._session.closed

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.is_open():
            await self._session.close()
            logger.debug("Closed RPC session")
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if not self.is_open():
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def _request(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its result.

        Raises:
            RpcError: On HTTP failure, malformed response or RPC error object
        """
        request_id = next(self._ids)
        body = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}

        logger.debug(
            f"STEP: RPC {method}",
            extra={
                "extra_data": {
                    "action": "rpc_request",
                    "method": method,
                    "request_id": request_id,
                }
            },
        )

        try:
            session = self._get_session()
            async with session.post(self.url, json=body) as response:
                if response.status != 200:
                    raise RpcError(f"{method}: HTTP {response.status}")
                payload = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RpcError(f"{method}: {e}") from e

        if not isinstance(payload, dict):
            raise RpcError(f"{method}: malformed response")

        if payload.get("error"):
            error = payload["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RpcError(f"{method}: {message}")

        return payload.get("result")

    async def get_token_metadata(self, mint: str) -> TokenMetadata | None:
        """Fetch and parse a token mint account.

        Args:
            mint: Mint address

        Returns:
            TokenMetadata, or None if the account is not a token mint
        """
        result = await self._request(
            "getAccountInfo",
            [mint, {"encoding": "jsonParsed", "commitment": self.commitment}],
        )
        return parse_mint_account((result or {}).get("value"), mint)

    async def get_largest_token_accounts(self, mint: str) -> list[tuple[str, int]]:
        """Fetch the largest token accounts of a mint, largest first."""
        result = await self._request(
            "getTokenLargestAccounts",
            [mint, {"commitment": self.commitment}],
        )
        try:
            return parse_largest_accounts((result or {}).get("value"))
        except ValueError as e:
            raise RpcError(f"getTokenLargestAccounts: {e}") from e

    async def simulate_transaction(self, payload: bytes) -> SimulationResult:
        """Simulate a serialized transaction."""
        result = await self._request(
            "simulateTransaction",
            [
                base64.b64encode(payload).decode("ascii"),
                {"encoding": "base64", "commitment": self.commitment},
            ],
        )
        return parse_simulation((result or {}).get("value"))

    async def send_transaction(self, payload: bytes) -> str:
        """Submit a serialized transaction.

        Preflight is skipped because callers simulate beforehand.

        Returns:
            Transaction signature
        """
        signature = await self._request(
            "sendTransaction",
            [
                base64.b64encode(payload).decode("ascii"),
                {"encoding": "base64", "skipPreflight": True, "preflightCommitment": self.commitment},
            ],
        )
        if not isinstance(signature, str):
            raise RpcError("sendTransaction: no signature returned")

        logger.info(f"Submitted transaction {signature}")
        return signature
