"""Tests for the Solana JSON-RPC connection."""
from unittest.mock import AsyncMock, patch
import base64
import pytest


def test_connection_init():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection(url="http://localhost:8899", commitment="finalized", timeout=5)

    assert conn.url == "http://localhost:8899"
    assert conn.commitment == "finalized"
    assert conn.timeout == 5
    assert not conn.is_open()


def test_connection_default_values():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection()

    assert conn.url == "https://api.mainnet-beta.solana.com"
    assert conn.commitment == "confirmed"
    assert conn.timeout == 30.0


def test_connection_satisfies_ledger_protocol():
    from agentguard.collectors.base import LedgerClient
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    assert isinstance(SolanaRpcConnection(), LedgerClient)


@pytest.mark.asyncio
async def test_close_without_session_is_noop():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    async with SolanaRpcConnection() as conn:
        assert not conn.is_open()

    assert not conn.is_open()


@pytest.mark.asyncio
async def test_get_token_metadata_parses_result():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection()
    conn._request = AsyncMock(return_value={
        "context": {"slot": 1},
        "value": {
            "data": {
                "program": "spl-token",
                "parsed": {"type": "mint", "info": {"decimals": 9, "supply": "42", "mintAuthority": None}},
            },
        },
    })

    metadata = await conn.get_token_metadata("M")

    assert metadata.supply == 42
    assert metadata.mint_authority is None
    method, params = conn._request.call_args[0]
    assert method == "getAccountInfo"
    assert params[1]["encoding"] == "jsonParsed"


@pytest.mark.asyncio
async def test_get_largest_token_accounts_wraps_malformed_response():
    from agentguard.collectors.solana.connection import SolanaRpcConnection, RpcError

    conn = SolanaRpcConnection()
    conn._request = AsyncMock(return_value={"value": [{"address": "x"}]})

    with pytest.raises(RpcError, match="getTokenLargestAccounts"):
        await conn.get_largest_token_accounts("M")


@pytest.mark.asyncio
async def test_simulate_transaction_sends_base64():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection()
    conn._request = AsyncMock(return_value={"value": {"err": None, "logs": [], "unitsConsumed": 5}})

    result = await conn.simulate_transaction(b"\x01\x02\x03")

    assert result.success
    method, params = conn._request.call_args[0]
    assert method == "simulateTransaction"
    assert params[0] == base64.b64encode(b"\x01\x02\x03").decode("ascii")


@pytest.mark.asyncio
async def test_send_transaction_returns_signature():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection()
    conn._request = AsyncMock(return_value="5igSig")

    assert await conn.send_transaction(b"tx") == "5igSig"
    params = conn._request.call_args[0][1]
    assert params[1]["skipPreflight"] is True


@pytest.mark.asyncio
async def test_send_transaction_without_signature_raises():
    from agentguard.collectors.solana.connection import SolanaRpcConnection, RpcError

    conn = SolanaRpcConnection()
    conn._request = AsyncMock(return_value=None)

    with pytest.raises(RpcError, match="no signature"):
        await conn.send_transaction(b"tx")


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self._payload = payload

    async def json(self):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.closed = False
        self.posted = []

    def post(self, url, json=None):
        self.posted.append((url, json))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_request_returns_result():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection(url="http://rpc")
    session = FakeSession(FakeResponse(200, {"jsonrpc": "2.0", "id": 1, "result": 7}))
    conn._session = session

    assert await conn._request("getSlot", []) == 7
    url, body = session.posted[0]
    assert url == "http://rpc"
    assert body["method"] == "getSlot"


@pytest.mark.asyncio
async def test_request_raises_on_rpc_error():
    from agentguard.collectors.solana.connection import SolanaRpcConnection, RpcError

    conn = SolanaRpcConnection()
    conn._session = FakeSession(FakeResponse(200, {"error": {"code": -32602, "message": "Invalid param"}}))

    with pytest.raises(RpcError, match="Invalid param"):
        await conn._request("getAccountInfo", ["bad"])


@pytest.mark.asyncio
async def test_request_raises_on_http_status():
    from agentguard.collectors.solana.connection import SolanaRpcConnection, RpcError

    conn = SolanaRpcConnection()
    conn._session = FakeSession(FakeResponse(429, {}))

    with pytest.raises(RpcError, match="HTTP 429"):
        await conn._request("getSlot", [])


@pytest.mark.asyncio
async def test_request_wraps_transport_errors():
    import aiohttp
    from agentguard.collectors.solana.connection import SolanaRpcConnection, RpcError

    conn = SolanaRpcConnection()
    conn._session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(RpcError, match="refused"):
        await conn._request("getSlot", [])


@pytest.mark.asyncio
async def test_close_closes_session():
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection()
    session = FakeSession()
    conn._session = session

    await conn.close()

    assert session.closed
    assert not conn.is_open()
