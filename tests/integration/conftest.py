"""Fixtures for integration tests."""
import os
import pytest_asyncio


@pytest_asyncio.fixture
async def rpc_connection():
    """Provide an RPC connection for tests."""
    from agentguard.collectors.solana.connection import SolanaRpcConnection

    conn = SolanaRpcConnection(url=os.environ["AGENTGUARD_RPC_URL"], timeout=15.0)
    yield conn
    await conn.close()
