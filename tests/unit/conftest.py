"""Shared fixtures for unit tests."""
from unittest.mock import AsyncMock, Mock
import pytest


@pytest.fixture
def mock_ledger():
    """Create a mock ledger client with async methods."""
    from agentguard.collectors.base import LedgerClient
    from agentguard.models import SimulationResult

    ledger = Mock(spec=LedgerClient)
    ledger.get_token_metadata = AsyncMock(return_value=None)
    ledger.get_largest_token_accounts = AsyncMock(return_value=[])
    ledger.simulate_transaction = AsyncMock(
        return_value=SimulationResult(success=True, logs=["Program log: ok"], compute_units_used=1200)
    )
    ledger.send_transaction = AsyncMock(return_value="sig123")
    return ledger


@pytest.fixture
def mock_builder():
    """Create a mock transaction builder."""
    from agentguard.core.executors import TransactionBuilder
    from agentguard.models import BuiltTransaction

    builder = Mock(spec=TransactionBuilder)
    builder.build_transfer = AsyncMock(return_value=BuiltTransaction(payload=b"transfer", description="transfer"))
    builder.build_swap = AsyncMock(return_value=BuiltTransaction(payload=b"swap", description="swap"))
    builder.build_stake = AsyncMock(return_value=BuiltTransaction(payload=b"stake", description="stake"))
    return builder
