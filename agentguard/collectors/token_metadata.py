"""Token metadata and holder distribution lookups."""
import logging

from agentguard.collectors.base import LedgerClient
from agentguard.models import TokenMetadata, TokenHolder

logger = logging.getLogger(__name__)


async def fetch_token_metadata(ledger: LedgerClient, mint: str) -> TokenMetadata | None:
    """Fetch supply-control metadata for a mint.

    Args:
        ledger: Ledger client
        mint: Mint address

    Returns:
        TokenMetadata, or None if the lookup failed or the account is not a mint
    """
    try:
        return await ledger.get_token_metadata(mint)
    except Exception as e:
        logger.warning(f"Failed to fetch token metadata for {mint}: {e}")
        return None


async def fetch_top_holders(
    ledger: LedgerClient,
    mint: str,
    limit: int = 10,
    supply: int | None = None,
) -> list[TokenHolder]:
    """Fetch the largest holders of a mint.

    Percentages are relative to total supply when it is known, otherwise to
    the combined balance of the largest accounts.

    Args:
        ledger: Ledger client
        mint: Mint address
        limit: Maximum number of holders to return (default: 10)
        supply: Total raw supply, if known

    Returns:
        Holders largest first, or an empty list if the lookup failed
    """
    try:
        accounts = await ledger.get_largest_token_accounts(mint)
    except Exception as e:
        logger.warning(f"Failed to fetch top holders for {mint}: {e}")
        return []

    denominator = supply if supply else sum(amount for _, amount in accounts)
    if denominator <= 0:
        return []

    return [
        TokenHolder(
            address=address,
            balance=float(amount),
            percentage=amount / denominator * 100,
        )
        for address, amount in accounts[:limit]
    ]


def calculate_concentration(holders: list[TokenHolder]) -> float:
    """Herfindahl index of holder shares (0 = dispersed, 1 = single holder)."""
    return sum((h.percentage / 100) ** 2 for h in holders)


def is_mint_disabled(metadata: TokenMetadata) -> bool:
    return metadata.mint_authority is None


def is_freeze_disabled(metadata: TokenMetadata) -> bool:
    return metadata.freeze_authority is None
