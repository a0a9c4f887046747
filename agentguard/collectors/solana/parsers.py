"""Parsers for Solana JSON-RPC responses."""
import re
from typing import Any

from agentguard.models import TokenMetadata, SimulationResult

_COMPUTE_UNITS_RE = re.compile(r"consumed (\d+) of (\d+) compute units", re.IGNORECASE)


def parse_mint_account(value: dict[str, Any] | None, mint: str) -> TokenMetadata | None:
    """Parse a jsonParsed getAccountInfo value into TokenMetadata.

    Args:
        value: The "value" field of a getAccountInfo response
        mint: Mint address the account belongs to

    Returns:
        TokenMetadata, or None if the account is missing or is not a token mint
    """
    if not value or not value.get("data"):
        return None

    data = value["data"]
    if not isinstance(data, dict):
        return None

    if data.get("program") not in ("spl-token", "spl-token-2022"):
        return None

    parsed = data.get("parsed") or {}
    if parsed.get("type") != "mint":
        return None

    info = parsed.get("info") or {}

    return TokenMetadata(
        mint=mint,
        decimals=int(info.get("decimals", 0)),
        supply=int(info.get("supply", 0)),
        mint_authority=info.get("mintAuthority"),
        freeze_authority=info.get("freezeAuthority"),
    )


def parse_largest_accounts(value: list[dict[str, Any]] | None) -> list[tuple[str, int]]:
    """Parse a getTokenLargestAccounts value into (address, raw amount) pairs.

    Raises:
        ValueError: If an entry is missing its address or amount
    """
    accounts = []
    for entry in value or []:
        try:
            accounts.append((entry["address"], int(entry["amount"])))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed largest-account entry: {entry!r}") from e

    accounts.sort(key=lambda a: a[1], reverse=True)
    return accounts


def extract_compute_units(logs: list[str] | None) -> int | None:
    """Find compute units consumed in program logs."""
    for line in logs or []:
        match = _COMPUTE_UNITS_RE.search(line)
        if match:
            return int(match.group(1))
    return None


def parse_simulation(value: dict[str, Any] | None) -> SimulationResult:
    """Parse a simulateTransaction value into SimulationResult."""
    if value is None:
        return SimulationResult(success=False, err="Empty simulation response")

    logs = value.get("logs") or []
    err = value.get("err")

    return_data = None
    if value.get("returnData"):
        data = value["returnData"].get("data")
        if isinstance(data, list) and data:
            return_data = data[0]

    compute_units = value.get("unitsConsumed")
    if compute_units is None:
        compute_units = extract_compute_units(logs)

    return SimulationResult(
        success=err is None,
        logs=logs,
        err=err,
        compute_units_used=compute_units,
        return_data=return_data,
    )
