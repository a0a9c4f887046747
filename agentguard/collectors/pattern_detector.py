"""Behavioral anomaly collector over transaction history."""
import logging
import statistics

from agentguard.models import ParsedTransaction, PatternType, SuspiciousPattern

logger = logging.getLogger(__name__)

RAPID_TRANSFER_MIN_COUNT = 5
RAPID_TRANSFER_PER_MINUTE = 20
RAPID_TRANSFER_CONFIDENCE = 0.8

VOLUME_SPIKE_MIN_HISTORY = 5
VOLUME_SPIKE_SIGMA = 3
VOLUME_SPIKE_CONFIDENCE = 0.6

# Heuristics this collector does not implement yet. A clean scan says
# nothing about these.
UNCHECKED_PATTERNS = (PatternType.WASH_TRADING, PatternType.NEW_ACCOUNT_ACTIVITY)


def detect_volume_spikes(current_amount: float, historical_amounts: list[float]) -> bool:
    """Check whether an amount is more than three standard deviations above the mean.

    Needs at least five historical samples; returns False otherwise.
    """
    if len(historical_amounts) < VOLUME_SPIKE_MIN_HISTORY:
        return False

    mean = statistics.fmean(historical_amounts)
    std_dev = statistics.pstdev(historical_amounts)

    return current_amount > mean + VOLUME_SPIKE_SIGMA * std_dev


def _detect_rapid_transfers(timed: list[ParsedTransaction]) -> SuspiciousPattern | None:
    if len(timed) < RAPID_TRANSFER_MIN_COUNT:
        return None

    time_span = timed[-1].block_time - timed[0].block_time
    if time_span <= 0:
        return SuspiciousPattern(
            type=PatternType.RAPID_TRANSFERS,
            confidence=RAPID_TRANSFER_CONFIDENCE,
            description=f"{len(timed)} transactions within the same second",
        )

    frequency = len(timed) / (time_span / 60)
    if frequency <= RAPID_TRANSFER_PER_MINUTE:
        return None

    return SuspiciousPattern(
        type=PatternType.RAPID_TRANSFERS,
        confidence=RAPID_TRANSFER_CONFIDENCE,
        description=f"High transaction frequency: {frequency:.1f} tx/min",
    )


def _detect_unusual_volume(timed: list[ParsedTransaction], user_address: str) -> SuspiciousPattern | None:
    amounts = [
        abs(change.change)
        for tx in timed
        for change in tx.balance_changes
        if change.address == user_address and change.change
    ]
    if len(amounts) <= VOLUME_SPIKE_MIN_HISTORY:
        return None

    current, history = amounts[-1], amounts[:-1]
    if not detect_volume_spikes(current, history):
        return None

    return SuspiciousPattern(
        type=PatternType.UNUSUAL_VOLUME,
        confidence=VOLUME_SPIKE_CONFIDENCE,
        description=f"Latest movement of {current:g} is far above the {len(history)} prior movements",
    )


def detect_suspicious_patterns(
    transactions: list[ParsedTransaction],
    user_address: str,
) -> list[SuspiciousPattern]:
    """Scan transaction history for abnormal behavior.

    Checks rapid transfers (sustained rate above 20 tx/min over at least five
    timed transactions) and volume spikes in the user's own balance changes.
    Wash trading and new-account activity are listed in UNCHECKED_PATTERNS
    and are not evaluated.

    Args:
        transactions: Transaction history in any order
        user_address: Address whose behavior is being assessed

    Returns:
        Patterns found (empty if none)
    """
    timed = sorted(
        (tx for tx in transactions if tx.block_time is not None),
        key=lambda tx: tx.block_time,
    )

    patterns = []
    for check in (
        _detect_rapid_transfers(timed),
        _detect_unusual_volume(timed, user_address),
    ):
        if check is not None:
            patterns.append(check)

    logger.debug(
        f"EXIT: detect_suspicious_patterns for {user_address}",
        extra={
            "extra_data": {
                "action": "pattern_scan",
                "transaction_count": len(transactions),
                "timed_count": len(timed),
                "patterns": [p.type.value for p in patterns],
            }
        },
    )

    return patterns
