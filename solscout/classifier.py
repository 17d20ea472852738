"""Wallet type classification.

Rules are evaluated in full, in order. The first matching rule sets the
wallet type and description; every matching rule contributes its tag.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from solscout.models import Classification, TokenHolding, TransactionSummary


@dataclass(frozen=True)
class _Rule:
    tag: str
    type: str
    description: str
    matches: Callable[[float, int, int], bool]  # (sol, token_count, recent_txs)


CLASSIFICATION_RULES: tuple[_Rule, ...] = (
    _Rule(
        "whale",
        "Whale",
        "Large SOL holder with significant on-chain presence.",
        lambda sol, tokens, recent: sol > 1000,
    ),
    _Rule(
        "active-trader",
        "Active Trader",
        "Frequent transaction activity suggests active trading or bot usage.",
        lambda sol, tokens, recent: recent >= 50,
    ),
    _Rule(
        "token-collector",
        "Token Collector",
        "Holds many different token types, possibly airdrop farmer or diversified holder.",
        lambda sol, tokens, recent: tokens > 15,
    ),
    _Rule(
        "dormant",
        "Dormant Wallet",
        "Minimal recent activity. May be a cold storage or abandoned wallet.",
        lambda sol, tokens, recent: recent < 3 and sol > 0,
    ),
    _Rule(
        "new",
        "New Wallet",
        "Recently created with minimal history.",
        lambda sol, tokens, recent: recent < 5 and sol < 1,
    ),
)

DEFAULT_TYPE = "Standard Wallet"
DEFAULT_DESCRIPTION = "Regular Solana wallet with typical activity patterns."


def classify_wallet(
    sol: float,
    holdings: Sequence[TokenHolding],
    transactions: TransactionSummary,
) -> Classification:
    """
    Classify a wallet from its balance, holdings and recent activity.

    Args:
        sol: SOL balance.
        holdings: Non-zero token holdings.
        transactions: Summary of the recent signature window.
    """
    token_count = len(holdings)
    wallet_type: str | None = None
    description = ""
    tags: list[str] = []

    for rule in CLASSIFICATION_RULES:
        if not rule.matches(sol, token_count, transactions.recent):
            continue
        tags.append(rule.tag)
        if wallet_type is None:
            wallet_type = rule.type
            description = rule.description

    if wallet_type is None:
        wallet_type = DEFAULT_TYPE
        description = DEFAULT_DESCRIPTION
        tags.append("standard")

    if sol > 0:
        tags.append("funded")
    if token_count > 0:
        tags.append("token-holder")

    return Classification(type=wallet_type, description=description, tags=tuple(tags))
