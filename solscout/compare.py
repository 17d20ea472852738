"""Wallet comparison engine.

Builds two wallet reports concurrently and scores how alike they are:
shared tokens, activity pattern, balance size, classification and tags.

Composite similarity (0–100):
  token overlap (Jaccard)   35 pts
  activity similarity       30 pts
  balance ratio             15 pts
  classification match      10 pts
  shared tags (3 saturate)  10 pts
"""

from __future__ import annotations

from collections.abc import Set
from datetime import datetime, timezone

from solscout.config import DEFAULT_RPC_URL
from solscout.models import ComparisonReport, SharedToken, WalletReport
from solscout.report import build_report, gather_fail_fast

# (lower bound inclusive, relationship, detail)
_VERDICTS: tuple[tuple[int, str, str], ...] = (
    (80, "STRONGLY LINKED", "High probability of same owner or coordinated wallets"),
    (60, "SIMILAR", "Significant overlap in behavior and holdings"),
    (40, "MODERATE", "Some shared characteristics"),
    (20, "DIFFERENT", "Minimal overlap"),
)
_UNRELATED = ("UNRELATED", "No meaningful connection detected")


async def compare_wallets(
    address1: str,
    address2: str,
    endpoint: str = DEFAULT_RPC_URL,
    timeout: float = 30.0,
    commitment: str = "confirmed",
) -> ComparisonReport:
    """
    Compare two wallets.

    Both reports are built concurrently; if either fails, the comparison
    fails with that error.
    """
    wallet1, wallet2 = await gather_fail_fast(
        build_report(address1, endpoint, timeout=timeout, commitment=commitment),
        build_report(address2, endpoint, timeout=timeout, commitment=commitment),
    )
    return build_comparison(wallet1, wallet2, rpc_url=endpoint)


def build_comparison(
    wallet1: WalletReport,
    wallet2: WalletReport,
    rpc_url: str,
    now: datetime | None = None,
) -> ComparisonReport:
    """Derive a ComparisonReport from two finished wallet reports."""
    now = now or datetime.now(tz=timezone.utc)

    mints2 = wallet2.mints
    shared_tokens = tuple(
        SharedToken(
            mint=h.mint,
            wallet1_balance=h.ui_amount,
            wallet2_balance=wallet2.holding(h.mint).ui_amount,
        )
        for h in wallet1.holdings
        if h.mint in mints2
    )

    overlap = token_overlap(wallet1.mints, mints2)
    activity = activity_similarity(
        wallet1.transactions.txs_per_day,
        wallet2.transactions.txs_per_day,
        wallet1.transactions.success_rate,
        wallet2.transactions.success_rate,
    )
    ratio = balance_ratio(wallet1.sol, wallet2.sol)
    class_match = wallet1.classification.type == wallet2.classification.type
    shared_tags = tuple(
        t for t in wallet1.classification.tags if t in wallet2.classification.tags
    )

    score = similarity_score(overlap, activity, ratio, class_match, len(shared_tags))
    relationship, detail = similarity_verdict(score)

    return ComparisonReport(
        wallet1=wallet1,
        wallet2=wallet2,
        timestamp=now.isoformat(),
        shared_tokens=shared_tokens,
        token_overlap=overlap,
        activity_similarity=activity,
        balance_ratio=ratio,
        classification_match=class_match,
        shared_tags=shared_tags,
        score=score,
        relationship=relationship,
        relationship_detail=detail,
        rpc_url=rpc_url,
    )


# ── Component metrics ─────────────────────────────────────────────────────────


def token_overlap(mints1: Set[str], mints2: Set[str]) -> float:
    """Jaccard index of two mint sets; 0.0 when both are empty."""
    union = mints1 | mints2
    if not union:
        return 0.0
    return len(mints1 & mints2) / len(union)


def activity_similarity(
    freq1: float,
    freq2: float,
    success_rate1: float | None,
    success_rate2: float | None,
) -> float:
    """
    Similarity of two activity patterns (0.0–1.0).

    Args:
        freq1, freq2: Transactions per day.
        success_rate1, success_rate2: Success percentage; None counts as 0.

    Returns:
        1.0 when both wallets show no frequency, 0.0 when exactly one does,
        else 0.6 × frequency ratio + 0.4 × success-rate closeness.
    """
    if freq1 == 0 and freq2 == 0:
        return 1.0
    if freq1 == 0 or freq2 == 0:
        return 0.0

    freq_ratio = min(freq1, freq2) / max(freq1, freq2)
    sr1 = success_rate1 or 0.0
    sr2 = success_rate2 or 0.0
    sr_similarity = 1 - abs(sr1 - sr2) / 100

    return freq_ratio * 0.6 + sr_similarity * 0.4


def balance_ratio(sol1: float, sol2: float) -> float:
    """Smaller balance over larger; 1.0 when both are zero, 0.0 when one is."""
    if sol1 == 0 and sol2 == 0:
        return 1.0
    if sol1 == 0 or sol2 == 0:
        return 0.0
    return min(sol1, sol2) / max(sol1, sol2)


def similarity_score(
    overlap: float,
    activity: float,
    ratio: float,
    class_match: bool,
    shared_tag_count: int,
) -> int:
    """Weighted composite similarity, rounded to an int in 0–100."""
    return round(
        overlap * 35
        + activity * 30
        + ratio * 15
        + (10 if class_match else 0)
        + min(shared_tag_count / 3, 1) * 10
    )


def similarity_verdict(score: int) -> tuple[str, str]:
    """Map a composite score to (relationship, detail)."""
    for lower, relationship, detail in _VERDICTS:
        if score >= lower:
            return relationship, detail
    return _UNRELATED
