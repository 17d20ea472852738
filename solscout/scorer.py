"""Wallet risk scoring (0–100, higher is riskier).

Starts from a baseline of 50 and applies independent threshold
adjustments across five metrics:
  1. SOL balance
  2. Token diversity (non-zero holdings)
  3. Recent activity (signatures in the last fetch window)
  4. Transaction success rate
  5. Wallet age (days since the oldest known signature)

Each fired adjustment appends one RiskFactor in evaluation order. The
final score is clamped to [0, 100].

All scoring functions are pure — no I/O, no side effects.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timezone

from solscout.models import RiskAssessment, RiskFactor, TokenHolding, TransactionSummary

BASELINE_SCORE = 50

# Upper bound (inclusive) of each level band
_LEVEL_BANDS: tuple[tuple[int, str], ...] = (
    (25, "LOW"),
    (50, "MODERATE"),
    (75, "HIGH"),
)


# ── Individual adjustments ────────────────────────────────────────────────────


def _balance_factor(sol: float) -> RiskFactor | None:
    if sol > 100:
        return RiskFactor("High SOL balance (established wallet)", -10)
    if sol < 0.01:
        return RiskFactor("Near-zero SOL balance", 15)
    return None


def _diversity_factor(token_count: int) -> RiskFactor | None:
    if token_count > 20:
        return RiskFactor("Diverse token portfolio (>20 tokens)", -5)
    if token_count == 0:
        return RiskFactor("No token holdings", 10)
    return None


def _activity_factor(recent: int) -> RiskFactor | None:
    if recent >= 100:
        return RiskFactor("High transaction activity", -5)
    if recent < 5:
        return RiskFactor("Very low transaction count", 15)
    return None


def _success_rate_factor(success_rate: float | None) -> RiskFactor | None:
    # Unknown with zero signatures
    if success_rate is None:
        return None
    if success_rate < 50:
        return RiskFactor("High transaction failure rate", 20)
    if success_rate > 95:
        return RiskFactor("High success rate", -5)
    return None


def _age_factor(summary: TransactionSummary, now: datetime) -> RiskFactor | None:
    if not (summary.oldest and summary.newest):
        return None
    age_days = wallet_age_days(summary.oldest, now)
    if age_days > 365:
        return RiskFactor(f"Wallet active for {math.floor(age_days)} days", -10)
    if age_days < 7:
        return RiskFactor("Wallet less than 7 days old", 20)
    return None


def wallet_age_days(oldest_iso: str, now: datetime) -> float:
    """Fractional days between the oldest known signature and `now`."""
    oldest = datetime.fromisoformat(oldest_iso)
    return (now - oldest).total_seconds() / 86_400


# ── Composite scorer ──────────────────────────────────────────────────────────


def calculate_risk(
    sol: float,
    holdings: Sequence[TokenHolding],
    transactions: TransactionSummary,
    now: datetime | None = None,
) -> RiskAssessment:
    """
    Compute the risk assessment for a wallet.

    Args:
        sol: SOL balance.
        holdings: Non-zero token holdings.
        transactions: Summary of the recent signature window.
        now: Reference time for the age check (defaults to current UTC time).

    Returns:
        RiskAssessment with clamped score, level and fired factors in order.
    """
    now = now or datetime.now(tz=timezone.utc)

    candidates = (
        _balance_factor(sol),
        _diversity_factor(len(holdings)),
        _activity_factor(transactions.recent),
        _success_rate_factor(transactions.success_rate),
        _age_factor(transactions, now),
    )
    factors = tuple(f for f in candidates if f is not None)

    score = BASELINE_SCORE + sum(f.impact for f in factors)
    score = max(0, min(100, score))

    return RiskAssessment(score=score, level=risk_level(score), factors=factors)


def risk_level(score: int) -> str:
    """
    Map score to level label.

    Returns:
        "LOW" (≤25), "MODERATE" (≤50), "HIGH" (≤75), or "CRITICAL".
    """
    for upper, level in _LEVEL_BANDS:
        if score <= upper:
            return level
    return "CRITICAL"
