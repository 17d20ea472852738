"""
Shared data models for solscout.

These dataclasses are the canonical data shapes used across all modules:
the RPC adapter produces TokenHolding and SignatureRecord, the report
builder assembles a WalletReport, the comparator a ComparisonReport, and
output renders their to_dict() forms.

Every model is frozen and built in a single pass. Sequences are tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from solscout import AGENT_ID, __version__

LAMPORTS_PER_SOL = 1_000_000_000


def iso_from_unix(ts: int | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class TokenHolding:
    """One SPL token account owned by the wallet."""

    mint: str
    amount: str             # raw integer amount, kept as a string for precision
    decimals: int

    @property
    def ui_amount(self) -> Decimal:
        """amount / 10**decimals, exact."""
        return Decimal(self.amount).scaleb(-self.decimals)

    def to_dict(self) -> dict:
        return {
            "mint": self.mint,
            "amount": self.amount,
            "uiAmount": self.ui_amount,
            "decimals": self.decimals,
        }


@dataclass(frozen=True)
class SignatureRecord:
    """A confirmed transaction signature returned by getSignaturesForAddress."""

    signature: str
    block_time: int | None      # Unix seconds; None when the node does not know it
    success: bool               # False when the record carries an `err`
    slot: int = 0
    memo: str | None = None

    @property
    def time(self) -> str | None:
        return iso_from_unix(self.block_time)

    def to_dict(self) -> dict:
        return {
            "signature": self.signature,
            "time": self.time,
            "success": self.success,
        }


@dataclass(frozen=True)
class TransactionSummary:
    """Activity metrics over at most the most recent 100 signatures."""

    recent: int
    oldest: str | None              # ISO8601 UTC
    newest: str | None              # ISO8601 UTC
    avg_frequency: str              # "~N.N txns/day" | "~N.N txns/week" | "N/A"
    txs_per_day: float              # numeric value the label states
    success_rate: float | None      # percent, one decimal; None with no records
    txns: tuple[SignatureRecord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "recent": self.recent,
            "oldestSignature": self.oldest,
            "newestSignature": self.newest,
            "avgFrequency": self.avg_frequency,
            "txsPerDay": self.txs_per_day,
            "successRate": (
                f"{self.success_rate:.1f}%" if self.success_rate is not None else None
            ),
            "txns": [t.to_dict() for t in self.txns],
        }


@dataclass(frozen=True)
class ProgramUsage:
    """Programs the wallet interacted with (see PROGRAM_USAGE_NOTE)."""

    note: str
    programs: tuple[dict, ...] = ()

    def to_dict(self) -> dict:
        return {"note": self.note, "list": list(self.programs)}


@dataclass(frozen=True)
class RiskFactor:
    """One fired risk adjustment."""

    label: str
    impact: int         # signed points added to the score

    @property
    def direction(self) -> str:
        return "up" if self.impact > 0 else "down"

    def to_dict(self) -> dict:
        return {"label": self.label, "impact": self.impact, "direction": self.direction}


@dataclass(frozen=True)
class RiskAssessment:
    score: int                          # 0–100
    level: str                          # LOW | MODERATE | HIGH | CRITICAL
    factors: tuple[RiskFactor, ...] = ()

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "level": self.level,
            "factors": [f.to_dict() for f in self.factors],
        }


@dataclass(frozen=True)
class Classification:
    type: str
    description: str
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"type": self.type, "description": self.description, "tags": list(self.tags)}


@dataclass(frozen=True)
class WalletReport:
    """
    Full wallet snapshot.

    Produced fresh by report.build_report() on every call; never persisted.
    """

    address: str
    timestamp: str                      # ISO8601 UTC capture time
    lamports: int
    token_account_count: int            # all token accounts, zero balances included
    holdings: tuple[TokenHolding, ...]  # non-zero only, ui amount descending
    transactions: TransactionSummary
    programs: ProgramUsage
    risk: RiskAssessment
    classification: Classification
    rpc_url: str
    version: str = __version__

    @property
    def sol(self) -> float:
        return self.lamports / LAMPORTS_PER_SOL

    @property
    def mints(self) -> frozenset[str]:
        return frozenset(h.mint for h in self.holdings)

    def holding(self, mint: str) -> TokenHolding | None:
        for h in self.holdings:
            if h.mint == mint:
                return h
        return None

    def to_dict(self) -> dict:
        """Serialize to the stable report JSON shape."""
        return {
            "version": self.version,
            "address": self.address,
            "timestamp": self.timestamp,
            "balance": {"lamports": self.lamports, "sol": self.sol},
            "tokens": {
                "count": self.token_account_count,
                "nonZero": len(self.holdings),
                "holdings": [h.to_dict() for h in self.holdings],
            },
            "transactions": self.transactions.to_dict(),
            "programs": self.programs.to_dict(),
            "risk": self.risk.to_dict(),
            "classification": self.classification.to_dict(),
            "meta": {"rpc": self.rpc_url, "agent": AGENT_ID},
        }


@dataclass(frozen=True)
class SharedToken:
    mint: str
    wallet1_balance: Decimal
    wallet2_balance: Decimal

    def to_dict(self) -> dict:
        return {
            "mint": self.mint,
            "wallet1Balance": self.wallet1_balance,
            "wallet2Balance": self.wallet2_balance,
        }


@dataclass(frozen=True)
class ComparisonReport:
    """
    Similarity between two wallets.

    Every field is a deterministic function of the two WalletReports.
    """

    wallet1: WalletReport
    wallet2: WalletReport
    timestamp: str
    shared_tokens: tuple[SharedToken, ...]
    token_overlap: float            # 0.0–1.0 Jaccard index
    activity_similarity: float      # 0.0–1.0
    balance_ratio: float            # 0.0–1.0
    classification_match: bool
    shared_tags: tuple[str, ...]
    score: int                      # 0–100
    relationship: str               # STRONGLY LINKED | SIMILAR | MODERATE | DIFFERENT | UNRELATED
    relationship_detail: str
    rpc_url: str
    version: str = __version__
    type: str = field(default="comparison", init=False)

    @property
    def risk_delta(self) -> int:
        return abs(self.wallet1.risk.score - self.wallet2.risk.score)

    def balance_multiple(self) -> str:
        """Larger balance over smaller as "N.NNx"; "N/A" when either is empty."""
        a, b = self.wallet1.sol, self.wallet2.sol
        if a > 0 and b > 0:
            return f"{max(a, b) / min(a, b):.2f}x"
        return "N/A"

    def to_dict(self) -> dict:
        """Serialize to the stable comparison JSON shape."""
        w1, w2 = self.wallet1, self.wallet2
        return {
            "version": self.version,
            "type": self.type,
            "timestamp": self.timestamp,
            "wallets": {
                "wallet1": _wallet_brief(w1),
                "wallet2": _wallet_brief(w2),
            },
            "similarity": {
                "score": self.score,
                "relationship": self.relationship,
                "relationshipDetail": self.relationship_detail,
                "breakdown": {
                    "tokenOverlap": round(self.token_overlap * 100),
                    "activitySimilarity": round(self.activity_similarity * 100),
                    "balanceRatio": round(self.balance_ratio * 100),
                    "classificationMatch": self.classification_match,
                    "sharedTags": list(self.shared_tags),
                },
            },
            "sharedTokens": {
                "count": len(self.shared_tokens),
                "tokens": [t.to_dict() for t in self.shared_tokens],
            },
            "balanceComparison": {
                "wallet1": {"sol": w1.sol},
                "wallet2": {"sol": w2.sol},
                "ratio": self.balance_multiple(),
            },
            "riskComparison": {
                "wallet1": {"score": w1.risk.score, "level": w1.risk.level},
                "wallet2": {"score": w2.risk.score, "level": w2.risk.level},
                "delta": self.risk_delta,
            },
            "meta": {"rpc": self.rpc_url, "agent": AGENT_ID},
        }


def _wallet_brief(report: WalletReport) -> dict:
    return {
        "address": report.address,
        "classification": report.classification.type,
        "risk": report.risk.level,
    }
