"""Wallet report builder.

build_report() validates the address, issues the three RPC reads
concurrently, and reduces the raw records into a WalletReport. If any read
fails the whole report fails; no partial report is ever returned.

Activity metrics cover at most the SIGNATURE_FETCH_LIMIT most recent
signatures, never the full history.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from solscout.address import parse_wallet_address
from solscout.classifier import classify_wallet
from solscout.config import DEFAULT_RPC_URL
from solscout.models import (
    LAMPORTS_PER_SOL,
    ProgramUsage,
    SignatureRecord,
    TokenHolding,
    TransactionSummary,
    WalletReport,
    iso_from_unix,
)
from solscout.programs import label_program, program_category
from solscout.rpc import SIGNATURE_FETCH_LIMIT, SolanaRPCClient
from solscout.scorer import calculate_risk

# Number of most recent signatures echoed in the report
SAMPLE_SIZE = 5

PROGRAM_USAGE_NOTE = (
    "Program interaction details require getTransaction calls (rate-limited). "
    "Signature history alone does not identify the programs invoked."
)


async def build_report(
    address: str,
    endpoint: str = DEFAULT_RPC_URL,
    timeout: float = 30.0,
    commitment: str = "confirmed",
) -> WalletReport:
    """
    Build a full report for one wallet.

    Raises:
        InvalidAddressError: Address is not a valid public key.
        NotAWalletError: Address is off-curve (program / PDA).
        RpcError: Any of the three RPC reads failed.
    """
    parse_wallet_address(address)

    async with SolanaRPCClient(endpoint, timeout=timeout, commitment=commitment) as client:
        lamports, accounts, signatures = await fetch_wallet_data(client, address)

    return assemble_report(address, lamports, accounts, signatures, rpc_url=endpoint)


async def fetch_wallet_data(
    client: SolanaRPCClient, address: str
) -> tuple[int, list[TokenHolding], list[SignatureRecord]]:
    """
    Fetch balance, token accounts and recent signatures concurrently.

    Fails fast: the first error cancels the remaining requests and propagates.
    """
    lamports, accounts, signatures = await gather_fail_fast(
        client.get_balance(address),
        client.get_parsed_token_accounts_by_owner(address),
        client.get_signatures_for_address(address, limit=SIGNATURE_FETCH_LIMIT),
    )
    return lamports, accounts, signatures


async def gather_fail_fast(*aws: Awaitable[Any]) -> list[Any]:
    """
    Run awaitables concurrently and return their results in order.

    The first exception cancels every sibling still running, waits for the
    cancellations to settle, then propagates.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except Exception:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def assemble_report(
    address: str,
    lamports: int,
    accounts: Sequence[TokenHolding],
    signatures: Sequence[SignatureRecord],
    rpc_url: str,
    now: datetime | None = None,
) -> WalletReport:
    """Reduce raw RPC records into a WalletReport. Pure apart from the clock default."""
    now = now or datetime.now(tz=timezone.utc)
    sol = lamports / LAMPORTS_PER_SOL

    holdings = tuple(h for h in sort_holdings(accounts) if h.ui_amount > 0)
    transactions = summarize_transactions(signatures)

    return WalletReport(
        address=address,
        timestamp=now.isoformat(),
        lamports=lamports,
        token_account_count=len(accounts),
        holdings=holdings,
        transactions=transactions,
        programs=summarize_programs(signatures),
        risk=calculate_risk(sol, holdings, transactions, now=now),
        classification=classify_wallet(sol, holdings, transactions),
        rpc_url=rpc_url,
    )


def sort_holdings(accounts: Iterable[TokenHolding]) -> list[TokenHolding]:
    """Sort token accounts by UI amount, largest first."""
    return sorted(accounts, key=lambda h: h.ui_amount, reverse=True)


def summarize_transactions(signatures: Sequence[SignatureRecord]) -> TransactionSummary:
    """
    Derive activity metrics from a newest-first signature list.

    Frequency is only defined with at least two timed records spanning a
    non-zero interval; otherwise the label is "N/A" and the rate 0.
    """
    if not signatures:
        return TransactionSummary(
            recent=0,
            oldest=None,
            newest=None,
            avg_frequency="N/A",
            txs_per_day=0.0,
            success_rate=None,
            txns=(),
        )

    times = [s.block_time for s in signatures if s.block_time is not None]
    oldest = iso_from_unix(min(times)) if times else None
    newest = iso_from_unix(max(times)) if times else None

    avg_frequency, txs_per_day = frequency_label(times)

    succeeded = sum(1 for s in signatures if s.success)
    success_rate = round(succeeded / len(signatures) * 100, 1)

    return TransactionSummary(
        recent=len(signatures),
        oldest=oldest,
        newest=newest,
        avg_frequency=avg_frequency,
        txs_per_day=txs_per_day,
        success_rate=success_rate,
        txns=tuple(signatures[:SAMPLE_SIZE]),
    )


def frequency_label(block_times: Sequence[int]) -> tuple[str, float]:
    """
    Average transaction frequency over the span of `block_times`.

    Returns:
        (label, txs_per_day) where txs_per_day is exactly the rate the label
        states, e.g. ("~3.5 txns/week", 0.5).
    """
    if len(block_times) < 2:
        return "N/A", 0.0
    span_hours = (max(block_times) - min(block_times)) / 3600
    if span_hours <= 0:
        return "N/A", 0.0

    per_day = len(block_times) / span_hours * 24
    if per_day >= 1:
        shown = f"{per_day:.1f}"
        return f"~{shown} txns/day", float(shown)
    shown = f"{per_day * 7:.1f}"
    return f"~{shown} txns/week", float(shown) / 7


def summarize_programs(signatures: Sequence[SignatureRecord]) -> ProgramUsage:
    """
    Program usage section.

    Signature records carry no program ids, so no interactions are counted
    and the list is always empty; the note explains why.
    """
    # no program ids to count until transactions are fetched individually
    return ProgramUsage(note=PROGRAM_USAGE_NOTE, programs=program_entries({}))


def program_entries(program_counts: Mapping[str, int]) -> tuple[dict, ...]:
    """Labelled program list, most-used first."""
    return tuple(
        {
            "id": program_id,
            "count": count,
            "label": label_program(program_id),
            "category": program_category(program_id),
        }
        for program_id, count in sorted(
            program_counts.items(), key=lambda kv: kv[1], reverse=True
        )
    )
