"""Tests for solscout/report.py — activity summaries and report assembly."""

from __future__ import annotations

import asyncio
import time
from decimal import Decimal

import pytest
import respx

from solscout.exceptions import InvalidAddressError, NotAWalletError, RpcError
from solscout.models import SignatureRecord, TokenHolding, iso_from_unix
from solscout.report import (
    PROGRAM_USAGE_NOTE,
    SAMPLE_SIZE,
    assemble_report,
    build_report,
    frequency_label,
    gather_fail_fast,
    program_entries,
    sort_holdings,
    summarize_programs,
    summarize_transactions,
)
from tests.conftest import (
    DAY,
    INVALID_ADDR,
    MINT_BONK,
    MINT_JUP,
    MINT_USDC,
    NOW,
    NOW_TS,
    RPC_URL,
    make_rpc_handler,
    make_signatures,
    program_derived_address,
    raw_signature,
    raw_token_account,
)

# ── frequency_label ───────────────────────────────────────────────────────────


def test_frequency_per_day() -> None:
    assert frequency_label([0, DAY]) == ("~2.0 txns/day", 2.0)


def test_frequency_per_week() -> None:
    label, per_day = frequency_label([0, 7 * DAY])
    assert label == "~2.0 txns/week"
    assert per_day == pytest.approx(2.0 / 7)


def test_frequency_rounds_like_label() -> None:
    # 10 records over 9 hours = 26.666... per day
    label, per_day = frequency_label([i * 3600 for i in range(10)])
    assert label == "~26.7 txns/day"
    assert per_day == 26.7


@pytest.mark.parametrize("times", [[], [NOW_TS], [NOW_TS, NOW_TS, NOW_TS]])
def test_frequency_undefined(times: list[int]) -> None:
    assert frequency_label(times) == ("N/A", 0.0)


# ── summarize_transactions ────────────────────────────────────────────────────


def test_summary_empty() -> None:
    s = summarize_transactions([])
    assert s.recent == 0
    assert s.oldest is None and s.newest is None
    assert s.avg_frequency == "N/A"
    assert s.txs_per_day == 0.0
    assert s.success_rate is None
    assert s.txns == ()


def test_summary_metrics() -> None:
    sigs = make_signatures(10, spacing_seconds=3600, failed=2)
    s = summarize_transactions(sigs)
    assert s.recent == 10
    assert s.newest == iso_from_unix(NOW_TS)
    assert s.oldest == iso_from_unix(NOW_TS - 9 * 3600)
    assert s.avg_frequency == "~26.7 txns/day"
    assert s.success_rate == 80.0
    assert s.txns == tuple(sigs[:SAMPLE_SIZE])


def test_summary_success_rate_one_decimal() -> None:
    sigs = make_signatures(3, failed=1)
    assert summarize_transactions(sigs).success_rate == 66.7


def test_summary_ignores_untimed_records_for_span() -> None:
    sigs = [
        SignatureRecord("a", None, True),
        SignatureRecord("b", NOW_TS, True),
    ]
    s = summarize_transactions(sigs)
    assert s.recent == 2
    assert s.oldest == s.newest == iso_from_unix(NOW_TS)
    assert s.avg_frequency == "N/A"


def test_summary_all_untimed() -> None:
    s = summarize_transactions([SignatureRecord("a", None, False)])
    assert s.oldest is None
    assert s.success_rate == 0.0


# ── Holdings / programs ───────────────────────────────────────────────────────


def test_sort_holdings_by_ui_amount() -> None:
    small_raw_big_ui = TokenHolding(MINT_USDC, "5000000", 6)      # 5.0
    big_raw_small_ui = TokenHolding(MINT_BONK, "90000000", 9)     # 0.09
    mid = TokenHolding(MINT_JUP, "300", 2)                         # 3.0
    ordered = sort_holdings([big_raw_small_ui, mid, small_raw_big_ui])
    assert [h.mint for h in ordered] == [MINT_USDC, MINT_JUP, MINT_BONK]


def test_programs_section_is_empty_with_note() -> None:
    usage = summarize_programs(make_signatures(20))
    assert usage.programs == ()
    assert usage.note == PROGRAM_USAGE_NOTE
    assert usage.to_dict() == {"note": PROGRAM_USAGE_NOTE, "list": []}


def test_program_entries_labelled_and_ranked() -> None:
    entries = program_entries(
        {
            "11111111111111111111111111111111": 2,
            "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4": 7,
            "M2mx93ekt1fmXSVkTrUL9xVFHkmME8HTUi5Cyc5aF7K": 4,
            "UnknownProgram111": 1,
        }
    )
    assert [(e["label"], e["count"], e["category"]) for e in entries] == [
        ("Jupiter v6", 7, "defi"),
        ("Magic Eden v2", 4, "nft"),
        ("System Program", 2, None),
        (None, 1, None),
    ]


# ── assemble_report ───────────────────────────────────────────────────────────


def test_assemble_report() -> None:
    accounts = [
        TokenHolding(MINT_BONK, "0", 5),
        TokenHolding(MINT_USDC, "1000000", 6),
        TokenHolding(MINT_JUP, "250000000", 6),
    ]
    report = assemble_report(
        "WalletAddr",
        lamports=3_000_000_000,
        accounts=accounts,
        signatures=make_signatures(10, failed=2),
        rpc_url=RPC_URL,
        now=NOW,
    )
    assert report.timestamp == NOW.isoformat()
    assert report.sol == 3.0
    assert report.token_account_count == 3
    assert [h.mint for h in report.holdings] == [MINT_JUP, MINT_USDC]
    assert report.transactions.recent == 10
    assert report.classification.type == "Standard Wallet"
    assert report.rpc_url == RPC_URL


def test_assemble_empty_wallet() -> None:
    report = assemble_report("WalletAddr", 0, [], [], rpc_url=RPC_URL, now=NOW)
    assert report.risk.score == 90
    assert report.risk.level == "CRITICAL"
    assert report.classification.tags == ("new",)
    assert report.to_dict()["tokens"] == {"count": 0, "nonZero": 0, "holdings": []}


# ── gather_fail_fast ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_gather_fail_fast_returns_in_order() -> None:
    async def value(v: int, delay: float) -> int:
        await asyncio.sleep(delay)
        return v

    assert await gather_fail_fast(value(1, 0.02), value(2, 0.0), value(3, 0.01)) == [1, 2, 3]


@pytest.mark.asyncio
async def test_gather_fail_fast_cancels_siblings() -> None:
    cancelled = asyncio.Event()

    async def slow() -> None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    async def failing() -> None:
        await asyncio.sleep(0)
        raise RpcError("boom")

    with pytest.raises(RpcError, match="boom"):
        await gather_fail_fast(slow(), failing())
    assert cancelled.is_set()


# ── build_report (HTTP mocked) ────────────────────────────────────────────────


@pytest.mark.asyncio
@respx.mock
async def test_build_report_end_to_end(wallet_address: str) -> None:
    now_ts = int(time.time())
    wallets = {
        wallet_address: {
            "lamports": 12_500_000_000,
            "accounts": [
                raw_token_account(MINT_USDC, 42_000_000, 6),
                raw_token_account(MINT_BONK, 0, 5),
            ],
            "signatures": [
                raw_signature(f"sig{i}", now_ts - i * 3600 - 30 * DAY) for i in range(10)
            ],
        }
    }
    route = respx.post(RPC_URL).mock(side_effect=make_rpc_handler(wallets))

    report = await build_report(wallet_address, RPC_URL)

    assert route.call_count == 3
    assert report.address == wallet_address
    assert report.lamports == 12_500_000_000
    assert report.token_account_count == 2
    assert len(report.holdings) == 1
    assert report.holdings[0].ui_amount == Decimal("42")
    assert report.transactions.recent == 10
    assert report.transactions.success_rate == 100.0
    # baseline, high success rate only
    assert report.risk.score == 45
    assert report.classification.type == "Standard Wallet"
    assert report.to_dict()["meta"]["rpc"] == RPC_URL


@pytest.mark.asyncio
@respx.mock
async def test_build_report_rpc_failure_propagates(wallet_address: str) -> None:
    respx.post(RPC_URL).mock(
        side_effect=make_rpc_handler({wallet_address: {}}, fail_method="getSignaturesForAddress")
    )
    with pytest.raises(RpcError, match="getSignaturesForAddress"):
        await build_report(wallet_address, RPC_URL)


@pytest.mark.asyncio
@respx.mock(assert_all_called=False)
async def test_invalid_address_makes_no_request() -> None:
    route = respx.post(RPC_URL)
    with pytest.raises(InvalidAddressError):
        await build_report(INVALID_ADDR, RPC_URL)
    assert not route.called


@pytest.mark.asyncio
@respx.mock(assert_all_called=False)
async def test_off_curve_address_makes_no_request() -> None:
    route = respx.post(RPC_URL)
    with pytest.raises(NotAWalletError):
        await build_report(program_derived_address(), RPC_URL)
    assert not route.called
