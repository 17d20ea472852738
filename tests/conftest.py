"""Pytest fixtures shared across all solscout tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from solscout.config import OutputConfig, RPCConfig, ScoutConfig
from solscout.models import SignatureRecord, TokenHolding, TransactionSummary
from solscout.programs import SPL_TOKEN_PROGRAM_ID

RPC_URL = "https://rpc.solscout.test/v1"

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
NOW_TS = int(NOW.timestamp())
DAY = 86_400

INVALID_ADDR = "notavalidaddress123"
VOTE_PROGRAM = "Vote111111111111111111111111111111111111111"

MINT_USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
MINT_BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
MINT_JUP = "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the user's config file and SOLSCOUT_* variables out of tests."""
    for var in (
        "SOLSCOUT_RPC_URL",
        "SOLSCOUT_RPC_TIMEOUT",
        "SOLSCOUT_COMMITMENT",
        "SOLSCOUT_OUTPUT_FORMAT",
        "SOLSCOUT_NO_COLOR",
        "SOLSCOUT_CONFIG",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SOLSCOUT_CONFIG_PATH", str(tmp_path / "absent.toml"))


# ── Addresses ─────────────────────────────────────────────────────────────────


def new_wallet() -> str:
    """A fresh on-curve wallet address."""
    return str(Keypair().pubkey())


def program_derived_address() -> str:
    pda, _bump = Pubkey.find_program_address(
        [b"solscout-test"], Pubkey.from_string(SPL_TOKEN_PROGRAM_ID)
    )
    return str(pda)


@pytest.fixture
def wallet_address() -> str:
    return new_wallet()


@pytest.fixture
def other_wallet_address() -> str:
    return new_wallet()


# ── Config fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def sample_config() -> ScoutConfig:
    """Minimal valid ScoutConfig for tests."""
    return ScoutConfig(
        rpc=RPCConfig(url=RPC_URL, timeout_seconds=5.0, commitment="confirmed"),
        output=OutputConfig(default_format="json", color=False),
    )


# ── Model builders ────────────────────────────────────────────────────────────


def make_holdings(count: int, amount: str = "1000000", decimals: int = 6) -> tuple[TokenHolding, ...]:
    return tuple(TokenHolding(f"mint{i:03d}", amount, decimals) for i in range(count))


def make_summary(
    recent: int = 0,
    success_rate: float | None = None,
    oldest: str | None = None,
    newest: str | None = None,
    txs_per_day: float = 0.0,
    avg_frequency: str = "N/A",
) -> TransactionSummary:
    return TransactionSummary(
        recent=recent,
        oldest=oldest,
        newest=newest,
        avg_frequency=avg_frequency,
        txs_per_day=txs_per_day,
        success_rate=success_rate,
    )


def days_ago_iso(days: float) -> str:
    return datetime.fromtimestamp(NOW_TS - days * DAY, tz=timezone.utc).isoformat()


def make_signatures(
    count: int,
    spacing_seconds: int = 3600,
    failed: int = 0,
    start_ts: int = NOW_TS,
) -> list[SignatureRecord]:
    """Newest-first records; the last `failed` records carry an error."""
    return [
        SignatureRecord(
            signature=f"sig{i:04d}",
            block_time=start_ts - i * spacing_seconds,
            success=i < count - failed,
            slot=300_000_000 - i,
        )
        for i in range(count)
    ]


# ── Raw RPC payloads ──────────────────────────────────────────────────────────


def raw_token_account(mint: str, amount: int, decimals: int) -> dict[str, Any]:
    """getParsedTokenAccountsByOwner value entry (jsonParsed encoding)."""
    return {
        "pubkey": "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T",
        "account": {
            "data": {
                "parsed": {
                    "info": {
                        "isNative": False,
                        "mint": mint,
                        "owner": "owner",
                        "state": "initialized",
                        "tokenAmount": {
                            "amount": str(amount),
                            "decimals": decimals,
                            "uiAmount": amount / 10**decimals,
                            "uiAmountString": str(amount / 10**decimals),
                        },
                    },
                    "type": "account",
                },
                "program": "spl-token",
                "space": 165,
            },
            "executable": False,
            "lamports": 2039280,
            "owner": SPL_TOKEN_PROGRAM_ID,
            "rentEpoch": 18446744073709551615,
        },
    }


def raw_signature(
    signature: str, block_time: int | None, err: Any = None, slot: int = 250_000_000
) -> dict[str, Any]:
    """getSignaturesForAddress result entry."""
    return {
        "signature": signature,
        "slot": slot,
        "err": err,
        "memo": None,
        "blockTime": block_time,
        "confirmationStatus": "finalized",
    }


def rpc_result(request: httpx.Request, result: Any) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


def rpc_error(request: httpx.Request, code: int, message: str) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(
        200,
        json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": code, "message": message}},
    )


def make_rpc_handler(
    wallets: dict[str, dict[str, Any]],
    fail_method: str | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """
    respx side effect serving per-address wallet data.

    wallets: {address: {"lamports": int, "accounts": [raw], "signatures": [raw]}}
    fail_method: JSON-RPC method answered with an error object.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        address = body["params"][0]
        if method == fail_method:
            return rpc_error(request, -32005, "Node is behind by 42 slots")
        data = wallets[address]
        if method == "getBalance":
            return rpc_result(request, {"context": {"slot": 1}, "value": data.get("lamports", 0)})
        if method == "getParsedTokenAccountsByOwner":
            return rpc_result(request, {"context": {"slot": 1}, "value": data.get("accounts", [])})
        if method == "getSignaturesForAddress":
            return rpc_result(request, data.get("signatures", []))
        return rpc_error(request, -32601, "Method not found")

    return handler
