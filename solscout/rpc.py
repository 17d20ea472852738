"""
Solana JSON-RPC client.

Exposes the three read calls the report builder needs:
  getBalance                     → lamports
  getParsedTokenAccountsByOwner  → TokenHolding list (SPL Token program only)
  getSignaturesForAddress        → SignatureRecord list (newest first)

API docs: https://solana.com/docs/rpc/http

Design decisions:
- Uses async httpx; one AsyncClient per SolanaRPCClient, closed on exit.
- No retries and no caching. Every failure surfaces as an RpcError subclass.
- Malformed token-account entries are skipped, not fatal.
"""

from __future__ import annotations

from typing import Any

import httpx

from solscout.exceptions import (
    RateLimitError,
    RpcConnectionError,
    RpcError,
    RpcTimeoutError,
)
from solscout.models import SignatureRecord, TokenHolding
from solscout.programs import SPL_TOKEN_PROGRAM_ID

# getSignaturesForAddress page size; activity metrics never look further back
SIGNATURE_FETCH_LIMIT = 100


class SolanaRPCClient:
    """
    Async Solana JSON-RPC client.

    Usage:
        async with SolanaRPCClient(endpoint) as client:
            lamports = await client.get_balance(address)
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        commitment: str = "confirmed",
    ) -> None:
        self.endpoint = endpoint
        self.commitment = commitment
        self._client = httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    async def __aenter__(self) -> SolanaRPCClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get_balance(self, address: str) -> int:
        """Lamport balance of `address`."""
        result = await self._call("getBalance", [address, {"commitment": self.commitment}])
        try:
            return int(result["value"])
        except (KeyError, TypeError, ValueError) as e:
            raise RpcError(f"Malformed getBalance result: {result!r}") from e

    async def get_parsed_token_accounts_by_owner(self, address: str) -> list[TokenHolding]:
        """SPL token accounts owned by `address`, in RPC order."""
        result = await self._call(
            "getParsedTokenAccountsByOwner",
            [
                address,
                {"programId": SPL_TOKEN_PROGRAM_ID},
                {"encoding": "jsonParsed", "commitment": self.commitment},
            ],
        )
        accounts = result.get("value") if isinstance(result, dict) else None
        if not isinstance(accounts, list):
            raise RpcError(f"Malformed getParsedTokenAccountsByOwner result: {result!r}")

        holdings: list[TokenHolding] = []
        for raw in accounts:
            h = self._parse_token_account(raw)
            if h:
                holdings.append(h)
        return holdings

    async def get_signatures_for_address(
        self, address: str, limit: int = SIGNATURE_FETCH_LIMIT
    ) -> list[SignatureRecord]:
        """Most recent `limit` signatures for `address`, newest first."""
        result = await self._call(
            "getSignaturesForAddress",
            [address, {"limit": limit, "commitment": self.commitment}],
        )
        if not isinstance(result, list):
            raise RpcError(f"Malformed getSignaturesForAddress result: {result!r}")

        records: list[SignatureRecord] = []
        for raw in result:
            r = self._parse_signature(raw)
            if r:
                records.append(r)
        return records

    async def close(self) -> None:
        await self._client.aclose()

    # ──────────────────────────────────────────────────────────────
    # Private helpers
    # ──────────────────────────────────────────────────────────────

    async def _call(self, method: str, params: list[Any]) -> Any:
        """POST one JSON-RPC request and return its `result` member."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            resp = await self._client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise RpcTimeoutError(f"RPC timeout on {method}: {e}") from e
        except httpx.ConnectError as e:
            raise RpcConnectionError(f"Cannot connect to RPC endpoint {self.endpoint}: {e}") from e
        except httpx.HTTPError as e:
            raise RpcError(f"RPC transport error on {method}: {e}") from e

        if resp.status_code == 429:
            retry_after = resp.headers.get("retry-after", "")
            raise RateLimitError(
                f"RPC rate limit exceeded on {method}",
                retry_after=int(retry_after) if retry_after.isdigit() else 60,
            )
        if resp.status_code != 200:
            raise RpcError(
                f"RPC {method} returned HTTP {resp.status_code}",
                details={"status": resp.status_code, "body": resp.text[:500]},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(f"RPC {method} response was not valid JSON") from e

        if not isinstance(data, dict):
            raise RpcError(f"RPC {method} response was not a JSON object")

        if data.get("error"):
            err = data["error"]
            message = err.get("message", str(err)) if isinstance(err, dict) else str(err)
            code = err.get("code") if isinstance(err, dict) else None
            raise RpcError(
                f"RPC {method} failed: {message}",
                details={"method": method, "code": code},
            )

        if "result" not in data:
            raise RpcError(f"RPC {method} response has no result")
        return data["result"]

    def _parse_token_account(self, raw: dict[str, Any]) -> TokenHolding | None:
        """Parse one jsonParsed token account entry."""
        try:
            info = raw["account"]["data"]["parsed"]["info"]
            token_amount = info["tokenAmount"]
            return TokenHolding(
                mint=info["mint"],
                amount=str(int(token_amount["amount"])),
                decimals=int(token_amount["decimals"]),
            )
        except (KeyError, ValueError, TypeError):
            return None

    def _parse_signature(self, raw: dict[str, Any]) -> SignatureRecord | None:
        """Parse one getSignaturesForAddress entry."""
        try:
            block_time = raw.get("blockTime")
            return SignatureRecord(
                signature=raw["signature"],
                block_time=int(block_time) if block_time is not None else None,
                success=raw.get("err") is None,
                slot=int(raw.get("slot", 0)),
                memo=raw.get("memo"),
            )
        except (KeyError, ValueError, TypeError, AttributeError):
            return None
