"""Wallet address validation.

Pure local checks, no network calls. Only key-pair controlled wallets are
profiled, so program ids and program-derived addresses (off the ed25519
curve) are rejected.
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from solscout.exceptions import InvalidAddressError, NotAWalletError


def parse_wallet_address(address: str) -> Pubkey:
    """
    Parse and validate a wallet address.

    Raises:
        InvalidAddressError: Not a base58-encoded 32-byte public key.
        NotAWalletError: Valid key, but off-curve (program / PDA).
    """
    try:
        pubkey = Pubkey.from_string(address)
    except (ValueError, TypeError) as e:
        raise InvalidAddressError(
            f"Invalid Solana address: {address}",
            details={"address": address},
        ) from e

    if not pubkey.is_on_curve():
        raise NotAWalletError(
            f"Address is not a wallet (off-curve / program address): {address}",
            details={"address": address},
        )
    return pubkey
