"""
Custom exception hierarchy for solscout.

Every error is terminal for the current unit of work (one report or one
comparison). cli.py catches all ScoutError subclasses, writes to_dict()
as JSON to stderr and exits with the error's exit_code.

Hierarchy:
  ScoutError
    DataError
      InvalidAddressError — string is not a valid base58 public key
      NotAWalletError     — valid key, but off-curve (program / PDA)
    RpcError              — any failure of the three RPC operations
      RpcTimeoutError
      RpcConnectionError
      RateLimitError
    ConfigError
      ConfigInvalidError
"""


class ScoutError(Exception):
    """Base exception for all solscout errors."""

    exit_code: int = 1
    error_code: str = "unknown_error"

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class DataError(ScoutError):
    """Input address rejected before any network call."""

    error_code = "data_error"


class InvalidAddressError(DataError):
    """Address does not parse as a Solana public key."""

    error_code = "invalid_address"


class NotAWalletError(DataError):
    """Address is off the ed25519 curve, i.e. a program or program-derived address."""

    error_code = "not_a_wallet"


class RpcError(ScoutError):
    """RPC endpoint failed or returned an error object."""

    error_code = "rpc_error"


class RpcTimeoutError(RpcError):
    """Request timed out."""

    error_code = "rpc_timeout"


class RpcConnectionError(RpcError):
    """Could not connect to the RPC endpoint."""

    error_code = "rpc_connection_failed"


class RateLimitError(RpcError):
    """RPC provider rate limit exceeded (HTTP 429)."""

    error_code = "rate_limited"

    def __init__(self, message: str, retry_after: int = 60) -> None:
        super().__init__(message, details={"retry_after_seconds": retry_after})
        self.retry_after = retry_after


class ConfigError(ScoutError):
    """Config file or environment is malformed."""

    error_code = "config_error"


class ConfigInvalidError(ConfigError):
    """Config file exists but contains invalid TOML or invalid values."""

    error_code = "config_invalid"
