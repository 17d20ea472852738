"""Agent skill wrapper for the solscout CLI.

This module provides a Pythonic async API over the solscout CLI,
designed for use as an agent skill.

Usage:
    skill = ScoutSkill()
    report = await skill.analyze("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")
    if report["risk"]["level"] == "CRITICAL":
        ...

    comparison = await skill.compare(addr1, addr2)
    print(comparison["similarity"]["relationship"])
"""

from __future__ import annotations

import asyncio
import json


class SkillError(RuntimeError):
    """The CLI exited non-zero. Carries the parsed error code."""

    def __init__(self, message: str, error_code: str = "unknown_error") -> None:
        super().__init__(message)
        self.error_code = error_code


class ScoutSkill:
    """
    Agent skill wrapper for the solscout CLI.

    Wraps subprocess calls to solscout and provides typed async methods.
    All methods return parsed JSON dicts (not raw strings).

    Attributes:
        solscout_path: Path or name of the solscout executable.
        rpc_url: Optional endpoint passed as --rpc on every call.
    """

    def __init__(self, solscout_path: str = "solscout", rpc_url: str | None = None) -> None:
        self.solscout_path = solscout_path
        self.rpc_url = rpc_url

    async def analyze(self, address: str) -> dict:
        """
        Run solscout analyze --json.

        Returns:
            Parsed wallet report dict.

        Raises:
            SkillError: If solscout exits non-zero (invalid address, RPC failure, ...).
        """
        code, stdout, stderr = await self._run("analyze", address, *self._rpc_args(), "--json")
        if code != 0:
            self._raise_error(stderr)
        return json.loads(stdout)

    async def compare(self, address1: str, address2: str) -> dict:
        """
        Run solscout compare --json.

        Returns:
            Parsed comparison dict.

        Raises:
            SkillError: If solscout exits non-zero.
        """
        code, stdout, stderr = await self._run(
            "compare", address1, address2, *self._rpc_args(), "--json"
        )
        if code != 0:
            self._raise_error(stderr)
        return json.loads(stdout)

    def _rpc_args(self) -> list[str]:
        return ["--rpc", self.rpc_url] if self.rpc_url else []

    async def _run(self, *args: str) -> tuple[int, str, str]:
        """
        Run solscout with given arguments.

        Returns:
            (returncode, stdout, stderr) tuple.
        """
        proc = await asyncio.create_subprocess_exec(
            self.solscout_path,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return (
            proc.returncode or 0,
            stdout.decode(),
            stderr.decode(),
        )

    def _raise_error(self, stderr: str) -> None:
        """Parse error JSON from stderr and raise SkillError."""
        try:
            error = json.loads(stderr)
        except json.JSONDecodeError:
            raise SkillError(f"solscout error: {stderr.strip()}") from None
        code = error.get("error", "unknown_error")
        raise SkillError(
            f"solscout error [{code}]: {error.get('message', stderr)}",
            error_code=code,
        )
