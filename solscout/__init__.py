"""solscout — agent-first Solana wallet intelligence."""

__version__ = "2.0.0"
AGENT_ID = f"solana-scout/{__version__}"
