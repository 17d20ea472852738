"""Output format routing for solscout.

Converts report dicts (WalletReport.to_dict / ComparisonReport.to_dict)
to the requested format: json or text.

Design rules:
- JSON: 2-space indent, key order as produced, utf-8, Decimal → float
- Text: Rich-formatted sections; risk levels coloured green → red

All functions return strings. The caller writes to stdout.
"""

from __future__ import annotations

import io
import json
from decimal import Decimal
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

VALID_FORMATS = {"json", "text"}

# Holdings shown in text mode before collapsing into "... and N more"
MAX_TEXT_HOLDINGS = 10

_LEVEL_STYLES = {
    "LOW": "green",
    "MODERATE": "yellow",
    "HIGH": "dark_orange",
    "CRITICAL": "bold red",
}

_RELATIONSHIP_STYLES = {
    "STRONGLY LINKED": "bold red",
    "SIMILAR": "dark_orange",
    "MODERATE": "yellow",
    "DIFFERENT": "cyan",
    "UNRELATED": "green",
}


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal values."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


def format_output(data: Any, fmt: str, color: bool = True) -> str:
    """
    Format data for stdout output.

    Args:
        data: Report dict, comparison dict, or any JSON-serialisable value.
        fmt: "json" | "text"
        color: Emit ANSI styles in text mode.

    Raises:
        ValueError: If fmt is not a recognised format.
    """
    fmt = fmt.lower()
    if fmt not in VALID_FORMATS:
        raise ValueError(f"Unknown format {fmt!r}. Valid: {sorted(VALID_FORMATS)}")

    if fmt == "text":
        return format_text(data, color=color)
    return format_json(data)


# ── JSON ─────────────────────────────────────────────────────────────────────


def format_json(data: Any) -> str:
    """Pretty-print data as JSON (2-space indent)."""
    return json.dumps(data, indent=2, cls=DecimalEncoder, ensure_ascii=False)


# ── Text ─────────────────────────────────────────────────────────────────────


def format_text(data: Any, color: bool = True) -> str:
    """
    Format as human-readable Rich text.

    Handles:
    - Comparison reports (dict with type == "comparison")
    - Wallet reports (dict with 'classification')
    - Generic dict fallback
    """
    buf = io.StringIO()
    console = Console(
        file=buf,
        highlight=False,
        markup=True,
        width=120,
        no_color=not color,
        force_terminal=color,
    )

    if isinstance(data, dict) and data.get("type") == "comparison":
        _render_comparison(console, data)
    elif isinstance(data, dict) and "classification" in data:
        _render_report(console, data)
    else:
        console.print_json(json.dumps(data, cls=DecimalEncoder))

    return buf.getvalue()


def _short(address: str, head: int = 8) -> str:
    return f"{address[:head]}…" if len(address) > head else address


def _section(console: Console, title: str) -> None:
    console.print()
    console.rule(f"[bold]{title}[/bold]", align="left")


def _render_report(console: Console, r: dict[str, Any]) -> None:
    console.rule("[bold blue]SOLANA SCOUT REPORT[/bold blue]")
    console.print(f"Address:    [cyan]{escape(r.get('address', ''))}[/cyan]")
    console.print(f"Scanned:    {escape(r.get('timestamp', ''))}")
    console.print(f"RPC:        {escape(r.get('meta', {}).get('rpc', ''))}")

    balance = r.get("balance", {})
    _section(console, "BALANCE")
    console.print(f"SOL Balance:     {balance.get('sol', 0)} SOL")
    console.print(f"Lamports:        {balance.get('lamports', 0)}")

    tokens = r.get("tokens", {})
    holdings = tokens.get("holdings", [])
    _section(console, "TOKEN HOLDINGS")
    console.print(f"Token Accounts:  {tokens.get('count', 0)}")
    console.print(f"Non-zero:        {tokens.get('nonZero', 0)}")
    if holdings:
        table = Table(show_header=True, header_style="bold blue")
        table.add_column("Mint", style="cyan", no_wrap=True)
        table.add_column("Balance", justify="right")
        table.add_column("Decimals", justify="right")
        for h in holdings[:MAX_TEXT_HOLDINGS]:
            table.add_row(escape(_short(h.get("mint", ""))), str(h.get("uiAmount", "")), str(h.get("decimals", "")))
        console.print(table)
        if len(holdings) > MAX_TEXT_HOLDINGS:
            console.print(f"... and {len(holdings) - MAX_TEXT_HOLDINGS} more")

    txs = r.get("transactions", {})
    _section(console, "TRANSACTION ACTIVITY")
    console.print(f"Recent Txns:     {txs.get('recent', 0)}")
    console.print(f"First Seen:      {escape(txs.get('oldestSignature') or 'N/A')}")
    console.print(f"Last Active:     {escape(txs.get('newestSignature') or 'N/A')}")
    console.print(f"Avg Frequency:   {escape(txs.get('avgFrequency', 'N/A'))}")
    console.print(f"Success Rate:    {txs.get('successRate') or 'N/A'}")

    programs = r.get("programs", {})
    _section(console, "PROGRAMS USED")
    if programs.get("list"):
        for p in programs["list"]:
            console.print(
                f"  • {escape(_short(p.get('id', ''), 16))}  ({p.get('count', 0)} interactions) "
                f"{escape(p.get('label') or '')}"
            )
    else:
        console.print(f"[dim]{escape(programs.get('note', 'None'))}[/dim]")

    risk = r.get("risk", {})
    level = risk.get("level", "")
    _section(console, "RISK PROFILE")
    console.print(f"Risk Score:      {risk.get('score', 0)}/100")
    console.print(Text.assemble("Risk Level:      ", Text(level, style=_LEVEL_STYLES.get(level, ""))))
    for f in risk.get("factors", []):
        impact = f.get("impact", 0)
        arrow = Text("▲", style="red") if f.get("direction") == "up" else Text("▼", style="green")
        console.print(Text.assemble("  ", arrow, f" {f.get('label', '')} ({impact:+d})"))

    cls = r.get("classification", {})
    _section(console, "WALLET CLASSIFICATION")
    console.print(f"Type:            [bold]{escape(cls.get('type', ''))}[/bold]")
    console.print(f"Description:     {escape(cls.get('description', ''))}")
    console.print(f"Tags:            {escape(', '.join(cls.get('tags', [])))}")


def _render_comparison(console: Console, c: dict[str, Any]) -> None:
    console.rule("[bold blue]SOLANA SCOUT COMPARISON[/bold blue]")

    wallets = c.get("wallets", {})
    risk = c.get("riskComparison", {})
    balances = c.get("balanceComparison", {})

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("", style="bold")
    table.add_column("Wallet 1", style="cyan")
    table.add_column("Wallet 2", style="cyan")
    w1, w2 = wallets.get("wallet1", {}), wallets.get("wallet2", {})
    table.add_row("Address", escape(w1.get("address", "")), escape(w2.get("address", "")))
    table.add_row("Type", w1.get("classification", ""), w2.get("classification", ""))
    table.add_row(
        "Risk",
        f"{risk.get('wallet1', {}).get('score', '')} {w1.get('risk', '')}",
        f"{risk.get('wallet2', {}).get('score', '')} {w2.get('risk', '')}",
    )
    table.add_row(
        "SOL",
        str(balances.get("wallet1", {}).get("sol", "")),
        str(balances.get("wallet2", {}).get("sol", "")),
    )
    console.print(table)

    sim = c.get("similarity", {})
    breakdown = sim.get("breakdown", {})
    relationship = sim.get("relationship", "")
    _section(console, "SIMILARITY")
    console.print(f"Score:           {sim.get('score', 0)}/100")
    console.print(
        Text.assemble(
            "Relationship:    ",
            Text(relationship, style=_RELATIONSHIP_STYLES.get(relationship, "")),
            f" — {sim.get('relationshipDetail', '')}",
        )
    )
    console.print(f"Token Overlap:   {breakdown.get('tokenOverlap', 0)}%")
    console.print(f"Activity:        {breakdown.get('activitySimilarity', 0)}%")
    console.print(f"Balance Ratio:   {breakdown.get('balanceRatio', 0)}% ({balances.get('ratio', 'N/A')})")
    console.print(f"Same Type:       {'yes' if breakdown.get('classificationMatch') else 'no'}")
    console.print(f"Shared Tags:     {', '.join(breakdown.get('sharedTags', [])) or '—'}")
    console.print(f"Risk Delta:      {risk.get('delta', 0)}")

    shared = c.get("sharedTokens", {})
    _section(console, f"SHARED TOKENS ({shared.get('count', 0)})")
    for t in shared.get("tokens", [])[:MAX_TEXT_HOLDINGS]:
        console.print(
            f"  • {escape(_short(t.get('mint', '')))}  {t.get('wallet1Balance')} / {t.get('wallet2Balance')}"
        )
