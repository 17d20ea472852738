"""Basic wallet report example.

This script runs solscout against one wallet and prints the headline numbers.
"""

import json
import subprocess
import sys


def main(address: str) -> None:
    """Profile a single Solana wallet."""
    print(f"Profiling {address}...")

    result = subprocess.run(
        ["solscout", "analyze", address, "--json"],
        capture_output=True,
        text=True,
    )

    if result.returncode != 0:
        error = json.loads(result.stderr)
        print(f"Error [{error['error']}]: {error['message']}")
        return

    report = json.loads(result.stdout)

    print(f"\nBalance:   {report['balance']['sol']} SOL")
    print(f"Tokens:    {report['tokens']['nonZero']} non-zero of {report['tokens']['count']} accounts")
    print(f"Activity:  {report['transactions']['recent']} recent txns, {report['transactions']['avgFrequency']}")
    print(f"Risk:      {report['risk']['score']}/100 ({report['risk']['level']})")
    print(f"Type:      {report['classification']['type']}")

    if report["tokens"]["holdings"]:
        print("\nTop Holdings:")
        for h in report["tokens"]["holdings"][:5]:
            print(f"  • {h['mint'][:8]}…  {h['uiAmount']}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")
