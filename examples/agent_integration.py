"""Agent integration example for solscout.

This script shows how an agent can use ScoutSkill to vet a counterparty
wallet and check whether two wallets look like the same owner.
"""

import asyncio
import sys

from solscout.skill import ScoutSkill, SkillError


async def vet_counterparty(skill: ScoutSkill, address: str) -> bool:
    """Return True when the wallet looks safe enough to transact with."""
    report = await skill.analyze(address)
    risk = report["risk"]

    print(f"🔎 {address[:10]}… {report['classification']['type']}")
    print(f"   Risk: {risk['score']}/100 ({risk['level']})")
    for factor in risk["factors"]:
        arrow = "▲" if factor["direction"] == "up" else "▼"
        print(f"   {arrow} {factor['label']} ({factor['impact']:+d})")

    return risk["level"] in ("LOW", "MODERATE")


async def check_sybil(skill: ScoutSkill, address1: str, address2: str) -> None:
    """Flag wallet pairs that are likely controlled by one owner."""
    comparison = await skill.compare(address1, address2)
    sim = comparison["similarity"]

    print(f"\n🔗 Similarity {sim['score']}/100: {sim['relationship']}")
    print(f"   {sim['relationshipDetail']}")
    if sim["relationship"] == "STRONGLY LINKED":
        print("   ⚠ Treat these wallets as one participant.")


async def main(address1: str, address2: str) -> None:
    skill = ScoutSkill()
    try:
        if await vet_counterparty(skill, address1):
            print("   ✓ Counterparty accepted")
        else:
            print("   ✗ Counterparty rejected")
        await check_sybil(skill, address1, address2)
    except SkillError as e:
        print(f"✗ solscout failed ({e.error_code}): {e}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: agent_integration.py ADDRESS1 ADDRESS2")
        sys.exit(1)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
