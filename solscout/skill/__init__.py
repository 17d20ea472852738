"""Skill package for agent framework integration."""

from solscout.skill.scout_skill import ScoutSkill, SkillError

__all__ = [
    "ScoutSkill",
    "SkillError",
]
