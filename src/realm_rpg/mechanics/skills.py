"""Skill mechanics: proficiency tiers and skill templates, pure math."""
from __future__ import annotations

import logging

from realm_rpg.models.item import Skill

logger = logging.getLogger(__name__)

# Proficiency needed to leave each tier; the last tier has no ceiling to leave
PROFICIENCY_TIERS: list[tuple[str, int | None]] = [
    ("Novice", 100),
    ("Adept", 200),
    ("Expert", 400),
    ("Master", 800),
    ("Transcendent", None),
]

POWER_MULTIPLIERS = {
    "Novice": 1.0,
    "Adept": 2.0,
    "Expert": 3.0,
    "Master": 4.0,
    "Transcendent": 5.0,
}

COST_MULTIPLIERS = {
    "Novice": 1.0,
    "Adept": 0.8,
    "Expert": 0.6,
    "Master": 0.4,
    "Transcendent": 0.2,
}

BASIC_ATTACK = "basic attack"
UNKNOWN_SKILL_COST = 5

SKILL_TEMPLATES: dict[str, dict] = {
    BASIC_ATTACK: {"effect": "DAMAGE_HP", "base_power": 10, "resource_cost": 0},
    "heavy strike": {"effect": "DAMAGE_HP", "base_power": 30, "resource_cost": 10},
    "healing art": {"effect": "HEAL_HP", "base_power": 40, "resource_cost": 15},
    "qi restoration": {"effect": "RESTORE_MP", "base_power": 40, "resource_cost": 0},
}


def _tier_index(name: str) -> int:
    for i, (tier, _) in enumerate(PROFICIENCY_TIERS):
        if tier.lower() == (name or "").strip().lower():
            return i
    return 0


def tier_ceiling(index: int) -> int:
    """Proficiency ceiling of a tier; the last tier reuses the previous one."""
    ceiling = PROFICIENCY_TIERS[index][1]
    if ceiling is None:
        ceiling = PROFICIENCY_TIERS[index - 1][1] or 0
    return ceiling


def get_template(name: str) -> dict:
    """Template for a skill name, falling back to the basic attack."""
    return SKILL_TEMPLATES.get(name.strip().lower(), SKILL_TEMPLATES[BASIC_ATTACK])


def skill_from_template(name: str, description: str = "") -> Skill:
    """New skill at the first proficiency tier.

    Names without a template get the basic attack effect at a small cost.
    """
    known = name.strip().lower() in SKILL_TEMPLATES
    template = get_template(name)
    return Skill(
        name=name,
        description=description,
        effect=template["effect"],
        resource_cost=template["resource_cost"] if known else UNKNOWN_SKILL_COST,
        proficiency=0,
        max_proficiency=tier_ceiling(0),
        proficiency_tier=PROFICIENCY_TIERS[0][0],
    )


def add_proficiency(skill: Skill, amount: int) -> Skill:
    """Add proficiency, promoting through tiers. Result stays in [0, max]."""
    index = _tier_index(skill.proficiency_tier)
    proficiency = max(0, skill.proficiency + amount)
    ceiling = tier_ceiling(index)

    while PROFICIENCY_TIERS[index][1] is not None and proficiency >= ceiling:
        proficiency -= ceiling
        index += 1
        ceiling = tier_ceiling(index)
        logger.debug(f"{skill.name} reached {PROFICIENCY_TIERS[index][0]}")

    return skill.model_copy(update={
        "proficiency": min(proficiency, ceiling),
        "max_proficiency": ceiling,
        "proficiency_tier": PROFICIENCY_TIERS[index][0],
    })


def effective_power(skill: Skill) -> int:
    base = get_template(skill.name)["base_power"]
    return int(base * POWER_MULTIPLIERS.get(skill.proficiency_tier, 1.0))


def effective_cost(skill: Skill) -> int:
    return max(0, int(skill.resource_cost * COST_MULTIPLIERS.get(skill.proficiency_tier, 1.0)))
