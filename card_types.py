# card_types.py - Card enumerations and deck-wide constants

import math
from enum import Enum
from typing import Dict, Tuple


DECK_SIZE = 8
MAX_CARD_LEVEL = 14
TOURNAMENT_LEVEL = 11  # below this a card counts as underleveled


# ----------------
# Rarity tiers (ordered)
# ----------------
class CardRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    CHAMPION = "champion"


# ----------------
# Card Types
# ----------------
class CardType(str, Enum):
    TROOP = "troop"
    SPELL = "spell"
    BUILDING = "building"


# ----------------
# Semantic roles a card can fill in a deck
# ----------------
class CardRole(str, Enum):
    WIN_CONDITION = "win_condition"
    SMALL_SPELL = "small_spell"
    BIG_SPELL = "big_spell"
    AIR_TARGETING = "air_targeting"
    TANK_KILLER = "tank_killer"
    TANK = "tank"
    SWARM = "swarm"
    ANTI_SWARM = "anti_swarm"
    CYCLE = "cycle"
    SUPPORT = "support"


# Every complete deck needs one of each. The order is the fill priority.
REQUIRED_ROLES: Tuple[CardRole, ...] = (
    CardRole.WIN_CONDITION,
    CardRole.SMALL_SPELL,
    CardRole.BIG_SPELL,
    CardRole.AIR_TARGETING,
    CardRole.TANK_KILLER,
)

# Ranking bonus per rarity tier
RARITY_BONUS: Dict[CardRarity, int] = {
    CardRarity.COMMON: 3,
    CardRarity.RARE: 2,
    CardRarity.EPIC: 1,
    CardRarity.LEGENDARY: 0,
    CardRarity.CHAMPION: 0,
}


def role_label(role: CardRole) -> str:
    """Human-readable role name ("win_condition" -> "win condition")."""
    return role.value.replace("_", " ")


def round_tenth(value: float) -> float:
    """Round half-up to one decimal place (2.625 -> 2.6, 2.25 -> 2.3)."""
    return math.floor(value * 10 + 0.5) / 10
