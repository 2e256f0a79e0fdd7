"""
tests/conftest.py
Shared card catalogs and decks.
"""

import pytest

from card_db import DATA_DIR, CardCatalog, CardRecord, load_catalog
from card_types import CardRarity, CardRole, CardType

HOG = "26000021"
GIANT = "26000003"
GOLEM = "26000009"
KNIGHT = "26000000"
ARCHERS = "26000001"

# Hog Rider, Musketeer, Ice Spirit, Skeletons, Fireball, The Log, Cannon, Ice Golem
HOG_CYCLE_DECK = [
    "26000021", "26000014", "26000030", "26000010",
    "28000000", "28000011", "27000000", "26000038",
]

# Knight, Archers, Skeletons, Minions, Bomber, Valkyrie, Goblins, Baby Dragon
GENERIC_TROOP_DECK = [
    "26000000", "26000001", "26000010", "26000005",
    "26000013", "26000011", "26000002", "26000015",
]

# Knight, Archers, Skeletons, Minions, Fireball, Zap, Cannon, Bomber: everything but a win condition
NO_WIN_CONDITION_DECK = [
    "26000000", "26000001", "26000010", "26000005",
    "28000000", "28000008", "27000000", "26000013",
]


def make_card(card_id, name, elixir, rarity, card_type, roles, arena=0) -> CardRecord:
    return CardRecord(
        card_id=card_id,
        name=name,
        elixir=elixir,
        rarity=CardRarity(rarity),
        card_type=CardType(card_type),
        arena=arena,
        roles=tuple(CardRole(r) for r in roles),
    )


MINI_CARDS = [
    make_card("1", "Raider", 4, "rare", "troop", ["win_condition"]),
    make_card("2", "Raider Twin", 4, "rare", "troop", ["win_condition"]),
    make_card("3", "Spark", 2, "common", "spell", ["small_spell", "cycle"]),
    make_card("4", "Boom", 4, "rare", "spell", ["big_spell"]),
    make_card("5", "Sharpshooter", 4, "rare", "troop", ["air_targeting", "tank_killer"]),
    make_card("6", "Brute", 5, "epic", "troop", ["tank", "support"], arena=2),
    make_card("7", "Imp", 1, "common", "troop", ["cycle", "swarm"], arena=1),
    make_card("8", "Sweeper", 3, "common", "troop", ["anti_swarm"]),
    make_card("9", "Helper", 3, "common", "troop", ["support"]),
    make_card("10", "Watchtower", 3, "common", "building", ["tank_killer"], arena=3),
]


@pytest.fixture(scope="session")
def catalog() -> CardCatalog:
    """The catalog shipped in data/."""
    return load_catalog(DATA_DIR)


@pytest.fixture
def mini_catalog() -> CardCatalog:
    """Ten hand-made cards, enough to build exactly one kind of deck."""
    return CardCatalog(MINI_CARDS)
