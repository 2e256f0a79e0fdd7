# card_db.py - read-only card catalog loaded from the JSON data files

import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from card_types import CardRarity, CardRole, CardType, round_tenth

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("DECKBUILDER_DATA_DIR", Path(__file__).parent / "data"))

ICON_URL_TEMPLATE = "https://cdn.royaleapi.com/static/img/cards-150/{card_id}.png"


class CardRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    card_id: str
    name: str
    elixir: int = Field(..., ge=1, le=9)
    rarity: CardRarity
    card_type: CardType
    arena: int = Field(0, ge=0)
    roles: Tuple[CardRole, ...] = Field(..., min_length=1)
    icon_url: Optional[str] = None


class ArenaRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    arena_id: int
    name: str
    trophy_min: int
    trophy_max: int


class TopDeckRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    deck_id: str
    name: Optional[str] = None
    cards: Tuple[str, ...]
    win_rate: float
    usage_rate: float
    average_elixir: float
    trophy_min: int
    trophy_max: int


class CardCatalog:
    """
    Immutable in-memory index over the card pool.

    Catalog order (the order cards appear in cards.json) is significant:
    it is the tie-break for ranking and the scan order for swaps.
    """

    def __init__(
        self,
        cards: Iterable[CardRecord],
        arenas: Iterable[ArenaRecord] = (),
        top_decks: Iterable[TopDeckRecord] = (),
    ) -> None:
        self._cards: Tuple[CardRecord, ...] = tuple(cards)
        self._card_by_id: Dict[str, CardRecord] = {c.card_id: c for c in self._cards}
        self._arenas: Tuple[ArenaRecord, ...] = tuple(arenas)
        self._arena_by_id: Dict[int, ArenaRecord] = {a.arena_id: a for a in self._arenas}
        self._top_decks: Tuple[TopDeckRecord, ...] = tuple(top_decks)

    def __len__(self) -> int:
        return len(self._cards)

    # ---- cards ----

    def get_card_by_id(self, card_id: str) -> Optional[CardRecord]:
        return self._card_by_id.get(card_id)

    def get_cards_by_id(self, card_ids: Iterable[str]) -> List[CardRecord]:
        """Resolve ids in order. Unknown ids are dropped silently."""
        return [self._card_by_id[i] for i in card_ids if i in self._card_by_id]

    def get_all_cards(self) -> List[CardRecord]:
        return list(self._cards)

    def get_cards_by_role(
        self, role: CardRole, cards: Optional[Iterable[CardRecord]] = None
    ) -> List[CardRecord]:
        source = self._cards if cards is None else cards
        return [c for c in source if role in c.roles]

    def get_cards_unlocked_by_arena(self, max_arena_id: int) -> List[CardRecord]:
        return [c for c in self._cards if c.arena <= max_arena_id]

    def calculate_average_elixir(self, card_ids: Iterable[str]) -> float:
        cards = self.get_cards_by_id(card_ids)
        if not cards:
            return 0
        return round_tenth(sum(c.elixir for c in cards) / len(cards))

    # ---- arenas / meta decks ----

    def get_all_arenas(self) -> List[ArenaRecord]:
        return list(self._arenas)

    def get_arena_by_id(self, arena_id: int) -> Optional[ArenaRecord]:
        return self._arena_by_id.get(arena_id)

    def get_all_top_decks(self) -> List[TopDeckRecord]:
        return list(self._top_decks)

    def get_top_decks_by_trophy_range(
        self,
        min_trophies: Optional[int] = None,
        max_trophies: Optional[int] = None,
    ) -> List[TopDeckRecord]:
        decks = []
        for deck in self._top_decks:
            if min_trophies is not None and deck.trophy_max < min_trophies:
                continue
            if max_trophies is not None and deck.trophy_min > max_trophies:
                continue
            decks.append(deck)
        return decks

    def get_top_decks_by_arena(self, arena_id: int) -> List[TopDeckRecord]:
        arena = self.get_arena_by_id(arena_id)
        if arena is None:
            return self.get_all_top_decks()
        return self.get_top_decks_by_trophy_range(arena.trophy_min, arena.trophy_max)


def _read_json(path: Path, key: str) -> list:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)
    return raw.get(key, []) if isinstance(raw, dict) else raw


def row_to_card(row: dict) -> CardRecord:
    return CardRecord(
        card_id=str(row["id"]),
        name=row["name"],
        elixir=row["elixir"],
        rarity=CardRarity(row["rarity"]),
        card_type=CardType(row["type"]),
        arena=row.get("arena", 0),
        roles=tuple(CardRole(r) for r in row.get("roles", [])),
        icon_url=ICON_URL_TEMPLATE.format(card_id=row["id"]),
    )


def row_to_top_deck(row: dict) -> TopDeckRecord:
    trophy_range = row.get("trophyRange") or {}
    return TopDeckRecord(
        deck_id=str(row["id"]),
        name=row.get("name"),
        cards=tuple(str(c) for c in row["cards"]),
        win_rate=row.get("winRate", 0.0),
        usage_rate=row.get("usageRate", 0.0),
        average_elixir=row.get("averageElixir", 0.0),
        trophy_min=trophy_range.get("min", 0),
        trophy_max=trophy_range.get("max", 0),
    )


def load_catalog(data_dir: Path = DATA_DIR) -> CardCatalog:
    """Build a catalog from cards.json, arenas.json and top_decks.json."""
    data_dir = Path(data_dir)

    cards = [row_to_card(r) for r in _read_json(data_dir / "cards.json", "cards")]

    arenas_path = data_dir / "arenas.json"
    arenas = []
    if arenas_path.exists():
        arenas = [
            ArenaRecord(
                arena_id=r["id"],
                name=r["name"],
                trophy_min=r["trophyMin"],
                trophy_max=r["trophyMax"],
            )
            for r in _read_json(arenas_path, "arenas")
        ]

    decks_path = data_dir / "top_decks.json"
    top_decks = []
    if decks_path.exists():
        top_decks = [row_to_top_deck(r) for r in _read_json(decks_path, "decks")]

    logger.info(
        f"Loaded {len(cards)} cards, {len(arenas)} arenas, {len(top_decks)} top decks from {data_dir}"
    )
    return CardCatalog(cards, arenas, top_decks)


_catalog: Optional[CardCatalog] = None
_catalog_lock = threading.Lock()


def init_catalog(data_dir: Path = DATA_DIR) -> CardCatalog:
    """Load the shared catalog once. Later calls return the same instance."""
    global _catalog
    with _catalog_lock:
        if _catalog is None:
            _catalog = load_catalog(data_dir)
        return _catalog


def get_catalog() -> CardCatalog:
    if _catalog is not None:
        return _catalog
    return init_catalog()


def get_card(card_id: str) -> Optional[CardRecord]:
    return get_catalog().get_card_by_id(card_id)


def list_cards(
    role: Optional[CardRole] = None,
    max_arena: Optional[int] = None,
) -> List[CardRecord]:
    catalog = get_catalog()
    cards = (
        catalog.get_cards_unlocked_by_arena(max_arena)
        if max_arena is not None
        else catalog.get_all_cards()
    )
    if role is not None:
        cards = catalog.get_cards_by_role(role, cards)
    return cards


def count_cards() -> int:
    return len(get_catalog())


def resolve_catalog(catalog: Optional[CardCatalog] = None) -> CardCatalog:
    """Use the injected catalog when given, otherwise the shared one."""
    return catalog if catalog is not None else get_catalog()
