# card_utils.py
# Helpers to bridge between request payloads, the card catalog and deck links.

import logging
import re

from typing import Iterable, List, Optional, Sequence, Tuple
from card_db import CardCatalog, CardRecord, resolve_catalog
from card_types import DECK_SIZE
from scoring_models import PlayerLevels

logger = logging.getLogger(__name__)

DECK_LINK_REGEX = re.compile(r"link\.clashroyale\.com/(?:\?clashroyale://)?copyDeck\?deck=([0-9;]+)")
DECK_PARAM_REGEX = re.compile(r"deck=([0-9;]+)")
DECK_LINK_TEMPLATE = "https://link.clashroyale.com/deck/en?deck={cards}"


def make_deck_from_ids(
    card_ids: Iterable[str],
    catalog: Optional[CardCatalog] = None,
) -> Tuple[List[CardRecord], List[str]]:
    """
    Resolve card IDs against the catalog, keeping request order.

    Returns:
        (cards, missing_ids)
    """
    catalog = resolve_catalog(catalog)
    cards = []
    missing = []

    for card_id in card_ids:
        card = catalog.get_card_by_id(card_id)
        if card is None:
            missing.append(card_id)
            continue
        cards.append(card)

    if missing:
        logger.debug(f"Unresolved card IDs: {missing}")

    return cards, missing


def find_duplicate_ids(card_ids: Iterable[str]) -> List[str]:
    """IDs appearing more than once, in order of their second appearance."""
    seen = set()
    duplicates = []
    for card_id in card_ids:
        if card_id in seen and card_id not in duplicates:
            duplicates.append(card_id)
        seen.add(card_id)
    return duplicates


def levels_to_map(levels: Optional[Iterable]) -> Optional[PlayerLevels]:
    """
    Convert the request's list of {card_id, level} into a lookup.
    Later entries win when a card is listed twice. None stays None.
    """
    if levels is None:
        return None
    return {entry.card_id: entry.level for entry in levels}


def parse_deck_link(link: str) -> List[str]:
    """
    Extract the card IDs from a shared deck link.

    Accepts the official copyDeck link and any URL carrying a
    ``deck=id;id;...`` parameter.

    Raises:
        ValueError: if the link has no deck parameter or does not hold 8 cards
    """
    match = DECK_LINK_REGEX.search(link) or DECK_PARAM_REGEX.search(link)
    if match is None:
        raise ValueError("Invalid deck link format")

    card_ids = [card_id for card_id in match.group(1).split(";") if card_id]
    if len(card_ids) != DECK_SIZE:
        raise ValueError(f"Deck has {len(card_ids)} cards, expected {DECK_SIZE}")

    return card_ids


def generate_deck_link(card_ids: Sequence[str]) -> str:
    if len(card_ids) != DECK_SIZE:
        raise ValueError(f"Deck must contain exactly {DECK_SIZE} cards")
    return DECK_LINK_TEMPLATE.format(cards=";".join(card_ids))
