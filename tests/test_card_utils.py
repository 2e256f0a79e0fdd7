"""
tests/test_card_utils.py
"""

import pytest

from advisor_models import PlayerCardLevelInput
from card_utils import (
    find_duplicate_ids,
    generate_deck_link,
    levels_to_map,
    make_deck_from_ids,
    parse_deck_link,
)
from conftest import HOG, HOG_CYCLE_DECK


def test_make_deck_from_ids_reports_missing(catalog):
    cards, missing = make_deck_from_ids([HOG, "999", "28000000"], catalog)

    assert [c.card_id for c in cards] == [HOG, "28000000"]
    assert missing == ["999"]


def test_find_duplicate_ids():
    assert find_duplicate_ids(["a", "b", "a", "c", "b", "a"]) == ["a", "b"]
    assert find_duplicate_ids(HOG_CYCLE_DECK) == []


def test_levels_to_map():
    assert levels_to_map(None) is None
    levels = [
        PlayerCardLevelInput(card_id=HOG, level=11),
        PlayerCardLevelInput(card_id="28000000", level=9),
    ]
    assert levels_to_map(levels) == {HOG: 11, "28000000": 9}


def test_parse_copy_deck_link():
    link = "https://link.clashroyale.com/?clashroyale://copyDeck?deck=" + ";".join(HOG_CYCLE_DECK)
    assert parse_deck_link(link) == HOG_CYCLE_DECK


def test_parse_shared_deck_link_with_trailing_separator():
    link = "https://link.clashroyale.com/deck/en?deck=" + ";".join(HOG_CYCLE_DECK) + ";"
    assert parse_deck_link(link) == HOG_CYCLE_DECK


def test_parse_rejects_bad_links():
    with pytest.raises(ValueError, match="Invalid deck link format"):
        parse_deck_link("https://example.com/decks/42")

    with pytest.raises(ValueError, match="Deck has 7 cards, expected 8"):
        parse_deck_link("https://link.clashroyale.com/deck/en?deck=" + ";".join(HOG_CYCLE_DECK[:7]))


def test_generate_deck_link():
    assert generate_deck_link(HOG_CYCLE_DECK) == (
        "https://link.clashroyale.com/deck/en?deck="
        "26000021;26000014;26000030;26000010;28000000;28000011;27000000;26000038"
    )
    assert parse_deck_link(generate_deck_link(HOG_CYCLE_DECK)) == HOG_CYCLE_DECK

    with pytest.raises(ValueError):
        generate_deck_link(HOG_CYCLE_DECK[:7])
