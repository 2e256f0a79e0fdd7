"""
tests/test_swap_advisor.py
"""

from card_db import CardCatalog
from deck_scoring import score_deck
from scoring_models import ScoringConfig, ScoringWeights
from swap_advisor import MAX_SWAP_SUGGESTIONS, SWAP_CANDIDATES_PER_SLOT, suggest_swaps
from conftest import GIANT, GOLEM, HOG_CYCLE_DECK, KNIGHT, NO_WIN_CONDITION_DECK, make_card


def test_every_suggestion_improves_by_more_than_one(catalog):
    for deck in (HOG_CYCLE_DECK, NO_WIN_CONDITION_DECK):
        for suggestion in suggest_swaps(deck, catalog=catalog):
            assert suggestion.score_after - suggestion.score_before > 1
            assert suggestion.improvement > 1


def test_swap_adds_missing_win_condition(catalog):
    suggestions = suggest_swaps(NO_WIN_CONDITION_DECK, catalog=catalog)

    assert 0 < len(suggestions) <= MAX_SWAP_SUGGESTIONS
    improvements = [s.improvement for s in suggestions]
    assert improvements == sorted(improvements, reverse=True)

    pairs = {(s.remove_card, s.add_card) for s in suggestions}
    assert (KNIGHT, GIANT) in pairs
    assert (KNIGHT, GOLEM) in pairs
    assert suggestions[0].remove_card == KNIGHT

    giant_swap = next(s for s in suggestions if s.add_card == GIANT)
    assert giant_swap.score_before == 65.4
    assert giant_swap.score_after == 75.7
    assert giant_swap.reason == "Swap Knight for Giant (+10.3 score)"


def test_suggestions_keep_a_role_of_the_removed_card(catalog):
    for suggestion in suggest_swaps(NO_WIN_CONDITION_DECK, catalog=catalog):
        removed = catalog.get_card_by_id(suggestion.remove_card)
        added = catalog.get_card_by_id(suggestion.add_card)
        assert set(removed.roles) & set(added.roles)
        assert suggestion.add_card not in NO_WIN_CONDITION_DECK


def test_suggested_deck_scores_match(catalog):
    for suggestion in suggest_swaps(NO_WIN_CONDITION_DECK, catalog=catalog):
        new_deck = [c for c in NO_WIN_CONDITION_DECK if c != suggestion.remove_card] + [suggestion.add_card]
        assert score_deck(new_deck, catalog=catalog).overall == suggestion.score_after


def test_arena_limits_replacements(catalog):
    for suggestion in suggest_swaps(NO_WIN_CONDITION_DECK, preferred_arena=0, catalog=catalog):
        assert catalog.get_card_by_id(suggestion.add_card).arena == 0


# ---- thresholds on a hand-made catalog ----

SUPPORT_DECK = [f"b{i}" for i in range(1, 9)]


def _support_card(card_id, roles=("support",)):
    return make_card(card_id, card_id.upper(), 3, "common", "troop", list(roles))


def _support_catalog(replacements):
    return CardCatalog([_support_card(card_id) for card_id in SUPPORT_DECK] + replacements)


def test_only_first_role_compatible_cards_are_tried():
    weak = [_support_card(f"w{i}") for i in range(1, SWAP_CANDIDATES_PER_SLOT + 1)]
    star = _support_card(
        "star",
        ("support", "win_condition", "small_spell", "big_spell", "air_targeting", "tank_killer"),
    )

    assert suggest_swaps(SUPPORT_DECK, catalog=_support_catalog(weak + [star])) == []

    suggestions = suggest_swaps(SUPPORT_DECK, catalog=_support_catalog([star] + weak))
    assert len(suggestions) == MAX_SWAP_SUGGESTIONS
    assert {s.add_card for s in suggestions} == {"star"}


def test_improvement_of_exactly_one_is_not_enough():
    # Only coverage counts: each required role is worth exactly 1.0 overall
    config = ScoringConfig(weights=ScoringWeights(coverage=0.05, curve=0, role=0, level_fit=0))
    one_role = _support_card("one", ("support", "win_condition"))
    two_roles = _support_card("two", ("support", "win_condition", "small_spell"))
    catalog = _support_catalog([one_role, two_roles])

    assert score_deck(SUPPORT_DECK, config=config, catalog=catalog).overall == 0.0
    assert score_deck(SUPPORT_DECK[1:] + ["one"], config=config, catalog=catalog).overall == 1.0

    suggestions = suggest_swaps(SUPPORT_DECK, scoring_config=config, catalog=catalog)
    assert suggestions
    assert {s.add_card for s in suggestions} == {"two"}
    assert all(s.improvement == 2.0 for s in suggestions)
