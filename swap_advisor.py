# Single-card swap suggestions for a complete deck
# swap_advisor.py

from typing import List, Optional, Sequence

from card_db import CardCatalog, resolve_catalog
from deck_scoring import DEFAULT_SCORING_CONFIG, score_deck
from logger_config import deck_logger, log_swap_evaluation
from scoring_models import PlayerLevels, ScoringConfig, SwapSuggestion

SWAP_CANDIDATES_PER_SLOT = 5
MIN_SWAP_IMPROVEMENT = 1.0
MAX_SWAP_SUGGESTIONS = 5


def suggest_swaps(
    deck: Sequence[str],
    player_levels: Optional[PlayerLevels] = None,
    preferred_arena: Optional[int] = None,
    scoring_config: Optional[ScoringConfig] = None,
    catalog: Optional[CardCatalog] = None,
) -> List[SwapSuggestion]:
    """
    Suggest single-card swaps that raise the deck's overall score.

    Each deck card is only replaced by a card sharing at least one of its
    roles, and only the first few such cards in catalog order are tried.
    A swap is kept when it improves the overall score by more than
    MIN_SWAP_IMPROVEMENT.

    Args:
        deck: 8 distinct card ids (not validated here)

    Returns:
        Best suggestions across all slots, highest improvement first
    """
    catalog = resolve_catalog(catalog)
    config = scoring_config or DEFAULT_SCORING_CONFIG

    baseline = score_deck(deck, player_levels, config, catalog)
    in_deck = set(deck)

    pool = (
        catalog.get_cards_unlocked_by_arena(preferred_arena)
        if preferred_arena is not None
        else catalog.get_all_cards()
    )

    suggestions: List[SwapSuggestion] = []

    for removed in catalog.get_cards_by_id(deck):
        remaining = [card_id for card_id in deck if card_id != removed.card_id]

        replacements = [
            c for c in pool
            if c.card_id not in in_deck and any(role in removed.roles for role in c.roles)
        ][:SWAP_CANDIDATES_PER_SLOT]

        for replacement in replacements:
            new_score = score_deck([*remaining, replacement.card_id], player_levels, config, catalog)
            improvement = new_score.overall - baseline.overall
            accepted = improvement > MIN_SWAP_IMPROVEMENT

            log_swap_evaluation(
                deck_logger, removed.card_id, replacement.card_id, improvement, accepted
            )

            if accepted:
                suggestions.append(
                    SwapSuggestion(
                        remove_card=removed.card_id,
                        add_card=replacement.card_id,
                        score_before=baseline.overall,
                        score_after=new_score.overall,
                        improvement=improvement,
                        reason=f"Swap {removed.name} for {replacement.name} (+{improvement:.1f} score)",
                    )
                )

    suggestions.sort(key=lambda s: s.improvement, reverse=True)
    return suggestions[:MAX_SWAP_SUGGESTIONS]
