# Deck advisor operations: autofill, validate, optimize
# deck_advisor.py

import logging
from typing import Dict, List, Optional, Sequence

from advisor_models import (
    AlternativeSuggestion,
    AutofillResponse,
    CardExplanation,
    OptimizeAnalysis,
    OptimizeResponse,
    ValidateResponse,
)
from card_db import CardCatalog, resolve_catalog
from card_types import DECK_SIZE, CardRole, role_label
from deck_candidates import get_best_deck_completion
from deck_scoring import DEFAULT_SCORING_CONFIG, get_missing_roles, score_deck
from scoring_models import DeckScore, DeckScoreSummary, PlayerLevels
from swap_advisor import suggest_swaps

logger = logging.getLogger(__name__)

# Alternatives shown per added card in an autofill answer
MAX_AUTOFILL_ALTERNATIVES = 2

MISSING_ROLE_ISSUES = {
    CardRole.WIN_CONDITION: "Deck lacks a win condition",
    CardRole.SMALL_SPELL: "Deck lacks a small spell",
    CardRole.BIG_SPELL: "Deck lacks a big spell",
    CardRole.AIR_TARGETING: "Deck lacks air-targeting units",
    CardRole.TANK_KILLER: "Deck lacks a tank killer",
}


def summarize_score(score: DeckScore) -> DeckScoreSummary:
    return DeckScoreSummary(
        overall=score.overall,
        coverage=score.coverage.total,
        curve=score.curve.total,
        role=score.role.total,
        level_fit=score.level_fit.total,
    )


def autofill_deck(
    current_cards: Sequence[str],
    player_levels: Optional[PlayerLevels] = None,
    preferred_arena: Optional[int] = None,
    target_elixir: Optional[float] = None,
    catalog: Optional[CardCatalog] = None,
) -> Optional[AutofillResponse]:
    """
    Complete a partial deck to 8 cards, explaining every added card.

    Returns None when the available pool cannot fill the deck (for example
    a low arena with no card for a required role left).
    """
    catalog = resolve_catalog(catalog)

    if len(current_cards) >= DECK_SIZE:
        deck = list(current_cards[:DECK_SIZE])
        return AutofillResponse(
            deck=deck,
            explanations=[],
            alternatives={},
            average_elixir=catalog.calculate_average_elixir(deck),
        )

    config = DEFAULT_SCORING_CONFIG
    if target_elixir is not None:
        config = config.model_copy(update={"target_elixir": target_elixir})

    completion = get_best_deck_completion(
        current_cards,
        player_levels=player_levels,
        preferred_arena=preferred_arena,
        scoring_config=config,
        catalog=catalog,
    )
    if completion is None:
        logger.warning(
            f"Could not complete deck from {len(current_cards)} card(s) "
            f"(arena: {preferred_arena if preferred_arena is not None else 'any'})"
        )
        return None

    explanations = []
    alternatives: Dict[str, List[AlternativeSuggestion]] = {}

    for added in completion.added_cards:
        label = role_label(added.role)
        explanations.append(
            CardExplanation(
                card_id=added.card_id,
                reason=f"Added {added.card_name} as {label} ({added.elixir} elixir)",
                role=added.role,
            )
        )
        alternatives[added.card_id] = [
            AlternativeSuggestion(
                card_id=alt.card_id,
                reason=f"{alt.card_name} is another good {label} option",
            )
            for alt in added.alternatives[:MAX_AUTOFILL_ALTERNATIVES]
        ]

    deck = list(completion.cards)
    average_elixir = catalog.calculate_average_elixir(deck)

    if not config.min_elixir <= average_elixir <= config.max_elixir:
        logger.warning(
            f"Deck average elixir {average_elixir} is outside recommended range "
            f"({config.min_elixir}-{config.max_elixir})"
        )

    return AutofillResponse(
        deck=deck,
        explanations=explanations,
        alternatives=alternatives,
        average_elixir=average_elixir,
    )


def validate_deck(
    card_ids: Sequence[str],
    catalog: Optional[CardCatalog] = None,
) -> ValidateResponse:
    """Check deck size, required roles and elixir range. Issues are listed in that order."""
    catalog = resolve_catalog(catalog)
    config = DEFAULT_SCORING_CONFIG
    issues = []

    if len(card_ids) != DECK_SIZE:
        issues.append(f"Deck has {len(card_ids)} cards, needs exactly {DECK_SIZE}")

    for role in get_missing_roles(card_ids, catalog):
        issues.append(MISSING_ROLE_ISSUES[role])

    average_elixir = catalog.calculate_average_elixir(card_ids)
    if average_elixir < config.min_elixir:
        issues.append(f"Average elixir ({average_elixir:g}) is too low (min: {config.min_elixir:g})")
    if average_elixir > config.max_elixir:
        issues.append(f"Average elixir ({average_elixir:g}) is too high (max: {config.max_elixir:g})")

    return ValidateResponse(
        is_valid=not issues,
        issues=issues,
        average_elixir=average_elixir,
    )


def optimize_deck(
    card_ids: Sequence[str],
    max_swaps: int,
    player_levels: Optional[PlayerLevels] = None,
    preferred_arena: Optional[int] = None,
    catalog: Optional[CardCatalog] = None,
) -> OptimizeResponse:
    """
    Apply the best single-card swaps to a complete deck.

    Suggestions are ranked against the original deck and applied in that
    order, each replacing the removed card in place. A suggestion is
    skipped once its removed card is gone or its added card is already in
    the deck.
    """
    catalog = resolve_catalog(catalog)
    original = list(card_ids)

    suggestions = suggest_swaps(
        original,
        player_levels=player_levels,
        preferred_arena=preferred_arena,
        catalog=catalog,
    )

    optimized = list(original)
    applied = []
    for swap in suggestions:
        if len(applied) >= max_swaps:
            break
        if swap.remove_card not in optimized or swap.add_card in optimized:
            logger.debug(f"Skipping swap {swap.remove_card} -> {swap.add_card}: deck already changed")
            continue
        optimized[optimized.index(swap.remove_card)] = swap.add_card
        applied.append(swap)

    score_before = score_deck(original, player_levels, catalog=catalog)
    score_after = score_deck(optimized, player_levels, catalog=catalog)

    return OptimizeResponse(
        original_deck=original,
        optimized_deck=optimized,
        swaps=applied,
        score_before=summarize_score(score_before),
        score_after=summarize_score(score_after),
        analysis=OptimizeAnalysis(
            missing_roles=list(score_before.coverage.missing_roles),
            elixir_before=catalog.calculate_average_elixir(original),
            elixir_after=catalog.calculate_average_elixir(optimized),
            already_optimal=not suggestions,
        ),
    )
