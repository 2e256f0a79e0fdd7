# Card ranking and greedy deck completion
# deck_candidates.py

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set

from card_db import CardCatalog, CardRecord, resolve_catalog
from card_types import DECK_SIZE, RARITY_BONUS, CardRole, role_label
from deck_scoring import DEFAULT_SCORING_CONFIG, get_missing_roles, score_deck
from logger_config import deck_logger, log_card_selection
from scoring_models import (
    AddedCardInfo,
    AlternativeCard,
    CardSelection,
    DeckCandidate,
    PlayerLevels,
    RankedCard,
    ScoringConfig,
    ScoringWeights,
)

# How many runners-up to keep per slot
MAX_ALTERNATIVES = 3

# Two accepted candidates may share at most this many cards
MAX_SHARED_CARDS = 6

# Role preferences for filler slots, keyed by where the average elixir sits
HEAVY_DECK_ROLES = (CardRole.CYCLE, CardRole.SWARM, CardRole.SUPPORT)
LIGHT_DECK_ROLES = (CardRole.SUPPORT, CardRole.TANK, CardRole.ANTI_SWARM)
BALANCED_DECK_ROLES = (CardRole.SUPPORT, CardRole.CYCLE, CardRole.SWARM)
ELIXIR_TOLERANCE = 0.3


class OptimizationGoal(str, Enum):
    COVERAGE = "coverage"
    CURVE = "curve"
    LEVEL_FIT = "level_fit"


GOAL_WEIGHTS = {
    OptimizationGoal.COVERAGE: ScoringWeights(coverage=0.5, curve=0.2, role=0.2, level_fit=0.1),
    OptimizationGoal.CURVE: ScoringWeights(coverage=0.25, curve=0.45, role=0.2, level_fit=0.1),
    OptimizationGoal.LEVEL_FIT: ScoringWeights(coverage=0.25, curve=0.2, role=0.15, level_fit=0.4),
}


def _role_adjustment(card: CardRecord, role: CardRole) -> float:
    """Cheaper is better for cycle/small spells; win conditions and tanks want weight."""
    if role in (CardRole.CYCLE, CardRole.SMALL_SPELL):
        return max(0, 4 - card.elixir)
    if role in (CardRole.WIN_CONDITION, CardRole.TANK):
        return 2 if card.elixir > 3 else 0
    return 0


def score_card_for_role(
    card: CardRecord,
    role: CardRole,
    current_deck: Sequence[str],
    player_levels: Optional[PlayerLevels] = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    catalog: Optional[CardCatalog] = None,
    base_overall: Optional[float] = None,
) -> float:
    """
    Heuristic score for putting ``card`` into ``current_deck`` as ``role``.

    Combines:
    - 2x the change in overall deck score
    - the player's level for the card (0 if unknown)
    - 2 per extra role the card fills
    - rarity bonus (commons are easier to level)
    - role-specific elixir adjustment

    ``base_overall`` is the current deck's overall score, when the caller
    already has it.
    """
    if base_overall is None:
        base_overall = score_deck(current_deck, player_levels, config, catalog).overall
    new_overall = score_deck([*current_deck, card.card_id], player_levels, config, catalog).overall

    score = (new_overall - base_overall) * 2
    if player_levels:
        score += player_levels.get(card.card_id, 0)
    score += (len(card.roles) - 1) * 2
    score += RARITY_BONUS.get(card.rarity, 0)
    score += _role_adjustment(card, role)
    return score


def rank_cards_for_role(
    role: CardRole,
    available_cards: Sequence[CardRecord],
    current_deck: Sequence[str],
    player_levels: Optional[PlayerLevels] = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    limit: Optional[int] = None,
    catalog: Optional[CardCatalog] = None,
) -> List[RankedCard]:
    """
    Rank the cards that can fill ``role`` and are not already in the deck.

    Sorted by score descending; ties keep catalog order.
    """
    catalog = resolve_catalog(catalog)
    in_deck = set(current_deck)
    candidates = [
        c for c in catalog.get_cards_by_role(role, available_cards) if c.card_id not in in_deck
    ]
    if not candidates:
        return []

    base_overall = score_deck(current_deck, player_levels, config, catalog).overall
    ranked = [
        RankedCard(
            card=card,
            score=score_card_for_role(
                card, role, current_deck, player_levels, config, catalog, base_overall
            ),
        )
        for card in candidates
    ]
    ranked.sort(key=lambda r: r.score, reverse=True)

    return ranked[:limit] if limit is not None else ranked


def _preferred_filler_roles(
    current_deck: Sequence[str],
    config: ScoringConfig,
    catalog: CardCatalog,
) -> Sequence[CardRole]:
    cards = catalog.get_cards_by_id(current_deck)
    if cards:
        avg_elixir = sum(c.elixir for c in cards) / len(cards)
    else:
        avg_elixir = config.target_elixir

    if avg_elixir > config.target_elixir + ELIXIR_TOLERANCE:
        return HEAVY_DECK_ROLES
    if avg_elixir < config.target_elixir - ELIXIR_TOLERANCE:
        return LIGHT_DECK_ROLES
    return BALANCED_DECK_ROLES


def select_best_card(
    available_cards: Sequence[CardRecord],
    current_deck: Sequence[str],
    missing_roles: Sequence[CardRole],
    player_levels: Optional[PlayerLevels] = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    catalog: Optional[CardCatalog] = None,
) -> Optional[CardSelection]:
    """
    Pick the card for the next slot.

    The first missing required role wins. Otherwise the role is chosen by
    whether the deck is running heavy or light on elixir. Falls back to the
    first remaining card in catalog order; returns None only when nothing is
    left to add.
    """
    catalog = resolve_catalog(catalog)

    if missing_roles:
        role = missing_roles[0]
        ranked = rank_cards_for_role(
            role, available_cards, current_deck, player_levels, config, catalog=catalog
        )
        if ranked:
            return CardSelection(
                card=ranked[0].card,
                role=role,
                alternatives=tuple(ranked[1:1 + MAX_ALTERNATIVES]),
            )

    for role in _preferred_filler_roles(current_deck, config, catalog):
        ranked = rank_cards_for_role(
            role, available_cards, current_deck, player_levels, config, catalog=catalog
        )
        if ranked:
            return CardSelection(
                card=ranked[0].card,
                role=role,
                alternatives=tuple(ranked[1:1 + MAX_ALTERNATIVES]),
            )

    in_deck = set(current_deck)
    for card in available_cards:
        if card.card_id not in in_deck:
            role = card.roles[0] if card.roles else CardRole.SUPPORT
            return CardSelection(card=card, role=role)

    return None


def _describe_selection(selection: CardSelection) -> AddedCardInfo:
    label = role_label(selection.role)
    best_alternative = selection.alternatives[0].score if selection.alternatives else 0
    return AddedCardInfo(
        card_id=selection.card.card_id,
        card_name=selection.card.name,
        reason=f"Added as {label}",
        role=selection.role,
        elixir=selection.card.elixir,
        alternatives=tuple(
            AlternativeCard(
                card_id=alt.card.card_id,
                card_name=alt.card.name,
                reason=f"Alternative {label} option",
                score_delta=alt.score - best_alternative,
            )
            for alt in selection.alternatives
        ),
    )


def generate_single_completion(
    starting_cards: Sequence[str],
    available_cards: Sequence[CardRecord],
    player_levels: Optional[PlayerLevels] = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    exclude_cards: Iterable[str] = (),
    catalog: Optional[CardCatalog] = None,
) -> Optional[DeckCandidate]:
    """
    Greedily grow ``starting_cards`` to a full deck, one card at a time.

    No backtracking. Returns None if the pool runs out before the deck is full.
    """
    catalog = resolve_catalog(catalog)
    excluded = set(exclude_cards)
    pool = [c for c in available_cards if c.card_id not in excluded]

    deck = list(starting_cards)
    added_cards: List[AddedCardInfo] = []

    while len(deck) < DECK_SIZE:
        missing_roles = get_missing_roles(deck, catalog)
        selection = select_best_card(pool, deck, missing_roles, player_levels, config, catalog)
        if selection is None:
            break

        deck.append(selection.card.card_id)
        added_cards.append(_describe_selection(selection))
        log_card_selection(
            deck_logger,
            selection.card.card_id,
            selection.role.value,
            len(deck),
            alternatives=[a.card.card_id for a in selection.alternatives],
        )

    if len(deck) != DECK_SIZE:
        deck_logger.debug(f"Completion abandoned at {len(deck)} cards: pool exhausted")
        return None

    return DeckCandidate(
        cards=tuple(deck),
        score=score_deck(deck, player_levels, config, catalog),
        added_cards=tuple(added_cards),
    )


def _shared_card_count(a: Sequence[str], b: Sequence[str]) -> int:
    other = set(b)
    return sum(1 for card_id in a if card_id in other)


def generate_deck_candidates(
    starting_cards: Sequence[str],
    max_candidates: int = 5,
    player_levels: Optional[PlayerLevels] = None,
    preferred_arena: Optional[int] = None,
    scoring_config: Optional[ScoringConfig] = None,
    exclude_ids: Optional[Iterable[str]] = None,
    catalog: Optional[CardCatalog] = None,
) -> List[DeckCandidate]:
    """
    Generate up to ``max_candidates`` diverse completions of ``starting_cards``.

    The first completion is unconstrained. Later runs exclude the first few
    cards added to the first candidate plus the first card added to every
    accepted candidate, and a run is only accepted when it shares at most six
    cards with every earlier candidate.

    Returns:
        Candidates sorted by overall score, best first
    """
    catalog = resolve_catalog(catalog)
    config = scoring_config or DEFAULT_SCORING_CONFIG
    caller_excluded: Set[str] = set(exclude_ids or ())

    available_cards = (
        catalog.get_cards_unlocked_by_arena(preferred_arena)
        if preferred_arena is not None
        else catalog.get_all_cards()
    )

    candidates: List[DeckCandidate] = []
    used_first_cards: Set[str] = set()

    primary = generate_single_completion(
        starting_cards, available_cards, player_levels, config, caller_excluded, catalog
    )
    if primary is not None:
        candidates.append(primary)
        if primary.added_cards:
            used_first_cards.add(primary.added_cards[0].card_id)

    while candidates and len(candidates) < max_candidates:
        exclude_cards: Set[str] = set()

        best = candidates[0]
        for added in best.added_cards[:min(len(candidates), 3)]:
            exclude_cards.add(added.card_id)
        exclude_cards |= used_first_cards

        candidate = generate_single_completion(
            starting_cards,
            available_cards,
            player_levels,
            config,
            exclude_cards | caller_excluded,
            catalog,
        )

        accepted = candidate is not None and all(
            _shared_card_count(candidate.cards, existing.cards) <= MAX_SHARED_CARDS
            for existing in candidates
        )
        if accepted:
            candidates.append(candidate)
            if candidate.added_cards:
                used_first_cards.add(candidate.added_cards[0].card_id)

        if len(exclude_cards) > len(available_cards) * 0.5:
            break

        # Stop once a round adds nothing
        if not accepted:
            break

    candidates.sort(key=lambda c: c.score.overall, reverse=True)

    deck_logger.info(
        f"Generated {len(candidates)} candidate(s) from {len(starting_cards)} starting card(s)"
    )
    return candidates[:max_candidates]


def get_best_deck_completion(
    starting_cards: Sequence[str],
    player_levels: Optional[PlayerLevels] = None,
    preferred_arena: Optional[int] = None,
    scoring_config: Optional[ScoringConfig] = None,
    exclude_ids: Optional[Iterable[str]] = None,
    catalog: Optional[CardCatalog] = None,
) -> Optional[DeckCandidate]:
    candidates = generate_deck_candidates(
        starting_cards,
        max_candidates=1,
        player_levels=player_levels,
        preferred_arena=preferred_arena,
        scoring_config=scoring_config,
        exclude_ids=exclude_ids,
        catalog=catalog,
    )
    return candidates[0] if candidates else None


def generate_optimized_candidates(
    starting_cards: Sequence[str],
    goal: OptimizationGoal,
    max_candidates: int = 5,
    player_levels: Optional[PlayerLevels] = None,
    preferred_arena: Optional[int] = None,
    scoring_config: Optional[ScoringConfig] = None,
    exclude_ids: Optional[Iterable[str]] = None,
    catalog: Optional[CardCatalog] = None,
) -> List[DeckCandidate]:
    """Generate candidates with weights tilted towards one scoring goal."""
    base = scoring_config or DEFAULT_SCORING_CONFIG
    config = base.model_copy(update={"weights": GOAL_WEIGHTS[OptimizationGoal(goal)]})
    return generate_deck_candidates(
        starting_cards,
        max_candidates=max_candidates,
        player_levels=player_levels,
        preferred_arena=preferred_arena,
        scoring_config=config,
        exclude_ids=exclude_ids,
        catalog=catalog,
    )
