# Deck scoring logic
# deck_scoring.py

import math
from typing import List, Optional, Sequence

from card_db import CardCatalog, CardRecord, resolve_catalog
from card_types import (
    CardRole,
    DECK_SIZE,
    MAX_CARD_LEVEL,
    REQUIRED_ROLES,
    TOURNAMENT_LEVEL,
    round_tenth,
)
from scoring_models import (
    CoverageScore,
    CurveScore,
    DeckScore,
    LevelFitScore,
    PlayerLevels,
    RoleScore,
    ScoringConfig,
)

DEFAULT_SCORING_CONFIG = ScoringConfig()

# Synergy pairs: (role_a, role_b, bonus). Checked independently.
SYNERGY_PAIRS = (
    (CardRole.TANK, CardRole.SUPPORT, 10),
    (CardRole.SWARM, CardRole.ANTI_SWARM, 5),
    (CardRole.WIN_CONDITION, CardRole.SMALL_SPELL, 10),
)


def _has_role(cards: Sequence[CardRecord], role: CardRole) -> bool:
    return any(role in c.roles for c in cards)


def calculate_coverage_score(cards: Sequence[CardRecord]) -> CoverageScore:
    """Score how many of the five required roles the deck covers (20 points each)."""
    presence = {role: _has_role(cards, role) for role in REQUIRED_ROLES}
    missing_roles = tuple(role for role in REQUIRED_ROLES if not presence[role])

    covered_count = len(REQUIRED_ROLES) - len(missing_roles)
    total = (covered_count / len(REQUIRED_ROLES)) * 100

    return CoverageScore(
        total=total,
        has_win_condition=presence[CardRole.WIN_CONDITION],
        has_small_spell=presence[CardRole.SMALL_SPELL],
        has_big_spell=presence[CardRole.BIG_SPELL],
        has_air_targeting=presence[CardRole.AIR_TARGETING],
        has_tank_killer=presence[CardRole.TANK_KILLER],
        missing_roles=missing_roles,
    )


def calculate_curve_score(
    cards: Sequence[CardRecord],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> CurveScore:
    """
    Score the elixir curve.

    Base 60 in range (30 outside), minus up to 20 for distance from target,
    plus up to 20 for a healthy number of cheap cycle cards, minus 5 for each
    heavy card beyond the second.
    """
    if not cards:
        return CurveScore(
            total=0,
            average_elixir=0,
            is_in_range=False,
            distance_from_target=config.target_elixir,
            cycle_card_count=0,
            heavy_card_count=0,
        )

    average_elixir = round_tenth(sum(c.elixir for c in cards) / len(cards))
    is_in_range = config.min_elixir <= average_elixir <= config.max_elixir
    distance_from_target = abs(average_elixir - config.target_elixir)

    cycle_card_count = sum(1 for c in cards if c.elixir <= 3)
    heavy_card_count = sum(1 for c in cards if c.elixir >= 6)

    total = 60 if is_in_range else 30
    total -= min(distance_from_target * 10, 20)

    # === CYCLE BONUS ===
    if 2 <= cycle_card_count <= 4:
        total += 20
    elif cycle_card_count in (1, 5):
        total += 10

    # === HEAVY PENALTY ===
    if heavy_card_count > 2:
        total -= (heavy_card_count - 2) * 5

    return CurveScore(
        total=max(0, min(100, total)),
        average_elixir=average_elixir,
        is_in_range=is_in_range,
        distance_from_target=distance_from_target,
        cycle_card_count=cycle_card_count,
        heavy_card_count=heavy_card_count,
    )


def calculate_role_score(cards: Sequence[CardRecord]) -> RoleScore:
    """Score role diversity, multi-role cards and classic role pairings."""
    role_distribution = {}
    for card in cards:
        for role in card.roles:
            role_distribution[role] = role_distribution.get(role, 0) + 1

    multi_role_count = sum(1 for c in cards if len(c.roles) > 1)
    versatility_score = (multi_role_count / max(len(cards), 1)) * 30

    synergy_bonus = 0
    for role_a, role_b, bonus in SYNERGY_PAIRS:
        if role_a in role_distribution and role_b in role_distribution:
            synergy_bonus += bonus

    diversity_score = min(len(role_distribution) * 5, 35)

    total = min(100, diversity_score + versatility_score + synergy_bonus)

    return RoleScore(
        total=total,
        role_distribution=role_distribution,
        versatility_score=versatility_score,
        synergy_bonus=synergy_bonus,
    )


def calculate_level_fit_score(
    cards: Sequence[CardRecord],
    player_levels: Optional[PlayerLevels] = None,
) -> LevelFitScore:
    """
    Score how well the player's card levels suit the deck.

    Without level data (or with no cards) the score is a neutral 50.
    Cards missing from ``player_levels`` count as level 1.
    """
    if not player_levels or not cards:
        return LevelFitScore(
            total=50,
            average_level=0,
            level_variance=0,
            underleveled_count=0,
        )

    card_levels: List[int] = [player_levels.get(c.card_id) or 1 for c in cards]
    underleveled_count = sum(1 for level in card_levels if level < TOURNAMENT_LEVEL)

    average_level = sum(card_levels) / len(card_levels)
    variance = sum((level - average_level) ** 2 for level in card_levels) / len(card_levels)
    level_variance = math.sqrt(variance)

    level_score = (average_level / MAX_CARD_LEVEL) * 50
    variance_score = max(0, 30 - level_variance * 10)
    underleveled_penalty = min(underleveled_count * 5, 20)

    total = max(0, min(100, level_score + variance_score - underleveled_penalty))

    return LevelFitScore(
        total=total,
        average_level=round_tenth(average_level),
        level_variance=round_tenth(level_variance),
        underleveled_count=underleveled_count,
    )


def score_deck(
    card_ids: Sequence[str],
    player_levels: Optional[PlayerLevels] = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    catalog: Optional[CardCatalog] = None,
) -> DeckScore:
    """
    Calculate the complete weighted score for a deck.

    Unknown ids are ignored. Never raises: empty or partial decks get a
    degraded but well-defined score.

    Returns:
        DeckScore with ``overall`` rounded to one decimal
    """
    catalog = resolve_catalog(catalog)
    cards = catalog.get_cards_by_id(card_ids)

    coverage = calculate_coverage_score(cards)
    curve = calculate_curve_score(cards, config)
    role = calculate_role_score(cards)
    level_fit = calculate_level_fit_score(cards, player_levels)

    weights = config.weights
    overall = (
        coverage.total * weights.coverage
        + curve.total * weights.curve
        + role.total * weights.role
        + level_fit.total * weights.level_fit
    )

    return DeckScore(
        overall=round_tenth(overall),
        coverage=coverage,
        curve=curve,
        role=role,
        level_fit=level_fit,
    )


def score_card_addition(
    current_deck_ids: Sequence[str],
    candidate: CardRecord,
    player_levels: Optional[PlayerLevels] = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    catalog: Optional[CardCatalog] = None,
) -> dict:
    """
    Score the effect of adding one card to a deck.

    Returns:
        {"score": new overall, "improves_score": bool, "delta": new - current}
    """
    current = score_deck(current_deck_ids, player_levels, config, catalog)
    new = score_deck([*current_deck_ids, candidate.card_id], player_levels, config, catalog)
    delta = new.overall - current.overall
    return {"score": new.overall, "improves_score": delta > 0, "delta": delta}


def get_missing_roles(
    card_ids: Sequence[str],
    catalog: Optional[CardCatalog] = None,
) -> List[CardRole]:
    """Required roles absent from the deck, in fill-priority order."""
    catalog = resolve_catalog(catalog)
    return list(calculate_coverage_score(catalog.get_cards_by_id(card_ids)).missing_roles)


def is_deck_valid(card_ids: Sequence[str], catalog: Optional[CardCatalog] = None) -> bool:
    """A deck is valid with exactly 8 ids and every required role covered."""
    if len(card_ids) != DECK_SIZE:
        return False
    return not get_missing_roles(card_ids, catalog)
