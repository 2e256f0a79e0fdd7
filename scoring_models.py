# Score and candidate value objects
# scoring_models.py

from typing import Dict, Tuple
from pydantic import BaseModel, ConfigDict, Field

from card_db import CardRecord
from card_types import CardRole


class ScoringWeights(BaseModel):
    """Sub-score weights. Should sum to 1.0 for a 0-100 overall score (not enforced)."""
    model_config = ConfigDict(frozen=True)

    coverage: float = 0.35
    curve: float = 0.25
    role: float = 0.25
    level_fit: float = 0.15


class ScoringConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_elixir: float = 3.5
    min_elixir: float = 2.6
    max_elixir: float = 4.3
    weights: ScoringWeights = Field(default_factory=ScoringWeights)


class CoverageScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    has_win_condition: bool
    has_small_spell: bool
    has_big_spell: bool
    has_air_targeting: bool
    has_tank_killer: bool
    missing_roles: Tuple[CardRole, ...]


class CurveScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    average_elixir: float
    is_in_range: bool
    distance_from_target: float
    cycle_card_count: int  # elixir <= 3
    heavy_card_count: int  # elixir >= 6


class RoleScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    role_distribution: Dict[CardRole, int]
    versatility_score: float
    synergy_bonus: float


class LevelFitScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    average_level: float
    level_variance: float  # standard deviation of card levels
    underleveled_count: int


class DeckScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall: float
    coverage: CoverageScore
    curve: CurveScore
    role: RoleScore
    level_fit: LevelFitScore


class RankedCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    card: CardRecord
    score: float


class CardSelection(BaseModel):
    """The card picked for one slot, the role it fills and the runners-up."""
    model_config = ConfigDict(frozen=True)

    card: CardRecord
    role: CardRole
    alternatives: Tuple[RankedCard, ...] = ()


class AlternativeCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    card_id: str
    card_name: str
    reason: str
    score_delta: float


class AddedCardInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    card_id: str
    card_name: str
    reason: str
    role: CardRole
    elixir: int
    alternatives: Tuple[AlternativeCard, ...] = ()


class DeckCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    cards: Tuple[str, ...]
    score: DeckScore
    added_cards: Tuple[AddedCardInfo, ...] = ()


class SwapSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    remove_card: str
    add_card: str
    score_before: float
    score_after: float
    improvement: float
    reason: str


class DeckScoreSummary(BaseModel):
    """Flattened component totals, used for before/after comparisons."""
    overall: float
    coverage: float
    curve: float
    role: float
    level_fit: float


PlayerLevels = Dict[str, int]