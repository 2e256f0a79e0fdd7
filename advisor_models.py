# Deck advisor request/response models
# advisor_models.py

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from card_db import ArenaRecord, CardRecord, TopDeckRecord
from card_types import DECK_SIZE, MAX_CARD_LEVEL, CardRole
from card_utils import find_duplicate_ids
from deck_candidates import OptimizationGoal
from scoring_models import DeckCandidate, DeckScore, DeckScoreSummary, SwapSuggestion


def _reject_duplicates(card_ids: List[str]) -> List[str]:
    duplicates = find_duplicate_ids(card_ids)
    if duplicates:
        raise ValueError(f"Duplicate card IDs: {duplicates}")
    return card_ids


class PlayerCardLevelInput(BaseModel):
    card_id: str
    level: int = Field(..., ge=1, le=MAX_CARD_LEVEL, description="Card level (1-14)")


class AutofillRequest(BaseModel):
    """Request to complete a partial deck."""
    current_cards: List[str] = Field(
        default_factory=list,
        description="Card IDs already chosen",
        max_length=DECK_SIZE - 1,
    )
    player_card_levels: Optional[List[PlayerCardLevelInput]] = Field(
        None, description="Player's card levels, used to favour well-levelled cards"
    )
    preferred_arena: Optional[int] = Field(None, ge=0, description="Only use cards unlocked up to this arena")
    target_elixir: Optional[float] = Field(None, ge=1, le=9, description="Override the target average elixir")

    @field_validator('current_cards')
    @classmethod
    def validate_no_duplicates(cls, v):
        return _reject_duplicates(v)

    class Config:
        json_schema_extra = {
            "example": {
                "current_cards": ["26000021", "28000000"],
                "player_card_levels": [
                    {"card_id": "26000021", "level": 11},
                    {"card_id": "28000000", "level": 10}
                ],
                "preferred_arena": 6,
                "target_elixir": 3.2
            }
        }


class CardExplanation(BaseModel):
    card_id: str
    reason: str
    role: CardRole


class AlternativeSuggestion(BaseModel):
    card_id: str
    reason: str


class AutofillResponse(BaseModel):
    deck: List[str]
    explanations: List[CardExplanation]
    alternatives: Dict[str, List[AlternativeSuggestion]]  # added card_id -> up to 2 options
    average_elixir: float
    card_details: List[CardRecord] = Field(default_factory=list)


class ValidateRequest(BaseModel):
    cards: List[str] = Field(..., description="Card IDs of the deck to check")

    @field_validator('cards')
    @classmethod
    def validate_no_duplicates(cls, v):
        return _reject_duplicates(v)


class ValidateResponse(BaseModel):
    is_valid: bool
    issues: List[str]
    average_elixir: float
    card_details: List[CardRecord] = Field(default_factory=list)


class OptimizeRequest(BaseModel):
    """Request to improve a complete deck with single-card swaps."""
    cards: List[str] = Field(
        ...,
        description="The 8 card IDs of the deck",
        min_length=DECK_SIZE,
        max_length=DECK_SIZE,
    )
    max_swaps: int = Field(3, ge=0, le=DECK_SIZE, description="Maximum number of swaps to apply")
    player_card_levels: Optional[List[PlayerCardLevelInput]] = None
    preferred_arena: Optional[int] = Field(None, ge=0)

    @field_validator('cards')
    @classmethod
    def validate_no_duplicates(cls, v):
        return _reject_duplicates(v)

    class Config:
        json_schema_extra = {
            "example": {
                "cards": [
                    "26000000", "26000001", "26000010", "26000005",
                    "28000000", "28000008", "27000000", "26000013"
                ],
                "max_swaps": 2
            }
        }


class OptimizeAnalysis(BaseModel):
    missing_roles: List[CardRole]  # of the original deck
    elixir_before: float
    elixir_after: float
    already_optimal: bool


class OptimizeResponse(BaseModel):
    original_deck: List[str]
    optimized_deck: List[str]
    swaps: List[SwapSuggestion]
    score_before: DeckScoreSummary
    score_after: DeckScoreSummary
    analysis: OptimizeAnalysis


class ScoreRequest(BaseModel):
    cards: List[str] = Field(..., min_length=1, max_length=DECK_SIZE)
    player_card_levels: Optional[List[PlayerCardLevelInput]] = None

    @field_validator('cards')
    @classmethod
    def validate_no_duplicates(cls, v):
        return _reject_duplicates(v)


class ScoreResponse(BaseModel):
    cards: List[str]
    score: DeckScore
    average_elixir: float
    deck_link: Optional[str] = None  # only for complete decks


class CandidatesRequest(BaseModel):
    current_cards: List[str] = Field(default_factory=list, max_length=DECK_SIZE - 1)
    max_candidates: int = Field(3, ge=1, le=10)
    goal: Optional[OptimizationGoal] = Field(None, description="Tilt scoring weights towards one goal")
    player_card_levels: Optional[List[PlayerCardLevelInput]] = None
    preferred_arena: Optional[int] = Field(None, ge=0)
    exclude_cards: List[str] = Field(default_factory=list, description="Card IDs never to add")

    @field_validator('current_cards')
    @classmethod
    def validate_no_duplicates(cls, v):
        return _reject_duplicates(v)


class CandidatesResponse(BaseModel):
    candidates: List[DeckCandidate]
    goal: Optional[OptimizationGoal] = None


class DeckLinkResponse(BaseModel):
    is_valid: bool
    cards: List[str]
    average_elixir: float
    card_details: List[CardRecord] = Field(default_factory=list)


class CardsResponse(BaseModel):
    cards: List[CardRecord]


class ArenasResponse(BaseModel):
    arenas: List[ArenaRecord]


class TopDeckDetail(TopDeckRecord):
    card_details: List[CardRecord] = Field(default_factory=list)


class TopDecksResponse(BaseModel):
    decks: List[TopDeckDetail]
