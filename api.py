# api.py

import logging
from fastapi import FastAPI, Query, HTTPException
from typing import List, Optional
from advisor_models import (
    ArenasResponse,
    AutofillRequest,
    AutofillResponse,
    CandidatesRequest,
    CandidatesResponse,
    CardsResponse,
    DeckLinkResponse,
    OptimizeRequest,
    OptimizeResponse,
    ScoreRequest,
    ScoreResponse,
    TopDeckDetail,
    TopDecksResponse,
    ValidateRequest,
    ValidateResponse,
)
from card_db import CardRecord, get_card, get_catalog, init_catalog, list_cards, count_cards
from card_types import DECK_SIZE, CardRole
from card_utils import generate_deck_link, levels_to_map, make_deck_from_ids, parse_deck_link
from deck_advisor import autofill_deck, optimize_deck, validate_deck
from deck_candidates import generate_deck_candidates, generate_optimized_candidates
from deck_scoring import score_deck
from logger_config import deck_logger, log_deck_decision, log_deck_request, setup_logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Deck Builder")

@app.on_event("startup")
def on_startup() -> None:
    setup_logging()
    init_catalog()


def _resolve_known_cards(card_ids: List[str]) -> List[CardRecord]:
    """Look up every id, rejecting the request if any is unknown."""
    cards, missing_ids = make_deck_from_ids(card_ids)
    if missing_ids:
        logger.warning(f"Unknown card IDs in request: {missing_ids}")
        raise HTTPException(
            status_code=400,
            detail=f"Unknown card IDs: {', '.join(missing_ids)}"
        )
    return cards


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "card_count": count_cards()}


@app.get("/meta/cards", response_model=CardsResponse)
def list_cards_endpoint(
    role: Optional[CardRole] = Query(None),
    max_arena: Optional[int] = Query(None, ge=0),
) -> CardsResponse:
    """List cards in the catalog with optional filters."""
    return CardsResponse(cards=list_cards(role=role, max_arena=max_arena))


@app.get("/meta/arenas", response_model=ArenasResponse)
def list_arenas_endpoint() -> ArenasResponse:
    return ArenasResponse(arenas=get_catalog().get_all_arenas())


@app.get("/meta/top-decks", response_model=TopDecksResponse)
def list_top_decks_endpoint(
    arena_id: Optional[int] = Query(None, ge=0),
    trophy_min: Optional[int] = Query(None, ge=0),
    trophy_max: Optional[int] = Query(None, ge=0),
) -> TopDecksResponse:
    """
    Meta decks, filtered by arena or by trophy range.
    An arena filter takes precedence over a trophy range.
    """
    catalog = get_catalog()
    if arena_id is not None:
        decks = catalog.get_top_decks_by_arena(arena_id)
    elif trophy_min is not None or trophy_max is not None:
        decks = catalog.get_top_decks_by_trophy_range(trophy_min, trophy_max)
    else:
        decks = catalog.get_all_top_decks()

    return TopDecksResponse(
        decks=[
            TopDeckDetail(**deck.model_dump(), card_details=catalog.get_cards_by_id(deck.cards))
            for deck in decks
        ]
    )


@app.get("/cards/{card_id}", response_model=CardRecord)
def get_card_endpoint(card_id: str) -> CardRecord:
    card = get_card(card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@app.post("/deck/autofill", response_model=AutofillResponse)
def autofill_endpoint(request: AutofillRequest) -> AutofillResponse:
    """Complete a partial deck of 0-7 cards."""
    try:
        log_deck_request(
            deck_logger,
            "autofill",
            request.current_cards,
            preferred_arena=request.preferred_arena,
            target_elixir=request.target_elixir,
        )
        _resolve_known_cards(request.current_cards)

        result = autofill_deck(
            request.current_cards,
            player_levels=levels_to_map(request.player_card_levels),
            preferred_arena=request.preferred_arena,
            target_elixir=request.target_elixir,
        )
        if result is None:
            raise HTTPException(
                status_code=422,
                detail="Not enough eligible cards to complete the deck"
            )

        result.card_details = get_catalog().get_cards_by_id(result.deck)
        log_deck_decision(deck_logger, "autofill", request.current_cards, result.deck)
        logger.info(f"Autofill added {len(result.explanations)} card(s), avg elixir {result.average_elixir}")
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in autofill: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@app.post("/deck/validate", response_model=ValidateResponse)
def validate_endpoint(request: ValidateRequest) -> ValidateResponse:
    try:
        log_deck_request(deck_logger, "validate", request.cards)
        cards = _resolve_known_cards(request.cards)

        result = validate_deck(request.cards)
        result.card_details = cards
        log_deck_decision(
            deck_logger, "validate", request.cards,
            {"is_valid": result.is_valid, "issues": result.issues}
        )
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error validating deck: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/deck/optimize", response_model=OptimizeResponse)
def optimize_endpoint(request: OptimizeRequest) -> OptimizeResponse:
    """Suggest and apply up to max_swaps single-card swaps."""
    try:
        log_deck_request(deck_logger, "optimize", request.cards, max_swaps=request.max_swaps)
        _resolve_known_cards(request.cards)

        result = optimize_deck(
            request.cards,
            request.max_swaps,
            player_levels=levels_to_map(request.player_card_levels),
            preferred_arena=request.preferred_arena,
        )
        log_deck_decision(deck_logger, "optimize", request.cards, result.swaps)
        logger.info(
            f"Optimize applied {len(result.swaps)} swap(s): "
            f"{result.score_before.overall} -> {result.score_after.overall}"
        )
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error optimizing deck: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/deck/score", response_model=ScoreResponse)
def score_endpoint(request: ScoreRequest) -> ScoreResponse:
    try:
        log_deck_request(deck_logger, "score", request.cards)
        _resolve_known_cards(request.cards)
        catalog = get_catalog()

        score = score_deck(request.cards, levels_to_map(request.player_card_levels))
        log_deck_decision(
            deck_logger, "score", request.cards,
            {"overall": score.overall, "missing_roles": [role.value for role in score.coverage.missing_roles]}
        )
        return ScoreResponse(
            cards=request.cards,
            score=score,
            average_elixir=catalog.calculate_average_elixir(request.cards),
            deck_link=generate_deck_link(request.cards) if len(request.cards) == DECK_SIZE else None,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error scoring deck: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/deck/candidates", response_model=CandidatesResponse)
def candidates_endpoint(request: CandidatesRequest) -> CandidatesResponse:
    """Several diverse completions of a partial deck, best first."""
    try:
        log_deck_request(
            deck_logger,
            "candidates",
            request.current_cards,
            goal=request.goal.value if request.goal else None,
        )
        _resolve_known_cards(request.current_cards)
        player_levels = levels_to_map(request.player_card_levels)

        if request.goal is not None:
            candidates = generate_optimized_candidates(
                request.current_cards,
                request.goal,
                max_candidates=request.max_candidates,
                player_levels=player_levels,
                preferred_arena=request.preferred_arena,
                exclude_ids=request.exclude_cards,
            )
        else:
            candidates = generate_deck_candidates(
                request.current_cards,
                max_candidates=request.max_candidates,
                player_levels=player_levels,
                preferred_arena=request.preferred_arena,
                exclude_ids=request.exclude_cards,
            )

        log_deck_decision(
            deck_logger, "candidates", request.current_cards,
            [list(c.cards) for c in candidates]
        )
        return CandidatesResponse(candidates=candidates, goal=request.goal)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating candidates: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/deck/parse", response_model=DeckLinkResponse)
def parse_deck_link_endpoint(link: str = Query(..., min_length=1)) -> DeckLinkResponse:
    """Decode a shared deck link into its 8 cards."""
    try:
        card_ids = parse_deck_link(link)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cards = _resolve_known_cards(card_ids)
    return DeckLinkResponse(
        is_valid=True,
        cards=card_ids,
        average_elixir=get_catalog().calculate_average_elixir(card_ids),
        card_details=cards,
    )
