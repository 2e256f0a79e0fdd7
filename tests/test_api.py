"""
tests/test_api.py
HTTP boundary: request validation, status codes and response shapes.
"""

import pytest
from fastapi.testclient import TestClient

import api
import logger_config
from api import app
from conftest import HOG, HOG_CYCLE_DECK, KNIGHT, NO_WIN_CONDITION_DECK


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_config, "LOGS_DIR", tmp_path / "logs")
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "card_count": 85}


def test_meta_cards_filters(client):
    body = client.get("/meta/cards").json()
    assert len(body["cards"]) == 85

    body = client.get("/meta/cards", params={"role": "win_condition", "max_arena": 4}).json()
    assert body["cards"]
    for card in body["cards"]:
        assert "win_condition" in card["roles"]
        assert card["arena"] <= 4

    assert client.get("/meta/cards", params={"role": "healer"}).status_code == 422


def test_meta_arenas(client):
    arenas = client.get("/meta/arenas").json()["arenas"]
    assert len(arenas) == 15
    assert arenas[0]["name"] == "Training Camp"


def test_meta_top_decks(client):
    decks = client.get("/meta/top-decks").json()["decks"]
    assert len(decks) == 5
    assert all(len(d["card_details"]) == 8 for d in decks)

    decks = client.get("/meta/top-decks", params={"arena_id": 0}).json()["decks"]
    assert [d["deck_id"] for d in decks] == ["early-giant-beatdown"]

    decks = client.get("/meta/top-decks", params={"trophy_min": 5000}).json()["decks"]
    assert len(decks) == 3


def test_get_card(client):
    response = client.get(f"/cards/{HOG}")
    assert response.status_code == 200
    assert response.json()["name"] == "Hog Rider"

    assert client.get("/cards/does-not-exist").status_code == 404


def test_autofill(client):
    response = client.post("/deck/autofill", json={"current_cards": [KNIGHT]})
    assert response.status_code == 200

    body = response.json()
    assert len(body["deck"]) == 8
    assert body["deck"][0] == KNIGHT
    assert len(body["explanations"]) == 7
    assert len(body["card_details"]) == 8


def test_autofill_with_levels_and_arena(client):
    response = client.post(
        "/deck/autofill",
        json={
            "current_cards": [],
            "player_card_levels": [{"card_id": HOG, "level": 14}],
            "preferred_arena": 4,
        },
    )
    assert response.status_code == 200
    assert all(c["arena"] <= 4 for c in response.json()["card_details"])


@pytest.mark.parametrize(
    "payload",
    [
        {"current_cards": HOG_CYCLE_DECK},
        {"current_cards": [HOG, HOG]},
        {"current_cards": [], "player_card_levels": [{"card_id": HOG, "level": 15}]},
        {"current_cards": [], "preferred_arena": -1},
    ],
)
def test_autofill_rejects_malformed_requests(client, payload):
    assert client.post("/deck/autofill", json=payload).status_code == 422


def test_autofill_unknown_card(client):
    response = client.post("/deck/autofill", json={"current_cards": ["12345"]})
    assert response.status_code == 400
    assert "12345" in response.json()["detail"]


def test_autofill_exhausted_pool(client, monkeypatch):
    monkeypatch.setattr(api, "autofill_deck", lambda *args, **kwargs: None)
    response = client.post("/deck/autofill", json={"current_cards": []})
    assert response.status_code == 422


def test_validate(client):
    response = client.post("/deck/validate", json={"cards": HOG_CYCLE_DECK[:2]})
    assert response.status_code == 200

    body = response.json()
    assert body["is_valid"] is False
    assert "Deck has 2 cards, needs exactly 8" in body["issues"]
    assert len(body["card_details"]) == 2

    body = client.post("/deck/validate", json={"cards": HOG_CYCLE_DECK}).json()
    assert body["is_valid"] is True
    assert body["average_elixir"] == 2.6


def test_validate_rejects_duplicates_and_unknown(client):
    assert client.post("/deck/validate", json={"cards": [HOG, HOG]}).status_code == 422

    response = client.post("/deck/validate", json={"cards": [HOG, HOG, HOG, KNIGHT, KNIGHT]})
    assert response.status_code == 422
    assert f"Duplicate card IDs: ['{HOG}', '{KNIGHT}']" in response.json()["detail"][0]["msg"]

    assert client.post("/deck/validate", json={"cards": ["nope"]}).status_code == 400


def test_optimize(client):
    response = client.post("/deck/optimize", json={"cards": NO_WIN_CONDITION_DECK, "max_swaps": 1})
    assert response.status_code == 200

    body = response.json()
    assert body["original_deck"] == NO_WIN_CONDITION_DECK
    assert len(body["swaps"]) == 1
    assert body["swaps"][0]["remove_card"] == KNIGHT
    assert body["analysis"]["missing_roles"] == ["win_condition"]
    assert body["score_after"]["overall"] > body["score_before"]["overall"]


def test_optimize_requires_full_deck(client):
    response = client.post("/deck/optimize", json={"cards": NO_WIN_CONDITION_DECK[:7]})
    assert response.status_code == 422


def test_score(client):
    response = client.post("/deck/score", json={"cards": HOG_CYCLE_DECK})
    assert response.status_code == 200

    body = response.json()
    assert body["score"]["overall"] == 77.4
    assert body["score"]["coverage"]["missing_roles"] == []
    assert body["deck_link"].endswith(";".join(HOG_CYCLE_DECK))

    body = client.post("/deck/score", json={"cards": HOG_CYCLE_DECK[:3]}).json()
    assert body["deck_link"] is None

    assert client.post("/deck/score", json={"cards": []}).status_code == 422


def test_score_logs_request_and_decision(client, monkeypatch):
    requests, decisions = [], []
    monkeypatch.setattr(api, "log_deck_request", lambda logger, op, cards, **extra: requests.append((op, list(cards))))
    monkeypatch.setattr(api, "log_deck_decision", lambda logger, op, cards, result, **extra: decisions.append((op, result)))

    assert client.post("/deck/score", json={"cards": HOG_CYCLE_DECK}).status_code == 200

    assert requests == [("score", HOG_CYCLE_DECK)]
    assert decisions == [("score", {"overall": 77.4, "missing_roles": []})]


def test_candidates(client):
    response = client.post(
        "/deck/candidates",
        json={"current_cards": [HOG], "max_candidates": 2, "goal": "level_fit"},
    )
    assert response.status_code == 200

    body = response.json()
    assert body["goal"] == "level_fit"
    assert 1 <= len(body["candidates"]) <= 2
    for candidate in body["candidates"]:
        assert candidate["cards"][0] == HOG
        assert len(candidate["added_cards"]) == 7


def test_candidates_exclude_cards(client):
    response = client.post(
        "/deck/candidates",
        json={"current_cards": [], "max_candidates": 2, "exclude_cards": [HOG]},
    )
    assert response.status_code == 200
    assert all(HOG not in c["cards"] for c in response.json()["candidates"])


def test_parse_deck_link(client):
    link = "https://link.clashroyale.com/deck/en?deck=" + ";".join(HOG_CYCLE_DECK)
    response = client.get("/deck/parse", params={"link": link})
    assert response.status_code == 200

    body = response.json()
    assert body["is_valid"] is True
    assert body["cards"] == HOG_CYCLE_DECK
    assert body["average_elixir"] == 2.6


def test_parse_deck_link_errors(client):
    assert client.get("/deck/parse", params={"link": "https://example.com"}).status_code == 400

    unknown = "https://link.clashroyale.com/deck/en?deck=" + ";".join(["1"] * 8)
    response = client.get("/deck/parse", params={"link": unknown})
    assert response.status_code == 400
    assert "Unknown card IDs" in response.json()["detail"]

    assert client.get("/deck/parse").status_code == 422
