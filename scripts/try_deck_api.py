#!/usr/bin/env python3
"""
Smoke script for the deck builder API.
Start the server first (uvicorn api:app --reload), then run this.
"""

import sys
import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

# Hog Rider + Fireball, let the engine do the rest
STARTING_CARDS = ["26000021", "28000000"]

print("=" * 80)
print(f"POSTing to {BASE_URL}/deck/autofill with {len(STARTING_CARDS)} starting cards")
print("=" * 80 + "\n")

try:
    response = requests.post(
        f"{BASE_URL}/deck/autofill",
        json={"current_cards": STARTING_CARDS},
        headers={"Content-Type": "application/json"}
    )
    response.raise_for_status()
    autofill = response.json()

    print("AUTOFILL RESPONSE:")
    print("-" * 80)
    print(f"Deck: {autofill['deck']}")
    print(f"Average elixir: {autofill['average_elixir']}")
    for explanation in autofill['explanations']:
        print(f"  - {explanation['reason']}")
        for alt in autofill['alternatives'].get(explanation['card_id'], []):
            print(f"      alt: {alt['reason']}")

    response = requests.post(
        f"{BASE_URL}/deck/validate",
        json={"cards": autofill['deck']}
    )
    response.raise_for_status()
    validation = response.json()

    print("\nVALIDATION:")
    print("-" * 80)
    print(f"Valid: {validation['is_valid']}")
    for issue in validation['issues']:
        print(f"  ! {issue}")

    response = requests.post(
        f"{BASE_URL}/deck/optimize",
        json={"cards": autofill['deck'], "max_swaps": 2}
    )
    response.raise_for_status()
    optimized = response.json()

    print("\nOPTIMIZE:")
    print("-" * 80)
    print(f"Score: {optimized['score_before']['overall']} -> {optimized['score_after']['overall']}")
    if optimized['analysis']['already_optimal']:
        print("Deck is already optimal")
    for swap in optimized['swaps']:
        print(f"  * {swap['reason']}")

    print("\n" + "=" * 80)
    print("Expected Behavior:")
    print("=" * 80)
    print("1. Deck has 8 distinct cards and keeps both starting cards")
    print("2. Validation reports no missing roles")
    print("3. Every applied swap improves the score by more than 1")

except requests.exceptions.ConnectionError:
    print("ERROR: Could not connect to API server.")
    print("Make sure the server is running: uvicorn api:app --reload")
except requests.exceptions.HTTPError as e:
    print(f"ERROR: HTTP {e.response.status_code}")
    print(e.response.text)
