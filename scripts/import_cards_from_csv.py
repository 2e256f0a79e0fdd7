# scripts/import_cards_from_csv.py

import csv
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from card_db import DATA_DIR, row_to_card
from card_types import CardRarity, CardRole, CardType


CSV_PATH = Path("data/cards.csv")
JSON_PATH = DATA_DIR / "cards.json"


def parse_roles(raw: str) -> list[str]:
    """Roles are separated by ';' or ','. Spaces inside a role become underscores."""
    if not raw:
        return []
    parts = raw.replace(";", ",").split(",")
    return [p.strip().lower().replace(" ", "_") for p in parts if p.strip()]


# Safe integer parsing
def to_int(value, default=0):
    s = (value or "").strip()
    if not s:
        return default
    try:
        return int(s)
    except ValueError:
        return default


def read_cards_csv(csv_path: Path) -> list[dict]:
    """
    Read a card sheet into cards.json rows, in sheet order.

    Expected columns: id, name, elixir, rarity, type, arena, roles.
    Bad rows are reported and skipped.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    rows = []
    seen_ids = set()

    with csv_path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        for line_num, row in enumerate(reader, start=2):  # start=2 (line after header)
            # Skip completely empty rows
            if not row or all(v in (None, "", " ") for v in row.values()):
                print(f"Skipping empty row at line {line_num}")
                continue

            raw_id = (row.get("id") or "").strip()
            if not raw_id:
                print(f"Skipping row {line_num}: missing id -> {row}")
                continue

            if raw_id in seen_ids:
                print(f"Skipping row {line_num}: duplicate id '{raw_id}'")
                continue

            raw_rarity = (row.get("rarity") or "").strip().lower()
            raw_type = (row.get("type") or "").strip().lower()

            try:
                CardRarity(raw_rarity)
                CardType(raw_type)
            except ValueError as e:
                print(f"Skipping row {line_num}: invalid rarity or type -> {e}")
                continue

            roles = parse_roles(row.get("roles") or "")
            unknown_roles = [r for r in roles if r not in {role.value for role in CardRole}]
            if unknown_roles:
                print(f"Skipping row {line_num}: unknown roles {unknown_roles}")
                continue

            out = {
                "id": raw_id,
                "name": (row.get("name") or "").strip(),
                "elixir": to_int(row.get("elixir"), 0),
                "rarity": raw_rarity,
                "type": raw_type,
                "arena": to_int(row.get("arena"), 0),
                "roles": roles,
            }

            try:
                row_to_card(out)
            except ValidationError as e:
                print(f"Skipping row {line_num}: {e.error_count()} validation error(s) -> {out}")
                continue

            seen_ids.add(raw_id)
            rows.append(out)

    return rows


def write_cards_json(rows: list[dict], json_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump({"cards": rows}, f, indent=2)
        f.write("\n")


def main() -> None:
    csv_path = Path(sys.argv[1]) if len(sys.argv) > 1 else CSV_PATH
    rows = read_cards_csv(csv_path)
    write_cards_json(rows, JSON_PATH)
    print(f"Imported {len(rows)} cards from {csv_path} into {JSON_PATH.resolve()}")


if __name__ == "__main__":
    main()
