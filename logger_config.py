"""
Logging configuration for the deck builder.
Human-readable console/file logs plus structured JSON lines for deck decisions.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

LOGS_DIR = Path(os.environ.get("DECKBUILDER_LOG_DIR", "logs"))

# Decision log (JSON lines format for easy parsing)
DECISION_LOG_FILE = "deck_decisions.jsonl"

_configured = False


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add any extra fields passed to the logger
        if hasattr(record, "data"):
            log_data.update(record.data)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: Optional[str] = None, logs_dir: Optional[Path] = None) -> None:
    """Setup logging configuration for the deck builder. Safe to call more than once."""
    global _configured
    if _configured:
        return

    log_level = log_level or os.environ.get("DECKBUILDER_LOG_LEVEL", "INFO")
    logs_dir = Path(logs_dir) if logs_dir is not None else LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Console handler (human-readable)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(console_formatter)

    # File handler (human-readable)
    file_handler = logging.FileHandler(logs_dir / "deckbuilder.log")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(console_formatter)

    # Decision handler (JSON lines format)
    decision_handler = logging.FileHandler(logs_dir / DECISION_LOG_FILE, mode="a")
    decision_handler.setLevel(logging.INFO)
    decision_handler.setFormatter(JSONFormatter())

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(decision_handler)

    _configured = True


def log_deck_request(
    logger: logging.Logger,
    operation: str,
    card_ids: Iterable[str],
    **extra_data: Any
) -> None:
    """Log an incoming deck operation."""
    log_data = {
        "event_type": "deck_request",
        "operation": operation,
        "cards": list(card_ids),
        **extra_data
    }
    logger.info("Deck request logged", extra={"data": log_data})


def log_deck_decision(
    logger: logging.Logger,
    operation: str,
    card_ids: Iterable[str],
    result: Any,
    **extra_data: Any
) -> None:
    """Log the engine's answer for a deck operation."""
    log_data = {
        "event_type": "deck_decision",
        "operation": operation,
        "cards": list(card_ids),
        "result": _serialize_result(result),
        **extra_data
    }
    logger.info("Deck decision logged", extra={"data": log_data})


def log_card_selection(
    logger: logging.Logger,
    card_id: str,
    role: str,
    deck_size: int,
    **extra_data: Any
) -> None:
    """Log a single greedy slot fill."""
    log_data = {
        "event_type": "card_selection",
        "card_id": card_id,
        "role": role,
        "deck_size": deck_size,
        **extra_data
    }
    logger.debug("Card selection logged", extra={"data": log_data})


def log_swap_evaluation(
    logger: logging.Logger,
    remove_card: str,
    add_card: str,
    improvement: float,
    accepted: bool,
    **extra_data: Any
) -> None:
    """Log a single swap considered by the swap advisor."""
    log_data = {
        "event_type": "swap_evaluation",
        "remove_card": remove_card,
        "add_card": add_card,
        "improvement": improvement,
        "accepted": accepted,
        **extra_data
    }
    logger.debug("Swap evaluation logged", extra={"data": log_data})


def _serialize_result(result: Any) -> Any:
    """Serialize a result model (or list of models) for logging."""
    if hasattr(result, "model_dump"):
        return result.model_dump(mode="json")
    elif isinstance(result, dict):
        return result
    elif isinstance(result, (list, tuple)):
        return [
            item.model_dump(mode="json") if hasattr(item, "model_dump") else item
            for item in result
        ]
    elif result is None:
        return None
    else:
        return {"raw": str(result)}


# Shared logger for engine events
deck_logger = logging.getLogger("deckbuilder")
