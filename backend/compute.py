"""Pure computation functions: no I/O, no cache, JSON-ready outputs."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

MAX_COMMANDERS = 2
NAME_KEYWORD = "cedh"

# Commander keys on a deck description, checked in order
_COMMANDER_MAPPING_KEYS = ("Commanders", "commanders")
_COMMANDER_VALUE_KEYS = ("Commander", "name")


# ── Commanders ────────────────────────────────────────────────────────────────

def extract_commanders(deck: Any) -> list[str]:
    """
    Pull up to two commander names out of a standing's deck description.

    TopDeck hands back several shapes, so the first rule that matches wins:
      1. ``Commanders`` mapping  -> its first two keys
      2. ``commanders`` mapping  -> its first two keys
      3. ``Commander`` value     -> [value]
      4. ``name`` value          -> [value]
    Anything else (including a missing deck) gives an empty list.
    """
    if not isinstance(deck, Mapping):
        return []

    for key in _COMMANDER_MAPPING_KEYS:
        if isinstance(deck.get(key), Mapping):
            return list(deck[key])[:MAX_COMMANDERS]

    for key in _COMMANDER_VALUE_KEYS:
        if deck.get(key):
            return [deck[key]]

    return []


def _with_commanders(standing: Any, idx: int) -> Any:
    if not isinstance(standing, dict):
        return standing
    deck = standing.get("deckObj")
    if isinstance(deck, Mapping):
        logger.debug("Standing %d deckObj keys: %s", idx, list(deck))
        logger.debug("Standing %d deckObj: %.200s", idx, json.dumps(deck, default=str))
    return {**standing, "commanders": extract_commanders(deck)}


# ── Transform ─────────────────────────────────────────────────────────────────

def transform_tournament(tournament: Any) -> Any:
    if not isinstance(tournament, dict):
        return tournament

    standings = tournament.get("standings")
    data = tournament.get("data")
    out = {**tournament}

    if isinstance(standings, list):
        out["standings"] = [_with_commanders(s, i) for i, s in enumerate(standings)]
        participants = len(standings)
    else:
        participants = 0

    out["data"] = {**(data if isinstance(data, dict) else {}), "participants": participants}
    return out


def transform_tournaments(raw: Any) -> Any:
    """Return a new list of enriched tournaments; non-list payloads pass through unchanged."""
    if not isinstance(raw, list):
        return raw

    result = [transform_tournament(t) for t in raw]

    first = result[0] if result else None
    if isinstance(first, dict) and isinstance(first.get("standings"), list) and first["standings"]:
        logger.debug(
            "First standing (before filter): %.500s",
            json.dumps(first["standings"][0], indent=2, default=str),
        )
    return result


# ── Filter / sort ─────────────────────────────────────────────────────────────

def _data_field(tournament: dict, key: str) -> Any:
    data = tournament.get("data")
    return data.get(key) if isinstance(data, dict) else None


def tournament_name(tournament: dict) -> str:
    name = _data_field(tournament, "name") or tournament.get("tournamentName") or ""
    return str(name)


def _as_number(v: Any) -> float:
    """Numbers pass through, numeric strings are parsed, anything else is 0."""
    if isinstance(v, bool):
        return 0
    if isinstance(v, (int, float)):
        return v
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            return 0
    return 0


def start_date(tournament: dict) -> float:
    for v in (_data_field(tournament, "startDate"), tournament.get("startDate")):
        n = _as_number(v)
        if n:
            return n
    return 0


def filter_and_sort(tournaments: Any, now_seconds: int) -> list:
    """
    Keep started cEDH tournaments, most recent first.

    Equal start dates keep their input order (``sorted`` is stable under
    ``reverse=True``).
    """
    if not isinstance(tournaments, list):
        return []

    kept = [
        t for t in tournaments
        if isinstance(t, dict)
        and NAME_KEYWORD in tournament_name(t).lower()
        and start_date(t) <= now_seconds
    ]
    return sorted(kept, key=start_date, reverse=True)
