"""Data fetching layer: one POST to the TopDeck.gg tournaments API per cache miss."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

TOPDECK_API_URL = os.getenv("TOPDECK_API_URL", "https://topdeck.gg/api/v2/tournaments")


# ── Request body ──────────────────────────────────────────────────────────────


class TournamentQuery(BaseModel):
    last:           int       = 14
    game:           str       = "Magic: The Gathering"
    format:         str       = "EDH"
    columns:        list[str] = ["name", "wins", "losses", "participants"]
    players:        list[str] = ["name", "wins", "losses", "deckObj"]
    rounds:         bool      = False
    participantMin: int       = 8


# ── Errors ────────────────────────────────────────────────────────────────────


class UpstreamError(Exception):
    """Base class for anything that goes wrong talking to TopDeck."""


class UpstreamHTTPError(UpstreamError):
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"TopDeck API error: {status_code} - {body}")


class NetworkError(UpstreamError):
    pass


class InvalidResponseError(UpstreamError):
    pass


@dataclass
class FetchResult:
    tournaments: Any = None
    error: UpstreamError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ── Fetch ─────────────────────────────────────────────────────────────────────


async def fetch_tournaments(
    client: httpx.AsyncClient,
    api_key: str | None,
    query: TournamentQuery | None = None,
) -> FetchResult:
    """
    POST the tournament query to TopDeck and decode the JSON body.

    Never raises for upstream problems: a non-2xx status, a transport failure
    or an undecodable body comes back as ``FetchResult.error``. The decoded
    payload is returned as-is, whatever its shape.
    """
    body = (query or TournamentQuery()).model_dump()
    headers = {
        "Authorization": api_key or "",
        "Content-Type": "application/json",
    }

    try:
        response = await client.post(
            TOPDECK_API_URL, json=body, headers=headers, follow_redirects=True,
        )
    except httpx.RequestError as exc:
        logger.error("TopDeck request failed: %s", exc)
        return FetchResult(error=NetworkError(f"Failed to reach TopDeck API: {exc}"))

    if not response.is_success:
        logger.error("API Response: %s %s", response.status_code, response.text)
        return FetchResult(error=UpstreamHTTPError(response.status_code, response.text))

    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("TopDeck returned a non-JSON body: %s", exc)
        return FetchResult(error=InvalidResponseError(f"Invalid JSON from TopDeck API: {exc}"))

    count = len(payload) if isinstance(payload, list) else 0
    logger.info("Received tournaments from API: %d", count)
    return FetchResult(tournaments=payload)
