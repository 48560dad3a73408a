"""
Pytest configuration and shared fixtures.

Run from the repo root:
  pytest tests/

The upstream TopDeck API is never contacted: endpoint tests patch
``main.d.fetch_tournaments`` and client tests use ``httpx.MockTransport``.
"""

import os

# ── Must be set BEFORE any app imports ────────────────────────────────────────
os.environ.setdefault("API_KEY", "test-key")
os.environ.setdefault("TOPDECK_API_URL", "https://topdeck.test/api/v2/tournaments")

import pytest
from fastapi.testclient import TestClient

# Import app after env vars are set
from main import app

NOW = 1_700_000_000.0


# ── Clients ───────────────────────────────────────────────────────────────────

@pytest.fixture
def client():
    """TestClient with a fresh lifespan, so every test starts with an empty cache."""
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


# ── Sample payloads ───────────────────────────────────────────────────────────

def make_tournament(name: str, start: int, standings=None, legacy: bool = False) -> dict:
    """Build a TopDeck-shaped tournament record."""
    if legacy:
        t = {"tournamentName": name, "startDate": start}
    else:
        t = {"data": {"name": name, "startDate": start}}
    if standings is not None:
        t["standings"] = standings
    return t


@pytest.fixture
def sample_tournaments():
    return [
        make_tournament("Weekly cEDH Night", int(NOW) - 3_600,
                        standings=[{"name": "p1", "deckObj": {"Commander": "Kinnan"}}]),
        make_tournament("Casual EDH Pod", int(NOW) - 7_200, standings=[]),
        make_tournament("Spring CEDH Open", int(NOW) - 86_400,
                        standings=[{"name": "p1", "deckObj": {"Commanders": {"Tymna": {}, "Thrasios": {}}}},
                                   {"name": "p2", "deckObj": {"name": "Najeela"}}]),
        make_tournament("Future cEDH Major", int(NOW) + 86_400),
    ]
