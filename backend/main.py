"""FastAPI proxy for cEDH tournament data from TopDeck.gg."""

from __future__ import annotations

import os
import logging
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import data as d
import compute as c
from cache import TournamentCache

logger = logging.getLogger(__name__)

API_KEY = os.getenv("API_KEY")
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    """Give the root logger a handler so INFO lines show under `uvicorn main:app` too."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


configure_logging()


def _now() -> float:
    return time.time()


# ── Lifespan: shared HTTP client + cache slot ─────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("API_KEY loaded: %s", "Yes" if API_KEY else "No")
    app.state.cache = TournamentCache()
    app.state.http = httpx.AsyncClient(follow_redirects=True)
    yield
    await app.state.http.aclose()
    app.state.cache.clear()


app = FastAPI(title="cEDH Tournament Proxy", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


# ── Tournaments ───────────────────────────────────────────────────────────────


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


@app.get("/api/tournaments")
async def get_tournaments(request: Request):
    cache: TournamentCache = request.app.state.cache
    now = _now()

    cached = cache.read(now)
    if cached is not None:
        logger.info("Returning cached tournament data")
        return cached

    logger.info("Fetching fresh tournament data from API...")
    try:
        result = await d.fetch_tournaments(request.app.state.http, API_KEY)
        if not result.ok:
            return _error_response(str(result.error))

        # transform before filter: filtering works on the enriched records
        tournaments = c.transform_tournaments(result.tournaments)
        tournaments = c.filter_and_sort(tournaments, int(now))
    except Exception as exc:
        logger.exception("Error in /api/tournaments")
        return _error_response(str(exc))

    logger.info("After filtering by CEDH name: %d tournaments", len(tournaments))
    cache.write(tournaments, now)
    return tournaments


# ── Dev entry point ───────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=PORT, reload=True)
