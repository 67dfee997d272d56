"""
Cardfeed Backend API
FastAPI application for content card normalization and home feed ordering.
"""

import logging
import os
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardfeed.routers import feed, push

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cardfeed API",
    description="Content card normalization and home feed ordering",
    version="0.1.0",
)


def get_cors_origins() -> List[str]:
    """
    Build the list of allowed CORS origins.

    Always includes http://localhost:3000.  Additional origins are read from
    the CORS_ORIGINS environment variable as a comma-separated list, e.g.:
        CORS_ORIGINS=https://demo.example.com,https://preview.example.com

    Duplicates are removed while preserving order.
    """
    always_included = ["http://localhost:3000"]

    extra_origins: List[str] = []
    cors_env = os.getenv("CORS_ORIGINS", "").strip()
    if cors_env:
        extra_origins = [o.strip() for o in cors_env.split(",") if o.strip()]

    seen: set = set()
    origins: List[str] = []
    for origin in always_included + extra_origins:
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)

    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(feed.feed_router, prefix="/api/feed", tags=["feed"])
app.include_router(feed.content_cards_router, prefix="/api/content-cards", tags=["content-cards"])
app.include_router(push.router, prefix="/api/push", tags=["push"])


@app.get("/")
async def root():
    return {"message": "Cardfeed API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}
