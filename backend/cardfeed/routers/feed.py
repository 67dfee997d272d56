"""
Home feed and content card API endpoints.

Endpoints:
  GET  /api/feed                                 - current snapshot
  POST /api/feed/reset                           - log dismissals on tear-down
  POST /api/feed/impressions                     - log impressions for shown cards
  POST /api/content-cards                        - SDK "cards processed" update
  POST /api/content-cards/{card_id}/click        - log a click
  POST /api/content-cards/{card_id}/impression   - log an impression
  POST /api/content-cards/{card_id}/dismiss      - log a dismissal

Per-card analytics calls for an unknown id are accepted and ignored
(``logged: false``) since the card batch may have changed since the client
rendered it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from cardfeed.models.feed import ContentCardsUpdate, FeedResponse
from cardfeed.services.feed_assembler import log_impressions
from cardfeed.services.home_feed import HomeFeed, get_home_feed
from cardfeed.services.remote_config import RemoteConfigError

logger = logging.getLogger(__name__)

feed_router = APIRouter()
content_cards_router = APIRouter()


def _feed_response(feed: HomeFeed) -> FeedResponse:
    with feed.lock:
        try:
            priority = feed.store.retrieve()
        except RemoteConfigError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return FeedResponse(experience=feed.experience, priority=priority, snapshot=feed.snapshot)


@feed_router.get("", response_model=FeedResponse)
async def get_feed(feed: HomeFeed = Depends(get_home_feed)):
    """Return the current two-section snapshot and experience mode."""
    return _feed_response(feed)


@feed_router.post("/reset")
async def reset_feed(feed: HomeFeed = Depends(get_home_feed)):
    """
    Record that the user no longer sees the content-card tiles.

    The snapshot itself is unchanged.
    """
    feed.reset()
    return {"status": "ok"}


@feed_router.post("/impressions")
async def log_feed_impressions(feed: HomeFeed = Depends(get_home_feed)):
    with feed.lock:
        logged = log_impressions(feed.snapshot, feed.analytics)
    return {"logged": logged}


@content_cards_router.post("", response_model=FeedResponse)
async def content_cards_updated(
    update: ContentCardsUpdate,
    feed: HomeFeed = Depends(get_home_feed),
):
    """
    Accept the cards the SDK just processed and rebuild the feed.

    An update with ``is_successful: false`` keeps the previous cards.
    """
    try:
        feed.content_cards_updated(update)
    except RemoteConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _feed_response(feed)


@content_cards_router.post("/{card_id}/click")
async def log_card_clicked(card_id: str, feed: HomeFeed = Depends(get_home_feed)):
    return {"logged": feed.analytics.log_content_card_clicked(card_id)}


@content_cards_router.post("/{card_id}/impression")
async def log_card_impression(card_id: str, feed: HomeFeed = Depends(get_home_feed)):
    return {"logged": feed.analytics.log_content_card_impression(card_id)}


@content_cards_router.post("/{card_id}/dismiss")
async def log_card_dismissed(card_id: str, feed: HomeFeed = Depends(get_home_feed)):
    return {"logged": feed.analytics.log_content_card_dismissed(card_id)}
