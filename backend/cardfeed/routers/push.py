"""
Silent-push webhook.

The client forwards the user info of every silent push it receives.  The
payload is interpreted by the push directive handler and its effects are
applied to the home feed.

Environment variables
---------------------
PUSH_WEBHOOK_SECRET   Shared secret checked in the X-Webhook-Secret header.
"""

import logging
import os
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException

from cardfeed.models.feed import PushResponse
from cardfeed.services.home_feed import HomeFeed, get_home_feed
from cardfeed.services.push_directives import apply_effects, handle_push_payload
from cardfeed.services.remote_config import RemoteConfigError

logger = logging.getLogger(__name__)

router = APIRouter()


def _verify_webhook_secret(x_webhook_secret: Optional[str] = Header(None)) -> None:
    """
    Verify that the push request carries the configured shared secret.

    Raises 401 if the secret is missing, unconfigured, or does not match.
    """
    expected = os.getenv("PUSH_WEBHOOK_SECRET", "")
    if not expected:
        logger.warning("PUSH_WEBHOOK_SECRET is not configured; all push requests will be rejected")
        raise HTTPException(status_code=401, detail="Webhook secret not configured")

    if not x_webhook_secret or x_webhook_secret != expected:
        raise HTTPException(status_code=401, detail="Invalid webhook secret")


@router.post("", response_model=PushResponse, dependencies=[Depends(_verify_webhook_secret)])
async def receive_push(
    payload: Dict[str, Any] = Body(...),
    feed: HomeFeed = Depends(get_home_feed),
):
    """
    Apply the directives in a silent-push payload.

    Returns the effects in the order they were applied.  A payload without
    any known key is accepted and yields no effects.
    """
    effects = handle_push_payload(payload)
    try:
        # Store writes and the observers they trigger form one update
        with feed.lock:
            applied = apply_effects(effects, feed.store, feed.notifications, feed.analytics)
    except RemoteConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return PushResponse(effects=applied)
