"""
Pydantic models for analytics events forwarded to the engagement vendor.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class AnalyticsEventType(str, Enum):
    CARD_CLICKED = "card_clicked"
    CARD_IMPRESSION = "card_impression"
    CARD_DISMISSED = "card_dismissed"
    CUSTOM_EVENT = "custom_event"


class AnalyticsEvent(BaseModel):
    """
    One analytics call.

    Card events carry ``content_card_id``; custom events carry ``name`` and
    optional ``properties``.
    """
    event_type: AnalyticsEventType
    content_card_id: Optional[str] = None
    name: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
