"""
Content card analytics.

Click, impression and dismissal calls are keyed by card id and resolved
against the latest card batch; an id that is not in the batch (e.g. the
cards were refreshed in the meantime) makes the call a no-op.  Custom events
are forwarded by name.

Events are handed to a sink:
  SupabaseAnalyticsSink  - inserts a row per event into ``content_card_events``
  InMemoryAnalyticsSink  - keeps events in a list, used when Supabase is not
                           configured and in tests
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cardfeed.db import ANALYTICS_TABLE, supabase_admin
from cardfeed.models.analytics import AnalyticsEvent, AnalyticsEventType
from cardfeed.services.card_repository import ContentCardRepository

logger = logging.getLogger(__name__)


class AnalyticsSink(ABC):

    @abstractmethod
    def record(self, event: AnalyticsEvent) -> None:
        """Forward one event to the vendor."""


class InMemoryAnalyticsSink(AnalyticsSink):

    def __init__(self) -> None:
        self.events: List[AnalyticsEvent] = []

    def record(self, event: AnalyticsEvent) -> None:
        logger.info("analytics %s %s", event.event_type.value, event.content_card_id or event.name)
        self.events.append(event)


class SupabaseAnalyticsSink(AnalyticsSink):

    def __init__(self, client: Any = None, table: str = ANALYTICS_TABLE):
        self.client = client if client is not None else supabase_admin
        self.table = table
        if self.client is None:
            raise ValueError("SUPABASE_SERVICE_KEY is required for the Supabase analytics sink")

    def record(self, event: AnalyticsEvent) -> None:
        row = event.model_dump(mode="json")
        row["event_type"] = event.event_type.value
        row["recorded_at"] = datetime.now(timezone.utc).isoformat()
        try:
            self.client.table(self.table).insert(row).execute()
        except Exception as e:
            # Analytics must never break the feed
            logger.warning(f"Failed to record analytics event {event.event_type.value}: {e}")


def create_analytics_sink() -> AnalyticsSink:
    if supabase_admin is not None:
        return SupabaseAnalyticsSink(supabase_admin)
    return InMemoryAnalyticsSink()


class ContentCardAnalytics:
    """Logs card interactions by id and custom events by name."""

    def __init__(self, repository: ContentCardRepository, sink: AnalyticsSink):
        self.repository = repository
        self.sink = sink

    def _log_card_event(self, event_type: AnalyticsEventType, id_string: Optional[str]) -> bool:
        card = self.repository.get(id_string)
        if card is None:
            logger.debug("%s: no content card with id %r, skipping", event_type.value, id_string)
            return False
        self.sink.record(AnalyticsEvent(event_type=event_type, content_card_id=card.id_string))
        return True

    def log_content_card_clicked(self, id_string: Optional[str]) -> bool:
        return self._log_card_event(AnalyticsEventType.CARD_CLICKED, id_string)

    def log_content_card_impression(self, id_string: Optional[str]) -> bool:
        return self._log_card_event(AnalyticsEventType.CARD_IMPRESSION, id_string)

    def log_content_card_dismissed(self, id_string: Optional[str]) -> bool:
        return self._log_card_event(AnalyticsEventType.CARD_DISMISSED, id_string)

    def log_custom_event(self, event_name: str, properties: Optional[Dict[str, Any]] = None) -> None:
        self.sink.record(
            AnalyticsEvent(
                event_type=AnalyticsEventType.CUSTOM_EVENT,
                name=event_name,
                properties=properties,
            )
        )
