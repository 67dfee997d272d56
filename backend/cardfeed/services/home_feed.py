"""
Home feed state.

HomeFeed owns the current PresentationSnapshot and the experience mode, and
is the observer of the three feed signals:

  default_app_experience    -> tiles come from the bundled default tiles
  home_screen_content_card  -> tiles come from content cards
  reorder_home_screen       -> re-apply the stored priority hint in place

Ads always come from the latest content card batch.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import List, Optional

from fastapi import HTTPException
from pydantic import TypeAdapter

from cardfeed.models.content_card import Ad, ContentCardClassType, Tile
from cardfeed.models.feed import ContentCardsUpdate, ExperienceMode, PresentationSnapshot
from cardfeed.services.analytics import ContentCardAnalytics, create_analytics_sink
from cardfeed.services.card_repository import ContentCardRepository
from cardfeed.services.feed_assembler import build_snapshot, reorder_only, reset as reset_feed
from cardfeed.services.normalizer import normalize_content_cards
from cardfeed.services.notifications import FeedSignal, NotificationCenter
from cardfeed.services.remote_config import RemoteConfigError, RemoteConfigStore, create_remote_config_store

logger = logging.getLogger(__name__)

_DEFAULT_TILES_FILE = Path(__file__).resolve().parent.parent / "data" / "default_tiles.json"

_TILE_LIST = TypeAdapter(List[Tile])


def load_default_tiles(path: Optional[str] = None) -> List[Tile]:
    """
    Load the locally defined tiles shown in the default experience.

    Reads ``path``, else ``DEFAULT_TILES_PATH``, else the bundled
    ``data/default_tiles.json``.  The file is a JSON list of tile objects;
    the tiles are never backed by a content card.
    """
    tiles_path = Path(path or os.getenv("DEFAULT_TILES_PATH") or _DEFAULT_TILES_FILE)
    with open(tiles_path, encoding="utf-8") as f:
        raw = json.load(f)
    tiles = _TILE_LIST.validate_python(raw)
    return [tile.model_copy(update={"content_card_data": None}) for tile in tiles]


class HomeFeed:
    """
    Current home feed state.

    Every mutation runs under ``lock`` so that card updates, experience
    switches and reorders are applied one at a time.  The lock is re-entrant
    because signal observers run inside whatever posted the signal.
    """

    def __init__(
        self,
        store: RemoteConfigStore,
        notifications: NotificationCenter,
        repository: ContentCardRepository,
        analytics: ContentCardAnalytics,
        default_tiles: Optional[List[Tile]] = None,
        experience: ExperienceMode = ExperienceMode.DEFAULT,
    ):
        self.store = store
        self.notifications = notifications
        self.repository = repository
        self.analytics = analytics
        self.default_tiles = list(default_tiles or [])
        self.experience = experience
        self.snapshot = PresentationSnapshot()
        self.lock = threading.RLock()

        notifications.add_observer(FeedSignal.DEFAULT_APP_EXPERIENCE, self.show_default_experience)
        notifications.add_observer(FeedSignal.HOME_SCREEN_CONTENT_CARD, self.show_content_card_experience)
        notifications.add_observer(FeedSignal.REORDER_HOME_SCREEN, self.reorder)

        self.rebuild()

    @property
    def wanted_types(self) -> List[ContentCardClassType]:
        if self.experience == ExperienceMode.CONTENT_CARD:
            return [ContentCardClassType.ITEM_TILE, ContentCardClassType.AD]
        return [ContentCardClassType.AD]

    def rebuild(self) -> PresentationSnapshot:
        """Rebuild the snapshot from the cached cards and the current mode."""
        with self.lock:
            items = normalize_content_cards(self.repository.cards, self.wanted_types)
            ads = [item for item in items if isinstance(item, Ad)]
            if self.experience == ExperienceMode.CONTENT_CARD:
                tiles = [item for item in items if isinstance(item, Tile)]
            else:
                tiles = self.default_tiles
            self.snapshot = build_snapshot(ads, tiles, self.store.retrieve())
            return self.snapshot

    def content_cards_updated(self, update: ContentCardsUpdate) -> PresentationSnapshot:
        """
        Take in an SDK "cards processed" update.

        An unsuccessful update leaves the cached cards and snapshot alone.
        """
        with self.lock:
            if not update.is_successful:
                logger.info("Ignoring unsuccessful content card update")
                return self.snapshot
            self.repository.replace(update.cards)
            self.rebuild()
            logger.info(
                "Feed rebuilt from %d card(s): %d ad(s), %d tile(s)",
                len(update.cards),
                len(self.snapshot.ads),
                len(self.snapshot.tiles),
            )
            return self.snapshot

    # Signal observers

    def show_default_experience(self) -> None:
        with self.lock:
            self.experience = ExperienceMode.DEFAULT
            self.rebuild()

    def show_content_card_experience(self) -> None:
        with self.lock:
            self.experience = ExperienceMode.CONTENT_CARD
            self.rebuild()

    def reorder(self) -> None:
        with self.lock:
            self.snapshot = reorder_only(self.snapshot, self.store.retrieve())

    def reset(self) -> None:
        """Log dismissals for the content-card tiles currently shown."""
        with self.lock:
            reset_feed(self.snapshot, self.analytics)


_home_feed: Optional[HomeFeed] = None
_home_feed_lock = threading.Lock()


def get_home_feed() -> HomeFeed:
    """
    FastAPI dependency returning the process-wide HomeFeed.

    Built on first use with the Supabase-backed store and sink when Supabase
    is configured.  Raises 503 if the priority hint cannot be read while
    building; the next request tries again.
    """
    global _home_feed
    with _home_feed_lock:
        if _home_feed is None:
            repository = ContentCardRepository()
            try:
                _home_feed = HomeFeed(
                    store=create_remote_config_store(),
                    notifications=NotificationCenter(),
                    repository=repository,
                    analytics=ContentCardAnalytics(repository, create_analytics_sink()),
                    default_tiles=load_default_tiles(),
                )
            except RemoteConfigError as e:
                logger.error(f"Failed to build home feed: {e}")
                raise HTTPException(status_code=503, detail=str(e))
        return _home_feed
