"""
Home feed assembly.

Combines ad placements and priority-ordered tiles into the two-section
PresentationSnapshot the client renders, and re-applies the priority hint to
an existing snapshot without fetching new cards.
"""

import logging
from typing import List, Optional

from cardfeed.models.content_card import Ad, Tile
from cardfeed.models.feed import AdSection, FeedSection, PresentationSnapshot, TileSection
from cardfeed.services.analytics import ContentCardAnalytics
from cardfeed.services.priority import reorder_tiles

logger = logging.getLogger(__name__)


def build_snapshot(
    ads: List[Ad],
    tiles: List[Tile],
    priority_hint: Optional[str],
) -> PresentationSnapshot:
    """
    Build a fresh snapshot: ``ad`` section first, then the ordered tiles.

    Both sections are always present, even when empty.
    """
    return PresentationSnapshot(
        sections=[
            AdSection(items=list(ads)),
            TileSection(items=reorder_tiles(tiles, priority_hint)),
        ]
    )


def reorder_only(
    current: PresentationSnapshot,
    priority_hint: Optional[str],
) -> PresentationSnapshot:
    """
    Re-derive the tile order from the tiles already in ``current``.

    Only the tile section is replaced; the ad section object is carried over
    as is.  The result always has the ``ad`` then ``tile`` sections, even if
    ``current`` is missing one of them.
    """
    ad_section = current.section(FeedSection.AD)
    if ad_section is None:
        ad_section = AdSection()
    tile_section = TileSection(items=reorder_tiles(current.tiles, priority_hint))
    return PresentationSnapshot(sections=[ad_section, tile_section])


def reset(current: PresentationSnapshot, analytics: ContentCardAnalytics) -> None:
    """
    Log a dismissal for every content-card tile in ``current``.

    Called when the feed is torn down; the snapshot itself is not changed.
    """
    dismissed = 0
    for tile in current.tiles:
        if not tile.is_content_card:
            continue
        if analytics.log_content_card_dismissed(tile.content_card_id):
            dismissed += 1
    logger.info("Feed reset: logged %d dismissal(s)", dismissed)


def log_impressions(current: PresentationSnapshot, analytics: ContentCardAnalytics) -> int:
    """Log an impression for every content-card item in ``current``."""
    logged = 0
    for section in current.sections:
        for item in section.items:
            if item.is_content_card and analytics.log_content_card_impression(item.content_card_id):
                logged += 1
    return logged
