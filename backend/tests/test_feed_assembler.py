"""
Unit tests for home feed assembly: snapshot building, reorder-only updates
and tear-down dismissal logging.
"""

from cardfeed.models.analytics import AnalyticsEventType
from cardfeed.models.content_card import (
    Ad,
    ContentCardClassType,
    ContentCardData,
    RawCard,
    RawCardType,
    Tile,
)
from cardfeed.models.feed import FeedSection, PresentationSnapshot, TileSection
from cardfeed.services.analytics import ContentCardAnalytics, InMemoryAnalyticsSink
from cardfeed.services.card_repository import ContentCardRepository
from cardfeed.services.feed_assembler import (
    build_snapshot,
    log_impressions,
    reorder_only,
    reset,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _card_data(card_id: str, class_type=ContentCardClassType.ITEM_TILE) -> ContentCardData:
    return ContentCardData(
        content_card_id=card_id,
        content_card_class_type=class_type,
        created_at=1700000000.0,
        is_dismissable=True,
    )


def _tile(tile_id: str, *tags: str, card: bool = False) -> Tile:
    return Tile(
        id=tile_id,
        title=f"Tile {tile_id}",
        tags=set(tags),
        content_card_data=_card_data(tile_id) if card else None,
    )


def _ad(ad_id: str) -> Ad:
    return Ad(
        id=ad_id,
        image_url=f"https://cdn.example.com/{ad_id}.png",
        content_card_data=_card_data(ad_id, ContentCardClassType.AD),
    )


def _raw(card_id: str) -> RawCard:
    return RawCard(id_string=card_id, created=1700000000.0, card_type=RawCardType.CLASSIC)


def _analytics(*card_ids: str):
    sink = InMemoryAnalyticsSink()
    repository = ContentCardRepository([_raw(card_id) for card_id in card_ids])
    return ContentCardAnalytics(repository, sink), sink


def _ids(items):
    return [item.id for item in items]


# ---------------------------------------------------------------------------
# build_snapshot
# ---------------------------------------------------------------------------

class TestBuildSnapshot:

    def test_sections_are_ad_then_tile(self):
        snapshot = build_snapshot([_ad("ad-1")], [_tile("t1")], None)
        assert [s.section for s in snapshot.sections] == [FeedSection.AD, FeedSection.TILE]

    def test_both_sections_present_when_inputs_empty(self):
        snapshot = build_snapshot([], [], None)
        assert [s.section for s in snapshot.sections] == [FeedSection.AD, FeedSection.TILE]
        assert snapshot.ads == []
        assert snapshot.tiles == []

    def test_ads_kept_in_order(self):
        snapshot = build_snapshot([_ad("ad-2"), _ad("ad-1")], [], "x")
        assert _ids(snapshot.ads) == ["ad-2", "ad-1"]

    def test_tiles_are_priority_ordered(self):
        tiles = [_tile("a"), _tile("b", "x"), _tile("c", "x", card=True)]
        snapshot = build_snapshot([], tiles, "x")
        assert _ids(snapshot.tiles) == ["c", "b", "a"]

    def test_no_hint_keeps_tile_order(self):
        tiles = [_tile("a"), _tile("b", "x")]
        snapshot = build_snapshot([], tiles, None)
        assert _ids(snapshot.tiles) == ["a", "b"]


# ---------------------------------------------------------------------------
# reorder_only
# ---------------------------------------------------------------------------

class TestReorderOnly:

    def test_reorders_current_tiles(self):
        current = build_snapshot([_ad("ad-1")], [_tile("a"), _tile("b", "new")], None)

        updated = reorder_only(current, "new")

        assert _ids(updated.tiles) == ["b", "a"]

    def test_ad_section_is_untouched(self):
        current = build_snapshot([_ad("ad-1"), _ad("ad-2")], [_tile("a", "x")], None)

        updated = reorder_only(current, "x")

        assert updated.section(FeedSection.AD) is current.section(FeedSection.AD)
        assert [s.section for s in updated.sections] == [FeedSection.AD, FeedSection.TILE]

    def test_reorders_from_snapshot_order_not_original_input(self):
        """A second hint applies to the already-reordered tiles."""
        tiles = [_tile("a", "y"), _tile("b", "x"), _tile("c")]
        current = build_snapshot([], tiles, "x")
        assert _ids(current.tiles) == ["b", "a", "c"]

        updated = reorder_only(current, "y")

        assert _ids(updated.tiles) == ["a", "b", "c"]

    def test_empty_hint_leaves_tiles_alone(self):
        current = build_snapshot([], [_tile("a"), _tile("b", "x")], "x")
        updated = reorder_only(current, "")
        assert _ids(updated.tiles) == _ids(current.tiles)

    def test_empty_snapshot_keeps_both_sections(self):
        updated = reorder_only(PresentationSnapshot(), "x")

        assert [s.section for s in updated.sections] == [FeedSection.AD, FeedSection.TILE]
        assert updated.ads == []
        assert updated.tiles == []

    def test_snapshot_without_ad_section_gets_one(self):
        current = PresentationSnapshot(sections=[TileSection(items=[_tile("a"), _tile("b", "x")])])

        updated = reorder_only(current, "x")

        assert [s.section for s in updated.sections] == [FeedSection.AD, FeedSection.TILE]
        assert _ids(updated.tiles) == ["b", "a"]

    def test_default_snapshot_has_ad_then_tile(self):
        assert [s.section for s in PresentationSnapshot().sections] == [FeedSection.AD, FeedSection.TILE]


# ---------------------------------------------------------------------------
# reset / log_impressions
# ---------------------------------------------------------------------------

class TestReset:

    def test_logs_dismissal_for_content_card_tiles_only(self):
        analytics, sink = _analytics("c1", "c2")
        snapshot = build_snapshot([], [_tile("local"), _tile("c1", card=True), _tile("c2", card=True)], None)

        reset(snapshot, analytics)

        assert [e.event_type for e in sink.events] == [AnalyticsEventType.CARD_DISMISSED] * 2
        assert [e.content_card_id for e in sink.events] == ["c1", "c2"]

    def test_ads_are_not_dismissed(self):
        analytics, sink = _analytics("ad-1")
        reset(build_snapshot([_ad("ad-1")], [], None), analytics)
        assert sink.events == []

    def test_cards_missing_from_latest_batch_are_skipped(self):
        analytics, sink = _analytics("c1")
        snapshot = build_snapshot([], [_tile("c1", card=True), _tile("gone", card=True)], None)

        reset(snapshot, analytics)

        assert [e.content_card_id for e in sink.events] == ["c1"]

    def test_snapshot_is_unchanged(self):
        analytics, _ = _analytics("c1")
        snapshot = build_snapshot([_ad("ad-1")], [_tile("c1", card=True)], None)
        before = snapshot.model_dump()

        reset(snapshot, analytics)

        assert snapshot.model_dump() == before


class TestLogImpressions:

    def test_logs_ads_and_card_tiles(self):
        analytics, sink = _analytics("ad-1", "c1")
        snapshot = build_snapshot([_ad("ad-1")], [_tile("local"), _tile("c1", card=True)], None)

        assert log_impressions(snapshot, analytics) == 2
        assert [e.content_card_id for e in sink.events] == ["ad-1", "c1"]
        assert all(e.event_type == AnalyticsEventType.CARD_IMPRESSION for e in sink.events)
