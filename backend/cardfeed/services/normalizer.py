"""
Normalization service for vendor content cards.

Converts RawCard records (the loosely-typed objects the engagement SDK
delivers) into strongly-typed domain objects: Ad, Coupon, Tile,
FullPageMessage and WebViewMessage.

Conversion runs in two steps:
  1. The raw card's subtype decides which display fields go into a
     ContentCardMetadata dict; identifier, created, dismissible and extras
     are always added.
  2. The card's class type (from ``extras["class_type"]``) picks the domain
     constructor.  Constructors return None when metadata is insufficient;
     such cards are dropped without affecting the rest of the batch.

Adding a new domain variant:
  1. Give it a ``from_metadata(metadata, class_type)`` classmethod.
  2. Register it in _CONSTRUCTORS.
"""

import logging
from typing import Callable, Collection, Dict, List, Optional

from cardfeed.models.content_card import (
    Ad,
    ContentCardable,
    ContentCardClassType,
    ContentCardKey,
    ContentCardMetadata,
    Coupon,
    FullPageMessage,
    RawCard,
    RawCardType,
    Tile,
    WebViewMessage,
)
from cardfeed.models.feed import ContentCardsUpdate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Subtype -> display metadata
# ---------------------------------------------------------------------------

def _banner_metadata(card: RawCard) -> ContentCardMetadata:
    return {ContentCardKey.IMAGE: card.image}


def _captioned_metadata(card: RawCard) -> ContentCardMetadata:
    return {
        ContentCardKey.TITLE: card.title,
        ContentCardKey.CARD_DESCRIPTION: card.card_description,
        ContentCardKey.IMAGE: card.image,
    }


_SUBTYPE_METADATA: Dict[RawCardType, Callable[[RawCard], ContentCardMetadata]] = {
    RawCardType.BANNER: _banner_metadata,
    RawCardType.CAPTIONED_IMAGE: _captioned_metadata,
    RawCardType.CLASSIC: _captioned_metadata,
}


def build_metadata(card: RawCard) -> ContentCardMetadata:
    """
    Parse a raw card into a ContentCardMetadata dict.

    Banner cards contribute only an image; captioned-image and classic cards
    contribute title, description and image; unknown subtypes contribute no
    display fields.  Identifier, created, dismissible and extras are always
    present.
    """
    subtype_builder = _SUBTYPE_METADATA.get(card.card_type)
    metadata: ContentCardMetadata = subtype_builder(card) if subtype_builder else {}

    metadata[ContentCardKey.ID_STRING] = card.id_string
    metadata[ContentCardKey.CREATED] = card.created
    metadata[ContentCardKey.DISMISSABLE] = card.dismissible
    metadata[ContentCardKey.EXTRAS] = card.extras
    return metadata


# ---------------------------------------------------------------------------
# Class type -> domain constructor
# ---------------------------------------------------------------------------

_CONSTRUCTORS: Dict[
    ContentCardClassType,
    Callable[[ContentCardMetadata, ContentCardClassType], Optional[ContentCardable]],
] = {
    ContentCardClassType.AD: Ad.from_metadata,
    ContentCardClassType.COUPON: Coupon.from_metadata,
    ContentCardClassType.ITEM_TILE: Tile.from_metadata,
    ContentCardClassType.MESSAGE_FULL_PAGE: FullPageMessage.from_metadata,
    ContentCardClassType.MESSAGE_WEB_VIEW: WebViewMessage.from_metadata,
}


def content_cardable(
    metadata: ContentCardMetadata,
    class_type: ContentCardClassType,
) -> Optional[ContentCardable]:
    """
    Instantiate the domain object for ``class_type``.

    Returns None for class types without a constructor (including NONE) and
    when the constructor rejects the metadata.
    """
    constructor = _CONSTRUCTORS.get(class_type)
    if constructor is None:
        return None
    return constructor(metadata, class_type)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def normalize_content_cards(
    raw_cards: List[RawCard],
    wanted_types: Collection[ContentCardClassType],
) -> List[ContentCardable]:
    """
    Convert raw content cards into domain objects.

    This is the main entry point.  Cards whose class type is not in
    ``wanted_types`` are skipped before any metadata is built.  Output keeps
    the input order of the cards that converted successfully.

    Args:
        raw_cards: Cards as delivered by the SDK.
        wanted_types: Class types the caller wants back.

    Returns:
        List of Ad / Coupon / Tile / FullPageMessage / WebViewMessage objects.
    """
    wanted = set(wanted_types)
    converted: List[ContentCardable] = []

    for card in raw_cards:
        class_type = ContentCardClassType.from_raw(card.class_type_string)
        if class_type not in wanted:
            continue

        metadata = build_metadata(card)
        item = content_cardable(metadata, class_type)
        if item is None:
            logger.debug(
                "normalize_content_cards: dropped card %r (%s), insufficient metadata",
                card.id_string,
                class_type.value,
            )
            continue
        converted.append(item)

    return converted


def handle_content_cards_updated(
    update: ContentCardsUpdate,
    wanted_types: Collection[ContentCardClassType],
) -> List[ContentCardable]:
    """
    Convert the cards of an SDK "cards processed" update.

    An unsuccessful refresh yields an empty list; the previous feed is then
    left for the caller to keep or replace.
    """
    if not update.is_successful:
        logger.info("Content card refresh reported unsuccessful; nothing to convert")
        return []
    return normalize_content_cards(update.cards, wanted_types)
