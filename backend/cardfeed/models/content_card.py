"""
Pydantic models for vendor content cards and the domain objects built from them.

RawCard mirrors what the engagement SDK hands the client; it is read-only to
us.  The domain variants (Ad, Coupon, Tile, FullPageMessage, WebViewMessage)
are what the rest of the service works with.  A variant built from a content
card carries a ContentCardData; a variant defined locally (e.g. a default
home tile) has content_card_data=None.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field


class ContentCardKey(str, Enum):
    """
    Keys used in content card metadata.

    Values match the key-value pair names configured on the vendor dashboard
    so that extras can be read with ``extras[ContentCardKey.X.value]``.
    """
    ID_STRING = "idString"
    CREATED = "created"
    CLASS_TYPE = "class_type"
    DISMISSABLE = "dismissable"
    EXTRAS = "extras"
    IMAGE = "image"
    TITLE = "title"
    CARD_DESCRIPTION = "cardDescription"
    MESSAGE_HEADER = "message_header"
    MESSAGE_TITLE = "message_title"
    HTML = "html"
    URL = "url"
    DISCOUNT_PERCENTAGE = "discount_percentage"
    TAGS = "tile_tags"
    PRICE = "tile_price"


# Intermediate representation built by the normalizer, never persisted
ContentCardMetadata = Dict[ContentCardKey, Any]


# Dashboard class_type value (lower-cased) -> ContentCardClassType value
_RAW_CLASS_TYPES = {
    "ad_banner": "ad",
    "coupon_code": "coupon",
    "home_tile": "item.tile",
    "message_full_page": "message.full_page",
    "message_webview": "message.web_view",
}


class ContentCardClassType(str, Enum):
    """Application-defined category of a content card."""
    AD = "ad"
    COUPON = "coupon"
    ITEM_TILE = "item.tile"
    MESSAGE_FULL_PAGE = "message.full_page"
    MESSAGE_WEB_VIEW = "message.web_view"
    NONE = "none"

    @classmethod
    def from_raw(cls, raw_type: Any) -> "ContentCardClassType":
        """
        Derive the class type from the dashboard ``class_type`` string.

        Matching is case-insensitive.  Missing, non-string or unrecognised
        values map to NONE; this never raises.

        Examples:
            "home_tile"  -> ITEM_TILE
            "AD_BANNER"  -> AD
            "banner"     -> NONE
            None         -> NONE
        """
        if not isinstance(raw_type, str):
            return cls.NONE
        return cls(_RAW_CLASS_TYPES.get(raw_type.lower(), cls.NONE.value))


class RawCardType(str, Enum):
    """Concrete card subtype as reported by the vendor SDK."""
    BANNER = "banner"
    CAPTIONED_IMAGE = "captioned_image"
    CLASSIC = "classic"
    UNKNOWN = "unknown"


class RawCard(BaseModel):
    """A content card exactly as the vendor SDK delivered it."""
    model_config = {"extra": "ignore"}

    id_string: str
    created: float  # seconds since epoch
    dismissible: bool = False
    extras: Dict[str, Any] = Field(default_factory=dict)
    card_type: RawCardType = RawCardType.UNKNOWN
    # Subtype-specific display fields; banners only carry an image
    image: Optional[str] = None
    title: Optional[str] = None
    card_description: Optional[str] = None

    @property
    def class_type_string(self) -> Optional[str]:
        value = self.extras.get(ContentCardKey.CLASS_TYPE.value)
        return value if isinstance(value, str) else None


class ContentCardData(BaseModel):
    """The slice of a content card a domain object keeps for analytics."""
    content_card_id: str
    content_card_class_type: ContentCardClassType
    created_at: float
    is_dismissable: bool

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentCardData):
            return NotImplemented
        return self.content_card_id == other.content_card_id

    def __hash__(self) -> int:
        return hash(self.content_card_id)


# ---------------------------------------------------------------------------
# Metadata readers
# ---------------------------------------------------------------------------

def _string(metadata: ContentCardMetadata, key: ContentCardKey) -> Optional[str]:
    value = metadata.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _extras(metadata: ContentCardMetadata) -> Dict[str, Any]:
    extras = metadata.get(ContentCardKey.EXTRAS)
    return extras if isinstance(extras, dict) else {}


def _extra_string(metadata: ContentCardMetadata, key: ContentCardKey) -> Optional[str]:
    value = _extras(metadata).get(key.value)
    if isinstance(value, str) and value:
        return value
    return None


def split_comma_space(value: Optional[str]) -> List[str]:
    """
    Split a comma-space separated dashboard value into its tokens.

    Examples:
        "sale, new"  -> ["sale", "new"]
        "sale"       -> ["sale"]
        ""           -> []
        None         -> []
    """
    if not value:
        return []
    return [token for token in value.split(", ") if token]


def _parse_price(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip().lstrip("$").replace(",", ""))
    except (InvalidOperation, ValueError):
        return None


def content_card_data_from_metadata(
    metadata: ContentCardMetadata,
    class_type: ContentCardClassType,
) -> Optional[ContentCardData]:
    """
    Build the ContentCardData common to every variant.

    Returns None when the identifier or creation time is missing.
    """
    content_card_id = _string(metadata, ContentCardKey.ID_STRING)
    created = metadata.get(ContentCardKey.CREATED)
    if content_card_id is None:
        return None
    if isinstance(created, bool) or not isinstance(created, (int, float)):
        return None

    dismissable = metadata.get(ContentCardKey.DISMISSABLE)
    return ContentCardData(
        content_card_id=content_card_id,
        content_card_class_type=class_type,
        created_at=float(created),
        is_dismissable=dismissable if isinstance(dismissable, bool) else False,
    )


# ---------------------------------------------------------------------------
# Domain variants
# ---------------------------------------------------------------------------

class ContentCardable(BaseModel):
    """
    Base for every domain object that may be backed by a content card.

    Equality is identity equality: two objects of the same variant are equal
    iff their ids are equal, whatever their display fields say.
    """
    id: str
    content_card_data: Optional[ContentCardData] = None

    @property
    def is_content_card(self) -> bool:
        return self.content_card_data is not None

    @property
    def content_card_id(self) -> Optional[str]:
        if self.content_card_data is None:
            return None
        return self.content_card_data.content_card_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentCardable):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class Ad(ContentCardable):
    """A paid banner placement shown above the tiles."""
    image_url: str

    @classmethod
    def from_metadata(
        cls, metadata: ContentCardMetadata, class_type: ContentCardClassType
    ) -> Optional["Ad"]:
        data = content_card_data_from_metadata(metadata, class_type)
        image_url = _string(metadata, ContentCardKey.IMAGE)
        if data is None or image_url is None:
            return None
        return cls(id=data.content_card_id, content_card_data=data, image_url=image_url)


class Coupon(ContentCardable):
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    discount_percentage: Optional[str] = None

    @classmethod
    def from_metadata(
        cls, metadata: ContentCardMetadata, class_type: ContentCardClassType
    ) -> Optional["Coupon"]:
        data = content_card_data_from_metadata(metadata, class_type)
        title = _string(metadata, ContentCardKey.TITLE)
        if data is None or title is None:
            return None
        return cls(
            id=data.content_card_id,
            content_card_data=data,
            title=title,
            description=_string(metadata, ContentCardKey.CARD_DESCRIPTION),
            image_url=_string(metadata, ContentCardKey.IMAGE),
            discount_percentage=_extra_string(metadata, ContentCardKey.DISCOUNT_PERCENTAGE),
        )


class Tile(ContentCardable):
    """A selectable home-screen item, optionally backed by a content card."""
    title: str
    detail: str = ""
    price: Optional[Decimal] = None
    image_url: Optional[str] = None
    tags: Set[str] = Field(default_factory=set)

    @classmethod
    def from_metadata(
        cls, metadata: ContentCardMetadata, class_type: ContentCardClassType
    ) -> Optional["Tile"]:
        data = content_card_data_from_metadata(metadata, class_type)
        title = _string(metadata, ContentCardKey.TITLE)
        if data is None or title is None:
            return None
        return cls(
            id=data.content_card_id,
            content_card_data=data,
            title=title,
            detail=_string(metadata, ContentCardKey.CARD_DESCRIPTION) or "",
            price=_parse_price(_extras(metadata).get(ContentCardKey.PRICE.value)),
            image_url=_string(metadata, ContentCardKey.IMAGE),
            tags=set(split_comma_space(_extra_string(metadata, ContentCardKey.TAGS))),
        )


class FullPageMessage(ContentCardable):
    """A message-center entry rendered as a full page."""
    header: Optional[str] = None
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_metadata(
        cls, metadata: ContentCardMetadata, class_type: ContentCardClassType
    ) -> Optional["FullPageMessage"]:
        data = content_card_data_from_metadata(metadata, class_type)
        title = (
            _extra_string(metadata, ContentCardKey.MESSAGE_TITLE)
            or _string(metadata, ContentCardKey.TITLE)
        )
        if data is None or title is None:
            return None
        return cls(
            id=data.content_card_id,
            content_card_data=data,
            header=_extra_string(metadata, ContentCardKey.MESSAGE_HEADER),
            title=title,
            description=_string(metadata, ContentCardKey.CARD_DESCRIPTION),
            image_url=_string(metadata, ContentCardKey.IMAGE),
        )


class WebViewMessage(ContentCardable):
    """A message-center entry rendered in a web view (remote url or inline html)."""
    header: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    html: Optional[str] = None

    @classmethod
    def from_metadata(
        cls, metadata: ContentCardMetadata, class_type: ContentCardClassType
    ) -> Optional["WebViewMessage"]:
        data = content_card_data_from_metadata(metadata, class_type)
        url = _extra_string(metadata, ContentCardKey.URL)
        html = _extra_string(metadata, ContentCardKey.HTML)
        if data is None or (url is None and html is None):
            return None
        return cls(
            id=data.content_card_id,
            content_card_data=data,
            header=_extra_string(metadata, ContentCardKey.MESSAGE_HEADER),
            title=(
                _extra_string(metadata, ContentCardKey.MESSAGE_TITLE)
                or _string(metadata, ContentCardKey.TITLE)
            ),
            url=url,
            html=html,
        )
