"""
Pydantic models for the home feed presentation model and push directives.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from cardfeed.models.content_card import Ad, ContentCardable, RawCard, Tile


class FeedSection(str, Enum):
    """Sections of the home feed, in display order."""
    AD = "ad"
    TILE = "tile"


class ExperienceMode(str, Enum):
    """Which source the home feed tiles currently come from."""
    DEFAULT = "default"
    CONTENT_CARD = "content_card"


class AdSection(BaseModel):
    section: Literal["ad"] = "ad"
    items: List[Ad] = Field(default_factory=list)


class TileSection(BaseModel):
    section: Literal["tile"] = "tile"
    items: List[Tile] = Field(default_factory=list)


# Discriminated on ``section`` so a dumped Tile is never read back as an Ad
SnapshotSection = Annotated[Union[AdSection, TileSection], Field(discriminator="section")]


class PresentationSnapshot(BaseModel):
    """
    Ordered two-section structure consumed by the rendering layer.

    Always holds exactly two sections, ``ad`` then ``tile``.
    """
    sections: List[SnapshotSection] = Field(default_factory=lambda: [AdSection(), TileSection()])

    def section(self, section: FeedSection) -> Optional[Union[AdSection, TileSection]]:
        for candidate in self.sections:
            if candidate.section == section:
                return candidate
        return None

    def items(self, section: FeedSection) -> List[ContentCardable]:
        found = self.section(section)
        return list(found.items) if found is not None else []

    @property
    def ads(self) -> List[Ad]:
        return [item for item in self.items(FeedSection.AD) if isinstance(item, Ad)]

    @property
    def tiles(self) -> List[Tile]:
        return [item for item in self.items(FeedSection.TILE) if isinstance(item, Tile)]


# ---------------------------------------------------------------------------
# Push directives
# ---------------------------------------------------------------------------

class EffectKind(str, Enum):
    CLEAR_PRIORITY = "clear_priority"
    NOTIFY_DEFAULT_EXPERIENCE = "notify_default_experience"
    NOTIFY_CONTENT_CARD_EXPERIENCE = "notify_content_card_experience"
    STORE_PRIORITY = "store_priority"
    NOTIFY_REORDER = "notify_reorder"
    LOG_EVENT = "log_event"


class Effect(BaseModel):
    """
    One side effect requested by a push payload.

    ``value`` carries the priority hint for STORE_PRIORITY and the event name
    for LOG_EVENT; it is None for every other kind.  Frozen so effects can be
    collected in a set.
    """
    model_config = {"frozen": True}

    kind: EffectKind
    value: Optional[str] = None


# ---------------------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------------------

class ContentCardsUpdate(BaseModel):
    """Body of POST /api/content-cards, the SDK's "cards processed" event."""
    is_successful: bool = True
    cards: List[RawCard] = Field(default_factory=list)


class FeedResponse(BaseModel):
    experience: ExperienceMode
    priority: Optional[str] = None
    snapshot: PresentationSnapshot


class PushResponse(BaseModel):
    effects: List[Effect]

