"""
Latest batch of raw content cards delivered by the SDK.

The batch is the lookup source for analytics calls keyed by card id, so a
card that disappeared in a later refresh can no longer be logged against.
"""

from typing import Dict, List, Optional

from cardfeed.models.content_card import RawCard


class ContentCardRepository:

    def __init__(self, cards: Optional[List[RawCard]] = None):
        self._cards: List[RawCard] = []
        self._by_id: Dict[str, RawCard] = {}
        if cards:
            self.replace(cards)

    @property
    def cards(self) -> List[RawCard]:
        return list(self._cards)

    def replace(self, cards: List[RawCard]) -> None:
        """Swap in a freshly processed batch."""
        self._cards = list(cards)
        self._by_id = {}
        for card in self._cards:
            # First occurrence wins, like a linear search over the batch
            self._by_id.setdefault(card.id_string, card)

    def get(self, id_string: Optional[str]) -> Optional[RawCard]:
        if id_string is None:
            return None
        return self._by_id.get(id_string)
