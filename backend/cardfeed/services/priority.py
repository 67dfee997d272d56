"""
Home tile priority ordering.

A priority hint is a comma-space separated list of tags (e.g. "sale, new")
pushed from the dashboard.  Tiles carrying a hinted tag are bubbled to the
front of the tile section; everything else keeps its natural order.
"""

from typing import List, Optional

from cardfeed.models.content_card import Tile, split_comma_space


def parse_priority_hint(priority_hint: Optional[str]) -> List[str]:
    """
    Split a priority hint into its ordered tag tokens.

    Examples:
        "sale, new"  -> ["sale", "new"]
        "   "        -> []
        None         -> []
    """
    if not priority_hint or not priority_hint.strip():
        return []
    return split_comma_space(priority_hint)


def reorder_tiles(tiles: List[Tile], priority_hint: Optional[str]) -> List[Tile]:
    """
    Reorder tiles so those tagged with a hinted key come first.

    For each key, in hint order, the remaining tiles are scanned from the end
    towards the start.  Every match is removed from the remaining list and
    moved to the priority list: content-card tiles are inserted at the front,
    locally defined tiles are appended at the back.  A tile matching several
    keys moves once, on its first match.

    The result is the priority list followed by the untouched tiles in their
    original relative order.  With no hint the input order is returned
    unchanged.

    Args:
        tiles: Tiles in their natural order.
        priority_hint: Persisted hint, e.g. "sale, new".

    Returns:
        New list with the reordered tiles.
    """
    priority_keys = parse_priority_hint(priority_hint)
    if not priority_keys:
        return list(tiles)

    priority_tiles: List[Tile] = []
    remaining = list(tiles)

    for key in priority_keys:
        for index in range(len(remaining) - 1, -1, -1):
            tile = remaining[index]
            if key not in tile.tags:
                continue
            del remaining[index]
            if tile.is_content_card:
                priority_tiles.insert(0, tile)
            else:
                priority_tiles.append(tile)

    return priority_tiles + remaining
