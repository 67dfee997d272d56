"""
Silent-push directive handling.

The dashboard can steer the home feed through three optional keys in a
silent push payload:

  refresh_home         "Default"       clear the priority hint and switch to
                                       the default experience
                       "Content Card"  switch to the content card experience
                       anything else   ignored
  home_tile_priority   <hint>          store the hint; also ask for a reorder
                                       unless refresh_home is present (the
                                       experience switch already rebuilds)
  event_name           <name>          log a custom analytics event

The keys are independent: a payload may carry any combination.  Values that
are not strings are treated as absent.

handle_push_payload() is pure and returns the set of effects;
apply_effects() performs them against the store, the notification center and
analytics.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Set

from cardfeed.models.feed import Effect, EffectKind
from cardfeed.services.analytics import ContentCardAnalytics
from cardfeed.services.notifications import FeedSignal, NotificationCenter
from cardfeed.services.remote_config import RemoteConfigStore

logger = logging.getLogger(__name__)

REFRESH_HOME_KEY = "refresh_home"
HOME_TILE_PRIORITY_KEY = "home_tile_priority"
EVENT_NAME_KEY = "event_name"

REFRESH_HOME_DEFAULT = "Default"
REFRESH_HOME_CONTENT_CARD = "Content Card"

# Stores are written before observers run so they read the new hint
_APPLY_ORDER = [
    EffectKind.CLEAR_PRIORITY,
    EffectKind.STORE_PRIORITY,
    EffectKind.LOG_EVENT,
    EffectKind.NOTIFY_DEFAULT_EXPERIENCE,
    EffectKind.NOTIFY_CONTENT_CARD_EXPERIENCE,
    EffectKind.NOTIFY_REORDER,
]

_SIGNALS = {
    EffectKind.NOTIFY_DEFAULT_EXPERIENCE: FeedSignal.DEFAULT_APP_EXPERIENCE,
    EffectKind.NOTIFY_CONTENT_CARD_EXPERIENCE: FeedSignal.HOME_SCREEN_CONTENT_CARD,
    EffectKind.NOTIFY_REORDER: FeedSignal.REORDER_HOME_SCREEN,
}


def _string_value(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def handle_push_payload(payload: Mapping[str, Any]) -> Set[Effect]:
    """
    Interpret a push payload.

    Examples:
        {"refresh_home": "Default", "home_tile_priority": "5"}
            -> CLEAR_PRIORITY, NOTIFY_DEFAULT_EXPERIENCE, STORE_PRIORITY("5")
        {"home_tile_priority": "5"}
            -> STORE_PRIORITY("5"), NOTIFY_REORDER
        {"refresh_home": "Somewhere else"}
            -> (nothing)
    """
    effects: Set[Effect] = set()

    refresh_home = _string_value(payload, REFRESH_HOME_KEY)
    if refresh_home == REFRESH_HOME_DEFAULT:
        effects.add(Effect(kind=EffectKind.CLEAR_PRIORITY))
        effects.add(Effect(kind=EffectKind.NOTIFY_DEFAULT_EXPERIENCE))
    elif refresh_home == REFRESH_HOME_CONTENT_CARD:
        effects.add(Effect(kind=EffectKind.NOTIFY_CONTENT_CARD_EXPERIENCE))

    priority = _string_value(payload, HOME_TILE_PRIORITY_KEY)
    if priority is not None:
        effects.add(Effect(kind=EffectKind.STORE_PRIORITY, value=priority))
        if payload.get(REFRESH_HOME_KEY) is None:
            effects.add(Effect(kind=EffectKind.NOTIFY_REORDER))

    event_name = _string_value(payload, EVENT_NAME_KEY)
    if event_name is not None:
        effects.add(Effect(kind=EffectKind.LOG_EVENT, value=event_name))

    return effects


def ordered_effects(effects: Iterable[Effect]) -> List[Effect]:
    """Effects in the order apply_effects() runs them."""
    return sorted(effects, key=lambda effect: (_APPLY_ORDER.index(effect.kind), effect.value or ""))


def apply_effects(
    effects: Iterable[Effect],
    store: RemoteConfigStore,
    notifications: NotificationCenter,
    analytics: ContentCardAnalytics,
) -> List[Effect]:
    """
    Perform ``effects``: store writes first, then analytics, then signals.

    Returns the effects in the order they were applied.
    """
    applied = ordered_effects(effects)
    for effect in applied:
        logger.info("Applying push effect %s %s", effect.kind.value, effect.value or "")
        if effect.kind == EffectKind.CLEAR_PRIORITY:
            store.remove()
        elif effect.kind == EffectKind.STORE_PRIORITY:
            store.store(effect.value or "")
        elif effect.kind == EffectKind.LOG_EVENT:
            analytics.log_custom_event(effect.value or "")
        else:
            notifications.post(_SIGNALS[effect.kind])
    return applied
