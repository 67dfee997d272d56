"""
Structural notifications between the push handler and the home feed.

Three named signals, each posted without a payload:

  default_app_experience     - switch the home feed back to the local tiles
  home_screen_content_card   - switch the home feed to content card tiles
  reorder_home_screen        - re-apply the priority hint to the current tiles

Observers register explicitly with a NotificationCenter instance; there is
no process-wide bus.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class FeedSignal(str, Enum):
    DEFAULT_APP_EXPERIENCE = "default_app_experience"
    HOME_SCREEN_CONTENT_CARD = "home_screen_content_card"
    REORDER_HOME_SCREEN = "reorder_home_screen"


Observer = Callable[[], None]


class NotificationCenter:
    """Synchronous observer registry keyed by FeedSignal."""

    def __init__(self) -> None:
        self._observers: Dict[FeedSignal, List[Observer]] = {signal: [] for signal in FeedSignal}

    def add_observer(self, signal: FeedSignal, observer: Observer) -> None:
        self._observers[signal].append(observer)

    def remove_observer(self, signal: FeedSignal, observer: Observer) -> None:
        """Unregister ``observer``.  Unknown observers are ignored."""
        try:
            self._observers[signal].remove(observer)
        except ValueError:
            pass

    def post(self, signal: FeedSignal) -> None:
        """Call every observer of ``signal`` in registration order."""
        observers = list(self._observers[signal])
        logger.info("Posting %s to %d observer(s)", signal.value, len(observers))
        for observer in observers:
            observer()
