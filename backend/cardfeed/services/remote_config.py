"""
Remote config store for the home tile priority hint.

The hint is a single string persisted under one well-known key.  Two
implementations share the retrieve / store / remove interface:

  SupabaseRemoteConfigStore  - one row per key in the ``remote_config`` table
                               (columns: key text primary key, value text)
  InMemoryRemoteConfigStore  - process-local cell, used when Supabase is not
                               configured and in tests
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from cardfeed.db import REMOTE_CONFIG_TABLE, supabase_admin

logger = logging.getLogger(__name__)

# Key the priority hint is stored under
HOME_TILE_PRIORITY_KEY = "home_tile_priority"


class RemoteConfigError(Exception):
    """Raised when the backing store cannot be read or written."""


class RemoteConfigStore(ABC):
    """get / set / clear over a single key."""

    def __init__(self, key: str = HOME_TILE_PRIORITY_KEY):
        self.key = key

    @abstractmethod
    def retrieve(self) -> Optional[str]:
        """Return the stored value, or None when nothing is stored."""

    @abstractmethod
    def store(self, value: str) -> None:
        """Persist ``value``, replacing any previous value."""

    @abstractmethod
    def remove(self) -> None:
        """Clear the stored value.  Clearing an empty store is a no-op."""


class InMemoryRemoteConfigStore(RemoteConfigStore):

    def __init__(self, key: str = HOME_TILE_PRIORITY_KEY, value: Optional[str] = None):
        super().__init__(key)
        self._value = value

    def retrieve(self) -> Optional[str]:
        return self._value

    def store(self, value: str) -> None:
        self._value = value

    def remove(self) -> None:
        self._value = None


class SupabaseRemoteConfigStore(RemoteConfigStore):
    """
    Supabase-backed store.

    Writes use upsert on the ``key`` column so repeated pushes overwrite the
    same row.
    """

    def __init__(
        self,
        client: Any = None,
        key: str = HOME_TILE_PRIORITY_KEY,
        table: str = REMOTE_CONFIG_TABLE,
    ):
        super().__init__(key)
        self.client = client if client is not None else supabase_admin
        self.table = table
        if self.client is None:
            raise ValueError("SUPABASE_SERVICE_KEY is required for the Supabase remote config store")

    def retrieve(self) -> Optional[str]:
        try:
            result = (
                self.client.table(self.table)
                .select("value")
                .eq("key", self.key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to read remote config key '{self.key}': {e}")
            raise RemoteConfigError(f"Failed to read remote config: {str(e)}") from e

        if not result.data:
            return None
        value = result.data[0].get("value")
        return value if isinstance(value, str) else None

    def store(self, value: str) -> None:
        try:
            self.client.table(self.table).upsert(
                {"key": self.key, "value": value},
                on_conflict="key",
            ).execute()
        except Exception as e:
            logger.error(f"Failed to store remote config key '{self.key}': {e}")
            raise RemoteConfigError(f"Failed to store remote config: {str(e)}") from e

    def remove(self) -> None:
        try:
            self.client.table(self.table).delete().eq("key", self.key).execute()
        except Exception as e:
            logger.error(f"Failed to remove remote config key '{self.key}': {e}")
            raise RemoteConfigError(f"Failed to remove remote config: {str(e)}") from e


def create_remote_config_store() -> RemoteConfigStore:
    """Supabase store when the admin client is configured, in-memory otherwise."""
    if supabase_admin is not None:
        return SupabaseRemoteConfigStore(supabase_admin)
    logger.warning("Supabase not configured; priority hint will be kept in memory")
    return InMemoryRemoteConfigStore()
