"""
Unit tests for the remote config store (priority hint persistence).
Supabase is mocked; no real database calls are made.
"""

import pytest
from unittest.mock import MagicMock, patch

from cardfeed.services.remote_config import (
    HOME_TILE_PRIORITY_KEY,
    InMemoryRemoteConfigStore,
    RemoteConfigError,
    SupabaseRemoteConfigStore,
    create_remote_config_store,
)


class TestInMemoryRemoteConfigStore:

    def test_empty_store_returns_none(self):
        assert InMemoryRemoteConfigStore().retrieve() is None

    def test_store_then_retrieve(self):
        store = InMemoryRemoteConfigStore()
        store.store("sale, new")
        assert store.retrieve() == "sale, new"

    def test_store_overwrites(self):
        store = InMemoryRemoteConfigStore(value="old")
        store.store("new")
        assert store.retrieve() == "new"

    def test_remove_clears_value(self):
        store = InMemoryRemoteConfigStore(value="sale")
        store.remove()
        assert store.retrieve() is None

    def test_remove_on_empty_store_is_noop(self):
        store = InMemoryRemoteConfigStore()
        store.remove()
        assert store.retrieve() is None

    def test_default_key(self):
        assert InMemoryRemoteConfigStore().key == HOME_TILE_PRIORITY_KEY == "home_tile_priority"


class TestSupabaseRemoteConfigStore:
    """Supabase-backed store, one row per key in remote_config."""

    def _table(self, client):
        return client.table.return_value

    def test_retrieve_returns_value(self):
        client = MagicMock()
        query = self._table(client).select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[{"value": "sale"}])

        store = SupabaseRemoteConfigStore(client)

        assert store.retrieve() == "sale"
        client.table.assert_called_with("remote_config")
        self._table(client).select.return_value.eq.assert_called_once_with("key", "home_tile_priority")

    def test_retrieve_missing_row_returns_none(self):
        client = MagicMock()
        query = self._table(client).select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[])

        assert SupabaseRemoteConfigStore(client).retrieve() is None

    def test_retrieve_non_string_value_returns_none(self):
        client = MagicMock()
        query = self._table(client).select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[{"value": None}])

        assert SupabaseRemoteConfigStore(client).retrieve() is None

    def test_store_upserts_on_key(self):
        client = MagicMock()

        SupabaseRemoteConfigStore(client).store("sale, new")

        self._table(client).upsert.assert_called_once_with(
            {"key": "home_tile_priority", "value": "sale, new"},
            on_conflict="key",
        )
        self._table(client).upsert.return_value.execute.assert_called_once()

    def test_remove_deletes_row(self):
        client = MagicMock()

        SupabaseRemoteConfigStore(client).remove()

        self._table(client).delete.return_value.eq.assert_called_once_with("key", "home_tile_priority")

    def test_custom_table(self):
        client = MagicMock()
        SupabaseRemoteConfigStore(client, table="app_config").remove()
        client.table.assert_called_once_with("app_config")

    def test_read_failure_raises_remote_config_error(self):
        client = MagicMock()
        client.table.side_effect = Exception("connection refused")

        with pytest.raises(RemoteConfigError) as exc_info:
            SupabaseRemoteConfigStore(client).retrieve()

        assert "connection refused" in str(exc_info.value)

    def test_write_failure_raises_remote_config_error(self):
        client = MagicMock()
        self._table(client).upsert.return_value.execute.side_effect = Exception("timeout")

        with pytest.raises(RemoteConfigError):
            SupabaseRemoteConfigStore(client).store("sale")

    def test_requires_a_client(self):
        with patch("cardfeed.services.remote_config.supabase_admin", None):
            with pytest.raises(ValueError):
                SupabaseRemoteConfigStore()


class TestCreateRemoteConfigStore:

    def test_in_memory_when_supabase_not_configured(self):
        with patch("cardfeed.services.remote_config.supabase_admin", None):
            assert isinstance(create_remote_config_store(), InMemoryRemoteConfigStore)

    def test_supabase_when_configured(self):
        with patch("cardfeed.services.remote_config.supabase_admin", MagicMock()):
            assert isinstance(create_remote_config_store(), SupabaseRemoteConfigStore)
