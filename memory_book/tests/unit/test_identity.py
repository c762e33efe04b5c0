"""Tests for player identity management."""

import pytest
from unittest.mock import patch

from memory_book.models import Identity
from memory_book.services.identity import (
    FileIdentityCache,
    IdentityManager,
    InvalidIdentity,
    MalformedCachedIdentity,
    SessionIdentityCache,
    create_identity_cache,
    parse_cached_identity,
    validate_identity,
)

STORAGE_KEY = "memory-book-user"
JANE = Identity(name="Jane Doe", email="jane@example.com")


def make_manager(query_params=None, store=None):
    store = {} if store is None else store
    query_params = {} if query_params is None else query_params
    cache = SessionIdentityCache(store, storage_key=STORAGE_KEY)
    return IdentityManager(cache, query_params), store, query_params


class TestValidateIdentity:
    """Test cases for validate_identity."""

    def test_valid(self):
        assert validate_identity("  Jane Doe ", " jane@example.com ") == JANE

    def test_missing_name(self):
        with pytest.raises(InvalidIdentity, match="Please enter your name"):
            validate_identity("   ", "jane@example.com")

    @pytest.mark.parametrize("email", ["", "   ", "jane.example.com"])
    def test_invalid_email(self, email):
        with pytest.raises(InvalidIdentity, match="valid email"):
            validate_identity("Jane", email)


class TestParseCachedIdentity:
    """Test cases for parse_cached_identity."""

    def test_valid(self):
        assert parse_cached_identity(JANE.model_dump_json()) == JANE

    @pytest.mark.parametrize("raw", [
        "not json",
        "{\"name\": \"Jane\"}",
        "[]",
        "{\"name\": \"\", \"email\": \"jane@example.com\"}",
    ])
    def test_malformed(self, raw):
        with pytest.raises(MalformedCachedIdentity):
            parse_cached_identity(raw)


class TestIdentityResolution:
    """Test cases for IdentityManager.resolve."""

    def test_url_parameters_win(self):
        manager, store, _ = make_manager(
            query_params={"name": "Jane Doe", "email": "jane@example.com"},
            store={STORAGE_KEY: Identity(name="Sam", email="sam@example.com").model_dump_json()}
        )

        assert manager.resolve() == JANE
        assert parse_cached_identity(store[STORAGE_KEY]) == JANE

    def test_url_parameters_are_trimmed(self):
        manager, _, _ = make_manager(query_params={"name": "  Jane Doe ", "email": " jane@example.com"})

        assert manager.resolve() == JANE

    def test_url_parameters_are_not_decoded_twice(self):
        manager, _, query_params = make_manager()
        manager.identify("Team %41 Rocks", "jane@example.com")

        fresh = IdentityManager(SessionIdentityCache({}, storage_key=STORAGE_KEY), query_params)

        assert fresh.resolve().name == "Team %41 Rocks"

    @pytest.mark.parametrize("params", [
        {"name": "Jane"},
        {"email": "jane@example.com"},
        {"name": "  ", "email": "jane@example.com"},
        {"name": "Jane", "email": "not-an-email"},
    ])
    def test_invalid_url_parameters_fall_back_to_cache(self, params):
        cached = Identity(name="Sam", email="sam@example.com")
        manager, _, _ = make_manager(query_params=params, store={STORAGE_KEY: cached.model_dump_json()})

        assert manager.resolve() == cached

    def test_nothing_available(self):
        manager, _, _ = make_manager()

        assert manager.resolve() is None
        assert manager.identity is None

    def test_malformed_cache_is_discarded(self):
        manager, store, _ = make_manager(store={STORAGE_KEY: "{broken"})

        assert manager.resolve() is None
        assert STORAGE_KEY not in store


class TestIdentifyAndLogout:
    """Test cases for IdentityManager.identify and logout."""

    def test_identify_persists_and_updates_url(self):
        manager, store, query_params = make_manager(query_params={"tab": "guess"})

        identity = manager.identify(" Jane Doe ", "jane@example.com")

        assert identity == JANE
        assert manager.identity == JANE
        assert parse_cached_identity(store[STORAGE_KEY]) == JANE
        assert query_params == {"tab": "guess", "name": "Jane Doe", "email": "jane@example.com"}

    def test_identify_rejects_invalid_input(self):
        manager, store, query_params = make_manager()

        with pytest.raises(InvalidIdentity):
            manager.identify("Jane", "nope")

        assert store == {}
        assert query_params == {}

    def test_logout_clears_everything(self):
        manager, store, query_params = make_manager(query_params={"tab": "guess"})
        manager.identify("Jane Doe", "jane@example.com")

        manager.logout()

        assert manager.identity is None
        assert STORAGE_KEY not in store
        assert query_params == {"tab": "guess"}
        assert manager.resolve() is None

    def test_identity_survives_new_manager(self):
        manager, store, query_params = make_manager()
        manager.identify("Jane Doe", "jane@example.com")

        fresh = IdentityManager(SessionIdentityCache(store, storage_key=STORAGE_KEY), {})

        assert fresh.resolve() == JANE


class TestFileIdentityCache:
    """Test cases for FileIdentityCache."""

    def test_round_trip(self, tmp_path):
        cache = FileIdentityCache(str(tmp_path), storage_key=STORAGE_KEY)

        assert cache.load() is None

        cache.save(JANE)
        assert (tmp_path / f"{STORAGE_KEY}.json").exists()
        assert FileIdentityCache(str(tmp_path), storage_key=STORAGE_KEY).load() == JANE

        cache.clear()
        assert cache.load() is None

    def test_clear_without_file(self, tmp_path):
        FileIdentityCache(str(tmp_path / "missing"), storage_key=STORAGE_KEY).clear()

    def test_malformed_file_is_discarded(self, tmp_path):
        path = tmp_path / f"{STORAGE_KEY}.json"
        path.write_text("not json", encoding="utf-8")

        assert FileIdentityCache(str(tmp_path), storage_key=STORAGE_KEY).load() is None
        assert not path.exists()


class TestCreateIdentityCache:
    """Test cases for create_identity_cache."""

    def test_session_backend(self):
        with patch('memory_book.services.identity.get_settings') as mock_settings:
            mock_settings.return_value.identity_cache_backend = "session"
            mock_settings.return_value.identity_storage_key = "key"
            store = {}

            cache = create_identity_cache(store)

        assert isinstance(cache, SessionIdentityCache)
        assert cache.store is store
        assert cache.storage_key == "key"

    def test_file_backend(self, tmp_path):
        with patch('memory_book.services.identity.get_settings') as mock_settings:
            mock_settings.return_value.identity_cache_backend = "file"
            mock_settings.return_value.identity_storage_key = "key"
            mock_settings.return_value.identity_cache_dir = str(tmp_path)

            cache = create_identity_cache({})

        assert isinstance(cache, FileIdentityCache)
        assert cache.path == tmp_path / "key.json"
