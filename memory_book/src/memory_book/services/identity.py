"""
Player identity management.

The current player is resolved from URL query parameters first, then from a
cached identity, and otherwise stays unknown (which keeps the memories behind
the identification form).
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import MutableMapping, Optional

from loguru import logger
from pydantic import ValidationError

from ..config import get_settings
from ..models import Identity

NAME_PARAM = "name"
EMAIL_PARAM = "email"


class InvalidIdentity(ValueError):
    """Name/email entered on the identification form is not acceptable."""


class MalformedCachedIdentity(Exception):
    """A cached identity exists but cannot be parsed."""


def validate_identity(name: str, email: str) -> Identity:
    """
    Build an Identity from user input.

    Raises:
        InvalidIdentity: With a message suitable for showing to the player
    """
    name = (name or "").strip()
    email = (email or "").strip()

    if not name:
        raise InvalidIdentity("Please enter your name")
    if not email or "@" not in email:
        raise InvalidIdentity("Please enter a valid email address")

    return Identity(name=name, email=email)


def parse_cached_identity(raw: str) -> Identity:
    """
    Parse a cached identity entry.

    Raises:
        MalformedCachedIdentity: If the entry is not a valid identity record
    """
    try:
        identity = Identity.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedCachedIdentity(str(e)) from e

    if not identity.is_valid:
        raise MalformedCachedIdentity(f"Cached identity has an empty name or invalid email: {raw!r}")
    return identity


class IdentityCache(ABC):
    """Single cached identity record stored under a fixed key."""

    def __init__(self, storage_key: Optional[str] = None):
        self.storage_key = storage_key or get_settings().identity_storage_key

    @abstractmethod
    def read_raw(self) -> Optional[str]:
        """Return the stored entry, or None when nothing is cached."""

    @abstractmethod
    def write_raw(self, value: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def load(self) -> Optional[Identity]:
        """
        Load the cached identity.

        A malformed entry is logged and discarded rather than raised.
        """
        raw = self.read_raw()
        if raw is None:
            return None

        try:
            identity = parse_cached_identity(raw)
        except MalformedCachedIdentity as e:
            logger.error(f"Discarding unreadable cached identity: {e}")
            self.clear()
            return None

        logger.debug(f"Loaded cached identity for {identity.name}")
        return identity

    def save(self, identity: Identity) -> None:
        self.write_raw(identity.model_dump_json())


class SessionIdentityCache(IdentityCache):
    """Identity cache kept in a mutable mapping such as Streamlit session state."""

    def __init__(self, store: MutableMapping, storage_key: Optional[str] = None):
        super().__init__(storage_key)
        self.store = store

    def read_raw(self) -> Optional[str]:
        return self.store.get(self.storage_key)

    def write_raw(self, value: str) -> None:
        self.store[self.storage_key] = value

    def clear(self) -> None:
        self.store.pop(self.storage_key, None)


class FileIdentityCache(IdentityCache):
    """Identity cache kept in a JSON file, for single-screen deployments."""

    def __init__(self, cache_dir: Optional[str] = None, storage_key: Optional[str] = None):
        super().__init__(storage_key)
        self.path = Path(cache_dir or get_settings().identity_cache_dir) / f"{self.storage_key}.json"

    def read_raw(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not read identity cache {self.path}: {e}")
            return None

    def write_raw(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(value, encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class IdentityManager:
    """
    Resolves, persists and clears the current player's identity.

    Args:
        cache: Where the identity is persisted between page loads
        query_params: Mutable view of the page URL's query parameters
    """

    def __init__(self, cache: IdentityCache, query_params: MutableMapping):
        self.cache = cache
        self.query_params = query_params
        self.identity: Optional[Identity] = None

    def _identity_from_url(self) -> Optional[Identity]:
        name = self.query_params.get(NAME_PARAM)
        email = self.query_params.get(EMAIL_PARAM)
        if not name or not email:
            return None

        try:
            return validate_identity(name, email)
        except InvalidIdentity as e:
            logger.debug(f"Ignoring identity in URL: {e}")
            return None

    def resolve(self) -> Optional[Identity]:
        """
        Resolve the identity: URL parameters, then the cache, then nobody.

        A valid URL identity is written to the cache.
        """
        identity = self._identity_from_url()
        if identity is not None:
            self.cache.save(identity)
            logger.info(f"Identified {identity.name} from URL parameters")
        else:
            identity = self.cache.load()

        self.identity = identity
        return identity

    def identify(self, name: str, email: str) -> Identity:
        """
        Identify the player from the identification form.

        Raises:
            InvalidIdentity: If the name or email is not acceptable
        """
        identity = validate_identity(name, email)
        self.cache.save(identity)
        self.query_params[NAME_PARAM] = identity.name
        self.query_params[EMAIL_PARAM] = identity.email
        self.identity = identity
        logger.info(f"Player identified as {identity.name}")
        return identity

    def logout(self) -> None:
        """Forget the player: clear the cache and strip the URL parameters."""
        self.cache.clear()
        self.query_params.pop(NAME_PARAM, None)
        self.query_params.pop(EMAIL_PARAM, None)
        if self.identity is not None:
            logger.info(f"Player {self.identity.name} logged out")
        self.identity = None


def create_identity_cache(session_store: MutableMapping) -> IdentityCache:
    """Build the identity cache selected by ``identity_cache_backend``."""
    settings = get_settings()
    if settings.identity_cache_backend == "file":
        return FileIdentityCache(settings.identity_cache_dir, settings.identity_storage_key)
    return SessionIdentityCache(session_store, settings.identity_storage_key)
