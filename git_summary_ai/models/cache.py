"""Model Cache - per-provider model lists persisted in ~/.git-summary-ai/models-cache.json"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

from git_summary_ai.models.types import (
    CACHE_VERSION,
    DEFAULT_TTL_MS,
    CachedModel,
    CacheStatus,
    FetchStatus,
    ModelsCacheDocument,
    ProviderCache,
    from_iso,
    utc_now,
)
from git_summary_ai.paths import models_cache_path
from git_summary_ai.providers import Provider

logger = logging.getLogger(__name__)


def human_age(last_fetched: datetime, now: datetime) -> str:
    """'just now', '5 minutes ago', '3 hours ago', '2 days ago'."""
    seconds = (now - last_fetched).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return f"{days} day{'s' if days > 1 else ''} ago"


class ModelCache:
    """Reads and writes the cache document.

    Nothing is held in memory between calls: every read loads the file and
    every update is a read-modify-write of the whole document. A missing or
    broken file behaves like an empty cache.
    """

    def __init__(self, path: Path | None = None, clock: Callable[[], datetime] | None = None):
        self._path = path
        self._clock = clock or utc_now

    @property
    def path(self) -> Path:
        return self._path or models_cache_path()

    def now(self) -> datetime:
        return self._clock()

    def _empty(self) -> ModelsCacheDocument:
        return ModelsCacheDocument(version=CACHE_VERSION, last_updated=self.now())

    def load(self) -> ModelsCacheDocument:
        path = self.path
        if not path.exists():
            return self._empty()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"[models] Failed to load cache, recreating: {e}")
            return self._empty()

        if (not isinstance(data, dict) or not data.get("version")
                or not data.get("lastUpdated") or not isinstance(data.get("providers"), dict)):
            logger.warning("[models] Invalid cache structure, recreating")
            return self._empty()

        try:
            document = ModelsCacheDocument(version=data["version"], last_updated=from_iso(data["lastUpdated"]))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"[models] Invalid cache timestamp, recreating: {e}")
            return self._empty()

        for name, entry in data["providers"].items():
            try:
                document.providers[Provider(name)] = ProviderCache.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                # Drop just the unreadable entry
                logger.debug(f"[models] Ignoring cache entry for '{name}': {e}")

        return document

    def save(self, document: ModelsCacheDocument) -> None:
        """Replace the cache file atomically. Failure is logged, never raised."""
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".models-cache-", suffix=".json", dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document.to_dict(), f, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.warning(f"[models] Failed to save cache: {e}")

    def get_provider_cache(self, provider: Provider) -> ProviderCache | None:
        return self.load().providers.get(Provider(provider))

    def get_cached_models(self, provider: Provider) -> list[CachedModel] | None:
        """Fresh cached models, or None on a miss or an expired entry."""
        entry = self.get_provider_cache(provider)
        if entry is None or not entry.models:
            return None
        if entry.is_expired(self.now()):
            return None
        return list(entry.models)

    def set_cached_models(self, provider: Provider, models: list[CachedModel], ttl: int = DEFAULT_TTL_MS) -> None:
        provider = Provider(provider)
        document = self.load()
        now = self.now()
        document.providers[provider] = ProviderCache(
            models=list(models),
            last_fetched=now,
            ttl=ttl,
            fetch_status=FetchStatus.SUCCESS,
        )
        document.last_updated = now
        self.save(document)

    def clear(self) -> None:
        self.save(self._empty())

    def clear_provider(self, provider: Provider) -> None:
        document = self.load()
        document.providers.pop(Provider(provider), None)
        document.last_updated = self.now()
        self.save(document)

    def get_cache_status(self, provider: Provider) -> CacheStatus:
        entry = self.get_provider_cache(provider)
        if entry is None:
            return CacheStatus(is_cached=False, is_expired=False)

        now = self.now()
        expired = entry.is_expired(now)
        return CacheStatus(
            is_cached=True,
            is_expired=expired,
            last_fetched=entry.last_fetched,
            age=human_age(entry.last_fetched, now),
            source="static" if expired else "cached",
        )
