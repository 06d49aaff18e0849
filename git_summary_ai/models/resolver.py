"""
Model Resolver

Answers "which models can this provider serve?" through a fixed chain:

    fresh cache -> live catalog fetch (needs a key) -> bundled static table

The static table is unconditional, so get_models() always returns a
non-empty list. Only AI providers are accepted; anything else is a
ValueError raised before any lookup happens.
"""

import logging
from typing import TYPE_CHECKING, Callable, Iterable

from git_summary_ai.credentials.base import CredentialError
from git_summary_ai.models.cache import ModelCache
from git_summary_ai.models.catalog import get_default_model, static_models
from git_summary_ai.models.fetcher import ModelFetcher
from git_summary_ai.models.types import (
    CachedModel,
    CacheStatus,
    FetchResult,
    OutcomeStatus,
    RefreshOutcome,
    RefreshResult,
)
from git_summary_ai.providers import AI_PROVIDERS, Provider, parse_provider

if TYPE_CHECKING:
    from git_summary_ai.config import Config

logger = logging.getLogger(__name__)


class ModelResolver:
    """Composes the cache, the fetcher and the static table."""

    def __init__(self, cache: ModelCache | None = None, fetcher: ModelFetcher | None = None):
        self.cache = cache or ModelCache()
        self.fetcher = fetcher or ModelFetcher()

    def get_models(self, provider: Provider, api_key: str | None = None, force_refresh: bool = False) -> list[CachedModel]:
        provider = parse_provider(provider, ai_only=True)

        if not force_refresh:
            cached = self.cache.get_cached_models(provider)
            if cached:
                logger.debug(f"Using cached {provider.value} models")
                return cached

        if api_key:
            result = self._fetch(provider, api_key)
            if result.success and result.models:
                self.cache.set_cached_models(provider, result.models)
                return list(result.models)
            logger.debug(f"Falling back to static {provider.value} models: {result.error}")

        return self.get_static_models(provider)

    def get_static_models(self, provider: Provider) -> list[CachedModel]:
        provider = parse_provider(provider, ai_only=True)
        return [CachedModel(id=m.id, display_name=m.name, provider=provider) for m in static_models(provider)]

    def refresh_models(self, provider: Provider, api_key: str) -> RefreshOutcome:
        """Always goes to the network. The cache is only written on success."""
        provider = parse_provider(provider, ai_only=True)
        result = self._fetch(provider, api_key)

        if result.success and result.models:
            self.cache.set_cached_models(provider, result.models)
            return RefreshOutcome(OutcomeStatus.REFRESHED, count=len(result.models))

        return RefreshOutcome(OutcomeStatus.FAILED, error=result.error or "No models returned")

    def _fetch(self, provider: Provider, api_key: str) -> FetchResult:
        try:
            return self.fetcher.fetch_models(provider, api_key)
        except Exception as e:
            logger.warning(f"Unexpected error fetching {provider.value} models: {e}")
            return FetchResult(provider=provider, success=False, error=str(e) or type(e).__name__)

    def refresh_all_providers(
        self,
        key_lookup: Callable[[Provider], str | None],
        providers: Iterable[Provider] = AI_PROVIDERS,
    ) -> RefreshResult:
        """Refresh each provider independently; one failure never stops the rest."""
        result = RefreshResult(timestamp=self.cache.now())

        for provider in providers:
            provider = Provider(provider)
            try:
                parse_provider(provider, ai_only=True)
                api_key = key_lookup(provider)
            except (CredentialError, ValueError) as e:
                result.results[provider] = RefreshOutcome(OutcomeStatus.FAILED, error=str(e))
                continue

            if not api_key:
                result.results[provider] = RefreshOutcome(OutcomeStatus.NO_KEY, error="No API key configured")
                continue

            result.results[provider] = self.refresh_models(provider, api_key)

        return result

    def is_valid_model(self, provider: Provider, model_id: str, api_key: str | None = None) -> bool:
        return any(m.id == model_id for m in self.get_models(provider, api_key))

    def get_cache_status(self, provider: Provider) -> CacheStatus:
        return self.cache.get_cache_status(provider)

    def clear_all_caches(self) -> None:
        self.cache.clear()

    def clear_cache(self, provider: Provider) -> None:
        self.cache.clear_provider(provider)


def resolve_model(provider: Provider, explicit: str | None = None, config: "Config | None" = None) -> str:
    """Pick the model to use: explicit > config.models[provider] > config.model > static default."""
    provider = Provider(provider)
    if explicit:
        return explicit
    if config is not None:
        configured = config.model_for(provider.value)
        if configured:
            return configured
    return get_default_model(provider)
