"""Model Resolution Package"""

from git_summary_ai.models.types import (
    CachedModel,
    ProviderCache,
    ModelsCacheDocument,
    FetchResult,
    FetchStatus,
    OutcomeStatus,
    RefreshOutcome,
    RefreshResult,
    CacheStatus,
    DEFAULT_TTL_MS,
)
from git_summary_ai.models.catalog import (
    AVAILABLE_MODELS,
    StaticModel,
    find_static_model,
    get_default_model,
    get_model_name,
    is_valid_model_static,
)
from git_summary_ai.models.cache import ModelCache
from git_summary_ai.models.fetcher import ModelFetcher
from git_summary_ai.models.resolver import ModelResolver, resolve_model

__all__ = [
    "CachedModel",
    "ProviderCache",
    "ModelsCacheDocument",
    "FetchResult",
    "FetchStatus",
    "OutcomeStatus",
    "RefreshOutcome",
    "RefreshResult",
    "CacheStatus",
    "DEFAULT_TTL_MS",
    "AVAILABLE_MODELS",
    "StaticModel",
    "find_static_model",
    "get_default_model",
    "get_model_name",
    "is_valid_model_static",
    "ModelCache",
    "ModelFetcher",
    "ModelResolver",
    "resolve_model",
]
