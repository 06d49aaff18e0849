"""
Credential Resolver

Finds the API key for a provider by checking, in order:

1. Environment variables (canonical name, then legacy alias)
2. OS keychain (skipped when storage preference is "env")
3. Local .env file (./.env)
4. Global .env file (~/.git-summary-ai/.env)

The first non-empty hit wins. Nothing found is not an error; callers that
need a key use require_api_key() to get an actionable message instead.
"""

import logging
import os
from dataclasses import dataclass, replace

from git_summary_ai.credentials.base import (
    CredentialError,
    EnvLocation,
    MissingCredentialError,
    SecretStore,
    StoragePreference,
)
from git_summary_ai.credentials.envfile import EnvFileStore
from git_summary_ai.credentials.keychain import KeychainStore
from git_summary_ai.providers import AI_PROVIDERS, PROVIDER_INFO, Provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialManagerConfig:
    """Storage settings. Frozen so an in-flight lookup never sees a half-applied change."""
    storage: StoragePreference = StoragePreference.AUTO
    env_location: EnvLocation = EnvLocation.LOCAL

    def __post_init__(self):
        object.__setattr__(self, "storage", StoragePreference(self.storage))
        object.__setattr__(self, "env_location", EnvLocation(self.env_location))


@dataclass
class StorageLocation:
    """One row of a where-is-my-key report."""
    location: str
    found: bool


class CredentialResolver:
    """Prioritized read chain and single-target write path over the secret stores.

    Built once at process start and passed to whatever needs credentials.
    """

    def __init__(
        self,
        config: CredentialManagerConfig | None = None,
        keychain: SecretStore | None = None,
        local_store: SecretStore | None = None,
        global_store: SecretStore | None = None,
    ):
        self._config = config or CredentialManagerConfig()
        self.keychain = keychain or KeychainStore()
        self.local_store = local_store or EnvFileStore(EnvLocation.LOCAL)
        self.global_store = global_store or EnvFileStore(EnvLocation.GLOBAL)

    @property
    def config(self) -> CredentialManagerConfig:
        return self._config

    def reconfigure(
        self,
        storage: StoragePreference | str | None = None,
        env_location: EnvLocation | str | None = None,
    ) -> CredentialManagerConfig:
        """Apply new settings; they take effect from the next call onwards."""
        changes = {}
        if storage is not None:
            changes["storage"] = StoragePreference(storage)
        if env_location is not None:
            changes["env_location"] = EnvLocation(env_location)
        self._config = replace(self._config, **changes)
        return self._config

    def is_keychain_available(self) -> bool:
        return self.keychain.is_available()

    def _file_store(self, config: CredentialManagerConfig) -> SecretStore:
        if config.env_location == EnvLocation.GLOBAL:
            return self.global_store
        return self.local_store

    def preferred_store(self, storage: StoragePreference | str | None = None) -> SecretStore:
        """The store set_api_key() would write to."""
        config = self._config
        preference = StoragePreference(storage) if storage is not None else config.storage

        if preference in (StoragePreference.KEYCHAIN, StoragePreference.AUTO):
            if self.keychain.is_available():
                return self.keychain
            if preference == StoragePreference.KEYCHAIN:
                logger.debug("Keychain requested but not available, falling back to .env file")

        return self._file_store(config)

    def get_env_api_key(self, provider: Provider) -> str | None:
        """Environment-only lookup: canonical name first, then the alias."""
        for name in PROVIDER_INFO[provider].env_vars:
            value = os.environ.get(name)
            if value:
                return value
        return None

    def get_api_key(self, provider: Provider) -> str | None:
        provider = Provider(provider)
        config = self._config

        value = self.get_env_api_key(provider)
        if value:
            return value

        if config.storage != StoragePreference.ENV and self.keychain.is_available():
            value = self.keychain.get(provider)
            if value:
                return value

        for store in (self.local_store, self.global_store):
            value = store.get(provider)
            if value:
                return value

        return None

    def require_api_key(self, provider: Provider) -> str:
        value = self.get_api_key(provider)
        if not value:
            raise MissingCredentialError(Provider(provider))
        return value

    def set_api_key(
        self,
        provider: Provider,
        value: str,
        storage: StoragePreference | str | None = None,
    ) -> str:
        """Store a key in exactly one place and return that place's label."""
        provider = Provider(provider)
        if not value or not value.strip():
            raise CredentialError("Refusing to store an empty API key")

        store = self.preferred_store(storage)
        store.set(provider, value.strip())
        logger.debug(f"Stored {provider.value} key in {store.label}")
        return store.label

    def delete_api_key(self, provider: Provider) -> None:
        """Remove a key from every store.

        Each store is attempted regardless of what the others do; a stale copy
        left behind anywhere would keep resolving. Raises only if every
        attempted store failed.
        """
        provider = Provider(provider)
        stores = [self.local_store, self.global_store]
        if self.keychain.is_available():
            stores.insert(0, self.keychain)

        errors = []
        for store in stores:
            try:
                store.delete(provider)
            except Exception as e:
                logger.debug(f"Failed to delete {provider.value} key from {store.label}: {e}")
                errors.append(f"{store.label}: {e}")

        if errors and len(errors) == len(stores):
            raise CredentialError(
                f"Could not delete {provider.value} key from any storage:\n  " + "\n  ".join(errors)
            )

    def get_storage_info(self, provider: Provider) -> list[StorageLocation]:
        provider = Provider(provider)
        results = []

        if self.keychain.is_available():
            results.append(StorageLocation(self.keychain.label, bool(self.keychain.get(provider))))

        for store in (self.local_store, self.global_store):
            where = f"{store.label} ({store.path})" if hasattr(store, "path") else store.label
            results.append(StorageLocation(where, bool(store.get(provider))))

        for name in PROVIDER_INFO[provider].env_vars:
            results.append(StorageLocation(f"Environment variable ({name})", bool(os.environ.get(name))))

        return results

    def configured_providers(self) -> list[Provider]:
        """AI providers that currently resolve a key from any source."""
        return [p for p in AI_PROVIDERS if self.get_api_key(p)]
