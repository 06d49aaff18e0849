"""Credential Storage Package"""

from git_summary_ai.credentials.base import (
    SecretStore,
    StoragePreference,
    EnvLocation,
    CredentialError,
    BackendUnavailableError,
    MissingCredentialError,
    is_placeholder,
    mask_secret,
)
from git_summary_ai.credentials.keychain import KeychainStore
from git_summary_ai.credentials.envfile import EnvFileStore
from git_summary_ai.credentials.resolver import CredentialResolver, CredentialManagerConfig, StorageLocation

__all__ = [
    "SecretStore",
    "KeychainStore",
    "EnvFileStore",
    "CredentialResolver",
    "CredentialManagerConfig",
    "StorageLocation",
    "StoragePreference",
    "EnvLocation",
    "CredentialError",
    "BackendUnavailableError",
    "MissingCredentialError",
    "is_placeholder",
    "mask_secret",
]
