"""Secret Store Base Classes and Shared Types"""

from abc import ABC, abstractmethod
from enum import Enum

from git_summary_ai.providers import Provider, PROVIDER_INFO


# Substrings that mark a value copied from a template and never filled in
PLACEHOLDER_MARKERS = ("your-", "-here")


class StoragePreference(str, Enum):
    """Where new credentials should be written."""
    KEYCHAIN = "keychain"
    ENV = "env"
    AUTO = "auto"


class EnvLocation(str, Enum):
    """Which dotenv file receives writes when the keychain is not used."""
    LOCAL = "local"
    GLOBAL = "global"


class CredentialError(Exception):
    """Raised when credential storage operations fail."""
    pass


class BackendUnavailableError(CredentialError):
    """Raised when writing to a store that cannot be used on this system."""
    pass


class MissingCredentialError(CredentialError):
    """Raised when no source holds a credential the caller requires."""

    def __init__(self, provider: Provider):
        self.provider = provider
        self.env_var = PROVIDER_INFO[provider].env_var
        super().__init__(
            f"Missing API key for {provider.value}. Please set {self.env_var} "
            f"environment variable or run 'git-summary-ai setup'"
        )


def is_placeholder(value: str) -> bool:
    """True for template values such as 'sk-your-key-here'.

    A heuristic only; it is not a secret scanner.
    """
    return any(marker in value for marker in PLACEHOLDER_MARKERS)


def mask_secret(value: str) -> str:
    """Show enough of a secret to recognise it."""
    if len(value) <= 12:
        return "*" * len(value)
    return f"{value[:8]}...{value[-4:]}"


class SecretStore(ABC):
    """A place a credential can live.

    Stores know nothing about each other; ordering is the resolver's job.
    """

    @property
    @abstractmethod
    def label(self) -> str:
        """Human-readable storage type."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def get(self, provider: Provider) -> str | None:
        pass

    @abstractmethod
    def set(self, provider: Provider, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, provider: Provider) -> None:
        pass

    def account_name(self, provider: Provider) -> str:
        """Key under which the provider's secret is stored."""
        return PROVIDER_INFO[provider].env_var
