"""OS Keychain Secret Store (macOS Keychain, Windows Credential Locker, Secret Service)"""

import logging

import keyring
from keyring.backend import KeyringBackend
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError

from git_summary_ai import APP_NAME
from git_summary_ai.credentials.base import BackendUnavailableError, CredentialError, SecretStore
from git_summary_ai.providers import Provider

logger = logging.getLogger(__name__)


class KeychainStore(SecretStore):
    """Secrets in the operating system's credential store via ``keyring``.

    Having the bindings installed does not mean a keyring daemon is reachable
    (headless boxes, containers, SSH sessions), so availability is probed
    with a real lookup the first time it is asked and remembered afterwards.
    """

    SERVICE_NAME = APP_NAME

    def __init__(self, backend: KeyringBackend | None = None):
        self._backend = backend
        self._available: bool | None = None

    @property
    def label(self) -> str:
        return "OS Keychain"

    @property
    def backend(self) -> KeyringBackend:
        if self._backend is None:
            self._backend = keyring.get_keyring()
        return self._backend

    def is_available(self) -> bool:
        if self._available is None:
            self._available = self._probe()
        return self._available

    def _probe(self) -> bool:
        try:
            backend = self.backend
            if isinstance(backend, fail.Keyring):
                logger.debug("No usable keyring backend found")
                return False
            backend.get_password(self.SERVICE_NAME, "__probe__")
            return True
        except (KeyringError, OSError) as e:
            logger.debug(f"Keyring probe failed: {e}")
            return False

    def get(self, provider: Provider) -> str | None:
        if not self.is_available():
            return None
        try:
            return self.backend.get_password(self.SERVICE_NAME, self.account_name(provider)) or None
        except (KeyringError, OSError) as e:
            logger.debug(f"Keychain lookup for {provider.value} failed: {e}")
            return None

    def set(self, provider: Provider, value: str) -> None:
        if not self.is_available():
            raise BackendUnavailableError("Keychain is not available on this system")
        try:
            self.backend.set_password(self.SERVICE_NAME, self.account_name(provider), value)
        except (KeyringError, OSError) as e:
            raise CredentialError(f"Could not save {provider.value} key to the keychain: {e}") from e

    def delete(self, provider: Provider) -> None:
        if not self.is_available():
            raise BackendUnavailableError("Keychain is not available on this system")
        try:
            self.backend.delete_password(self.SERVICE_NAME, self.account_name(provider))
        except PasswordDeleteError:
            # Nothing stored for this provider
            pass
