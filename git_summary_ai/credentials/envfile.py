"""Dotenv File Secret Store"""

import logging
from pathlib import Path

from dotenv import dotenv_values, set_key, unset_key

from git_summary_ai.credentials.base import CredentialError, EnvLocation, SecretStore, is_placeholder
from git_summary_ai.paths import global_env_path, local_env_path
from git_summary_ai.providers import Provider

logger = logging.getLogger(__name__)


class EnvFileStore(SecretStore):
    """Secrets in a ``KEY=value`` dotenv file.

    local:  ./.env (project scoped)
    global: ~/.git-summary-ai/.env (user scoped)

    Writes go through python-dotenv, which rewrites only the affected line and
    leaves comments and unrelated keys alone.
    """

    def __init__(self, location: EnvLocation = EnvLocation.LOCAL, path: Path | None = None):
        self.location = EnvLocation(location)
        self._path = path

    @property
    def label(self) -> str:
        return "Global .env file" if self.location == EnvLocation.GLOBAL else "Local .env file"

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return global_env_path() if self.location == EnvLocation.GLOBAL else local_env_path()

    def is_available(self) -> bool:
        return True

    def _read(self) -> dict[str, str | None]:
        path = self.path
        if not path.is_file():
            return {}
        try:
            return dotenv_values(path)
        except (OSError, UnicodeDecodeError) as e:
            # Unreadable counts as empty so lookup moves on to the next store
            logger.debug(f"Could not read {path}: {e}")
            return {}

    def get(self, provider: Provider) -> str | None:
        value = self._read().get(self.account_name(provider))
        if not value:
            return None
        if is_placeholder(value):
            logger.debug(f"Ignoring placeholder value for {provider.value} in {self.path}")
            return None
        return value

    def set(self, provider: Provider, value: str) -> None:
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)
            set_key(str(path), self.account_name(provider), value, quote_mode="never")
        except OSError as e:
            raise CredentialError(f"Could not write {self.label} ({path}): {e}") from e

    def delete(self, provider: Provider) -> None:
        key = self.account_name(provider)
        if key not in self._read():
            return
        try:
            unset_key(str(self.path), key)
        except OSError as e:
            raise CredentialError(f"Could not update {self.label} ({self.path}): {e}") from e
