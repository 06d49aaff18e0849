"""Process-wide collaborators, built once and handed to each command."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from git_summary_ai.config import Config, ConfigManager
from git_summary_ai.credentials import CredentialManagerConfig, CredentialResolver
from git_summary_ai.git import GitService
from git_summary_ai.models import ModelResolver, resolve_model
from git_summary_ai.providers import Provider, parse_provider
from git_summary_ai.usage import TokenTracker

PROVIDER_ENV_VAR = 'GSAI_PROVIDER'
MODEL_ENV_VAR = 'GSAI_MODEL'


@dataclass
class AppContext:
    config_manager: ConfigManager
    credentials: CredentialResolver
    models: ModelResolver
    tracker: TokenTracker
    cwd: Path | None = None
    _git: GitService | None = field(default=None, repr=False)

    @classmethod
    def create(cls, cwd: Path | None = None) -> 'AppContext':
        config_manager = ConfigManager(project_dir=cwd)
        config = config_manager.load()
        credentials = CredentialResolver(CredentialManagerConfig(
            storage=config.credential_storage,
            env_location=config.env_location,
        ))
        return cls(
            config_manager=config_manager,
            credentials=credentials,
            models=ModelResolver(),
            tracker=TokenTracker(),
            cwd=cwd,
        )

    @property
    def config(self) -> Config:
        return self.config_manager.load()

    @property
    def git(self) -> GitService:
        if self._git is None:
            self._git = GitService(cwd=self.cwd, exclude_patterns=self.config.exclude_patterns)
        return self._git

    def resolve_provider(self, explicit: str | None = None) -> Provider:
        """CLI flag > GSAI_PROVIDER > config."""
        name = explicit or os.environ.get(PROVIDER_ENV_VAR) or self.config.provider
        return parse_provider(name, ai_only=True)

    def resolve_model(self, provider: Provider, explicit: str | None = None) -> str:
        """CLI flag > GSAI_MODEL > configured model > static default."""
        return resolve_model(provider, explicit or os.environ.get(MODEL_ENV_VAR), self.config)

    def reload_config(self) -> Config:
        """Re-read config files and push the storage settings into the resolver."""
        config = self.config_manager.reload()
        self.credentials.reconfigure(storage=config.credential_storage, env_location=config.env_location)
        return config
