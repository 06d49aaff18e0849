"""
Configuration Management Package

Settings are merged from (later wins):

1. Built-in defaults
2. ~/.git-summary-ai/config.json (global)
3. .git-summary-airc or .git-summary-airc.json in the current directory (project)

Config format (JSON):
{
    "provider": "claude",
    "models": {"claude": "claude-sonnet-4-20250514"},
    "targetBranch": "main"
}
"""

import json
import sys
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional

from git_summary_ai.paths import global_config_path
from git_summary_ai.providers import AI_PROVIDER_NAMES

# Valid configuration values
VALID_PROVIDERS = set(AI_PROVIDER_NAMES)
VALID_STORAGE = {"auto", "keychain", "env"}
VALID_ENV_LOCATIONS = {"local", "global"}

PROJECT_CONFIG_FILENAMES = (".git-summary-airc", ".git-summary-airc.json")

# Files are camelCase on disk, fields are snake_case in Python
_FILE_KEYS = {
    "max_tokens": "maxTokens",
    "target_branch": "targetBranch",
    "exclude_patterns": "excludePatterns",
    "commit_prefix": "commitPrefix",
    "prompt_template": "promptTemplate",
    "credential_storage": "credentialStorage",
    "env_location": "envLocation",
}
_FIELD_NAMES = {v: k for k, v in _FILE_KEYS.items()}


@dataclass
class Config:
    """User configuration with sensible defaults."""
    provider: str = "claude"
    model: Optional[str] = None  # legacy global model, used when models[provider] is unset
    models: dict[str, str] = field(default_factory=dict)
    max_tokens: int = 1024
    target_branch: str = "main"
    exclude_patterns: list[str] = field(default_factory=list)
    commit_prefix: Optional[str] = None
    language: str = "en"
    prompt_template: Optional[str] = None
    credential_storage: str = "auto"
    env_location: str = "local"

    def to_dict(self) -> dict:
        return {_FILE_KEYS.get(k, k): v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{self.provider}', using '{defaults.provider}'")
            self.provider = defaults.provider

        if not isinstance(self.models, dict):
            warnings.append("Invalid models map, ignoring it")
            self.models = {}
        for name in [p for p in self.models if p not in VALID_PROVIDERS]:
            warnings.append(f"Ignoring model for unknown provider '{name}'")
            del self.models[name]

        if not isinstance(self.max_tokens, int) or self.max_tokens <= 0:
            warnings.append(f"Invalid maxTokens '{self.max_tokens}', using {defaults.max_tokens}")
            self.max_tokens = defaults.max_tokens

        if not isinstance(self.exclude_patterns, list):
            warnings.append("Invalid excludePatterns, expected a list")
            self.exclude_patterns = []

        if self.credential_storage not in VALID_STORAGE:
            warnings.append(f"Invalid credentialStorage '{self.credential_storage}', using '{defaults.credential_storage}'")
            self.credential_storage = defaults.credential_storage

        if self.env_location not in VALID_ENV_LOCATIONS:
            warnings.append(f"Invalid envLocation '{self.env_location}', using '{defaults.env_location}'")
            self.env_location = defaults.env_location

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        config = cls(**_known_fields(data))
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config

    def model_for(self, provider: str) -> Optional[str]:
        """Configured model: per-provider entry first, then the legacy global one."""
        return self.models.get(provider) or self.model


def _known_fields(data: dict) -> dict:
    """Map file keys to field names, ignoring unknown keys."""
    valid_keys = {f.name for f in Config.__dataclass_fields__.values()}
    fields = {}
    for key, value in data.items():
        name = _FIELD_NAMES.get(key, key)
        if name in valid_keys:
            fields[name] = value
    return fields


class ConfigManager:
    """Manages loading and saving configuration."""

    def __init__(self, global_path: Path | None = None, project_dir: Path | None = None):
        self._global_path = global_path
        self._project_dir = project_dir
        self._config: Optional[Config] = None
        self._loaded_from: list[Path] = []

    @property
    def global_path(self) -> Path:
        return self._global_path or global_config_path()

    def project_path(self) -> Optional[Path]:
        base = self._project_dir or Path.cwd()
        for name in PROJECT_CONFIG_FILENAMES:
            path = base / name
            if path.is_file():
                return path
        return None

    def load(self) -> Config:
        """Merge global and project files over the defaults. Cached after first call."""
        if self._config is not None:
            return self._config

        merged: dict = {}
        self._loaded_from = []
        for path in (self.global_path, self.project_path()):
            if path is None or not path.is_file():
                continue
            data = self._read_file(path)
            if data:
                merged.update(_known_fields(data))
                self._loaded_from.append(path)

        self._config = Config.from_dict(merged)
        return self._config

    def reload(self) -> Config:
        self._config = None
        return self.load()

    def _read_file(self, path: Path) -> dict:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return {}
        if not isinstance(data, dict):
            print(f"Warning: Ignoring {path}: expected a JSON object", file=sys.stderr)
            return {}
        return data

    def read_global(self) -> dict:
        """Raw contents of the global file, or {} if it doesn't exist yet."""
        path = self.global_path
        if not path.is_file():
            return {}
        return self._read_file(path)

    def update_global(self, **changes) -> Path:
        """Read-modify-write the global file. A value of None removes the key."""
        data = self.read_global()
        for name, value in changes.items():
            key = _FILE_KEYS.get(name, name)
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        path = self._write(self.global_path, data)
        self._config = None
        return path

    def save(self, config: Config, global_config: bool = True) -> Path:
        if global_config:
            path = self.global_path
        else:
            path = (self._project_dir or Path.cwd()) / PROJECT_CONFIG_FILENAMES[1]
        self._config = None
        return self._write(path, config.to_dict())

    def _write(self, path: Path, data: dict) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        return path

    def loaded_from(self) -> list[Path]:
        """Files that contributed to the loaded config, lowest precedence first."""
        return list(self._loaded_from)


__all__ = [
    "Config",
    "ConfigManager",
    "VALID_PROVIDERS",
    "VALID_STORAGE",
    "VALID_ENV_LOCATIONS",
    "PROJECT_CONFIG_FILENAMES",
]
