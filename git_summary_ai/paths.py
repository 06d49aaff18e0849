"""Well-known file locations."""

from pathlib import Path

from git_summary_ai import APP_DIR_NAME


def app_dir() -> Path:
    """Global per-user directory. Resolved on every call so HOME changes are honored."""
    return Path.home() / APP_DIR_NAME


def global_config_path() -> Path:
    return app_dir() / "config.json"


def models_cache_path() -> Path:
    return app_dir() / "models-cache.json"


def usage_ledger_path() -> Path:
    return app_dir() / "token-usage.json"


def global_env_path() -> Path:
    return app_dir() / ".env"


def local_env_path() -> Path:
    return Path.cwd() / ".env"
