"""Shared fixtures: an isolated home/working directory, in-memory stores and a fake urlopen."""

import http.client
import io
import json
from pathlib import Path

import pytest

from git_summary_ai.cli.context import AppContext
from git_summary_ai.config import ConfigManager
from git_summary_ai.credentials import CredentialResolver, SecretStore
from git_summary_ai.models import FetchResult, ModelCache, ModelResolver
from git_summary_ai.providers import PROVIDER_INFO
from git_summary_ai.usage import TokenTracker, UsageStorage

ALL_KEY_VARS = sorted({name for info in PROVIDER_INFO.values() for name in info.env_vars})


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def fake_urlopen(payload=None, error: Exception | None = None, raw: bytes | None = None):
    """Build a urlopen replacement that records requests."""
    seen = []

    def _urlopen(req, timeout=None):
        seen.append((req, timeout))
        if error is not None:
            raise error
        body = raw if raw is not None else json.dumps(payload).encode("utf-8")
        return FakeResponse(body)

    _urlopen.seen = seen
    return _urlopen


class TruncatedResponse(FakeResponse):
    """Connection dropped partway through the body."""

    def read(self, *args):
        raise http.client.IncompleteRead(b"{\"data\"", 512)


def truncated_urlopen():
    def _urlopen(req, timeout=None):
        return TruncatedResponse(b"")
    return _urlopen


class FakeStore(SecretStore):
    """Dict-backed store. `fail_on` makes the named operations raise."""

    def __init__(self, label: str = "Fake store", available: bool = True, fail_on: tuple[str, ...] = ()):
        self._label = label
        self.available = available
        self.fail_on = set(fail_on)
        self.data: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    @property
    def label(self) -> str:
        return self._label

    def is_available(self) -> bool:
        return self.available

    def get(self, provider):
        self.calls.append(("get", provider.value))
        if "get" in self.fail_on:
            raise OSError("backend exploded")
        return self.data.get(self.account_name(provider))

    def set(self, provider, value):
        self.calls.append(("set", provider.value))
        if "set" in self.fail_on:
            raise OSError("backend exploded")
        self.data[self.account_name(provider)] = value

    def delete(self, provider):
        self.calls.append(("delete", provider.value))
        if "delete" in self.fail_on:
            raise OSError("backend exploded")
        self.data.pop(self.account_name(provider), None)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch) -> Path:
    """Fresh HOME and cwd with no provider keys in the environment. Returns the home dir."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setattr("pathlib.Path.home", lambda: home)
    monkeypatch.chdir(work)
    for name in ALL_KEY_VARS + ["GSAI_PROVIDER", "GSAI_MODEL", "DEBUG"]:
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def fake_stores():
    """(keychain, local, global) fakes."""
    return (
        FakeStore("OS Keychain"),
        FakeStore("Local .env file"),
        FakeStore("Global .env file"),
    )


class OfflineFetcher:
    """Model fetcher that never touches the network."""

    def __init__(self):
        self.calls = []

    def fetch_models(self, provider, api_key):
        self.calls.append(provider)
        return FetchResult(provider=provider, success=False, error="offline")


@pytest.fixture
def app_ctx(isolated_env, tmp_path, fake_stores):
    """AppContext wired to fakes: in-memory secrets, temp cache and ledger, no network."""
    keychain, local, global_ = fake_stores
    return AppContext(
        config_manager=ConfigManager(),
        credentials=CredentialResolver(keychain=keychain, local_store=local, global_store=global_),
        models=ModelResolver(cache=ModelCache(path=tmp_path / "models-cache.json"), fetcher=OfflineFetcher()),
        tracker=TokenTracker(UsageStorage(path=tmp_path / "token-usage.json")),
    )
