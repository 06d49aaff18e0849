"""
Unit tests for credential resolution: stores, priority chain, writes and deletes.

Run with:
    pytest tests/test_credentials.py -v
"""

from pathlib import Path

import pytest

from conftest import FakeStore
from git_summary_ai.credentials import (
    BackendUnavailableError,
    CredentialError,
    CredentialManagerConfig,
    CredentialResolver,
    EnvFileStore,
    EnvLocation,
    KeychainStore,
    MissingCredentialError,
    StoragePreference,
    is_placeholder,
    mask_secret,
)
from git_summary_ai.providers import Provider


def make_resolver(stores, storage="auto", env_location="local") -> CredentialResolver:
    keychain, local, global_ = stores
    return CredentialResolver(
        CredentialManagerConfig(storage=storage, env_location=env_location),
        keychain=keychain,
        local_store=local,
        global_store=global_,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestPlaceholderAndMasking:

    @pytest.mark.parametrize("value", ["your-api-key", "sk-ant-your-key", "paste-key-here", "your-key-here"])
    def test_placeholders_detected(self, value):
        assert is_placeholder(value)

    @pytest.mark.parametrize("value", ["sk-ant-api03-abcdef", "ghp_1234567890", "AIzaSyD-realkey"])
    def test_real_keys_not_placeholders(self, value):
        assert not is_placeholder(value)

    def test_mask_long_secret(self):
        assert mask_secret("sk-ant-abcdefghijc123") == "sk-ant-a...c123"

    def test_mask_short_secret_fully(self):
        assert mask_secret("short") == "*****"

    def test_missing_credential_names_env_var_and_setup(self):
        err = MissingCredentialError(Provider.CLAUDE)
        assert err.env_var == "CLAUDE_API_KEY"
        assert "CLAUDE_API_KEY" in str(err)
        assert "git-summary-ai setup" in str(err)
        assert isinstance(err, CredentialError)


# ---------------------------------------------------------------------------
# Read chain
# ---------------------------------------------------------------------------

class TestGetApiKey:

    def test_env_var_beats_every_store(self, isolated_env, fake_stores, monkeypatch):
        keychain, local, global_ = fake_stores
        for store in fake_stores:
            store.data["OPENAI_API_KEY"] = f"from-{store.label}"
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")

        assert make_resolver(fake_stores).get_api_key(Provider.OPENAI) == "from-env"

    def test_canonical_env_var_beats_alias(self, isolated_env, fake_stores, monkeypatch):
        monkeypatch.setenv("CLAUDE_API_KEY", "canonical")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "alias")
        assert make_resolver(fake_stores).get_api_key(Provider.CLAUDE) == "canonical"

    def test_alias_used_when_canonical_missing(self, isolated_env, fake_stores, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "alias")
        assert make_resolver(fake_stores).get_api_key(Provider.GEMINI) == "alias"

    def test_empty_env_var_is_ignored(self, isolated_env, fake_stores, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        fake_stores[1].data["OPENAI_API_KEY"] = "from-local"
        assert make_resolver(fake_stores).get_api_key(Provider.OPENAI) == "from-local"

    def test_keychain_before_files(self, isolated_env, fake_stores):
        keychain, local, global_ = fake_stores
        keychain.data["OPENAI_API_KEY"] = "from-keychain"
        local.data["OPENAI_API_KEY"] = "from-local"
        global_.data["OPENAI_API_KEY"] = "from-global"
        assert make_resolver(fake_stores).get_api_key(Provider.OPENAI) == "from-keychain"

    def test_local_before_global(self, isolated_env, fake_stores):
        _, local, global_ = fake_stores
        local.data["OPENAI_API_KEY"] = "from-local"
        global_.data["OPENAI_API_KEY"] = "from-global"
        assert make_resolver(fake_stores).get_api_key(Provider.OPENAI) == "from-local"

    def test_global_used_last(self, isolated_env, fake_stores):
        fake_stores[2].data["OPENAI_API_KEY"] = "from-global"
        assert make_resolver(fake_stores).get_api_key(Provider.OPENAI) == "from-global"

    def test_env_preference_skips_keychain(self, isolated_env, fake_stores):
        keychain, local, _ = fake_stores
        keychain.data["OPENAI_API_KEY"] = "from-keychain"
        local.data["OPENAI_API_KEY"] = "from-local"

        resolver = make_resolver(fake_stores, storage="env")

        assert resolver.get_api_key(Provider.OPENAI) == "from-local"
        assert keychain.calls == []

    def test_unavailable_keychain_not_consulted(self, isolated_env, fake_stores):
        keychain, _, _ = fake_stores
        keychain.available = False
        keychain.data["OPENAI_API_KEY"] = "unreachable"
        assert make_resolver(fake_stores).get_api_key(Provider.OPENAI) is None
        assert keychain.calls == []

    def test_nothing_found_returns_none(self, isolated_env, fake_stores):
        assert make_resolver(fake_stores).get_api_key(Provider.GEMINI) is None

    def test_require_api_key_raises_with_env_var(self, isolated_env, fake_stores):
        with pytest.raises(MissingCredentialError, match="GEMINI_API_KEY"):
            make_resolver(fake_stores).require_api_key(Provider.GEMINI)

    def test_copilot_and_github_share_token(self, isolated_env, fake_stores, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_token")
        resolver = make_resolver(fake_stores)
        assert resolver.get_api_key(Provider.COPILOT) == "ghp_token"
        assert resolver.get_api_key(Provider.GITHUB) == "ghp_token"

    def test_configured_providers(self, isolated_env, fake_stores, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        fake_stores[2].data["CLAUDE_API_KEY"] = "sk-claude"
        assert make_resolver(fake_stores).configured_providers() == [Provider.CLAUDE, Provider.OPENAI]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

class TestSetApiKey:

    def test_auto_prefers_keychain(self, isolated_env, fake_stores):
        keychain, local, global_ = fake_stores
        label = make_resolver(fake_stores).set_api_key(Provider.CLAUDE, "sk-ant-new")

        assert label == "OS Keychain"
        assert keychain.data == {"CLAUDE_API_KEY": "sk-ant-new"}
        assert local.data == {}
        assert global_.data == {}

    def test_auto_falls_back_to_local_file(self, isolated_env, fake_stores):
        keychain, local, global_ = fake_stores
        keychain.available = False

        label = make_resolver(fake_stores).set_api_key(Provider.CLAUDE, "sk-ant-new")

        assert label == "Local .env file"
        assert local.data == {"CLAUDE_API_KEY": "sk-ant-new"}
        assert global_.data == {}

    def test_keychain_preference_falls_back_when_unavailable(self, isolated_env, fake_stores):
        keychain, _, global_ = fake_stores
        keychain.available = False
        resolver = make_resolver(fake_stores, storage="keychain", env_location="global")

        assert resolver.set_api_key(Provider.OPENAI, "sk-x") == "Global .env file"
        assert global_.data == {"OPENAI_API_KEY": "sk-x"}

    def test_env_preference_uses_configured_location(self, isolated_env, fake_stores):
        keychain, local, global_ = fake_stores
        resolver = make_resolver(fake_stores, storage="env", env_location="global")

        resolver.set_api_key(Provider.OPENAI, "sk-x")

        assert keychain.data == {}
        assert local.data == {}
        assert global_.data == {"OPENAI_API_KEY": "sk-x"}

    def test_explicit_storage_overrides_config(self, isolated_env, fake_stores):
        keychain, local, _ = fake_stores
        resolver = make_resolver(fake_stores, storage="auto")

        assert resolver.set_api_key(Provider.OPENAI, "sk-x", storage=StoragePreference.ENV) == "Local .env file"
        assert keychain.data == {}
        assert local.data == {"OPENAI_API_KEY": "sk-x"}

    def test_round_trip_through_global_file_without_keychain(self, isolated_env, tmp_path):
        keychain = FakeStore("OS Keychain", available=False)
        global_path = tmp_path / "global" / ".env"
        global_path.parent.mkdir()
        global_path.write_text("")
        resolver = CredentialResolver(
            CredentialManagerConfig(storage="auto", env_location="global"),
            keychain=keychain,
            local_store=EnvFileStore(EnvLocation.LOCAL, path=tmp_path / "project" / ".env"),
            global_store=EnvFileStore(EnvLocation.GLOBAL, path=global_path),
        )

        assert resolver.set_api_key(Provider.CLAUDE, "sk-ant-abc123") == "Global .env file"
        assert "CLAUDE_API_KEY=sk-ant-abc123" in global_path.read_text()
        assert resolver.get_api_key(Provider.CLAUDE) == "sk-ant-abc123"

    def test_empty_value_rejected(self, isolated_env, fake_stores):
        with pytest.raises(CredentialError):
            make_resolver(fake_stores).set_api_key(Provider.OPENAI, "   ")
        assert all(store.data == {} for store in fake_stores)

    def test_value_is_stripped(self, isolated_env, fake_stores):
        make_resolver(fake_stores).set_api_key(Provider.OPENAI, "  sk-x \n")
        assert fake_stores[0].data == {"OPENAI_API_KEY": "sk-x"}

    def test_store_failure_propagates(self, isolated_env):
        stores = (FakeStore("OS Keychain", fail_on=("set",)), FakeStore(), FakeStore())
        with pytest.raises(OSError):
            make_resolver(stores).set_api_key(Provider.OPENAI, "sk-x")

    def test_round_trip(self, isolated_env, fake_stores):
        resolver = make_resolver(fake_stores)
        resolver.set_api_key(Provider.GEMINI, "AIza-real-key")
        assert resolver.get_api_key(Provider.GEMINI) == "AIza-real-key"


# ---------------------------------------------------------------------------
# Deletes
# ---------------------------------------------------------------------------

class TestDeleteApiKey:

    def test_removes_from_every_store(self, isolated_env, fake_stores):
        for store in fake_stores:
            store.data["OPENAI_API_KEY"] = "stale"
        resolver = make_resolver(fake_stores)

        resolver.delete_api_key(Provider.OPENAI)

        assert all(store.data == {} for store in fake_stores)
        assert resolver.get_api_key(Provider.OPENAI) is None

    def test_one_failing_store_does_not_stop_the_rest(self, isolated_env):
        keychain = FakeStore("OS Keychain", fail_on=("delete",))
        local, global_ = FakeStore("Local .env file"), FakeStore("Global .env file")
        local.data["OPENAI_API_KEY"] = "stale"
        global_.data["OPENAI_API_KEY"] = "stale"

        make_resolver((keychain, local, global_)).delete_api_key(Provider.OPENAI)

        assert local.data == {}
        assert global_.data == {}

    def test_raises_when_every_store_fails(self, isolated_env):
        stores = tuple(FakeStore(name, fail_on=("delete",)) for name in ("a", "b", "c"))
        with pytest.raises(CredentialError, match="any storage"):
            make_resolver(stores).delete_api_key(Provider.OPENAI)

    def test_unavailable_keychain_skipped(self, isolated_env, fake_stores):
        keychain, _, _ = fake_stores
        keychain.available = False
        make_resolver(fake_stores).delete_api_key(Provider.OPENAI)
        assert ("delete", "openai") not in keychain.calls

    def test_missing_key_is_not_an_error(self, isolated_env, fake_stores):
        make_resolver(fake_stores).delete_api_key(Provider.GEMINI)


# ---------------------------------------------------------------------------
# Configuration changes
# ---------------------------------------------------------------------------

class TestReconfigure:

    def test_config_coerces_strings(self):
        config = CredentialManagerConfig(storage="env", env_location="global")
        assert config.storage is StoragePreference.ENV
        assert config.env_location is EnvLocation.GLOBAL

    def test_invalid_storage_rejected(self):
        with pytest.raises(ValueError):
            CredentialManagerConfig(storage="cloud")

    def test_reconfigure_affects_next_write(self, isolated_env, fake_stores):
        keychain, _, global_ = fake_stores
        resolver = make_resolver(fake_stores)

        resolver.reconfigure(storage="env", env_location="global")
        resolver.set_api_key(Provider.OPENAI, "sk-x")

        assert keychain.data == {}
        assert global_.data == {"OPENAI_API_KEY": "sk-x"}

    def test_reconfigure_keeps_unspecified_fields(self, fake_stores):
        resolver = make_resolver(fake_stores, storage="keychain", env_location="global")
        config = resolver.reconfigure(storage="env")
        assert config.env_location is EnvLocation.GLOBAL

    def test_old_config_snapshot_unchanged(self, fake_stores):
        resolver = make_resolver(fake_stores)
        before = resolver.config
        resolver.reconfigure(storage="env")
        assert before.storage is StoragePreference.AUTO


# ---------------------------------------------------------------------------
# Storage report
# ---------------------------------------------------------------------------

class TestStorageInfo:

    def test_reports_every_location(self, isolated_env, fake_stores, monkeypatch):
        fake_stores[1].data["CLAUDE_API_KEY"] = "sk-ant-local"
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-alias")

        rows = {row.location: row.found for row in make_resolver(fake_stores).get_storage_info(Provider.CLAUDE)}

        assert rows["OS Keychain"] is False
        assert rows["Local .env file"] is True
        assert rows["Global .env file"] is False
        assert rows["Environment variable (CLAUDE_API_KEY)"] is False
        assert rows["Environment variable (ANTHROPIC_API_KEY)"] is True

    def test_keychain_omitted_when_unavailable(self, isolated_env, fake_stores):
        fake_stores[0].available = False
        rows = make_resolver(fake_stores).get_storage_info(Provider.OPENAI)
        assert all(row.location != "OS Keychain" for row in rows)


# ---------------------------------------------------------------------------
# EnvFileStore (real files)
# ---------------------------------------------------------------------------

class TestEnvFileStore:

    def test_labels(self):
        assert EnvFileStore(EnvLocation.LOCAL).label == "Local .env file"
        assert EnvFileStore(EnvLocation.GLOBAL).label == "Global .env file"

    def test_default_paths(self, isolated_env):
        assert EnvFileStore(EnvLocation.GLOBAL).path == isolated_env / ".git-summary-ai" / ".env"
        assert EnvFileStore(EnvLocation.LOCAL).path.name == ".env"

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = EnvFileStore(path=tmp_path / "nope" / ".env")
        assert store.get(Provider.OPENAI) is None

    def test_set_creates_parent_directory(self, tmp_path):
        path = tmp_path / "deep" / "dir" / ".env"
        store = EnvFileStore(EnvLocation.GLOBAL, path=path)

        store.set(Provider.OPENAI, "sk-test-123")

        assert path.is_file()
        assert store.get(Provider.OPENAI) == "sk-test-123"

    def test_set_preserves_other_lines(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("# my settings\nDATABASE_URL=postgres://localhost/db\n", encoding="utf-8")
        store = EnvFileStore(path=path)

        store.set(Provider.OPENAI, "sk-test-123")

        text = path.read_text(encoding="utf-8")
        assert "# my settings" in text
        assert "DATABASE_URL=postgres://localhost/db" in text
        assert "OPENAI_API_KEY=sk-test-123" in text

    def test_set_replaces_existing_value(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("OPENAI_API_KEY=old\n", encoding="utf-8")
        store = EnvFileStore(path=path)

        store.set(Provider.OPENAI, "new")

        assert store.get(Provider.OPENAI) == "new"
        assert path.read_text(encoding="utf-8").count("OPENAI_API_KEY") == 1

    def test_placeholder_treated_as_absent(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("CLAUDE_API_KEY=sk-ant-your-key-here\n", encoding="utf-8")
        assert EnvFileStore(path=path).get(Provider.CLAUDE) is None

    def test_delete_removes_only_that_key(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("OPENAI_API_KEY=sk-x\nOTHER=1\n", encoding="utf-8")
        store = EnvFileStore(path=path)

        store.delete(Provider.OPENAI)

        assert store.get(Provider.OPENAI) is None
        assert "OTHER=1" in path.read_text(encoding="utf-8")

    def test_delete_missing_file_is_noop(self, tmp_path):
        path = tmp_path / ".env"
        EnvFileStore(path=path).delete(Provider.OPENAI)
        assert not path.exists()

    def test_unreadable_file_reads_as_empty(self, tmp_path, monkeypatch):
        path = tmp_path / ".env"
        path.write_text("OPENAI_API_KEY=sk-x\n", encoding="utf-8")

        def denied(*args, **kwargs):
            raise PermissionError(13, "Permission denied")
        monkeypatch.setattr("git_summary_ai.credentials.envfile.dotenv_values", denied)

        assert EnvFileStore(path=path).get(Provider.OPENAI) is None

    def test_write_failure_raises_credential_error(self, tmp_path, monkeypatch):
        def denied(*args, **kwargs):
            raise PermissionError(13, "Permission denied")
        monkeypatch.setattr("git_summary_ai.credentials.envfile.set_key", denied)

        with pytest.raises(CredentialError, match="Could not write Local .env file"):
            EnvFileStore(path=tmp_path / ".env").set(Provider.OPENAI, "sk-x")


# ---------------------------------------------------------------------------
# KeychainStore (fake keyring backend)
# ---------------------------------------------------------------------------

class FakeBackend:
    def __init__(self, broken: bool = False, read_only: bool = False):
        self.broken = broken
        self.read_only = read_only
        self.passwords: dict[tuple[str, str], str] = {}
        self.probes = 0

    def get_password(self, service, username):
        if username == "__probe__":
            self.probes += 1
        if self.broken:
            from keyring.errors import KeyringError
            raise KeyringError("no daemon")
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        if self.read_only:
            from keyring.errors import PasswordSetError
            raise PasswordSetError("locked")
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        from keyring.errors import PasswordDeleteError
        if (service, username) not in self.passwords:
            raise PasswordDeleteError("not found")
        del self.passwords[(service, username)]


class TestKeychainStore:

    def test_round_trip_uses_service_and_env_var_name(self):
        backend = FakeBackend()
        store = KeychainStore(backend=backend)

        store.set(Provider.CLAUDE, "sk-ant-secret")

        assert backend.passwords == {("git-summary-ai", "CLAUDE_API_KEY"): "sk-ant-secret"}
        assert store.get(Provider.CLAUDE) == "sk-ant-secret"

    def test_probe_result_is_cached(self):
        backend = FakeBackend()
        store = KeychainStore(backend=backend)
        assert store.is_available()
        assert store.is_available()
        assert backend.probes == 1

    def test_broken_backend_unavailable(self):
        store = KeychainStore(backend=FakeBackend(broken=True))
        assert not store.is_available()
        assert store.get(Provider.CLAUDE) is None

    def test_write_to_unavailable_backend_raises(self):
        store = KeychainStore(backend=FakeBackend(broken=True))
        with pytest.raises(BackendUnavailableError):
            store.set(Provider.CLAUDE, "sk")
        with pytest.raises(BackendUnavailableError):
            store.delete(Provider.CLAUDE)

    def test_fail_backend_unavailable(self):
        from keyring.backends import fail
        assert not KeychainStore(backend=fail.Keyring()).is_available()

    def test_delete_missing_entry_is_noop(self):
        KeychainStore(backend=FakeBackend()).delete(Provider.OPENAI)

    def test_write_failure_raises_credential_error(self):
        store = KeychainStore(backend=FakeBackend(read_only=True))
        with pytest.raises(CredentialError, match="keychain: locked"):
            store.set(Provider.CLAUDE, "sk")


# ---------------------------------------------------------------------------
# End to end with real dotenv files
# ---------------------------------------------------------------------------

class TestResolverWithFiles:

    def test_global_file_key_found_from_any_directory(self, isolated_env, tmp_path, monkeypatch):
        keychain = KeychainStore(backend=FakeBackend(broken=True))
        resolver = CredentialResolver(
            CredentialManagerConfig(storage="env", env_location="global"),
            keychain=keychain,
        )

        assert resolver.set_api_key(Provider.OPENAI, "sk-global-123") == "Global .env file"

        other = tmp_path / "elsewhere"
        other.mkdir()
        monkeypatch.chdir(other)
        assert resolver.get_api_key(Provider.OPENAI) == "sk-global-123"
        assert (isolated_env / ".git-summary-ai" / ".env").is_file()

    def test_unreadable_local_file_falls_through_to_global(self, isolated_env, monkeypatch):
        global_env = isolated_env / ".git-summary-ai" / ".env"
        global_env.parent.mkdir(parents=True)
        global_env.write_text("GEMINI_API_KEY=from-global\n", encoding="utf-8")
        local_env = isolated_env.parent / "work" / ".env"
        local_env.write_text("GEMINI_API_KEY=from-local\n", encoding="utf-8")

        from git_summary_ai.credentials import envfile
        real_values = envfile.dotenv_values

        def flaky(path, *args, **kwargs):
            if Path(path).resolve() == local_env.resolve():
                raise PermissionError(13, "Permission denied")
            return real_values(path, *args, **kwargs)
        monkeypatch.setattr(envfile, "dotenv_values", flaky)

        resolver = CredentialResolver(keychain=KeychainStore(backend=FakeBackend(broken=True)))

        assert resolver.get_api_key(Provider.GEMINI) == "from-global"

    def test_local_file_shadows_global(self, isolated_env):
        global_env = isolated_env / ".git-summary-ai" / ".env"
        global_env.parent.mkdir(parents=True)
        global_env.write_text("GEMINI_API_KEY=from-global\n", encoding="utf-8")
        (isolated_env.parent / "work" / ".env").write_text("GEMINI_API_KEY=from-local\n", encoding="utf-8")

        resolver = CredentialResolver(keychain=KeychainStore(backend=FakeBackend(broken=True)))

        assert resolver.get_api_key(Provider.GEMINI) == "from-local"
