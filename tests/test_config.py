"""Tests for core.config: settings, YAML persistence and option merging."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from core.config import (
    AppSettings,
    SyncOptions,
    get_user_config_file,
    load_user_config,
    write_user_config,
)
from core.domain.errors import ConfigFileError


class TestAppSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("DEFAULT_PORT", "PLAINTEXT_LOGIN", "DNS_LIFETIME_SECONDS", "KEYRING_SERVICE_PREFIX"):
            monkeypatch.delenv(f"ROUTESYNC_{key}", raising=False)

        settings = AppSettings()

        assert settings.default_port == 8728
        assert settings.plaintext_login is True
        assert settings.dns_lifetime_seconds == 5.0
        assert settings.keyring_service_prefix == ""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTESYNC_DEFAULT_PORT", "8729")
        assert AppSettings().default_port == 8729


class TestUserConfigFile:
    def test_location(self, user_config_home: Path) -> None:
        assert get_user_config_file() == user_config_home / "config.yaml"

    def test_missing_file_is_empty(self, user_config_home: Path) -> None:
        assert load_user_config() == {}

    def test_write_then_load(self, user_config_home: Path) -> None:
        path = write_user_config({"gateway": "192.168.1.1", "address": "10.0.0.1", "username": "admin"})

        assert path == user_config_home / "config.yaml"
        assert load_user_config() == {"gateway": "192.168.1.1", "address": "10.0.0.1", "username": "admin"}

    def test_write_preserves_unknown_keys(self, user_config_home: Path) -> None:
        user_config_home.mkdir(parents=True)
        (user_config_home / "config.yaml").write_text("extra: keep-me\ngateway: old\n", encoding="utf-8")

        write_user_config({"gateway": "new"})

        data = yaml.safe_load((user_config_home / "config.yaml").read_text(encoding="utf-8"))
        assert data == {"extra": "keep-me", "gateway": "new"}

    def test_invalid_yaml(self, user_config_home: Path) -> None:
        user_config_home.mkdir(parents=True)
        (user_config_home / "config.yaml").write_text("gateway: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigFileError):
            load_user_config()

    def test_non_mapping(self, user_config_home: Path) -> None:
        user_config_home.mkdir(parents=True)
        (user_config_home / "config.yaml").write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigFileError):
            load_user_config()


class TestSyncOptions:
    STORED = {"gateway": "192.168.1.1", "address": "10.0.0.1", "username": "admin"}

    def test_stored_values_are_defaults(self) -> None:
        options = SyncOptions.from_sources(self.STORED, domain="example.com")

        assert options.address == "10.0.0.1"
        assert options.username == "admin"
        assert options.gateway == "192.168.1.1"

    def test_flags_win_even_when_empty(self) -> None:
        options = SyncOptions.from_sources(self.STORED, username="", gateway="eth1")

        assert options.username == ""
        assert options.gateway == "eth1"

    def test_update_implies_list(self) -> None:
        options = SyncOptions.from_sources({}, update=True)
        assert options.list_routes is True

    def test_missing_parameters_order(self) -> None:
        options = SyncOptions.from_sources({}, username="testuser")
        assert options.missing_parameters() == ["domain", "address", "password", "gateway"]

    def test_list_mode_needs_no_domain_or_gateway(self) -> None:
        options = SyncOptions.from_sources({}, address="10.0.0.1", username="admin", password="x", list_routes=True)
        assert options.missing_parameters() == []

    def test_complete(self) -> None:
        options = SyncOptions.from_sources(self.STORED, domain="example.com", password="secret")
        assert options.missing_parameters() == []

    def test_password_never_persisted(self) -> None:
        options = SyncOptions.from_sources(self.STORED, password="secret")
        assert options.persisted_values() == self.STORED
        assert "secret" not in repr(options)

    def test_with_password(self) -> None:
        options = SyncOptions.from_sources(self.STORED).with_password("secret")
        assert options.password == "secret"
