"""Pytest fixtures shared by the suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests.fakes import FakeApi, FakeRouteResource


@pytest.fixture
def route_resource() -> FakeRouteResource:
    return FakeRouteResource()


@pytest.fixture
def fake_api(route_resource: FakeRouteResource) -> FakeApi:
    return FakeApi(route_resource)


@pytest.fixture
def user_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the per-user config dir at a temp directory."""

    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path / "routesync"
