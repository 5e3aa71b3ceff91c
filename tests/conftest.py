"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from tests.helpers.env import OPTIONAL_ENV, SERVICE_ENV


@pytest.fixture
def service_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Set every required variable and clear the optional ones."""
    for name, value in SERVICE_ENV.items():
        monkeypatch.setenv(name, value)
    for name in OPTIONAL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def health_only_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove the signing secret so the runtime starts health-only."""
    monkeypatch.delenv("ISSUEGATE_SLACK_SIGNING_SECRET", raising=False)
    return monkeypatch
