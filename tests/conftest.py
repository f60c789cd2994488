"""Shared fixtures for the rose-rocket test suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from rose_rocket.config import Config, Settings, TenantConfig


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        token_endpoint="https://auth.roserocket.com/oauth2/token",
        default_base_url="https://platform.roserocket.com",
        max_retries=3,
        retry_delay=0.0,
        retry_jitter=0.0,
        page_limit=50,
        timeout=5.0,
    )


@pytest.fixture
def fake_tenants() -> dict[str, TenantConfig]:
    return {
        "Acme": TenantConfig(
            tenant_id="Acme",
            username="dispatch@acme.example",
            password="acme-pass",
            client_id="acme-client",
            client_secret="acme-secret",
            subdomain="acme",
        ),
        "Starlight": TenantConfig(
            tenant_id="Starlight",
            username="ops@starlight.example",
            password="star-pass",
            client_id="star-client",
            client_secret="star-secret",
        ),
    }


@pytest.fixture
def fake_config(fake_settings, fake_tenants) -> Config:
    return Config(settings=fake_settings, tenants=fake_tenants)


@pytest.fixture
def mock_client(fake_config):
    """MagicMock standing in for RoseRocketClient."""
    client = MagicMock()
    client.config = fake_config
    client.get = MagicMock()
    client.post = MagicMock()
    client.put = MagicMock()
    client.delete = MagicMock()
    client.close = MagicMock()
    return client

