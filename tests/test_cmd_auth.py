"""CLI tests for auth and tenants command groups."""
import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from rose_rocket.commands.auth_cmd import app
from rose_rocket.main import app as root_app
from rose_rocket.models.auth import TokenStatus
from rose_rocket.utils.errors import ConfigMissing, TokenExchangeFailed, UnknownTenant

runner = CliRunner()


def _valid_status():
    return TokenStatus(
        tenant_id="Acme", has_token=True, is_expired=False,
        expires_at=datetime.now() + timedelta(hours=1),
        seconds_remaining=3600,
    )


# ── login ────────────────────────────────────────────────────────────

def test_login_success():
    auth = MagicMock()
    auth.get_access_token.return_value = "tok-abc"
    auth.get_status.return_value = _valid_status()

    with patch("rose_rocket.commands.auth_cmd.get_config"), \
         patch("rose_rocket.commands.auth_cmd.AuthManager", return_value=auth):
        result = runner.invoke(app, ["login", "--tenant", "Acme", "--output", "json"])
    assert result.exit_code == 0
    auth.get_access_token.assert_called_once_with("Acme")
    auth.close.assert_called_once()


def test_login_unknown_tenant():
    auth = MagicMock()
    auth.get_access_token.side_effect = UnknownTenant("Nowhere", ["Acme"])

    with patch("rose_rocket.commands.auth_cmd.get_config"), \
         patch("rose_rocket.commands.auth_cmd.AuthManager", return_value=auth):
        result = runner.invoke(app, ["login", "--tenant", "Nowhere"])
    assert result.exit_code == 1
    assert "UNKNOWN_TENANT" in result.output


def test_login_requires_tenant():
    result = runner.invoke(app, ["login"])
    assert result.exit_code != 0


def test_config_failure_exits_1():
    with patch("rose_rocket.commands.auth_cmd.get_config", side_effect=ConfigMissing("no tenants.yaml")):
        result = runner.invoke(app, ["status", "--tenant", "Acme"])
    assert result.exit_code == 1
    assert "CONFIG_MISSING" in result.output


# ── status ───────────────────────────────────────────────────────────

def test_status_no_token():
    auth = MagicMock()
    auth.get_status.return_value = TokenStatus(tenant_id="Acme", has_token=False, is_expired=True)

    with patch("rose_rocket.commands.auth_cmd.get_config"), \
         patch("rose_rocket.commands.auth_cmd.AuthManager", return_value=auth):
        result = runner.invoke(app, ["status", "--tenant", "Acme", "--output", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["has_token"] is False
    assert data["expires_at"] == "N/A"


# ── refresh ──────────────────────────────────────────────────────────

def test_refresh_forces_exchange():
    auth = MagicMock()
    auth.get_status.return_value = _valid_status()

    with patch("rose_rocket.commands.auth_cmd.get_config"), \
         patch("rose_rocket.commands.auth_cmd.AuthManager", return_value=auth):
        result = runner.invoke(app, ["refresh", "--tenant", "Acme"])
    assert result.exit_code == 0
    auth.get_access_token.assert_called_once_with("Acme", force_refresh=True)


def test_refresh_failure():
    auth = MagicMock()
    auth.get_access_token.side_effect = TokenExchangeFailed("Acme", 401, "invalid_grant")

    with patch("rose_rocket.commands.auth_cmd.get_config"), \
         patch("rose_rocket.commands.auth_cmd.AuthManager", return_value=auth):
        result = runner.invoke(app, ["refresh", "--tenant", "Acme"])
    assert result.exit_code == 1
    assert "TOKEN_EXCHANGE_FAILED" in result.output


# ── tenants list ─────────────────────────────────────────────────────

def test_tenants_list_hides_secrets(fake_config):
    with patch("rose_rocket.commands.tenants_cmd.get_config", return_value=fake_config):
        result = runner.invoke(root_app, ["tenants", "list", "--output", "json"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert [r["tenant"] for r in rows] == ["Acme", "Starlight"]
    assert rows[0]["base_url"] == "https://acme.roserocket.com"
    assert "acme-secret" not in result.output
    assert "acme-pass" not in result.output
