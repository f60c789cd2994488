"""CLI tests for manifests, customers, address-books and webhook command groups."""
import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from rose_rocket.commands.customers_cmd import address_books_app
from rose_rocket.commands.manifests_cmd import app
from rose_rocket.main import app as root_app
from rose_rocket.utils.errors import ConfigMissing, InvalidInput, RequestFailed

runner = CliRunner()


def _patch_client(service):
    client = MagicMock()
    return patch("rose_rocket.commands.manifests_cmd._build_client", return_value=(client, service)), client


# ── manifests ────────────────────────────────────────────────────────

def test_get_manifest():
    svc = MagicMock()
    svc.get.return_value = {"id": "m-1", "status": "dispatched"}
    p, client = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["get", "m-1", "-t", "Acme"])
    assert result.exit_code == 0
    assert json.loads(result.output)["status"] == "dispatched"
    client.close.assert_called_once()


def test_equipment_reports_truck_and_trailer():
    svc = MagicMock()
    svc.get_equipment.return_value = [
        {"equipment_type": {"name": "Vehicle"}, "equipment": {"name": "T-101"}},
        {"equipment_type": {"name": "Trailer"}, "equipment": {"name": "TR-55"}},
    ]
    p, _ = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["equipment", "m-1", "-t", "Acme", "-o", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["truck"] == "T-101"
    assert data["trailer"] == "TR-55"


def test_stops_table():
    svc = MagicMock()
    svc.get_stops.return_value = [{"id": "s-1", "type": "pickup", "status": "done", "sequence": 1}]
    p, _ = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["stops", "m-1", "-t", "Acme"])
    assert result.exit_code == 0


def test_assignees_and_tags():
    svc = MagicMock()
    svc.get_assignees.return_value = [{"id": "d-1"}]
    svc.get_tags.return_value = [{"name": "hazmat"}]
    p, _ = _patch_client(svc)

    with p:
        assert runner.invoke(app, ["assignees", "m-1", "-t", "Acme", "-o", "json"]).exit_code == 0
        assert runner.invoke(app, ["tags", "m-1", "-t", "Acme", "-o", "json"]).exit_code == 0
    svc.get_assignees.assert_called_once_with("Acme", "m-1")
    svc.get_tags.assert_called_once_with("Acme", "m-1")


def test_payment_failure():
    svc = MagicMock()
    svc.get_payment.side_effect = RequestFailed(403, "forbidden")
    p, _ = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["payment", "m-1", "-t", "Acme"])
    assert result.exit_code == 1
    assert "Forbidden" in result.output


def test_upsert_payment(tmp_path):
    body = tmp_path / "items.json"
    body.write_text(json.dumps({"payment_items": [{"amount": 10}]}))
    svc = MagicMock()
    svc.upsert_payment_items.return_value = {"data": {}}
    p, _ = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["upsert-payment", "m-1", "-t", "Acme", "-b", str(body)])
    assert result.exit_code == 0
    svc.upsert_payment_items.assert_called_once_with("Acme", "m-1", {"payment_items": [{"amount": 10}]})


def test_upsert_payment_dry_run(tmp_path):
    body = tmp_path / "items.json"
    body.write_text(json.dumps({"payment_items": []}))
    svc = MagicMock()
    p, _ = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["upsert-payment", "m-1", "-t", "Acme", "-b", str(body), "--dry-run"])
    assert result.exit_code == 0
    assert "DRY RUN" in result.output
    svc.upsert_payment_items.assert_not_called()


def test_upsert_payment_invalid_body():
    svc = MagicMock()
    svc.upsert_payment_items.side_effect = InvalidInput('Payment body must contain a "payment_items" list')
    p, _ = _patch_client(svc)

    with p:
        result = runner.invoke(app, ["upsert-payment", "m-1", "-t", "Acme", "-b", "-"], input="{}")
    assert result.exit_code == 1
    assert "INVALID_INPUT" in result.output


# ── customers / address books ────────────────────────────────────────

def test_customer_get(mock_client):
    mock_client.get.return_value = {"customer": {"id": "c-1", "name": "Acme Imports"}}

    with patch("rose_rocket.commands.customers_cmd._build_client", return_value=mock_client):
        result = runner.invoke(root_app, ["customers", "get", "c-1", "-t", "Acme"])
    assert result.exit_code == 0
    assert json.loads(result.output)["name"] == "Acme Imports"
    mock_client.close.assert_called_once()


def test_address_book_names_only(mock_client):
    mock_client.get.return_value = {
        "data": {"address_books": [{"org_name": "Shipper SA"}, {"org_name": None}], "total": 2},
    }

    with patch("rose_rocket.commands.customers_cmd._build_client", return_value=mock_client):
        result = runner.invoke(
            address_books_app, ["search", "loc-1", "--names-only", "-t", "Acme", "-o", "csv"],
        )
    assert result.exit_code == 0
    assert "Shipper SA" in result.output
    assert "Unknown Organization" in result.output


# ── webhook check ────────────────────────────────────────────────────

def test_webhook_check_success(tmp_path):
    path = tmp_path / "delivery.json"
    path.write_text(json.dumps({
        "event": "order.status_updated", "current_status": "in-transit", "order_id": "o-1",
    }))
    result = runner.invoke(root_app, ["webhook", "check", str(path), "--status", "in-transit"])
    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["order_id"] == "o-1"


def test_webhook_check_rejected_from_stdin():
    payload = json.dumps({"event": "order.created", "current_status": "in-transit", "order_id": "o-1"})
    result = runner.invoke(root_app, ["webhook", "check", "-", "--status", "in-transit"], input=payload)
    assert result.exit_code == 1
    assert "Incorrect event type" in result.output


def test_webhook_check_bad_settings(tmp_path):
    path = tmp_path / "delivery.json"
    path.write_text(json.dumps({"event": "order.status_updated", "current_status": "in-transit", "order_id": "o-1"}))
    error = ConfigMissing("Invalid ROSE_ROCKET_* setting(s): webhook_status")

    with patch("rose_rocket.commands.webhook_cmd.load_settings", side_effect=error):
        result = runner.invoke(root_app, ["webhook", "check", str(path)])
    assert result.exit_code == 1
    assert "CONFIG_MISSING" in result.output


def test_address_book_org_names(mock_client):
    mock_client.get.return_value = {"data": {"address_books": [{"org_name": "Consignee LLC"}], "total": 1}}

    with patch("rose_rocket.commands.customers_cmd._build_client", return_value=mock_client):
        result = runner.invoke(address_books_app, ["org-names", "loc-1", "-t", "Acme", "-o", "json"])
    assert result.exit_code == 0
    assert "Consignee LLC" in result.output
