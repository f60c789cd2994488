"""Tests for utils/envelope.py — per-endpoint response unwrapping."""
import pytest

from rose_rocket.utils.envelope import ENVELOPES, dig, unwrap
from rose_rocket.utils.errors import ParseError


def test_dig_nested():
    assert dig({"data": {"payment": {"id": 1}}}, ("data", "payment")) == {"id": 1}


def test_dig_miss_returns_none():
    assert dig({"data": []}, ("data", "payment")) is None


def test_dig_empty_path_returns_payload():
    assert dig([1, 2], ()) == [1, 2]


def test_order_envelope():
    assert unwrap({"order": {"id": "o-1"}}, "orders.get") == {"id": "o-1"}


def test_order_without_envelope_is_parse_error():
    with pytest.raises(ParseError, match="orders.get"):
        unwrap({"id": "o-1"}, "orders.get")


def test_created_order_falls_back_to_bare_object():
    assert unwrap({"id": "o-2"}, "orders.create") == {"id": "o-2"}


def test_payment_envelope_and_fallback():
    assert unwrap({"data": {"payment": {"total": 10}}}, "manifests.payment") == {"total": 10}
    assert unwrap({"total": 10}, "manifests.payment") == {"total": 10}


def test_equipment_is_bare_array():
    assert unwrap([{"type": "vehicle"}], "manifests.equipment") == [{"type": "vehicle"}]


def test_equipment_object_is_parse_error():
    with pytest.raises(ParseError):
        unwrap({"equipment": []}, "manifests.equipment")


def test_stops_missing_is_empty():
    assert unwrap({"data": {}}, "manifests.stops") == []


def test_stops_wrong_type_is_parse_error():
    with pytest.raises(ParseError):
        unwrap({"data": {"stops": "none"}}, "manifests.stops")


def test_two_stage_orders_missing_is_empty():
    assert unwrap({}, "orders.two_stage") == []


def test_assignees_data_array():
    assert unwrap({"data": [{"id": "d-1"}]}, "manifests.assignees") == [{"id": "d-1"}]


def test_customer_requires_envelope():
    with pytest.raises(ParseError):
        unwrap({"id": "c-1"}, "customers.get")


def test_unknown_endpoint_key():
    with pytest.raises(KeyError):
        unwrap({}, "nope.nothing")


def test_every_envelope_has_a_container_type():
    for env in ENVELOPES.values():
        assert env.expect in (dict, list)
