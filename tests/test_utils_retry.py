"""Tests for utils/retry.py — backoff schedule and retry classification."""
from unittest.mock import MagicMock, patch

import httpx
import pytest

from rose_rocket.utils.errors import NetworkError, RequestFailed
from rose_rocket.utils.retry import backoff_delay, call_with_retry


def _resp(status_code=200, text=""):
    r = MagicMock(spec=httpx.Response)
    r.status_code = status_code
    r.text = text
    return r


def test_backoff_doubles_without_jitter():
    assert [backoff_delay(n, 1.0, 0.0) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]


def test_backoff_jitter_bounded():
    with patch("rose_rocket.utils.retry.random.uniform", return_value=0.5) as uniform:
        assert backoff_delay(1, 1.0, 1.0) == 2.5
    uniform.assert_called_once_with(0, 1.0)


def test_returns_first_success():
    send = MagicMock(side_effect=[_resp(500), _resp(201)])
    sleeps = []

    result = call_with_retry(send, 3, retry_delay=1.0, jitter=0.0, sleep=sleeps.append)
    assert result.status_code == 201
    assert sleeps == [2.0]


def test_server_errors_use_whole_budget():
    send = MagicMock(return_value=_resp(503, "down"))
    sleeps = []

    with pytest.raises(RequestFailed) as exc:
        call_with_retry(send, 3, retry_delay=1.0, jitter=0.0, sleep=sleeps.append)
    assert send.call_count == 3
    assert sleeps == [2.0, 4.0]
    assert exc.value.retryable is True


def test_client_error_not_retried():
    send = MagicMock(return_value=_resp(400, "bad"))
    sleeps = []

    with pytest.raises(RequestFailed) as exc:
        call_with_retry(send, 3, sleep=sleeps.append)
    assert send.call_count == 1
    assert sleeps == []
    assert exc.value.retryable is False


def test_redirect_status_is_failure():
    send = MagicMock(return_value=_resp(302))
    with pytest.raises(RequestFailed):
        call_with_retry(send, 3, sleep=lambda s: None)
    assert send.call_count == 1


def test_transport_error_exhausts_budget():
    send = MagicMock(side_effect=httpx.ConnectTimeout("slow"))

    with pytest.raises(NetworkError, match="GET /x failed after 2 attempts"):
        call_with_retry(send, 2, sleep=lambda s: None, label="GET /x")
    assert send.call_count == 2


def test_zero_budget_still_makes_one_call():
    send = MagicMock(return_value=_resp(200))
    call_with_retry(send, 0, sleep=lambda s: None)
    assert send.call_count == 1
