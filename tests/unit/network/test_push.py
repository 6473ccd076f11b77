"""
Unit tests for the push notification client.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from homestay.network.push import MAX_RETRIES, send_push, should_retry


def _response(status_code: int, payload: dict | None = None) -> MagicMock:
    res = MagicMock(spec=requests.Response)
    res.status_code = status_code
    res.json.return_value = payload or {}
    if status_code >= 400:
        res.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return res


@pytest.mark.unit
def test_should_retry_on_rate_limit_and_server_errors() -> None:
    assert should_retry(_response(429), None)
    assert should_retry(_response(503), None)
    assert should_retry(None, requests.Timeout())


@pytest.mark.unit
def test_should_not_retry_client_errors() -> None:
    assert not should_retry(_response(400), None)
    assert not should_retry(None, requests.ConnectionError())


@pytest.mark.unit
@patch("homestay.network.push.requests.post")
def test_send_push_returns_ticket(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(200, {"data": {"status": "ok", "id": "ticket-1"}})

    ticket = send_push("ExponentPushToken[abc]", "Hi", "Body", {"booking_id": "b1"})

    assert ticket == {"status": "ok", "id": "ticket-1"}
    sent = mock_post.call_args.kwargs["json"]
    assert sent == {
        "to": "ExponentPushToken[abc]",
        "title": "Hi",
        "body": "Body",
        "data": {"booking_id": "b1"},
    }


@pytest.mark.unit
@patch("homestay.network.push.requests.post")
def test_error_ticket_raises(mock_post: MagicMock) -> None:
    mock_post.return_value = _response(
        200, {"data": [{"status": "error", "message": "DeviceNotRegistered"}]}
    )

    with pytest.raises(requests.RequestException, match="DeviceNotRegistered"):
        send_push("ExponentPushToken[gone]", "Hi", "Body")


@pytest.mark.unit
@patch("homestay.network.push.time.sleep")
@patch("homestay.network.push.requests.post")
def test_retries_server_errors_then_succeeds(mock_post: MagicMock, mock_sleep: MagicMock) -> None:
    mock_post.side_effect = [_response(502), _response(200, {"data": {"status": "ok"}})]

    assert send_push("tok", "Hi", "Body") == {"status": "ok"}
    assert mock_post.call_count == 2
    mock_sleep.assert_called_once()


@pytest.mark.unit
@patch("homestay.network.push.time.sleep")
@patch("homestay.network.push.requests.post")
def test_gives_up_after_max_retries(mock_post: MagicMock, mock_sleep: MagicMock) -> None:
    mock_post.return_value = _response(503)

    with pytest.raises(requests.HTTPError):
        send_push("tok", "Hi", "Body")

    assert mock_post.call_count == MAX_RETRIES + 1
