from __future__ import annotations

from unittest import mock

import pytest
import requests

from comments_widget.exceptions import TransportError
from comments_widget.http import ApiResponse, RequestsTransport


def make_response(status: int, body: bytes = b"") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    return response


@pytest.fixture
def session() -> mock.Mock:
    return mock.Mock(spec=requests.Session)


def test_request_resolves_url_and_sends_json_with_token(session: mock.Mock) -> None:
    session.request.return_value = make_response(201, b'{"id": 3}')
    transport = RequestsTransport("https://blog.example.com/", token="abc", session=session)

    result = transport.request("POST", "/api/comments", {"content": "Hello world"})

    assert result == ApiResponse(201, {"id": 3})
    assert result.ok is True
    session.request.assert_called_once_with(
        "POST",
        "https://blog.example.com/api/comments",
        json={"content": "Hello world"},
        headers={"Accept": "application/json", "Authorization": "Bearer abc"},
        timeout=10.0,
    )


def test_absolute_next_links_are_kept(session: mock.Mock) -> None:
    session.request.return_value = make_response(200, b"{}")
    transport = RequestsTransport("https://blog.example.com/", session=session)

    transport.request("GET", "https://api.example.com/api/comments?page=2")

    args, kwargs = session.request.call_args
    assert args[1] == "https://api.example.com/api/comments?page=2"
    assert "Authorization" not in kwargs["headers"]


def test_empty_body_decodes_to_none(session: mock.Mock) -> None:
    session.request.return_value = make_response(204)
    transport = RequestsTransport("https://blog.example.com/", session=session)

    assert transport.request("DELETE", "/api/comments/3") == ApiResponse(204, None)


def test_non_json_body_is_returned_as_text(session: mock.Mock) -> None:
    session.request.return_value = make_response(502, b"Bad gateway")
    transport = RequestsTransport("https://blog.example.com/", session=session)

    response = transport.request("GET", "/api/comments?post=1")

    assert response == ApiResponse(502, "Bad gateway")
    assert response.ok is False


def test_network_errors_raise_transport_error(session: mock.Mock) -> None:
    session.request.side_effect = requests.ConnectionError("refused")
    transport = RequestsTransport("https://blog.example.com/", session=session)

    with pytest.raises(TransportError):
        transport.request("GET", "/api/comments?post=1")
