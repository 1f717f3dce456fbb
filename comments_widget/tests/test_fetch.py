from __future__ import annotations

import pytest

from comments_widget.exceptions import ApiError, TransportError
from comments_widget.fetch import PaginatedFetcher, ResourceFetcher, extract_field_errors
from comments_widget.http import ApiResponse

from .fakes import FakeTransport, comment_payload, page_payload

BASE = "/api/comments?post=42"
PAGE_2 = "http://testserver/api/comments?page=2&post=42"
PAGE_3 = "http://testserver/api/comments?page=3&post=42"


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


# ---------------------------------------------------------------------------
# PaginatedFetcher
# ---------------------------------------------------------------------------


def test_load_walks_pages_and_deduplicates(transport: FakeTransport) -> None:
    transport.add(
        "GET", BASE, data=page_payload(
            [comment_payload(6), comment_payload(5)], count=5, next_url=PAGE_2
        )
    )
    # A comment created meanwhile shifts the pages: 5 shows up again.
    transport.add(
        "GET", PAGE_2, data=page_payload(
            [comment_payload(5), comment_payload(4)], count=6, next_url=PAGE_3
        )
    )
    transport.add(
        "GET", PAGE_3, data=page_payload([comment_payload(3)], count=6)
    )
    fetcher = PaginatedFetcher(transport, BASE)

    assert fetcher.has_more is False
    assert fetcher.load() is True
    assert [c.id for c in fetcher.items] == [6, 5]
    assert fetcher.has_more is True

    assert fetcher.load() is True
    assert fetcher.load() is True

    assert [c.id for c in fetcher.items] == [6, 5, 4, 3]
    assert fetcher.count == 6
    assert fetcher.has_more is False
    assert [url for _, url, _ in transport.calls] == [BASE, PAGE_2, PAGE_3]


def test_load_after_last_page_sends_nothing(transport: FakeTransport) -> None:
    transport.add("GET", BASE, data=page_payload([comment_payload(1)], count=1))
    fetcher = PaginatedFetcher(transport, BASE)

    assert fetcher.load() is True
    assert fetcher.load() is False
    assert len(transport.calls) == 1


def test_concurrent_load_is_ignored(transport: FakeTransport) -> None:
    fetcher = PaginatedFetcher(transport, BASE)
    nested_results: list[bool] = []

    def reply(_payload):
        # The host fires load() again while the first request is in flight.
        assert fetcher.loading is True
        nested_results.append(fetcher.load())
        return ApiResponse(200, page_payload([comment_payload(1)], count=1))

    transport.queue("GET", BASE, reply)

    assert fetcher.load() is True
    assert nested_results == [False]
    assert [c.id for c in fetcher.items] == [1]
    assert fetcher.loading is False
    assert len(transport.calls) == 1


def test_failed_load_keeps_state_and_can_be_retried(transport: FakeTransport) -> None:
    transport.queue("GET", BASE, TransportError("connection refused"))
    transport.add("GET", BASE, status=503, data={"detail": "maintenance"})
    transport.add("GET", BASE, data=page_payload([comment_payload(1)], count=1))
    fetcher = PaginatedFetcher(transport, BASE)

    assert fetcher.load() is False
    assert fetcher.loading is False
    assert fetcher.items == ()

    assert fetcher.load() is False
    assert fetcher.items == ()

    assert fetcher.load() is True
    assert [c.id for c in fetcher.items] == [1]


def test_malformed_page_is_dropped_and_can_be_retried(transport: FakeTransport) -> None:
    transport.add("GET", BASE, data=page_payload([{"id": 1}], count=1))
    transport.add("GET", BASE, data=page_payload([comment_payload(1)], count=1))
    fetcher = PaginatedFetcher(transport, BASE)

    assert fetcher.load() is False
    assert fetcher.loading is False
    assert fetcher.items == ()
    assert fetcher.has_more is False

    assert fetcher.load() is True
    assert [c.id for c in fetcher.items] == [1]


def test_items_can_be_replaced(transport: FakeTransport) -> None:
    fetcher = PaginatedFetcher(transport, BASE)
    fetcher.items = []
    assert fetcher.items == ()


# ---------------------------------------------------------------------------
# ResourceFetcher
# ---------------------------------------------------------------------------


def test_success_invokes_callback_with_resource(transport: FakeTransport) -> None:
    created = comment_payload(7)
    transport.add("POST", "/api/comments", status=201, data=created)
    received = []
    fetcher = ResourceFetcher(transport, "/api/comments", "post", received.append)

    result = fetcher.load({"content": "Hello world", "post": 42})

    assert result == created
    assert received == [created]
    assert transport.calls == [("POST", "/api/comments", {"content": "Hello world", "post": 42})]
    assert fetcher.loading is False


def test_delete_success_passes_none(transport: FakeTransport) -> None:
    transport.add("DELETE", "/api/comments/7", status=204)
    received = []
    fetcher = ResourceFetcher(transport, "/api/comments/7", "DELETE", received.append)

    assert fetcher.load() is None
    assert received == [None]


def test_validation_failure_fills_errors_without_raising(transport: FakeTransport) -> None:
    transport.add(
        "PUT",
        "/api/comments/7",
        status=400,
        data={"content": ["Trop court.", "Autre."], "post": ["Requis."]},
    )
    received = []
    fetcher = ResourceFetcher(transport, "/api/comments/7", "PUT", received.append)

    assert fetcher.load({"content": "abc"}) is None
    assert fetcher.errors == {"content": "Trop court.", "post": "Requis."}
    assert received == []

    fetcher.clear_error("content")
    assert fetcher.errors == {"post": "Requis."}
    fetcher.clear_error("unknown")
    assert fetcher.errors == {"post": "Requis."}


def test_success_clears_previous_errors(transport: FakeTransport) -> None:
    transport.add("PUT", "/api/comments/7", status=422, data={"content": "Trop court."})
    transport.add("PUT", "/api/comments/7", data=comment_payload(7))
    fetcher = ResourceFetcher(transport, "/api/comments/7", "PUT")

    fetcher.load({"content": "abc"})
    assert fetcher.errors == {"content": "Trop court."}

    fetcher.load({"content": "Long enough"})
    assert fetcher.errors == {}


def test_other_failures_raise_api_error(transport: FakeTransport) -> None:
    transport.add("DELETE", "/api/comments/7", status=403, data={"detail": "Nope"})
    fetcher = ResourceFetcher(transport, "/api/comments/7", "DELETE")

    with pytest.raises(ApiError) as ctx:
        fetcher.load()

    assert ctx.value.status_code == 403
    assert fetcher.errors == {}
    assert fetcher.loading is False


def test_load_while_loading_is_ignored(transport: FakeTransport) -> None:
    fetcher = ResourceFetcher(transport, "/api/comments", "POST")
    nested = []

    def reply(_payload):
        nested.append(fetcher.load({"content": "Again!"}))
        return ApiResponse(201, comment_payload(1))

    transport.queue("POST", "/api/comments", reply)
    fetcher.load({"content": "Hello world"})

    assert nested == [None]
    assert len(transport.calls) == 1


def test_extract_field_errors_understands_violations() -> None:
    data = {
        "violations": [
            {"propertyPath": "content", "message": "Trop court."},
            {"propertyPath": "content", "message": "Second message."},
            {"message": "Global."},
        ]
    }
    assert extract_field_errors(data) == {
        "content": "Trop court.",
        "non_field_errors": "Global.",
    }
