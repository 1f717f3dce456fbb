from __future__ import annotations

from comments_widget.models import Comment
from comments_widget.state import ItemState, merge_page, prepend, remove, replace, toggle

from .fakes import comment_payload


def make(comment_id: int, content: str = "Hello world") -> Comment:
    return Comment.from_api(comment_payload(comment_id, content=content))


def ids(items) -> list[int]:
    return [item.id for item in items]


def test_toggle_switches_between_view_and_edit() -> None:
    assert toggle(ItemState.VIEW) is ItemState.EDIT
    assert toggle(ItemState.EDIT) is ItemState.VIEW


def test_merge_page_appends_in_server_order_without_duplicates() -> None:
    items = (make(5), make(4))
    merged = merge_page(items, [make(4), make(3), make(2), make(3)])
    assert ids(merged) == [5, 4, 3, 2]


def test_merge_page_keeps_existing_copy_of_duplicate() -> None:
    first = make(4, content="Original")
    merged = merge_page((first,), [make(4, content="From page two")])
    assert merged[0] is first


def test_prepend_puts_new_comment_at_head_once() -> None:
    new = make(9)
    items = prepend((make(5), make(4)), new)
    assert ids(items) == [9, 5, 4]

    again = prepend(items, make(9, content="Replayed"))
    assert ids(again) == [9, 5, 4]


def test_remove_drops_by_id_and_keeps_relative_order() -> None:
    items = (make(5), make(4), make(3), make(2))
    result = remove(items, make(4, content="Other instance, same id"))
    assert ids(result) == [5, 3, 2]
    assert result[0] is items[0]
    assert result[1] is items[2]


def test_replace_swaps_in_place() -> None:
    items = (make(5), make(4), make(3))
    updated = make(4, content="Edited text")
    result = replace(items, updated, items[1])

    assert ids(result) == [5, 4, 3]
    assert result[1] is updated
    assert result[0] is items[0]
    assert result[2] is items[2]


def test_replace_unknown_id_is_a_no_op() -> None:
    items = (make(5), make(4))
    assert replace(items, make(7)) == items
