"""Tests for cursor-based pagination traversal."""

import sys
from pathlib import Path
from unittest.mock import Mock

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ghyearbook.pagination import Page, page_info, walk_pages


def test_walk_pages_follows_cursor_until_last_page():
    """Verify pages are requested with the previous end cursor until hasNextPage is false."""
    fetch_page = Mock(
        side_effect=[
            Page(items=[1, 2], has_next_page=True, end_cursor="c1"),
            Page(items=[3], has_next_page=False, end_cursor="c2"),
        ]
    )

    assert walk_pages(fetch_page) == [1, 2, 3]
    assert [call.args[0] for call in fetch_page.call_args_list] == [None, "c1"]


def test_walk_pages_stops_when_cursor_missing():
    """Verify a page claiming more results but without a cursor ends the walk."""
    fetch_page = Mock(return_value=Page(items=["a"], has_next_page=True, end_cursor=None))

    assert walk_pages(fetch_page) == ["a"]
    assert fetch_page.call_count == 1


def test_walk_pages_treats_null_payload_as_empty():
    """Verify a null page ends the walk with the items gathered so far."""
    fetch_page = Mock(side_effect=[Page(items=[1], has_next_page=True, end_cursor="c1"), None])

    assert walk_pages(fetch_page) == [1]


def test_walk_pages_null_first_page_yields_nothing():
    """Verify a resource that is absent from the start produces zero items."""
    assert walk_pages(lambda cursor: None) == []


def test_walk_pages_respects_item_cap():
    """Verify accumulation stops at max_items without requesting further pages."""
    fetch_page = Mock(
        side_effect=[
            Page(items=list(range(60)), has_next_page=True, end_cursor="c1"),
            Page(items=list(range(60, 120)), has_next_page=True, end_cursor="c2"),
            Page(items=list(range(120, 180)), has_next_page=False, end_cursor=None),
        ]
    )

    items = walk_pages(fetch_page, max_items=100)

    assert items == list(range(100))
    assert fetch_page.call_count == 2


def test_page_info_tolerates_missing_page_info():
    """Verify a connection without pageInfo reports no further pages."""
    assert page_info({}) == (False, None)
    assert page_info({"pageInfo": {"hasNextPage": True, "endCursor": "x"}}) == (True, "x")
