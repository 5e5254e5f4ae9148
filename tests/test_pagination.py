"""Tests for the pagination helper."""

import pytest

from park_core.exceptions import ConfigError
from park_core.reporting import page_count, paginate


class TestPaginate:
    @pytest.fixture
    def items(self) -> list:
        return list(range(25))

    def test_first_page(self, items) -> None:
        page = paginate(items, page_size=10, page_number=1)
        assert page.items == tuple(range(10))
        assert page.total_pages == 3
        assert page.total_items == 25
        assert page.has_next
        assert not page.has_previous

    def test_page_past_the_end_is_clamped_to_last(self, items) -> None:
        page = paginate(items, page_size=10, page_number=5)
        assert page.page_number == 3
        assert page.items == (20, 21, 22, 23, 24)
        assert not page.has_next

    def test_page_below_one_is_clamped_to_first(self, items) -> None:
        assert paginate(items, 10, 0).page_number == 1
        assert paginate(items, 10, -4).items == tuple(range(10))

    def test_empty_collection_has_one_empty_page(self) -> None:
        page = paginate([], page_size=10, page_number=2)
        assert page.page_number == 1
        assert page.total_pages == 1
        assert page.items == ()

    @pytest.mark.parametrize("size", [0, -1])
    def test_non_positive_page_size(self, items, size) -> None:
        with pytest.raises(ConfigError):
            paginate(items, page_size=size)


def test_page_count() -> None:
    assert page_count(0) == 1
    assert page_count(10) == 1
    assert page_count(11) == 2
