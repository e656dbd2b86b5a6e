"""Tests for keyset pagination."""

import pytest
from catalogue.category.category import Category
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from shared.pagination import paginate


def _categories():
    return current_domain.repository_for(Category)._dao.query


def _collect_all(limit):
    seen = []
    cursor = None
    pages = 0
    while True:
        page = paginate(_categories(), limit, cursor)
        seen.extend(category.name for category in page.items)
        pages += 1
        if page.next_cursor is None:
            return seen, pages
        cursor = page.next_cursor


class TestPaginate:
    def test_empty_table_yields_empty_page(self):
        page = paginate(_categories(), 10)
        assert page.items == []
        assert page.next_cursor is None

    def test_single_page_has_no_cursor(self, create_category):
        for i in range(3):
            create_category(f"Genre {i}")

        page = paginate(_categories(), 3)
        assert len(page.items) == 3
        assert page.next_cursor is None

    def test_cursor_is_key_of_first_row_of_next_page(self, create_category):
        for i in range(4):
            create_category(f"Genre {i}")

        first = paginate(_categories(), 2)
        second = paginate(_categories(), 2, first.next_cursor)

        assert first.next_cursor is not None
        assert second.items[0].id == first.next_cursor

    def test_pages_are_ordered_by_key(self, create_category):
        for i in range(5):
            create_category(f"Genre {i}")

        page = paginate(_categories(), 5)
        ids = [category.id for category in page.items]
        assert ids == sorted(ids)

    @pytest.mark.parametrize("limit", [1, 2, 3, 7])
    def test_walking_every_page_sees_each_row_exactly_once(self, create_category, limit):
        names = {f"Genre {i}" for i in range(7)}
        for name in names:
            create_category(name)

        seen, pages = _collect_all(limit)

        assert sorted(seen) == sorted(names)
        assert len(seen) == len(set(seen))
        assert pages == -(-len(names) // limit)

    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            paginate(_categories(), 0)
        assert "limit" in exc.value.messages
