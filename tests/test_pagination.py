import pytest

from bookstore.utils.pagination import page_to_limit_offset


class TestPagination:
    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            (1, 5, (5, 0)),
            (3, 5, (5, 10)),
            (2, 20, (20, 20)),
            (0, 5, (5, 0)),
            (-4, 5, (5, 0)),
            (1, 0, (1, 0)),
            (2, 1000, (100, 100)),
        ],
    )
    def test_page_to_limit_offset(self, page, limit, expected):
        assert page_to_limit_offset(page, limit) == expected

    def test_custom_max_limit(self):
        assert page_to_limit_offset(1, 50, max_limit=10) == (10, 0)
