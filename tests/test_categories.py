import pytest

from torznab_client.categories import CATEGORY_TV, CATEGORY_TV_HD, PARENT_CATEGORIES, parent_category
from torznab_client.cli import _format_categories


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (CATEGORY_TV_HD, CATEGORY_TV),
        ("2045", "2000"),
        ("5000", "5000"),
        ("100001", "100001"),
        ("abc", "abc"),
    ],
)
def test_parent_category(category, expected):
    assert parent_category(category) == expected


def test_parent_names():
    assert PARENT_CATEGORIES[parent_category(CATEGORY_TV_HD)] == "TV"


def test_format_categories():
    assert _format_categories(["5040", "100001"]) == "5040 (TV), 100001"
