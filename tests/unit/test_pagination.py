from vagasrmc.core.catalog import clamp_pagination
from vagasrmc.types import Page


def test_limit_is_clamped_to_maximum() -> None:
    assert clamp_pagination(1, 500, default=20, maximum=50) == (1, 50)


def test_page_below_one_is_clamped() -> None:
    assert clamp_pagination(0, 10, default=20, maximum=50) == (1, 10)
    assert clamp_pagination(-3, None, default=20, maximum=50) == (1, 20)


def test_non_positive_limit_becomes_one() -> None:
    assert clamp_pagination(2, 0, default=20, maximum=50) == (2, 1)


def test_total_pages_is_ceiling() -> None:
    assert Page(items=[], page=1, limit=20, total=41).total_pages == 3
    assert Page(items=[], page=1, limit=20, total=40).total_pages == 2
    assert Page(items=[], page=1, limit=20, total=0).total_pages == 0


def test_pagination_dict() -> None:
    assert Page(items=[], page=2, limit=10, total=15).pagination() == {
        "page": 2,
        "limit": 10,
        "total": 15,
        "total_pages": 2,
    }


def test_huge_page_keeps_offset_within_sqlite_integer() -> None:
    page, limit = clamp_pagination(10**18, 50, default=20, maximum=50)
    assert (page - 1) * limit <= 2**63 - 1
    assert page > 1
