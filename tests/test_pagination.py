import pytest

from fakes import make_item
from tangofeed.errors import InvalidPagination
from tangofeed.ranking.pagination import paginate


@pytest.fixture
def ranked():
    return [make_item() for _ in range(45)]


def test_first_page(ranked):
    page = paginate(ranked, limit=20, offset=0)
    assert page.items == ranked[:20]
    assert page.next_offset == 20
    assert page.has_more is True


def test_last_partial_page(ranked):
    page = paginate(ranked, limit=20, offset=40)
    assert page.items == ranked[40:]
    assert len(page.items) == 5
    assert page.next_offset is None
    assert page.has_more is False


def test_exact_end_has_no_more():
    items = [make_item() for _ in range(40)]
    page = paginate(items, limit=20, offset=20)
    assert len(page.items) == 20
    assert page.has_more is False
    assert page.next_offset is None


def test_offset_past_end_is_empty_not_error(ranked):
    page = paginate(ranked, limit=20, offset=100)
    assert page.items == []
    assert page.next_offset is None
    assert page.has_more is False


def test_empty_list():
    page = paginate([], limit=20, offset=0)
    assert page.items == [] and page.next_offset is None and not page.has_more


def test_same_arguments_same_page(ranked):
    assert paginate(ranked, 7, 14) == paginate(ranked, 7, 14)


@pytest.mark.parametrize("limit", [1, 7, 20, 45, 60])
def test_following_cursor_rebuilds_the_list_once(ranked, limit):
    collected = []
    offset = 0
    while True:
        page = paginate(ranked, limit, offset)
        collected.extend(page.items)
        if not page.has_more:
            break
        offset = page.next_offset

    assert [i.id for i in collected] == [i.id for i in ranked]


@pytest.mark.parametrize("limit,offset", [(-1, 0), (20, -1), (-5, -5)])
def test_negative_arguments_rejected(ranked, limit, offset):
    with pytest.raises(InvalidPagination):
        paginate(ranked, limit, offset)


def test_serialises_with_cursor_aliases(ranked):
    payload = paginate(ranked, 20, 0).model_dump(by_alias=True)
    assert payload["nextOffset"] == 20
    assert payload["hasMore"] is True
    assert len(payload["items"]) == 20
