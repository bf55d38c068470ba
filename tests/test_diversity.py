"""Tests for the consecutive-author cap."""
import pytest

from fakes import make_item
from tangofeed.ranking.diversity import limit_consecutive
from tangofeed.schemas import ScoredItem


def _scored(authors: str) -> list[ScoredItem]:
    """One ScoredItem per character, author id = ord(char), descending scores."""
    return [
        ScoredItem(make_item(author_id=ord(a)), float(len(authors) - i))
        for i, a in enumerate(authors)
    ]


def _authors(items: list[ScoredItem]) -> str:
    return "".join(chr(s.item.author_id) for s in items)


def _longest_run_ok(result: list[ScoredItem], cap: int) -> bool:
    """No run longer than cap unless no other author remained afterwards."""
    authors = [s.item.author_id for s in result]
    run = 1
    for i in range(1, len(authors)):
        run = run + 1 if authors[i] == authors[i - 1] else 1
        if run > cap and any(a != authors[i] for a in authors[i:]):
            return False
    return True


def test_single_author_keeps_everything_in_order():
    items = _scored("AAAAA")
    result = limit_consecutive(items, 3)
    assert result == items


def test_alternate_author_is_pulled_forward():
    assert _authors(limit_consecutive(_scored("AAAAB"), 3)) == "AAABA"


def test_displaced_items_return_after_the_break():
    assert _authors(limit_consecutive(_scored("AAAAAABB"), 3)) == "AAABAAAB"


def test_run_may_exceed_cap_once_alternatives_run_out():
    result = limit_consecutive(_scored("AAAABAAAA"), 3)
    assert _authors(result) == "AAABAAAAA"
    assert _longest_run_ok(result, 3)


def test_lists_already_within_cap_are_untouched():
    items = _scored("AABBAACCA")
    assert limit_consecutive(items, 3) == items


@pytest.mark.parametrize(
    "authors",
    ["", "A", "AB", "AAAAAAAAAABBBBBBBBBB", "AAAABBBBCCCCAAAA", "ABAAAAAACAAAAAA", "CCCCCCCCCCCA"],
)
@pytest.mark.parametrize("cap", [1, 2, 3])
def test_never_drops_and_respects_cap(authors, cap):
    items = _scored(authors)
    result = limit_consecutive(items, cap)

    assert len(result) == len(items)
    assert sorted(id(s) for s in result) == sorted(id(s) for s in items)
    assert _longest_run_ok(result, cap)


def test_same_author_keeps_relative_order():
    items = _scored("AAAAABBBBB")
    result = limit_consecutive(items, 2)
    a_items = [s for s in result if chr(s.item.author_id) == "A"]
    assert a_items == [s for s in items if chr(s.item.author_id) == "A"]


def test_custom_author_key():
    result = limit_consecutive([1, 1, 1, 2], 2, author_of=lambda x: x)
    assert result == [1, 1, 2, 1]


def test_cap_must_be_positive():
    with pytest.raises(ValueError):
        limit_consecutive(_scored("AB"), 0)
