import pytest

from bottlematch.indexer import index_catalog
from bottlematch.matcher import Matcher, covered_keywords, match, required_matches
from bottlematch.models import IndexedEntry, NormalizedQuery


def _entry(name: str, entry_id: str = "1", price: float = 10.0) -> IndexedEntry:
    return IndexedEntry(id=entry_id, name=name, price=price, image="none")


def _query(*keywords: str) -> NormalizedQuery:
    return NormalizedQuery(keywords=keywords)


def test_required_matches_uses_ceiling():
    assert required_matches(5, 0.7) == 4
    assert required_matches(4, 0.7) == 3
    assert required_matches(3, 0.7) == 3
    assert required_matches(2, 0.7) == 2
    assert required_matches(1, 0.7) == 1
    assert required_matches(4, 0.5) == 2


def test_empty_query_matches_nothing(fruit_catalog):
    catalog = index_catalog(fruit_catalog)
    assert match(NormalizedQuery(), catalog) == []
    assert Matcher().is_match(NormalizedQuery(), catalog[0]) is False


def test_four_of_five_keywords_is_a_match():
    catalog = [_entry("blue bottle rum 700ml")]
    query = _query("blue", "bottle", "rum", "700ml", "deluxe")
    assert match(query, catalog) == catalog


def test_one_of_five_keywords_is_not_a_match():
    catalog = [_entry("blue bottle rum 700ml")]
    query = _query("blue", "deluxe", "extra", "rare", "aged")
    assert match(query, catalog) == []


def test_keyword_coverage_is_substring_containment():
    assert covered_keywords(["bottl", "12", "gin"], ["bottle", "1200ml"]) == ["bottl", "12"]


def test_keyword_counted_once_even_if_several_tokens_contain_it():
    assert covered_keywords(["rum"], ["rum", "rum", "rumble"]) == ["rum"]


def test_duplicate_keywords_are_counted_per_occurrence():
    assert covered_keywords(["rum", "rum", "gin"], ["dark", "rum"]) == ["rum", "rum"]


def test_match_preserves_catalog_order(fruit_catalog):
    catalog = index_catalog(fruit_catalog)
    # "a" is covered by every name, "an" only by banana
    query = _query("a", "an")
    matched = Matcher(min_match_ratio=0.5).match(query, catalog)
    assert [e.name for e in matched] == ["apple", "banana"]

    everything = Matcher(min_match_ratio=0.1).match(_query("e", "a", "y"), catalog)
    assert [e.name for e in everything] == ["apple", "banana", "cherry"]


def test_lower_ratio_admits_more_entries():
    catalog = [_entry("blue bottle rum", "1"), _entry("blue gin", "2")]
    query = _query("blue", "bottle", "rum")
    assert [e.id for e in Matcher(0.7).match(query, catalog)] == ["1"]
    assert [e.id for e in Matcher(0.3).match(query, catalog)] == ["1", "2"]


def test_match_is_deterministic(raw_catalog):
    catalog = index_catalog(raw_catalog)
    query = _query("blue", "bottle", "rum", "700ml")
    first = match(query, catalog)
    second = match(query, catalog)
    assert [e.model_dump() for e in first] == [e.model_dump() for e in second]


@pytest.mark.parametrize("ratio", [0, -0.1, 1.5])
def test_matcher_rejects_ratio_out_of_range(ratio):
    with pytest.raises(ValueError):
        Matcher(min_match_ratio=ratio)
