import pytest

from bottlematch.config import NO_IMAGE
from bottlematch.errors import MalformedCatalogEntry
from bottlematch.indexer import collation_key, index_catalog


def test_index_catalog_lowercases_and_sorts_by_name(raw_catalog):
    catalog = index_catalog(raw_catalog)

    assert [e.name for e in catalog] == [
        "aged blue rum 700ml deluxe",
        "blue bottle rum 700ml",
        "blue bottle rum gift set 700ml",
        "green bottle gin 1l",
    ]
    assert len(catalog) == 4
    assert catalog.skipped_count == 0


def test_index_catalog_copies_id_price_and_defaults_image(raw_catalog):
    by_id = {e.id: e for e in index_catalog(raw_catalog)}

    assert by_id["3"].price == 80.0
    assert by_id["3"].image == "https://img/3.jpg"
    assert by_id["1"].image == NO_IMAGE
    assert by_id["7"].image == NO_IMAGE


def test_index_catalog_accepts_search_hits_and_numeric_ids():
    catalog = index_catalog([
        {"_id": 42, "_source": {"name": "Rare Rum", "price": 10, "imageUrl": "x.jpg"}},
    ])
    entry = catalog[0]
    assert entry.id == "42"
    assert entry.name == "rare rum"
    assert entry.price == 10.0
    assert entry.image == "x.jpg"


def test_index_catalog_custom_no_image_marker():
    catalog = index_catalog([{"id": "1", "name": "Rum", "price": 5}], no_image="none.png")
    assert catalog[0].image == "none.png"


def test_index_catalog_keeps_input_order_for_equal_names():
    catalog = index_catalog([
        {"id": "b", "name": "Same Bottle", "price": 2},
        {"id": "a", "name": "same bottle", "price": 1},
        {"id": "c", "name": "Another", "price": 3},
    ])
    assert [e.id for e in catalog] == ["c", "b", "a"]


def test_collation_key_folds_case_and_accents():
    names = ["fizz", "Éclat", "apple"]
    assert sorted(names, key=collation_key) == ["apple", "Éclat", "fizz"]


def test_index_catalog_skips_and_counts_malformed_records():
    raw = [
        {"id": "ok", "name": "Good Rum", "price": 10},
        {"id": "no-name", "price": 10},
        {"id": "blank", "name": "   ", "price": 10},
        {"id": "no-price", "name": "Rum"},
        {"id": "bad-price", "name": "Rum", "price": "cheap"},
        {"_id": "nan", "_source": {"name": "Rum", "price": float("nan")}},
        "not a record",
    ]
    catalog = index_catalog(raw)

    assert [e.id for e in catalog] == ["ok"]
    assert catalog.skipped_count == 6
    assert [s.position for s in catalog.skipped] == [1, 2, 3, 4, 5, 6]
    assert catalog.skipped[0].entry_id == "no-name"
    assert catalog.skipped[4].entry_id == "nan"
    assert catalog.skipped[5].entry_id is None
    assert "name" in catalog.skipped[0].reason


def test_index_catalog_strict_fails_whole_batch():
    raw = [
        {"id": "ok", "name": "Good Rum", "price": 10},
        {"id": "no-price", "name": "Rum"},
    ]
    with pytest.raises(MalformedCatalogEntry) as exc_info:
        index_catalog(raw, strict=True)

    assert exc_info.value.position == 1
    assert exc_info.value.entry_id == "no-price"


def test_index_catalog_empty_inputs():
    assert len(index_catalog([])) == 0
    assert len(index_catalog(None)) == 0
