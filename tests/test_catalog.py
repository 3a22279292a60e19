import os

import pandas as pd
import pytest

from cardb.config import BASE_DIR
from cardb.reco.catalog import ListingsStore, load_catalog, normalize_columns, query_mask


def test_columns_are_mapped_to_the_listing_schema(sample_catalog_df):
    df = normalize_columns(sample_catalog_df.rename(columns={"make": "brand", "std_seating": "seats"}))
    assert {"make", "std_seating", "dealer.city"} <= set(df.columns)
    assert df["std_seating"].dtype.kind in "if"


def test_missing_required_columns():
    with pytest.raises(ValueError):
        normalize_columns(pd.DataFrame({"make": ["Kia"], "price": [1]}))


def test_moderation_defaults_when_absent():
    df = normalize_columns(pd.DataFrame({"make": ["Kia"], "model": ["Morning"], "price": ["300000000"]}))
    row = df.iloc[0]
    assert not row["verified"] and not row["isDeleted"]
    assert row["paymentStatus"] == "pending"
    assert row["id"] == "1"


def test_regex_is_case_insensitive_partial(store):
    found = store.find({"isDeleted": False, "model": {"$regex": "cr\\-v", "$options": "i"}})
    assert [c["model"] for c in found] == ["CR-V"]


def test_ranges_and_equality(store):
    q = {"isDeleted": False, "price": {"$gte": 500_000_000, "$lte": 1_000_000_000}, "fuel_type": "Gasoline"}
    assert sorted(c["model"] for c in store.find(q)) == ["CR-V", "City"]


def test_or_and_missing_values(store):
    q = {"$or": [{"highway_mpg": {"$gte": 30}}, {"city_mpg": {"$gte": 30}}]}
    models = {c["model"] for c in store.find(q)}
    assert "Fortuner" in models      # city 31
    assert "Carnival" not in models  # 20/20
    assert "VF 8" not in models      # no MPG data


def test_unknown_field_matches_nothing(store):
    assert store.find({"color": "red"}) == []


def test_unsupported_operator(sample_catalog_df):
    with pytest.raises(ValueError):
        query_mask(normalize_columns(sample_catalog_df), {"price": {"$where": "1"}})


def test_limit_and_projection(store):
    found = store.find({}, limit=3, projection=["make", "model", "price", "dealer.city", "nope"])
    assert len(found) == 3
    assert set(found[0]) == {"make", "model", "price", "dealer.city"}
    assert isinstance(found[0]["price"], int)


def test_missing_numbers_become_none(store):
    vf8 = store.find({"model": "VF 8"})[0]
    assert vf8["highway_mpg"] is None
    assert vf8["std_seating"] == 5


def test_count_and_distinct(store):
    visible = {"isDeleted": False, "verified": True}
    assert store.count(visible) == 5
    assert store.distinct("make", visible) == ["Honda", "Kia", "Toyota", "VinFast"]
    assert store.distinct("year", visible) == [2020, 2021, 2022, 2023]
    assert store.distinct("nope") == []


def test_bundled_catalog_loads():
    store = ListingsStore.from_csv(os.path.join(BASE_DIR, "data", "catalog.csv"))
    assert store.count({"isDeleted": False}) > 0
    assert "VinFast" in store.distinct("make")


def test_semicolon_csv(tmp_path):
    p = tmp_path / "cars.csv"
    p.write_text("brand;model;price;city\nKia;Morning;300000000;Hanoi\n", encoding="utf-8")
    df = load_catalog(str(p))
    assert df.loc[0, "make"] == "Kia"
    assert df.loc[0, "dealer.city"] == "Hanoi"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(str(tmp_path / "nope.csv"))
