# cardb/reco/catalog.py
from __future__ import annotations
import logging
import math
import operator
import os
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from cardb.config import CATALOG_PATH

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------------
# Schema of a listing row
# ------------------------------------------------------------------------------------
COLUMN_SYNONYMS = {
    "id":            ["id", "_id", "stock_id", "car_id"],
    "make":          ["make", "brand", "marca"],
    "model":         ["model", "modelo"],
    "year":          ["year"],
    "price":         ["price", "amount"],
    "miles":         ["miles", "mileage", "km", "odometer"],
    "body_type":     ["body_type", "body", "bodytype"],
    "fuel_type":     ["fuel_type", "fuel"],
    "transmission":  ["transmission", "gearbox"],
    "dealer.city":   ["dealer.city", "dealer_city", "city", "location"],
    "dealer.state":  ["dealer.state", "dealer_state", "state"],
    "std_seating":   ["std_seating", "seats", "seating"],
    "highway_mpg":   ["highway_mpg", "hwy_mpg"],
    "city_mpg":      ["city_mpg"],
    "verified":      ["verified"],
    "paymentStatus": ["paymentstatus", "payment_status"],
    "isDeleted":     ["isdeleted", "is_deleted"],
}

NUMERIC_COLUMNS = ["year", "price", "miles", "std_seating", "highway_mpg", "city_mpg"]
BOOL_COLUMNS = {"verified": False, "isDeleted": False}

_TRUE = {"true", "1", "yes", "y", "t"}


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if v is None or (isinstance(v, float) and math.isnan(v)):
        return False
    return str(v).strip().lower() in _TRUE


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()

    # 1) Column names -> expected schema
    stripped = {c: str(c).strip() for c in df.columns}
    df = df.rename(columns=stripped)
    rename = {}
    for target, alts in COLUMN_SYNONYMS.items():
        if target in df.columns:
            continue
        for col in df.columns:
            if col.lower() in alts and col not in rename:
                rename[col] = target
                break
    if rename:
        df = df.rename(columns=rename)

    required = ["make", "model", "price"]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in catalog (after mapping): {missing}")

    # 2) Types (tolerant; std_seating may arrive as text)
    for col in NUMERIC_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")

    # 3) Moderation defaults
    for col, default in BOOL_COLUMNS.items():
        if col in df.columns:
            df[col] = df[col].map(_to_bool)
        else:
            df[col] = default
    if "paymentStatus" not in df.columns:
        df["paymentStatus"] = "pending"
    df["paymentStatus"] = df["paymentStatus"].fillna("pending").astype(str)

    if "id" not in df.columns:
        df["id"] = [str(i) for i in range(1, len(df) + 1)]
    return df


def load_catalog(path: str = CATALOG_PATH) -> pd.DataFrame:
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"catalog not found at {os.path.abspath(path)}. "
            f"Set CATALOG_PATH or place the file in cardb/data/catalog.csv"
        )
    df = pd.read_csv(path)
    if len(df.columns) == 1:
        df = pd.read_csv(path, sep=";")
    return normalize_columns(df)


# ------------------------------------------------------------------------------------
# Mongo-style query evaluation over the DataFrame
# ------------------------------------------------------------------------------------
_CMP = {
    "$gte": operator.ge,
    "$lte": operator.le,
    "$gt":  operator.gt,
    "$lt":  operator.lt,
    "$eq":  operator.eq,
    "$ne":  operator.ne,
}


def _all(df: pd.DataFrame, value: bool) -> pd.Series:
    return pd.Series(value, index=df.index, dtype=bool)


def _condition_mask(df: pd.DataFrame, field: str, cond: Any) -> pd.Series:
    if field not in df.columns:
        return _all(df, False)
    col = df[field]

    if not isinstance(cond, Mapping):
        return (col == cond).fillna(False).astype(bool)

    mask = _all(df, True)
    for op, arg in cond.items():
        if op == "$options":
            continue
        if op == "$regex":
            flags = re.IGNORECASE if "i" in str(cond.get("$options", "")) else 0
            hit = col.astype("string").str.contains(arg, flags=flags, regex=True, na=False)
            mask &= hit.astype(bool)
        elif op in _CMP:
            mask &= _CMP[op](col, arg).fillna(False).astype(bool)
        elif op == "$in":
            mask &= col.isin(list(arg))
        else:
            raise ValueError(f"Unsupported query operator: {op}")
    return mask


def query_mask(df: pd.DataFrame, query: Mapping[str, Any]) -> pd.Series:
    mask = _all(df, True)
    for key, cond in (query or {}).items():
        if key == "$or":
            any_mask = _all(df, False)
            for sub in cond:
                any_mask |= query_mask(df, sub)
            mask &= any_mask
        elif key == "$and":
            for sub in cond:
                mask &= query_mask(df, sub)
        else:
            mask &= _condition_mask(df, key, cond)
    return mask


def _py(v: Any) -> Any:
    """numpy/pandas scalars -> plain Python; NaN/NA -> None."""
    if v is None or v is pd.NA:
        return None
    if hasattr(v, "item"):
        v = v.item()
    if isinstance(v, float):
        if math.isnan(v) or math.isinf(v):
            return None
        if v.is_integer():
            return int(v)
    return v


# ------------------------------------------------------------------------------------
# Store
# ------------------------------------------------------------------------------------
class ListingsStore:
    """
    Listings loaded once into memory. `find` and `distinct` take the same
    query documents the chat pipeline builds.
    """

    def __init__(self, df: pd.DataFrame):
        self.df = normalize_columns(df)

    @classmethod
    def from_csv(cls, path: str = CATALOG_PATH) -> "ListingsStore":
        store = cls.__new__(cls)
        store.df = load_catalog(path)
        logger.info("loaded %d listings from %s", len(store.df), path)
        return store

    def find(
        self,
        query: Mapping[str, Any],
        *,
        limit: Optional[int] = None,
        projection: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        if self.df.empty:
            return []
        sub = self.df[query_mask(self.df, query)]
        if limit:
            sub = sub.head(limit)
        cols = [c for c in (projection or self.df.columns) if c in sub.columns]
        return [
            {c: _py(v) for c, v in zip(cols, row)}
            for row in sub[cols].itertuples(index=False, name=None)
        ]

    def count(self, query: Mapping[str, Any]) -> int:
        if self.df.empty:
            return 0
        return int(query_mask(self.df, query).sum())

    def distinct(self, field: str, query: Optional[Mapping[str, Any]] = None) -> List[Any]:
        if self.df.empty or field not in self.df.columns:
            return []
        sub = self.df[query_mask(self.df, query or {})]
        values = {_py(v) for v in sub[field].dropna().unique()}
        values.discard(None)
        values.discard("")
        return sorted(values, key=lambda v: (str(type(v)), v))
