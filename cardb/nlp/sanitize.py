# cardb/nlp/sanitize.py
"""
Allow-list mapping from the model's (untrusted) filter bag to the query
sent to the listings store.

Every field is checked on its own and yields `Accepted(value)` or `DROPPED`.
Nothing from the input reaches the query without passing one of the
checkers below, and nothing here raises: a bad field is simply dropped.
"""
from __future__ import annotations
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from cardb.settings import BODY_TYPES, FUEL_TYPES, TRANSMISSIONS

MAX_TEXT_LEN = 60


@dataclass(frozen=True)
class Accepted:
    value: Any


class _Dropped:
    _instance: Optional["_Dropped"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DROPPED"

    def __bool__(self) -> bool:
        return False


DROPPED = _Dropped()

Outcome = Union[Accepted, _Dropped]


# -----------------------------------------------------------------------------
# Per-type checkers
# -----------------------------------------------------------------------------
def check_enum(raw: Any, allowed: list[str]) -> Outcome:
    if isinstance(raw, str) and raw in allowed:
        return Accepted(raw)
    return DROPPED


def check_number(raw: Any, lo: float, hi: float, *, integer: bool = False) -> Outcome:
    """
    Numbers or numeric strings ("500000000") inside [lo, hi].
    0, bools, NaN/inf and anything non-numeric are dropped.
    """
    if raw is None or isinstance(raw, bool):
        return DROPPED
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
    try:
        val = float(raw)
    except (TypeError, ValueError):
        return DROPPED
    if not math.isfinite(val) or val == 0 or not (lo <= val <= hi):
        return DROPPED
    if integer:
        if not val.is_integer():
            return DROPPED
        return Accepted(int(val))
    return Accepted(int(val) if val.is_integer() else val)


def check_text(raw: Any) -> Outcome:
    """Free text -> case-insensitive partial match with regex metachars escaped."""
    if not isinstance(raw, str):
        return DROPPED
    text = " ".join(raw.split())
    if not text or len(text) > MAX_TEXT_LEN:
        return DROPPED
    return Accepted({"$regex": re.escape(text), "$options": "i"})


# -----------------------------------------------------------------------------
# Field table
# -----------------------------------------------------------------------------
MAX_PRICE = 1e13
YEAR_RANGE = (1886, 2100)


def _field_outcomes(filters: Mapping[str, Any]) -> Dict[str, Outcome]:
    g = filters.get
    return {
        "body_type":    check_enum(g("body_type"), BODY_TYPES),
        "fuel_type":    check_enum(g("fuel_type"), FUEL_TYPES),
        "transmission": check_enum(g("transmission"), TRANSMISSIONS),
        "maxPrice":     check_number(g("maxPrice"), 0, MAX_PRICE),
        "minPrice":     check_number(g("minPrice"), 0, MAX_PRICE),
        "make":         check_text(g("make")),
        "model":        check_text(g("model")),
        "city":         check_text(g("city")),
        "year":         check_number(g("year"), *YEAR_RANGE, integer=True),
        "minYear":      check_number(g("minYear"), *YEAR_RANGE, integer=True),
        "maxYear":      check_number(g("maxYear"), *YEAR_RANGE, integer=True),
        "minSeats":     check_number(g("minSeats"), 1, 60, integer=True),
        "minMPG":       check_number(g("minMPG"), 0, 500),
    }


def _present(v: Any) -> bool:
    return bool(v.strip()) if isinstance(v, str) else bool(v)


def has_specific_make_or_model(filters: Mapping[str, Any] | None) -> bool:
    """A make or model was named, whether or not it survives validation."""
    if not isinstance(filters, Mapping):
        return False
    return _present(filters.get("make")) or _present(filters.get("model"))


def sanitize_filters(filters: Mapping[str, Any] | None) -> Dict[str, Any]:
    """
    Builds the listings query from extracted filters.

    Always carries ``isDeleted: False``. Moderation constraints
    (``verified``/``paymentStatus``) are added only when no make/model was
    named, even one that is then dropped: a user asking for a specific brand
    sees all matching inventory.
    Pure function; the same input always yields an equal query.
    """
    if not isinstance(filters, Mapping):
        filters = {}

    out = _field_outcomes(filters)

    query: Dict[str, Any] = {"isDeleted": False}
    if not has_specific_make_or_model(filters):
        query["verified"] = True
        query["paymentStatus"] = "paid"

    for key in ("body_type", "fuel_type", "transmission", "make", "model"):
        if isinstance(out[key], Accepted):
            query[key] = out[key].value

    if isinstance(out["city"], Accepted):
        query["dealer.city"] = out["city"].value

    price: Dict[str, Any] = {}
    if isinstance(out["maxPrice"], Accepted):
        price["$lte"] = out["maxPrice"].value
    if isinstance(out["minPrice"], Accepted):
        price["$gte"] = out["minPrice"].value
    if price:
        query["price"] = price

    # exact year, replaced by a range when minYear/maxYear are present
    year_range: Dict[str, Any] = {}
    if isinstance(out["minYear"], Accepted):
        year_range["$gte"] = out["minYear"].value
    if isinstance(out["maxYear"], Accepted):
        year_range["$lte"] = out["maxYear"].value
    if year_range:
        query["year"] = year_range
    elif isinstance(out["year"], Accepted):
        query["year"] = out["year"].value

    if isinstance(out["minSeats"], Accepted):
        query["std_seating"] = {"$gte": out["minSeats"].value}

    if isinstance(out["minMPG"], Accepted):
        mpg = out["minMPG"].value
        query["$or"] = [
            {"highway_mpg": {"$gte": mpg}},
            {"city_mpg": {"$gte": mpg}},
        ]

    return query
