# tests/conftest.py
import asyncio
import json
import os
import sys

import pandas as pd
import pytest
from fastapi.testclient import TestClient

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from cardb.assistant import ChatAssistant  # noqa: E402
from cardb.reco.catalog import ListingsStore  # noqa: E402


def run(coro):
    return asyncio.run(coro)


def extraction(intent="car_search", **filters) -> str:
    """JSON the model would return for the extraction prompt."""
    base = {
        "body_type": None, "fuel_type": None, "transmission": None, "make": None,
        "model": None, "year": None, "maxPrice": None, "minPrice": None,
        "city": None, "minSeats": None, "minMPG": None,
    }
    base.update(filters)
    return json.dumps({"intent": intent, "filters": base})


# ---------- Stub of the model router ----------
class FakeLLM:
    """Pops queued replies in order; queued exceptions are raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str, *, temperature: float = 0.2) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("unexpected model call")
        nxt = self.responses.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt


class CountingStore(ListingsStore):
    def __init__(self, df):
        super().__init__(df)
        self.queries = []

    def find(self, query, *, limit=None, projection=None):
        self.queries.append(query)
        return super().find(query, limit=limit, projection=projection)


# ---------- Catalog ----------
@pytest.fixture
def sample_catalog_df():
    cols = ["id", "make", "model", "year", "price", "miles", "body_type", "fuel_type",
            "transmission", "dealer_city", "std_seating", "highway_mpg", "city_mpg",
            "verified", "paymentStatus", "isDeleted"]
    data = [
        (1, "Honda",   "City",     2022, 529_000_000, 12800, "Sedan",     "Gasoline", "Automatic", "Ho Chi Minh City", "5", 40, 31, True,  "paid",    False),
        (2, "Honda",   "CR-V",     2021, 915_000_000, 30100, "SUV",       "Gasoline", "Automatic", "Da Nang",          "7", 32, 26, False, "pending", False),
        (3, "Toyota",  "Vios",     2021, 458_000_000, 21500, "Sedan",     "Gasoline", "Manual",    "Hanoi",            "5", 35, 20, True,  "paid",    False),
        (4, "Toyota",  "Fortuner", 2020, 1_015_000_000, 43200, "SUV",     "Diesel",   "Automatic", "Hanoi",            "7", 10, 31, True,  "paid",    False),
        (5, "Kia",     "Carnival", 2022, 1_350_000_000, 15600, "Van",     "Diesel",   "Automatic", "Ho Chi Minh City", "8", 20, 20, True,  "paid",    False),
        (6, "VinFast", "VF 8",     2023, 1_090_000_000, 8200, "SUV",      "Electric", "Automatic", "Hanoi",            "5", None, None, True, "paid",   False),
        (7, "Honda",   "Civic",    2018, 520_000_000, 61200, "Sedan",     "Gasoline", "Manual",    "Hanoi",            "5", 36, 27, True,  "paid",    True),
    ]
    return pd.DataFrame(data, columns=cols)


@pytest.fixture
def store(sample_catalog_df):
    return CountingStore(sample_catalog_df)


# ---------- Assistant factory ----------
@pytest.fixture
def make_assistant(store):
    def _make(*responses, cache=None):
        llm = FakeLLM(*responses)
        return ChatAssistant(llm, store, bot_name="TestBot", cache=cache), llm
    return _make


# ---------- TestClient de FastAPI ----------
@pytest.fixture
def client(store):
    from cardb.main import app, get_assistant, get_store

    holder = {}

    def _use(*responses):
        llm = FakeLLM(*responses)
        holder["llm"] = llm
        app.dependency_overrides[get_assistant] = lambda: ChatAssistant(llm, store, bot_name="TestBot")
        return llm

    app.dependency_overrides[get_store] = lambda: store
    _use()
    c = TestClient(app)
    c.use_llm = _use
    yield c
    app.dependency_overrides.clear()
