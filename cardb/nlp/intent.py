# cardb/nlp/intent.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict

from cardb.errors import MalformedModelOutput
from cardb.nlp.aliases import BUDGET_KEYWORDS
from cardb.nlp.normalize import contains_phrase, norm_txt, strip_code_fences
from cardb.schemas import ExtractedFilters, ExtractedIntent
from cardb.settings import BODY_TYPES, DEFAULT_MIN_MPG, FUEL_TYPES, TRANSMISSIONS

logger = logging.getLogger(__name__)

INTENTS = ("car_search", "policy", "troubleshooting", "general")
INAPPROPRIATE = "inappropriate"

# Keys whose presence makes a budget question concrete enough to search
CONCRETE_QUERY_KEYS = ("price", "fuel_type", "body_type", "make", "model")


def _enum(values) -> str:
    return "|".join(f'"{v}"' for v in values) + "|null"


def build_extract_prompt(message: str) -> str:
    return f"""Extract intent and filters from the user message of a car marketplace.

Message: {json.dumps(message, ensure_ascii=False)}

Instructions:
1. If the user asks for "fuel efficient", "fuel saving", "economical" or "good mpg", set "minMPG" to {DEFAULT_MIN_MPG} (unless the user gives another number).
2. If the user asks for seats (e.g. "7 seater", "7-seat"), set "minSeats" to that number.
3. If the message mentions any car brand, ALWAYS set "make" to that brand.
4. If the message mentions any car model, ALWAYS set "model" to that model.
5. Prices are plain numbers in VND (e.g. "500 million" -> 500000000).

Return ONLY JSON, no prose:
{{
  "intent": "car_search" | "policy" | "troubleshooting" | "general",
  "filters": {{
    "body_type": {_enum(BODY_TYPES)},
    "fuel_type": {_enum(FUEL_TYPES)},
    "transmission": {_enum(TRANSMISSIONS)},
    "make": string|null,
    "model": string|null,
    "year": number|null,
    "maxPrice": number|null,
    "minPrice": number|null,
    "city": string|null,
    "minSeats": number|null,
    "minMPG": number|null
  }}
}}"""


def parse_extraction(raw_text: str) -> ExtractedIntent:
    """
    Parses the model's JSON answer. Unparseable output is a hard failure:
    filters are never guessed from free text.
    """
    text = strip_code_fences(raw_text)
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedModelOutput("extraction response is not JSON") from e
    if not isinstance(data, dict):
        raise MalformedModelOutput("extraction response is not a JSON object")

    intent = data.get("intent")
    intent = intent.strip().lower() if isinstance(intent, str) else "general"

    raw_filters = data.get("filters")
    filters: Dict[str, Any] = {}
    if isinstance(raw_filters, dict):
        filters = ExtractedFilters.model_validate(raw_filters).model_dump()
    return ExtractedIntent(intent=intent, filters=filters)


async def extract_intent(llm, message: str, *, temperature: float = 0.0) -> ExtractedIntent:
    raw = await llm.complete(build_extract_prompt(message), temperature=temperature)
    parsed = parse_extraction(raw)
    logger.debug("extracted intent=%s filters=%s", parsed.intent, parsed.filters)
    return parsed


# ---------------- Budget phrasing ----------------
def mentions_budget(text: str) -> bool:
    t = norm_txt(text)
    return any(contains_phrase(t, kw) for kw in BUDGET_KEYWORDS)


def is_underspecified_budget_query(message: str, query: Dict[str, Any]) -> bool:
    """'cheap car' with no price, fuel, body, make or model to narrow it down."""
    if not mentions_budget(message):
        return False
    return not any(k in query for k in CONCRETE_QUERY_KEYS)
