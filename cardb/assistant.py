# cardb/assistant.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from cardb.cache import TTLCache, cache_key
from cardb.errors import InvalidInput, classify_failure
from cardb.nlp.intent import INAPPROPRIATE, INTENTS, extract_intent, is_underspecified_budget_query
from cardb.nlp.normalize import detect_brand
from cardb.nlp.safety import is_inappropriate
from cardb.nlp.sanitize import has_specific_make_or_model, sanitize_filters
from cardb.router import (
    PROMPT_BY_INTENT,
    build_recommendation_prompt,
    no_results_reply,
    one_paragraph,
)
from cardb.schemas import ChatResponse
from cardb.settings import EXTRACT_TEMPERATURE, LISTING_FIELDS, REPLY_TEMPERATURE, RESULT_LIMIT
from cardb.texts import BUDGET_CLARIFY_MSG, REFUSAL_MSG

logger = logging.getLogger(__name__)


class ChatAssistant:
    """
    Turns one free-text message into a ChatResponse:
      1) input check, 2) safety filter, 3) intent/filter extraction (model),
      4) brand fallback, 5) sanitization, 6) intent override,
      7) budget clarification, 8) listings query + reply, 9) other intents.

    `llm` needs `async complete(prompt, temperature=...)` (see ModelRouter);
    `store` needs `find(query, limit=, projection=)` (see ListingsStore).
    Both are built once by the service and shared across requests.
    """

    def __init__(self, llm, store, *, bot_name: str, cache: Optional[TTLCache] = None):
        self.llm = llm
        self.store = store
        self.bot_name = bot_name
        self.cache = cache if cache is not None else TTLCache(0)

    def _response(self, intent: str, filters: Dict[str, Any], matched: int, reply: str) -> ChatResponse:
        return ChatResponse(
            success=True,
            bot_name=self.bot_name,
            intent=intent,
            filters=filters,
            matched_cars=matched,
            reply=reply,
        )

    async def handle(self, message: Optional[str]) -> ChatResponse:
        if not isinstance(message, str) or not message.strip():
            raise InvalidInput("message is empty")
        message = message.strip()

        if is_inappropriate(message):
            return self._response(INAPPROPRIATE, {}, 0, REFUSAL_MSG)

        try:
            return await self._run(message)
        except Exception as e:
            err = classify_failure(e)
            logger.exception("chat pipeline failed (%s)", type(err).__name__)
            if err is e:
                raise
            raise err from e

    async def _run(self, message: str) -> ChatResponse:
        extracted = await extract_intent(self.llm, message, temperature=EXTRACT_TEMPERATURE)
        filters = dict(extracted.filters)

        if not filters.get("make"):
            brand = detect_brand(message)
            if brand:
                logger.debug("brand fallback detected %s", brand)
                filters["make"] = brand

        query = sanitize_filters(filters)
        logger.debug("sanitized query: %s", query)

        intent = extracted.intent if extracted.intent in INTENTS else "general"
        if has_specific_make_or_model(filters):
            intent = "car_search"

        # any intent: budget wording with nothing concrete to search on
        if is_underspecified_budget_query(message, query):
            return self._response(intent, filters, 0, BUDGET_CLARIFY_MSG)

        if intent == "car_search":
            return await self._search(message, filters, query)

        reply = await self.llm.complete(PROMPT_BY_INTENT[intent](message), temperature=REPLY_TEMPERATURE)
        return self._response(intent, filters, 0, reply)

    def _find_cars(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        key = cache_key("car_search", query)
        cars = self.cache.get(key)
        if cars is None:
            cars = self.store.find(query, limit=RESULT_LIMIT, projection=LISTING_FIELDS)
            self.cache.set(key, cars)
        return cars

    async def _search(self, message: str, filters: Dict[str, Any], query: Dict[str, Any]) -> ChatResponse:
        cars = self._find_cars(query)
        logger.info("car_search matched %d listings", len(cars))

        if not cars:
            if "make" in query and logger.isEnabledFor(logging.DEBUG):
                # diagnostics only; not part of the reply
                same_make = {"isDeleted": False, "make": query["make"]}
                logger.debug(
                    "%d listings for this make ignoring other filters; makes in store: %s",
                    self.store.count(same_make),
                    self.store.distinct("make", {"isDeleted": False}),
                )
            return self._response("car_search", filters, 0, no_results_reply(filters, query))

        reply = await self.llm.complete(build_recommendation_prompt(message, cars), temperature=REPLY_TEMPERATURE)
        return self._response("car_search", filters, len(cars), one_paragraph(reply))
