# cardb/main.py
import logging
import re
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from cardb.assistant import ChatAssistant
from cardb.cache import TTLCache
from cardb.config import (
    BOT_NAME,
    CATALOG_PATH,
    CHAT_CACHE_TTL,
    LLM_TIMEOUT,
    LOG_LEVEL,
    MODEL_CANDIDATES,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
)
from cardb.errors import ChatbotError
from cardb.nlp.llm import ModelRouter, OpenAIBackend
from cardb.reco.catalog import ListingsStore
from cardb.schemas import ChatRequest, ChatResponse, ErrorResponse, FilterOptionsResponse
from cardb.texts import WELCOME_MSG

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="CarDB Assistant API")

# Filter options only list what a visitor can actually browse
VISIBLE = {"isDeleted": False, "verified": True}


# ---------------- Shared collaborators (one per process) ----------------
@lru_cache(maxsize=1)
def get_store() -> ListingsStore:
    return ListingsStore.from_csv(CATALOG_PATH)


@lru_cache(maxsize=1)
def get_assistant() -> ChatAssistant:
    backend = OpenAIBackend(OPENAI_API_KEY, base_url=OPENAI_BASE_URL, timeout=LLM_TIMEOUT)
    return ChatAssistant(
        ModelRouter(backend, MODEL_CANDIDATES),
        get_store(),
        bot_name=BOT_NAME,
        cache=TTLCache(CHAT_CACHE_TTL),
    )


@app.exception_handler(ChatbotError)
async def chatbot_error_handler(request: Request, exc: ChatbotError):
    body = ErrorResponse(error=exc.public_message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.get("/")
async def root():
    return {"message": WELCOME_MSG}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/chat", response_model=ChatResponse, responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def chat(req: ChatRequest, assistant: ChatAssistant = Depends(get_assistant)):
    return await assistant.handle(req.message)


# ---------------- Filter options for the listing page ----------------
def _options(store: ListingsStore, field: str, label: str, query=None, newest_first: bool = False):
    try:
        data = store.distinct(field, query or VISIBLE)
    except Exception:
        logger.exception("failed to fetch %s", label)
        return JSONResponse(status_code=500, content={"success": False, "message": f"Failed to fetch {label}"})
    if newest_first:
        data = sorted(data, reverse=True)
    return FilterOptionsResponse(message=f"{label.capitalize()} retrieved successfully", data=data)


@app.get("/filters/brands", response_model=FilterOptionsResponse)
async def brands(store: ListingsStore = Depends(get_store)):
    return _options(store, "make", "brands")


@app.get("/filters/years", response_model=FilterOptionsResponse)
async def years(store: ListingsStore = Depends(get_store)):
    return _options(store, "year", "years", newest_first=True)


@app.get("/filters/models/{brand}", response_model=FilterOptionsResponse)
async def models_by_brand(brand: str, store: ListingsStore = Depends(get_store)):
    query = dict(VISIBLE, make={"$regex": re.escape(brand.strip()), "$options": "i"})
    return _options(store, "model", "models", query=query)


@app.get("/filters/body-types", response_model=FilterOptionsResponse)
async def body_types(store: ListingsStore = Depends(get_store)):
    return _options(store, "body_type", "body types")


@app.get("/filters/transmissions", response_model=FilterOptionsResponse)
async def transmissions(store: ListingsStore = Depends(get_store)):
    return _options(store, "transmission", "transmissions")


@app.get("/filters/fuel-types", response_model=FilterOptionsResponse)
async def fuel_types(store: ListingsStore = Depends(get_store)):
    return _options(store, "fuel_type", "fuel types")
