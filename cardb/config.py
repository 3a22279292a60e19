import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_FALLBACK_MODELS = os.getenv("OPENAI_FALLBACK_MODELS", "gpt-4.1-mini")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "30"))


def _candidates(primary: str, fallbacks: str) -> list[str]:
    out: list[str] = []
    for name in [primary, *fallbacks.split(",")]:
        name = name.strip()
        if name and name not in out:
            out.append(name)
    return out


# Tried in order by the model router
MODEL_CANDIDATES = _candidates(OPENAI_MODEL, OPENAI_FALLBACK_MODELS)

CATALOG_PATH = os.getenv("CATALOG_PATH") or os.path.join(BASE_DIR, "data", "catalog.csv")

BOT_NAME = os.getenv("BOT_NAME", "CarDB Assistant")

# 0 disables the listings cache
CHAT_CACHE_TTL = float(os.getenv("CHAT_CACHE_TTL", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
