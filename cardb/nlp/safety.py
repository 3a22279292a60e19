# cardb/nlp/safety.py
from __future__ import annotations
import logging

from cardb.nlp.normalize import norm_txt

logger = logging.getLogger(__name__)

# Substring denylist, matched against the normalized message.
# Grouped by category for maintenance only; any hit refuses.
DENYLIST = {
    "violence": (
        "bomb", "explosive", "firearm", "weapon", "murder", "kill someone",
        "kill people", "run someone over", "terrorist", "terrorism", "carjack",
        "hotwire", "steal a car", "stolen car", "break into a car",
    ),
    "adult": (
        "porn", "nude", "nsfw", "sexual", "escort service", "sex video",
    ),
    "hate": (
        "hate speech", "nazi", "white supremac", "racial slur", "ethnic cleansing",
    ),
    "fraud": (
        "fraud", "scam", "counterfeit", "fake id", "fake vin", "forged document",
        "money launder", "launder money", "odometer rollback", "roll back the odometer",
        "tamper with the odometer", "fake registration",
    ),
    "drugs": (
        "cocaine", "heroin", "methamphetamine", "fentanyl", "drug deal",
        "sell drugs", "smuggle drugs", "narcotic",
    ),
    "trafficking": (
        "human trafficking", "trafficking", "smuggle people", "child abuse",
        "child exploitation", "sexual exploitation",
    ),
}

_KEYWORDS = tuple(kw for words in DENYLIST.values() for kw in words)


def find_unsafe_keyword(message: str | None) -> str | None:
    """First denylisted keyword contained in the message (any casing), or None."""
    t = norm_txt(message)
    for kw in _KEYWORDS:
        if kw in t:
            return kw
    return None


def is_inappropriate(message: str | None) -> bool:
    hit = find_unsafe_keyword(message)
    if hit:
        # the message itself is not logged
        logger.info("safety filter refused a message (keyword category match)")
    return hit is not None
