"""Keyword-based live/dead classification of typed or spoken sighting text."""
import re
from typing import NamedTuple, Optional, Tuple

DEAD_KEYWORDS = (
    "dead", "roadkill", "road kill", "killed", "hit", "deceased",
    "carcass", "flattened", "squished", "ran over", "run over",
)

LIVE_KEYWORDS = (
    "live", "alive", "living", "flying", "spotted", "running",
    "walking", "swimming", "sitting", "perched",
)

_WHITESPACE = re.compile(r"\s+")


class Classification(NamedTuple):
    status: str
    cleaned_animal: str


def _first_match(lower: str, keywords: Tuple[str, ...]) -> Optional[str]:
    for kw in keywords:
        if kw in lower:
            return kw
    return None


def _strip_words(text: str, keywords: Tuple[str, ...]) -> str:
    for kw in keywords:
        text = re.sub(rf"\b{re.escape(kw)}\b", "", text, flags=re.IGNORECASE)
    return _WHITESPACE.sub(" ", text).strip()


def classify(text: str) -> Classification:
    """
    Infer a sighting status and a cleaned animal name from free text.

    Dead keywords are checked first and win over live keywords. Detection is a
    plain substring test on the lowercased text, so "deadline" still reads as
    dead; stripping only removes whole words from the winning keyword list.

    Args:
        text: Raw typed text or speech transcript

    Returns:
        Classification with status ``"live"`` or ``"dead"`` and the text with
        status words removed. Empty input yields ``("live", "")``.
    """
    original = (text or "").strip()
    lower = original.lower()

    for status, keywords in (("dead", DEAD_KEYWORDS), ("live", LIVE_KEYWORDS)):
        if _first_match(lower, keywords):
            return Classification(status, _strip_words(original, keywords))

    return Classification("live", original)
