from __future__ import annotations
import random
import re
from typing import Dict, List, Optional, Sequence

# Meta/self-referential phrases removed from generated explanations
DISCLAIMER_PHRASES: Sequence[str] = (
    "as an AI",
    "I cannot",
    "language model",
    "AI model",
    "artificial intelligence",
    "I'm an AI",
    "as a language model",
    "I don't have",
    "I can't",
    "gemini",
    "google",
)

# longest first so "as a language model" goes before "language model"
_DISCLAIMER_RE = re.compile(
    "|".join(re.escape(p) for p in sorted(DISCLAIMER_PHRASES, key=len, reverse=True)),
    re.IGNORECASE,
)

OPENERS: Dict[str, List[str]] = {
    "Disinformation": [
        "This content appears to contain disinformation.",
        "This looks like disinformation.",
        "This seems to spread false information.",
        "This resembles disinformation tactics.",
    ],
    "Not Disinformation": [
        "This appears credible.",
        "This seems legitimate.",
        "This looks reliable.",
        "This appears trustworthy.",
    ],
    "NSFW Content": [
        "This contains adult content.",
        "This includes inappropriate material.",
        "This has explicit content.",
    ],
}
DEFAULT_OPENER = "Analysis complete."

_rng = random.Random()


def strip_disclaimers(text: str) -> str:
    # repeat until stable: removing one phrase can splice together another
    while True:
        stripped = _DISCLAIMER_RE.sub("", text)
        if stripped == text:
            return stripped
        text = stripped


def pick_opener(classification: str, rng: Optional[random.Random] = None) -> str:
    pool = OPENERS.get(getattr(classification, "value", classification))
    if not pool:
        return DEFAULT_OPENER
    return (rng or _rng).choice(pool)


def sanitize_explanation(text: str, classification: str, rng: Optional[random.Random] = None) -> str:
    """Opening sentence for the classification + the explanation without disclaimers."""
    body = strip_disclaimers(text or "").strip()
    opener = pick_opener(classification, rng)
    return f"{opener} {body}" if body else opener
