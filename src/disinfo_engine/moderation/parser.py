from __future__ import annotations
import json
import logging
import random
from typing import Iterable, Optional, Protocol, Tuple

from pydantic import ValidationError

from ..schemas import AnalysisResult, Classification, ContentType
from .sanitize import sanitize_explanation

logger = logging.getLogger("disinfo.moderation.parser")

DEFAULT_SOURCES = ["Snopes.com", "FactCheck.org", "Reuters Fact Check"]
DEFAULT_RECOMMENDATIONS = [
    "Cross-check with multiple sources",
    "Verify publication dates",
    "Check author credentials",
]
FALLBACK_EXPLANATION = "Unable to complete full analysis. Please try with different content."


def json_span(raw: str) -> Optional[str]:
    """Greedy span from the first '{' to the last '}', or None."""
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end < start:
        return None
    return raw[start:end + 1]


class ParseStrategy(Protocol):
    name: str

    def try_parse(self, raw: str) -> Optional[AnalysisResult]:
        """Return a result, or None to hand over to the next strategy."""


class EmbeddedJsonStrategy:
    name = "json"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def try_parse(self, raw: str) -> Optional[AnalysisResult]:
        span = json_span(raw)
        if span is None:
            return None
        try:
            data = json.loads(span)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            result = AnalysisResult.model_validate(data)
        except (ValueError, OverflowError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("parser.malformed", extra={"stage": "parse", "err": repr(e)[:300]})
            return None
        return result.model_copy(update={
            "explanation": sanitize_explanation(result.explanation, result.classification, self.rng),
        })


class KeywordStrategy:
    """Prose-only replies: classify by keyword presence."""
    name = "keyword"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def try_parse(self, raw: str) -> Optional[AnalysisResult]:
        if json_span(raw) is not None:
            return None
        lower = raw.lower()
        if "disinformation" in lower or "false" in lower:
            label = Classification.DISINFORMATION
        else:
            label = Classification.NOT_DISINFORMATION
        return AnalysisResult(
            classification=label,
            content_type=ContentType.MIXED,
            confidence=75,
            explanation=sanitize_explanation(raw, label, self.rng),
            key_terms=[],
            verification_sources=list(DEFAULT_SOURCES),
            recommendations=list(DEFAULT_RECOMMENDATIONS),
        )


class NeutralFallbackStrategy:
    name = "fallback"

    def try_parse(self, raw: str) -> Optional[AnalysisResult]:
        return AnalysisResult(
            classification=Classification.NOT_DISINFORMATION,
            content_type=ContentType.MIXED,
            confidence=50,
            explanation=FALLBACK_EXPLANATION,
            key_terms=[],
            verification_sources=DEFAULT_SOURCES[:2],
            recommendations=["Try analyzing again", "Check content manually"],
        )


def first_success(strategies: Iterable[ParseStrategy], raw: str) -> Tuple[str, Optional[AnalysisResult]]:
    for strategy in strategies:
        result = strategy.try_parse(raw)
        if result is not None:
            return strategy.name, result
    return "", None


class ResponseParser:
    """Turns raw classifier text into an AnalysisResult. Never raises."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.strategies = [
            EmbeddedJsonStrategy(rng),
            KeywordStrategy(rng),
            NeutralFallbackStrategy(),
        ]

    def parse(self, raw: str) -> AnalysisResult:
        tier, result = first_success(self.strategies, raw or "")
        logger.info("parser.done", extra={"stage": "parse", "tier": tier})
        return result
