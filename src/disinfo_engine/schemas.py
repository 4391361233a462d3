from __future__ import annotations
import math
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SENT_SPLIT = re.compile(r"(?<=[.!?])\s+")


class Classification(str, Enum):
    DISINFORMATION = "Disinformation"
    NOT_DISINFORMATION = "Not Disinformation"
    NSFW = "NSFW Content"
    MISLEADING = "Misleading"


class ContentType(str, Enum):
    OPINION = "Opinion"
    CLAIM = "Claim"
    ASSUMPTION = "Assumption"
    FACT = "Fact"
    MIXED = "Mixed"


def _match_label(v, enum_cls):
    # labels are matched case-insensitively; anything else is rejected
    if isinstance(v, str):
        wanted = v.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member
    return v


class AnalysisResult(BaseModel):
    """One moderation verdict. Serialized with the camelCase wire names."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    classification: Classification
    content_type: ContentType = Field("Mixed", alias="contentType")
    confidence: int = 50
    explanation: str
    key_terms: List[str] = Field(default_factory=list, alias="keyTerms")
    verification_sources: List[str] = Field(default_factory=list, alias="verificationSources")
    recommendations: List[str] = Field(default_factory=list)
    timestamp: Optional[str] = None

    @field_validator("classification", mode="before")
    @classmethod
    def _classification(cls, v):
        return _match_label(v, Classification)

    @field_validator("content_type", mode="before")
    @classmethod
    def _content_type(cls, v):
        # unknown content types collapse to Mixed
        matched = _match_label(v, ContentType)
        return matched if isinstance(matched, ContentType) else ContentType.MIXED

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v):
        if isinstance(v, bool) or v is None:
            raise ValueError("confidence must be a number")
        if isinstance(v, int):
            # exact for ints too large to become a float
            return max(0, min(100, v))
        try:
            x = float(v)
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"confidence must be a number, got {v!r}")
        if not math.isfinite(x):
            raise ValueError(f"confidence must be finite, got {v!r}")
        return int(max(0.0, min(100.0, round(x))))

    @field_validator("key_terms", "verification_sources", "recommendations", mode="before")
    @classmethod
    def _string_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError(f"expected a list of strings, got {type(v).__name__}")
        return [str(x) for x in v]

    def first_sentences(self, n: int = 3) -> str:
        parts = [p.strip() for p in _SENT_SPLIT.split(self.explanation) if p.strip()]
        return " ".join(parts[:n])

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class HistoryItem(AnalysisResult):
    id: str
    content: str
