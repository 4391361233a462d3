from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

ANALYSIS_TEMPLATE = """Analyze this content for disinformation. Respond in JSON format only.

Rules:
- Keep explanations MEDIUM length (3-4 sentences)
- Use plain English, no technical jargon
- For NSFW/sexual content: classify as "NSFW Content" and mark as fictional
- Use "Misleading" for content that is technically true but framed to deceive
- Don't mention AI, models, or analysis tools
- Be direct and confident
- Label content types as: Opinion, Claim, Assumption, Fact, or Mixed

JSON structure:
{{
  "classification": "Disinformation" | "Not Disinformation" | "NSFW Content" | "Misleading",
  "contentType": "Opinion" | "Claim" | "Assumption" | "Fact" | "Mixed",
  "confidence": 0-100,
  "explanation": "Clear reasoning (3-4 sentences)",
  "keyTerms": ["term1", "term2"],
  "verificationSources": ["Snopes.com", "FactCheck.org", "Reuters Fact Check"],
  "recommendations": ["action1", "action2"]
}}

Content: "{content}"
"""


@dataclass(frozen=True)
class GenerationConfig:
    # low temperature, single-candidate sampling
    temperature: float = 0.1
    top_k: int = 1
    top_p: float = 0.8
    max_output_tokens: int = 1200

    def as_ollama_options(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "top_k": self.top_k,
            "top_p": self.top_p,
            "num_predict": self.max_output_tokens,
        }


@dataclass(frozen=True)
class AnalysisRequest:
    prompt: str
    generation: GenerationConfig = field(default_factory=GenerationConfig)


def build_analysis_request(content: str) -> AnalysisRequest:
    return AnalysisRequest(prompt=ANALYSIS_TEMPLATE.format(content=content))
