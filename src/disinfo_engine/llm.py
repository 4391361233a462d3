from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from langchain_ollama import ChatOllama
from ollama import ResponseError

from .config import LLM_TIMEOUT, MODEL, OLLAMA_URL
from .errors import ExternalServiceError
from .prompts.analysis import AnalysisRequest

logger = logging.getLogger("disinfo.llm")

_DEFAULT_OPTIONS: Dict[str, Any] = {
    "num_ctx": 4096,
    "keep_alive": "15m",  # don't unload between requests
}


def get_llm(
    *,
    model: Optional[str] = None,
    options: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> ChatOllama:
    """
    Returns a ChatOllama pointed at DISINFO_OLLAMA_URL.
    `options` (temperature, top_k, top_p, num_predict, ...) override the defaults.
    """
    merged = {**_DEFAULT_OPTIONS, **(options or {})}
    return ChatOllama(
        model=model or MODEL,
        base_url=OLLAMA_URL,
        client_kwargs={"timeout": timeout if timeout is not None else LLM_TIMEOUT},
        **merged,
    )


def coerce_text(x) -> str:
    """Best-effort: turn common chat-model outputs into a plain string."""
    if x is None:
        return ""
    if isinstance(x, str):
        return x

    content = getattr(x, "content", None)
    if content is not None:
        # content can be str or a list of parts (e.g., [{"type":"text","text":"..."}])
        if isinstance(content, str):
            return content
        if isinstance(content, (list, tuple)):
            parts = []
            for part in content:
                if isinstance(part, dict) and "text" in part:
                    parts.append(str(part["text"]))
                else:
                    parts.append(str(part))
            return "\n".join(parts)
        return str(content)

    if isinstance(x, dict) and "content" in x:
        return coerce_text(x["content"])

    return str(x)


def classify(request: AnalysisRequest, *, model: Optional[str] = None) -> str:
    """
    Send one analysis request to the classifier and return its raw text.
    Raises ExternalServiceError on a non-success status or an empty reply.
    """
    llm = get_llm(model=model, options=request.generation.as_ollama_options())
    try:
        raw = llm.invoke(request.prompt)
    except ResponseError as e:
        logger.error(
            "llm.invoke.status_error",
            extra={"stage": "llm", "status": e.status_code, "err": e.error},
        )
        raise ExternalServiceError(e.status_code, e.error) from e

    text = coerce_text(raw)
    if not text.strip():
        raise ExternalServiceError(None, "No response from analysis service")
    return text
