from __future__ import annotations
import logging, random, time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ..config import HISTORY_PATH, MAX_CONTENT_CHARS
from ..errors import (
    AnalysisUnavailableError,
    ContentTooLongError,
    EmptyInputError,
    UnsupportedLinkError,
)
from ..history import HistoryStore, JsonFileStore
from ..prompts.analysis import AnalysisRequest, build_analysis_request
from ..schemas import AnalysisResult
from ..telemetry.context import run_context
from ..telemetry.promptlog import log_prompt
from .parser import ResponseParser
from .source import extract_post_text, is_supported_link, looks_like_url

logger = logging.getLogger("disinfo.moderation.pipeline")
tracer = trace.get_tracer("disinfo.moderation")


def iso_timestamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


def _default_classify(request: AnalysisRequest) -> str:
    from ..llm import classify
    return classify(request)


class ContentAnalyzer:
    """
    Validates content, pulls Reddit post text when given a post link, asks the
    classifier once, parses and sanitizes the reply, and records it in history.
    """

    def __init__(
        self,
        *,
        classify: Optional[Callable[[AnalysisRequest], str]] = None,
        extract: Optional[Callable[[str], str]] = None,
        history: Optional[HistoryStore] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_chars: int = MAX_CONTENT_CHARS,
    ):
        self.classify = classify or _default_classify
        self.extract = extract or extract_post_text
        self.history = history
        self.parser = ResponseParser(rng)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.max_chars = max_chars

    def validate(self, content: Optional[str]) -> str:
        """Fail fast, before any network cost. Returns the stripped input."""
        text = (content or "").strip()
        if not text:
            raise EmptyInputError()
        if looks_like_url(text) and not is_supported_link(text):
            raise UnsupportedLinkError()
        return text

    def _resolve(self, text: str, original: str) -> str:
        if not is_supported_link(text):
            return original
        # Extraction failures degrade to analyzing the bare URL
        try:
            return self.extract(text) or text
        except Exception:
            logger.exception("source.extract.error", extra={"stage": "ingest"})
            return text

    def analyze(self, content: Optional[str]) -> AnalysisResult:
        with run_context() as run_id, tracer.start_as_current_span("analysis.run") as parent_span:
            t0 = time.perf_counter()
            parent_span.set_attribute("analysis.run_id", run_id)
            logger.info("analysis.run.start", extra={"stage": "start"})

            text = self.validate(content)

            with tracer.start_as_current_span("ingest") as span:
                s0 = time.perf_counter()
                effective = self._resolve(text, content)
                span.set_attribute("ingest.link", is_supported_link(text))
                span.set_attribute("content.len", len(effective))
                if len(effective) > self.max_chars:
                    raise ContentTooLongError(len(effective), self.max_chars)
                logger.info("ingest.done", extra={"stage": "ingest", "elapsed_ms": _elapsed_ms(s0),
                                                  "chars": len(effective)})

            try:
                with tracer.start_as_current_span("llm.classify") as span:
                    s0 = time.perf_counter()
                    request = build_analysis_request(effective)
                    log_prompt(request.prompt, content_len=len(effective), span=span)
                    raw = self.classify(request)
                    span.set_attribute("reply.len", len(raw or ""))
                    logger.info("llm.classify.done", extra={"stage": "llm", "elapsed_ms": _elapsed_ms(s0)})

                with tracer.start_as_current_span("parse") as span:
                    result = self.parser.parse(raw)
                    span.set_attribute("classification", result.classification)
                    span.set_attribute("confidence", result.confidence)
            except Exception as e:
                logger.exception("analysis.run.error", extra={"stage": "llm"})
                parent_span.record_exception(e)
                parent_span.set_status(Status(StatusCode.ERROR, str(e)))
                raise AnalysisUnavailableError() from e

            result = result.model_copy(update={"timestamp": iso_timestamp(self.clock())})

            if self.history is not None:
                try:
                    self.history.add(result, effective)
                except OSError:
                    logger.exception("history.save.error", extra={"stage": "history"})

            logger.info(
                "analysis.run.end",
                extra={"stage": "end", "elapsed_ms": _elapsed_ms(t0),
                       "classification": result.classification, "confidence": result.confidence},
            )
            return result


@lru_cache(maxsize=1)
def get_analyzer() -> ContentAnalyzer:
    """Process-wide analyzer backed by the on-disk history file."""
    return ContentAnalyzer(history=HistoryStore(JsonFileStore(HISTORY_PATH)))
