import os, hashlib, logging

from .telemetry import redact

logger = logging.getLogger("disinfo.telemetry.prompt")

LOG_PROMPT_MODE = os.getenv("DISINFO_LOG_PROMPT", "preview").lower()  # "off" | "preview" | "full"
PROMPT_PREVIEW = int(os.getenv("DISINFO_PROMPT_MAX_PREVIEW", "240"))


def fingerprint(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8", "ignore")).hexdigest()[:12]


def preview(s: str, n: int = PROMPT_PREVIEW) -> str:
    if s is None:
        return ""
    s = s.replace("\r", "")
    if len(s) <= n:
        return s
    return f"{s[:n]} ... [+{len(s)-n}]"


def log_prompt(prompt: str, *, content_len: int, stage: str = "llm", span=None, mode: str = None):
    """Log a built prompt. Length and sha always go out; the text depends on mode."""
    mode = (mode or LOG_PROMPT_MODE).lower()
    sha = fingerprint(prompt)
    attrs = {"prompt.len": len(prompt), "prompt.sha": sha, "content.len": content_len}
    if span is not None:
        span.add_event("prompt.built", attributes=attrs)

    if mode == "off":
        logger.info(
            "llm.prompt (logging=off) len=%d sha=%s content_len=%d",
            len(prompt), sha, content_len, extra={"stage": stage},
        )
        return

    label = "full" if mode == "full" else "preview"
    text = redact(prompt if label == "full" else preview(prompt))
    logger.info(
        "llm.prompt (%s) len=%d sha=%s content_len=%d :: %s",
        label, len(prompt), sha, content_len, text, extra={"stage": stage},
    )
