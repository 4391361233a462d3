from __future__ import annotations
import json, logging, os, sys, re
from logging.handlers import RotatingFileHandler

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
try:
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
except ImportError:  # pragma: no cover
    OTLPSpanExporter = None  # optional dep

from .context import RunIdFilter

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

# LogRecord attributes that are not `extra=` fields
_STD_KEYS = {
    "name","msg","args","levelname","levelno","pathname","filename","module","exc_info",
    "exc_text","stack_info","lineno","funcName","created","msecs","relativeCreated",
    "thread","threadName","processName","process","message","asctime","stacklevel","taskName",
}

_REDACTIONS = [
    (re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"), "<redacted:email>"),
    (re.compile(r"\+?\d[\d\s().-]{7,}\d"), "<redacted:phone>"),
    (re.compile(r"(?i)bearer\s+[A-Za-z0-9._-]+"), "<redacted:token>"),
    (re.compile(r"(?i)(api[-_\s]?key)\s*[:=]\s*[A-Za-z0-9._-]+"), r"\1=<redacted:token>"),
]


def redact(text: str) -> str:
    """Mask emails, phone-like numbers and bearer/api tokens."""
    if not text:
        return text
    for pattern, repl in _REDACTIONS:
        text = pattern.sub(repl, text)
    return text


def extract_extras(record: logging.LogRecord) -> dict:
    return {k: v for k, v in record.__dict__.items() if k not in _STD_KEYS}


def _jsonable(v):
    try:
        json.dumps(v)
        return v
    except (TypeError, ValueError):
        return str(v)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; `extra` fields are merged in."""
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update({k: _jsonable(v) for k, v in extract_extras(record).items()})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class KVFormatter(logging.Formatter):
    """Plain text with `extra` fields appended as sorted, redacted k=v pairs."""
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = extract_extras(record)
        if not extras:
            return base
        tail = " ".join(f"{k}={extras[k]}" for k in sorted(extras))
        return f"{base} | {redact(tail)}"


def setup_logging() -> logging.Logger:
    """
    Configure the 'disinfo' logger: stdout plus an optional rotating file.
    Env:
      DISINFO_LOG_LEVEL=DEBUG|INFO|...
      DISINFO_LOG_JSON=0|1
      DISINFO_LOG_FILE=/path/to/file.log
    """
    lvl = os.getenv("DISINFO_LOG_LEVEL", "INFO").upper()
    json_mode = os.getenv("DISINFO_LOG_JSON", "0") == "1"
    log_file = os.getenv("DISINFO_LOG_FILE", "").strip() or None

    logger = logging.getLogger("disinfo")
    logger.setLevel(lvl)
    logger.propagate = False
    logger.handlers.clear()

    fmt = JsonFormatter() if json_mode else KVFormatter(LOG_FORMAT)

    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(lvl)
    sh.setFormatter(fmt)
    sh.addFilter(RunIdFilter())
    logger.addHandler(sh)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3)
        fh.setLevel(lvl)
        fh.setFormatter(fmt)
        fh.addFilter(RunIdFilter())
        logger.addHandler(fh)

    return logger


def setup_tracing(service_name: str = "disinfo", exporter: str = "console"):
    """
    Install an OpenTelemetry tracer provider.
    exporter: 'console' (default) or 'otlp' (needs the OTLP exporter package
    and a collector; honours OTEL_EXPORTER_OTLP_ENDPOINT).
    """
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if exporter == "otlp" and OTLPSpanExporter is not None:
        span_exporter = OTLPSpanExporter()
    else:
        span_exporter = ConsoleSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(span_exporter))
    trace.set_tracer_provider(provider)
    return trace.get_tracer(service_name)
