from __future__ import annotations

import logging
import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Correlates every log line of one analysis run
run_id_var: ContextVar[Optional[str]] = ContextVar("disinfo_run_id", default=None)


class RunIdFilter(logging.Filter):
    """Stamps the current run_id (if any) onto each record."""
    def filter(self, record: logging.LogRecord) -> bool:
        rid = run_id_var.get()
        if rid and not hasattr(record, "run_id"):
            record.run_id = rid
        return True


@contextmanager
def run_context(run_id: Optional[str] = None) -> Iterator[str]:
    """Set a run id for the duration of the block and yield it."""
    rid = run_id or secrets.token_hex(4)
    token = run_id_var.set(rid)
    try:
        yield rid
    finally:
        run_id_var.reset(token)
