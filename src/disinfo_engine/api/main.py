from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from disinfo_engine.errors import DisinfoError, EmptyInputError, InputValidationError
from disinfo_engine.moderation.pipeline import get_analyzer
from disinfo_engine.telemetry.telemetry import setup_logging

setup_logging()
logger = logging.getLogger("disinfo.api")

app = FastAPI(title="Disinformation Hunter API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://127.0.0.1", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
def bad_request(request: Request, exc: RequestValidationError):
    # malformed bodies get the same error shape as blank content
    logger.info("api.request.invalid", extra={"path": request.url.path})
    return JSONResponse(status_code=400, content={"error": EmptyInputError.user_message})


class AnalyzeReq(BaseModel):
    # optional so a missing field is a 400 with our error shape, not a 422
    content: Optional[str] = None


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/analyze")
def analyze(req: AnalyzeReq):
    try:
        result = get_analyzer().analyze(req.content)
    except InputValidationError as e:
        logger.info("api.analyze.rejected", extra={"reason": type(e).__name__})
        return JSONResponse(status_code=400, content={"error": e.user_message})
    except DisinfoError as e:
        return JSONResponse(status_code=500, content={"error": e.user_message})
    return result.to_wire()


@app.get("/history")
def history():
    store = get_analyzer().history
    items = store.items() if store is not None else []
    return {"items": [i.to_wire() for i in items]}
