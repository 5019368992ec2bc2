"""
main.py — PharmaBroker API: matching & deal engine for a pharma B2B brokerage

App wiring only: logging, tables, the shared entity books, request-ID
middleware, structured error responses and router mounts. All business
logic lives in services/.

Business Rules:
- Every response carries X-Request-ID (8 chars); log lines inside a request
  are bound to it
- Error bodies always use schemas/errors.ErrorResponse
- Stage and deal-draft validation failures are 422, never 500
- Failed backend writes are not errors: routes return persisted=false + notice

Called by: uvicorn (app.main:app)
Depends on: config, database, logging_config, routers/*, services/entity_book
"""

import os
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import create_tables
from .http_client import close_clients
from .logging_config import setup_logging
from .routers import clients, deals, matching, suppliers
from .schemas.errors import ErrorResponse
from .services.deal_synthesizer import DealValidationError
from .services.entity_book import Workspace
from .services.stage_normalizer import InvalidStageError

APP_VERSION = "1.0.0"


def build_workspace() -> Workspace:
    return Workspace(None if settings.fixtures_enabled else {})


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if not os.environ.get("TESTING"):
        create_tables()
    app.state.workspace = build_workspace()
    logger.info(
        "PharmaBroker API started",
        store_backend=settings.store_backend,
        fixtures=settings.fixtures_enabled,
    )
    yield
    await close_clients()


app = FastAPI(title="PharmaBroker", version=APP_VERSION, lifespan=lifespan)
app.state.workspace = build_workspace()


# ── Middleware ───────────────────────────────────────────────────────────


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    start = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        if request.url.path != "/health":
            logger.debug(
                "{} {} → {} ({:.1f} ms)",
                request.method, request.url.path, response.status_code, elapsed_ms,
            )
    response.headers["X-Request-ID"] = request_id
    return response


# ── Error handlers ───────────────────────────────────────────────────────


def _error(request: Request, status_code: int, error: str, detail: list | None = None):
    body = ErrorResponse(
        error=error,
        status_code=status_code,
        request_id=getattr(request.state, "request_id", ""),
        detail=detail,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(request, exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    detail = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return _error(request, 422, "Validation failed", detail)


@app.exception_handler(InvalidStageError)
async def invalid_stage_handler(request: Request, exc: InvalidStageError):
    return _error(request, 422, str(exc))


@app.exception_handler(DealValidationError)
async def deal_validation_handler(request: Request, exc: DealValidationError):
    detail = [{"loc": [field], "msg": msg, "type": "value_error"} for field, msg in exc.errors.items()]
    return _error(request, 422, "Deal is not valid", detail)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(
        "Unhandled error on {} {}", request.method, request.url.path
    )
    return _error(request, 500, "Internal server error")


# ── Routes ───────────────────────────────────────────────────────────────


@app.get("/health")
async def health():
    return {"status": "ok", "version": APP_VERSION, "store_backend": settings.store_backend}


app.include_router(clients.router)
app.include_router(suppliers.router)
app.include_router(deals.router)
app.include_router(matching.router)
