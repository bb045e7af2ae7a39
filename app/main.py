# app/main.py
from __future__ import annotations

import logging
import uuid
from typing import Dict, Optional

from fastapi import FastAPI, APIRouter, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Logging & request-id ---
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from app.config import settings
from app.core.errors import LedgerError
from app.core.logging import configure_logging, logger
from app.core.request_id import set_request_id, clear_request_id
from services.db_service import close_db_pool, ping_db

from api.routers.activities import router as activities_router
from api.routers.auth import router as auth_router
from api.routers.emission_factors import router as emission_factors_router
from api.routers.rewards import router as rewards_router

_log_level = logging.getLevelName(settings.LOG_LEVEL.upper())
configure_logging(service_name="api", level=_log_level if isinstance(_log_level, int) else logging.INFO)

app = FastAPI(
    title="EcoTrack - Backend",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)


def _cors_headers(origin: Optional[str]) -> Dict[str, str]:
    if origin and origin in settings.CORS_ORIGINS:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Vary": "Origin",
        }
    return {}

@app.on_event("shutdown")
async def _shutdown_cleanup() -> None:
    await close_db_pool()

class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        set_request_id(req_id)

        logger.info("request_started", method=request.method, path=str(request.url.path))
        try:
            response: StarletteResponse = await call_next(request)
        except Exception as exc:
            logger.error("request_exception", error=str(exc.__class__.__name__))
            clear_request_id()
            raise
        logger.info("request_ended", status_code=response.status_code)
        response.headers["X-Request-Id"] = req_id
        clear_request_id()
        return response

# --- CORS ---
# Added first so it is the outermost middleware.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    expose_headers=["Content-Length", "X-Request-Id"],
)

app.add_middleware(RequestIdMiddleware)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    origin = request.headers.get("origin")
    log = logger.warning if exc.status_code >= 500 else logger.info
    log("ledger_error", error=exc.__class__.__name__, status_code=exc.status_code, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=_cors_headers(origin),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    origin = request.headers.get("origin")
    headers = dict(exc.headers or {})
    headers.update(_cors_headers(origin))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    origin = request.headers.get("origin")
    headers = _cors_headers(origin)
    logger.exception("unhandled_exception", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"}, headers=headers)

# --- Health endpoints ---
@app.get("/")
async def root():
    return {"ok": True, "app": "EcoTrack Backend", "message": "Up & running"}

@app.get("/health")
async def health():
    try:
        await ping_db()
    except Exception as exc:
        logger.warning("health_db_unreachable", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Database connection failed"},
        )
    return {"status": "ok"}

# --- API v1 router ---
api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(auth_router)
api_v1_router.include_router(activities_router)
api_v1_router.include_router(rewards_router)
api_v1_router.include_router(emission_factors_router)

app.include_router(api_v1_router)
