"""FastAPI application entry point."""
from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from benchshare.api import auth, pages
from benchshare.api.session import session_cookie_middleware
from benchshare.core import config
from benchshare.core.log import configure_logging
from benchshare.errors import NotFound, UpstreamFailure
from benchshare.persistence.db import init_db

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="benchshare",
    description="Shared benchmark test case pages",
    version="1.0.0",
)

# CORS — allow everything for local dev (restrict for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(session_cookie_middleware)


# ------------------------------------------------------------------
# Startup: logging + DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    configure_logging(config.LOG_LEVEL)
    init_db()


# ------------------------------------------------------------------
# Error mapping: hidden and missing pages answer the same way
# ------------------------------------------------------------------
@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": "The page was not found"})


@app.exception_handler(UpstreamFailure)
async def upstream_failure_handler(request: Request, exc: UpstreamFailure):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# ------------------------------------------------------------------
# Routers: auth first; the page routes catch every other path
# ------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(pages.router)
