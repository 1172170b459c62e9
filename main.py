"""
MicroSkill API.

Serves the lesson catalogue, resolved media URLs, caption cues, learner
progress, and the static /assets tree the media resolver probes.

Run with: uvicorn main:app --port 3001
"""

import logging
import os
from contextlib import asynccontextmanager

import httpx
import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

load_dotenv(".env.local")

from core.config import (  # noqa: E402
    get_allowed_origins,
    get_api_base_url,
    get_assets_dir,
    get_environment,
    get_log_level,
    get_probe_timeout,
)
from web_api.routes import diagnostics, lessons, progress, settings, skills  # noqa: E402
from web_api.services import build_services  # noqa: E402

API_VERSION = "0.1.0"

# Base URL used when probing our own /assets mount in-process
SELF_BASE_URL = "http://assets.local"

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if os.environ.get("SENTRY_DSN"):
    sentry_sdk.init(
        dsn=os.environ["SENTRY_DSN"],
        environment=get_environment(),
        traces_sample_rate=0.0,
    )


def _make_client(app: FastAPI) -> httpx.AsyncClient:
    """
    HTTP client used for asset probing and caption fetches.

    With API_BASE / BACKEND_URL set, assets are probed on that host;
    otherwise requests go to this app's own /assets mount without a network hop.
    """
    base = get_api_base_url()
    timeout = get_probe_timeout()
    if base:
        return httpx.AsyncClient(base_url=base, timeout=timeout)
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url=SELF_BASE_URL, timeout=timeout
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = _make_client(app)
    app.state.services = build_services(client)
    logger.info(f"MicroSkill API starting ({get_environment()})")
    try:
        yield
    finally:
        await client.aclose()
        logger.info("MicroSkill API shut down")


app = FastAPI(title="MicroSkill API", version=API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(lessons.router)
app.include_router(progress.router)
app.include_router(diagnostics.router)
app.include_router(settings.router)
app.include_router(skills.router)

assets_dir = get_assets_dir()
if assets_dir.exists():
    app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")
else:
    logger.warning(f"Assets directory {assets_dir} not found; /assets not served")


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    sentry_sdk.capture_exception(exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Unexpected error"}},
    )


@app.get("/")
async def health():
    """Health check."""
    return {
        "ok": True,
        "environment": get_environment(),
        "message": "MicroSkill API",
        "version": API_VERSION,
    }
