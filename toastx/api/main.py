"""
toastx.api.main — FastAPI application entry point
===================================================

Run with::

    uvicorn toastx.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from toastx import __version__  # noqa: E402
from toastx.api.deps import get_config, get_store  # noqa: E402
from toastx.api.routes.notifications import router as notifications_router  # noqa: E402
from toastx.api.routes.public import router as public_router  # noqa: E402
from toastx.api.routes.recognitions import router as recognitions_router  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Restore (or seed) the store before the first request."""
    store = get_store()
    cfg = get_config()
    logger.info(
        "Toast X API started for %s: %d users, %d recognitions (admin_mode=%s)",
        cfg.company_name,
        len(store.state.users),
        len(store.state.recognitions),
        cfg.admin_mode,
    )
    yield
    logger.info("Toast X API shutting down")


app = FastAPI(
    title="Toast X API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(public_router, prefix="/api")
app.include_router(recognitions_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
