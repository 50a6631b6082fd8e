"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.dependencies import get_edge_tools
from app.routers import functions, secrets, tools
from app.utils.fs import missing_root_error

# ── Logging setup ────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if err := missing_root_error(settings.functions_dir):
        logger.error("Edge Functions store unavailable: %s", err)
    else:
        logger.info("Edge Functions store at %s", settings.functions_dir)

    yield

    # Shutdown — close the invocation backend's connection pool
    if get_edge_tools.cache_info().currsize:
        await get_edge_tools().backend.aclose()


app = FastAPI(
    title="Edge Functions",
    description="Deploy, configure and invoke self-hosted Supabase Edge Functions",
    version="0.1.0",
    lifespan=lifespan,
)

# Mount routers
app.include_router(functions.router, prefix="/api/functions", tags=["functions"])
app.include_router(secrets.router, prefix="/api/secrets", tags=["secrets"])
app.include_router(tools.router, prefix="/api/tools", tags=["tools"])


@app.get("/health")
async def health():
    err = missing_root_error(settings.functions_dir)
    return {
        "status": "ok" if err is None else "degraded",
        "service": "edge-functions",
        "functions_dir": {
            "path": str(settings.functions_dir) if settings.functions_dir else None,
            "ready": err is None,
            "error": err,
        },
    }
