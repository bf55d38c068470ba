"""
Tango community feed service — entry point.

Startup sequence:
  1. Configure OTel tracing (→ Jaeger via OTLP)
  2. Initialise the DB connection pool and create tables if not present
  3. Expose Prometheus /metrics endpoint

The ranking core itself holds no connections; each request gets a
FeedAlgorithmService over per-read database sessions.
"""
import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from tangofeed.config import settings
from tangofeed.database import dispose_db, init_db
from tangofeed.telemetry import setup_tracing, instrument_app
from tangofeed.routers import feed, users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Set up tracing before the app is created so all imports are instrumented
setup_tracing()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup and shutdown of the database pool."""
    logger.info("Starting feed service (env=%s)", settings.environment)

    await init_db()

    logger.info("Database connected. Feed service ready.")
    yield

    logger.info("Shutting down...")
    await dispose_db()


app = FastAPI(
    title="Tango Community Feed",
    description=(
        "Feed ranking for the tango community: social proximity, engagement "
        "and recency scoring with author diversity and offset pagination."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# ── Routers ────────────────────────────────────────────────────────────────
app.include_router(feed.router, prefix="/feed", tags=["Feed"])
app.include_router(users.router, prefix="/users", tags=["Users"])

# ── Prometheus metrics endpoint ────────────────────────────────────────────
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── OTel FastAPI instrumentation ──────────────────────────────────────────
instrument_app(app)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "service": settings.service_name}
