"""
Community Donations — FastAPI Application Entry Point

Aggregates all routers, configures middleware and logging,
and initializes the database on startup.
"""
import time

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from donations.config import get_settings
from donations.database import SessionLocal, init_db
from donations.routes import campaign_router, payment_router
from donations.utils.logging import configure_logging

settings = get_settings()
logger = structlog.get_logger(__name__)

# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Donation payments for community fundraising campaigns. "
        "Covers JazzCash payment initiation, signed callback verification, "
        "and reconciliation of payment records."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# ─── Startup ─────────────────────────────────────────────────────────
BOOT_TIME = time.time()


@app.on_event("startup")
def on_startup():
    """Configure logging, initialize database tables and log boot info."""
    configure_logging()
    init_db()

    logger.info(
        "service_started",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        database=settings.DATABASE_URL,
        gateway_environment=settings.JAZZCASH_ENVIRONMENT,
        integrity_salt="[OK] Loaded" if settings.JAZZCASH_INTEGRITY_SALT else "[!] Missing",
        debug=settings.DEBUG,
    )


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        logger.info(
            "request_handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration,
        )

    return response


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(campaign_router)
app.include_router(payment_router)


@app.get("/health", tags=["Health"])
def deep_health():
    """Detailed health check including dependency statuses."""
    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        logger.warning("health_database_unreachable")
    finally:
        db.close()

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "gateway": settings.JAZZCASH_ENVIRONMENT,
        "uptime_seconds": round(time.time() - BOOT_TIME, 1),
        "version": settings.APP_VERSION,
    }
