"""
SeatFlow - Backend Main Application
FastAPI entry point

Endpoints:
    /api/v1/seatmaps - Seatmap layout & seat selection
    /health          - Health check
    /metrics         - Prometheus metrics

Run: uvicorn seatflow.main:app --reload --port 8000 (from backend/)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seatflow.core.config import LOG_LEVEL
from seatflow.core.metrics import setup_metrics
from seatflow.api.v1.seatmap_routes import router as seatmap_router
from seatflow.services.seatmap.session_store import clear_sessions, get_session_count

# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("SeatFlow-Backend")


# ═══════════════════════════════════════════════════════════════════
# LIFESPAN (Startup & Shutdown)
# ═══════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events"""

    # ─────────── STARTUP ───────────
    logger.info("🚀 Starting SeatFlow Backend...")

    yield

    # ─────────── SHUTDOWN ───────────
    logger.info(f"🛑 Shutting down SeatFlow Backend ({get_session_count()} open session(s))")
    clear_sessions()
    logger.info("👋 SeatFlow Backend stopped")


# ═══════════════════════════════════════════════════════════════════
# FASTAPI APP
# ═══════════════════════════════════════════════════════════════════

app = FastAPI(
    title="SeatFlow",
    description="Seatmap layout & multi-traveler seat selection engine",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

setup_metrics(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Production'da kısıtla
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ═══════════════════════════════════════════════════════════════════
# ROUTERS
# ═══════════════════════════════════════════════════════════════════

app.include_router(seatmap_router, prefix="/api/v1")  # /api/v1/seatmaps/...


# ═══════════════════════════════════════════════════════════════════
# ROOT ENDPOINTS
# ═══════════════════════════════════════════════════════════════════

@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "service": "seatflow",
        "active_sessions": get_session_count(),
    }


@app.get("/")
async def root():
    """API root - basic info"""
    return {
        "name": "SeatFlow",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
