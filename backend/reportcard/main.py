"""
Report Card Service — FastAPI Application

This is the entry point for the backend. It:
1. Creates the FastAPI app instance
2. Configures CORS (so the web frontend can talk to us)
3. Registers route handlers
4. Sets up startup/shutdown lifecycle events

Run with:
    uvicorn reportcard.main:app --reload --port 8000
"""

import math
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reportcard.config import settings
from reportcard.database import init_db
from reportcard.routers import rankings, reports, stats, students, subjects

# Import models so SQLAlchemy registers them with Base.metadata
# before init_db() calls create_all().
import reportcard.models  # noqa: F401

SERVICE_NAME = "Report Card Service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic.

    Code before 'yield' runs on startup, code after it on shutdown.
    """
    # --- Startup ---
    print(f"🚀 Starting {SERVICE_NAME} API...")
    await init_db()  # Create tables if they don't exist
    print(f"✅ Database tables created/verified (PDF backend: {settings.PDF_BACKEND})")

    yield  # App is running, handling requests

    # --- Shutdown ---
    print("👋 Shutting down...")


app = FastAPI(
    title=f"{SERVICE_NAME} API",
    description="Student records, class rankings and printable academic report sheets",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(students.router)
app.include_router(subjects.router)
app.include_router(rankings.router)
app.include_router(stats.router)
app.include_router(reports.router)


# --- Validation errors ---

def _json_safe(value):
    """Replace NaN/Infinity, which JSON cannot carry, with their string form."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Same 422 body as FastAPI's default, but safe when the rejected input is NaN."""
    return JSONResponse(
        status_code=422,
        content={"detail": _json_safe(jsonable_encoder(exc.errors()))},
    )


# --- Health Check Endpoints ---

@app.get("/", tags=["health"])
async def root():
    """Root endpoint — confirms the API is alive."""
    return {
        "service": SERVICE_NAME,
        "status": "running",
        "version": SERVICE_VERSION,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Detailed health check — verifies database connectivity."""
    from sqlalchemy import text

    from reportcard.database import AsyncSessionLocal

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": settings.APP_ENV,
    }
