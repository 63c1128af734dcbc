from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import asyncio
import time
import logging

from .api.v1.admin import router as admin_router
from .api.v1.booking import router as booking_router
from .api.v1.patients import router as patients_router
from .api.v1.realtime import router as realtime_router
from .api.v1.staff import router as staff_router
from .core.config import settings
from .core.database import init_db
from .core.errors import ClinicError, PersistenceError
from .realtime.broadcaster import ConnectionHub, build_broadcaster, start_relay

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Clinic appointment booking with real-time slot updates",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Real-time collaborators live for the whole process
app.state.hub = ConnectionHub()
app.state.broadcaster = build_broadcaster(settings, app.state.hub)
app.state.relay_task = None

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware for request logging and timing
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log request
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )

    return response

# Exception handlers
@app.exception_handler(ClinicError)
async def clinic_error_handler(request: Request, exc: ClinicError):
    if isinstance(exc, PersistenceError):
        # Details were logged where the failure happened
        logger.error(f"Persistence failure on {request.url.path}: {exc.__cause__!r}")
    else:
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message}
    )

@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": "DB Error"}
    )

@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "message": "The requested resource was not found",
            "path": str(request.url.path)
        }
    )

@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred"
        }
    )

# Include routers
app.include_router(booking_router)
app.include_router(staff_router)
app.include_router(patients_router)
app.include_router(admin_router)
app.include_router(realtime_router)

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Starting Clinic Booking System...")

    db_url = settings.get_database_url
    db_type = "PostgreSQL" if "postgresql" in db_url else "SQLite" if "sqlite" in db_url else "Unknown"
    logger.info(f"Using {db_type} database")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    if settings.BROADCAST_BACKEND.lower() == "redis":
        app.state.relay_task = start_relay(
            settings.REDIS_URL, settings.BROADCAST_CHANNEL, app.state.hub
        )

    logger.info(f"Real-time backend: {settings.BROADCAST_BACKEND}")
    logger.info("Application startup complete")

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown."""
    logger.info("Shutting down Clinic Booking System...")
    relay_task = app.state.relay_task
    if relay_task is not None:
        relay_task.cancel()
        try:
            await relay_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            # Already reported by the task's done-callback
            logger.warning(f"Redis relay had stopped before shutdown: {e!r}")
        app.state.relay_task = None

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION,
        "realtime_subscribers": app.state.hub.subscriber_count
    }

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Welcome to Clinic Booking System API",
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health",
        "realtime": "/ws"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinic.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
