"""
RentDesk API - Main Application

Property rental back office:
- /api/auth/...           -> Administrator login
- /api/rooms, /api/tenants, /api/leases
- /api/invoices, /api/light-bills, /api/payments
- /api/settings, /api/notifications, /api/dashboard
"""

import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from . import __version__
from .database import init_db, db
from .database.seed import seed_all
from .core.config import settings
from .core.exceptions import RentDeskError

from .routers.auth import router as auth_router
from .routers.rooms import router as rooms_router
from .routers.tenants import router as tenants_router
from .routers.leases import router as leases_router
from .routers.invoices import router as invoices_router
from .routers.light_bills import router as light_bills_router
from .routers.payments import router as payments_router
from .routers.settings import router as settings_router
from .routers.notifications import router as notifications_router
from .routers.dashboard import router as dashboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting RentDesk API...")

    try:
        init_db()
        logger.info("Database initialized")

        with db.get_session() as session:
            seed_all(session)
        logger.info("Seed data ensured")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    # Monthly invoice scheduler (background task)
    from .services.invoice_scheduler import scheduler
    scheduler_task = None
    if settings.SCHEDULER_ENABLED:
        scheduler.running = True
        scheduler_task = asyncio.create_task(scheduler.run())
        logger.info("Monthly invoice scheduler started")

    logger.info("RentDesk API started successfully!")

    yield

    # Shutdown
    if scheduler_task is not None:
        scheduler.stop()
        scheduler_task.cancel()
    db.dispose()
    logger.info("Shutting down RentDesk API...")


# Create FastAPI application
app = FastAPI(
    title="RentDesk API",
    description="""
    Rooms, tenants and leases with monthly rent invoices, electricity bills,
    payments and late fees.
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RentDeskError)
async def rentdesk_exception_handler(request: Request, exc: RentDeskError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc) if settings.DEBUG else None
        }
    )


# ==================== HEALTH ====================

@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "RentDesk API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    from sqlalchemy import text
    try:
        with db.get_session() as session:
            session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected", "error": str(e)}
        )


# ==================== ROUTERS ====================

API_PREFIX = "/api"

app.include_router(auth_router, prefix=f"{API_PREFIX}/auth")
app.include_router(rooms_router, prefix=f"{API_PREFIX}/rooms")
app.include_router(tenants_router, prefix=f"{API_PREFIX}/tenants")
app.include_router(leases_router, prefix=f"{API_PREFIX}/leases")
app.include_router(invoices_router, prefix=f"{API_PREFIX}/invoices")
app.include_router(light_bills_router, prefix=f"{API_PREFIX}/light-bills")
app.include_router(payments_router, prefix=f"{API_PREFIX}/payments")
app.include_router(settings_router, prefix=f"{API_PREFIX}/settings")
app.include_router(notifications_router, prefix=f"{API_PREFIX}/notifications")
app.include_router(dashboard_router, prefix=f"{API_PREFIX}/dashboard")


def main():
    import uvicorn
    uvicorn.run(
        "rentdesk.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
