"""SaaS Identity Analytics - Main Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from saas_analytics.api.routes import analytics_router
from saas_analytics.core.config import get_settings
from saas_analytics.core.database import SessionLocal, get_db_stats, init_db
from saas_analytics.core.exceptions import AllPlatformsUnreachable, MissingCompanyContext

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")

    init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Cross-platform identity correlation, ghost user detection, "
                "security risk scoring, and license waste estimation.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics_router)


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


@app.get("/health/detailed")
async def detailed_health_check():
    """Detailed health check with component status."""
    components = {
        "database": "unknown",
        "enabled_platforms": settings.enabled_platforms,
    }
    stats = {}

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            stats = get_db_stats(db)
        finally:
            db.close()
        components["database"] = "healthy"
    except Exception as e:
        components["database"] = f"unhealthy: {str(e)}"

    return {
        "status": "healthy" if components["database"] == "healthy" else "degraded",
        "version": settings.app_version,
        "components": components,
        "database_stats": stats,
    }


@app.exception_handler(MissingCompanyContext)
async def missing_company_handler(request: Request, exc: MissingCompanyContext):
    """Requests without a company scope are rejected as unauthenticated."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
    )


@app.exception_handler(AllPlatformsUnreachable)
async def all_platforms_unreachable_handler(request: Request, exc: AllPlatformsUnreachable):
    """No platform answered; report an error rather than an empty dashboard."""
    logger.error(f"All platforms unreachable for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "No connected platform could be reached",
            "company_id": exc.company_id,
            "platforms": exc.platforms,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": str(exc) if settings.debug else None},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "saas_analytics.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
