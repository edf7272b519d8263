"""
Menu API main application.
Entry point for the FastAPI server.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text

from menu_api.core import configure_cors, lifespan, register_middlewares
from menu_api.routers import router as imenu_router
from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal


app = FastAPI(
    title="Menu API",
    description="Hierarchical navigation menus for multi-tenant sites",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "menu-api",
        "environment": settings.environment,
    }


@app.get("/api/health/detailed")
def detailed_health_check():
    """Health check that verifies database connectivity."""
    checks = {
        "service": "menu-api",
        "environment": settings.environment,
        "dependencies": {},
    }

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
        checks["status"] = "healthy"
    except Exception as e:
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        checks["status"] = "degraded"
        return JSONResponse(content=checks, status_code=503)

    return checks


# =============================================================================
# Routers
# =============================================================================

app.include_router(imenu_router, prefix="/api/imenu")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("menu_api.main:app", host="0.0.0.0", port=settings.api_port, reload=settings.debug)
