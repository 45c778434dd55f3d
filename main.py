import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.auth import router as auth_router
from routers.admin import router as admin_router

from routers.properties import router as properties_router
from routers.properties import favorites_router
from routers.projects import router as projects_router
from routers.messages import router as messages_router
from routers.payments import router as payments_router
from routers.members import router as members_router
from routers.categories import router as categories_router

from routers.uploads import router as uploads_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Realty Marketplace API: listings, development projects, messaging and payments on Supabase",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup()
        for route in app.routes:
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            logger.debug(f"route {methods:10s} {getattr(route, 'path', '')}")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url.path}: {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------

    # Auth
    app.include_router(auth_router)

    # Marketplace
    app.include_router(properties_router)
    app.include_router(favorites_router)
    app.include_router(projects_router)
    app.include_router(messages_router)
    app.include_router(payments_router)

    # Site content
    app.include_router(members_router)
    app.include_router(categories_router)

    # Admin
    app.include_router(admin_router)

    # Uploads
    app.include_router(uploads_router)

    # Health
    app.include_router(health_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"service": settings.PROJECT_NAME, "docs": "/docs"}

    return app


# Create the global FastAPI instance
app = create_app()
