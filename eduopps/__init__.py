# eduopps/__init__.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eduopps.core.config import settings
from eduopps.core.database import close_db, get_db_context, init_db
from eduopps.core.errors import register_exception_handlers
from eduopps.middleware import RequestIDMiddleware
from eduopps.routes import interests, opportunities, preferences
from eduopps.seed import seed_roles

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="API for sharing opportunities across schools and registering students for them",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Include routers
    app.include_router(opportunities.router, prefix="/api/v1/opportunities", tags=["Opportunities"])
    app.include_router(interests.router, prefix="/api/v1/student-interests", tags=["Registrations"])
    app.include_router(preferences.router, prefix="/api/v1/student-preferences", tags=["Preferences"])

    @app.get("/api/v1/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.VERSION}

    @app.on_event("startup")
    async def startup_event():
        await init_db()
        if settings.SEED_ON_STARTUP:
            async with get_db_context() as db:
                await seed_roles(db)
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_db()
        logger.info("Application shutdown completed")

    return app
