import uvicorn
from fastapi import FastAPI

from tourney.api.routes.admin import router as admin_router
from tourney.api.routes.health import router as health_router
from tourney.api.routes.organizer import router as organizer_router
from tourney.api.routes.registrations import router as registrations_router
from tourney.api.routes.tournaments import router as tournaments_router
from tourney.core.config import get_settings
from tourney.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    docs_enabled = bool(settings.enable_openapi_docs)
    app = FastAPI(
        title="Tourney Registrations API",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.include_router(health_router)
    app.include_router(tournaments_router)
    app.include_router(registrations_router)
    app.include_router(organizer_router)
    app.include_router(admin_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "tourney.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
