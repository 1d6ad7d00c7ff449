import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interncoach import __version__
from interncoach.core.config import Settings, get_settings
from interncoach.routers import internships as internships_router
from interncoach.repositories.json_storage import JsonInternshipStore, StorageError
from interncoach.services.internship_service import InternshipService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


def _allowed_origins(settings: Settings) -> list[str]:
    allowed = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed.update(DEV_ORIGINS)
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Factory compatible with uvicorn (--factory interncoach.app:create_app)."""
    settings = settings or get_settings()
    app = FastAPI(title="InternCoach API", version=__version__)

    origins = _allowed_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    store = JsonInternshipStore(settings.data_file)
    try:
        store.ensure()
    except StorageError:
        # Requests will keep answering 500 until the path is writable.
        logger.error("Could not initialize data file %s", settings.data_file)

    app.state.settings = settings
    app.state.internship_service = InternshipService(
        store, strict_validation=settings.strict_validation
    )
    app.include_router(internships_router.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    logger.info(
        "InternCoach API ready (data file %s, strict validation %s)",
        settings.data_file,
        "on" if settings.strict_validation else "off",
    )
    return app
