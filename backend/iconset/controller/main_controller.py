"""FastAPI application bootstrap and routing setup."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from termcolor import colored

from iconset.config.settings import get_settings
from iconset.controller.icon_controller import router as icon_router
from iconset.handlers.error_handler import MapExceptions as me
from iconset.utility.logger import AppLogger

settings = get_settings()
AppLogger.init(level=settings.log_level, log_to_file=settings.log_to_file)

app = FastAPI(title="Icon Set Generator", version="0.1.0")
me.register_exception_handlers(app)
logger = AppLogger.get_logger(__name__)

logger.info(
    colored(
        f"Running in {settings.run_mode} mode with provider {settings.effective_provider}",
        "yellow",
    )
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)
app.include_router(icon_router)
# Legacy /api prefix for existing web clients
app.include_router(icon_router, prefix="/api")


@app.get("/health", tags=["Health"])
@app.get("/api/health", tags=["Health"])
def health_check():
    """Health check used by deployments and monitoring."""
    return {
        "status": "ok",
        "mode": settings.run_mode,
        "provider": settings.effective_provider,
    }
