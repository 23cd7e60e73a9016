"""FastAPI server for language pack lookups.

Serves the translations API consumed by the WooCommerce helper (mimics
https://api.wordpress.org/translations/plugins/1.0/) and the built archives
under /downloads/. In poll mode the GlotPress synchronizer runs as a
background task on the server's event loop.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .config import ServerConfig
from .downloader import GlotPressClient, RateLimitedClient
from .errors import FilesystemError, TranslationNotFound
from .index import TranslationIndex
from .packager import DOWNLOADS_PREFIX, PackageBuilder
from .synchronizer import PollScheduler, Synchronizer
from .utils.logging import get_logger

logger = get_logger(__name__)

# HTTP status of each error code; anything else is a 500
ERROR_STATUS = {
    "missing_slug": 400,
    "missing_version": 400,
    "translation_does_not_exist": 404,
}


class ErrorResponse(BaseModel):
    """Body of every error response."""

    code: str
    message: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    mode: str
    polling: bool
    translations: int


def json_error(code: str, message: str) -> JSONResponse:
    """Build an error response with the status mapped from its code."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(code, 500),
        content=ErrorResponse(code=code, message=message).model_dump(),
    )


def build_synchronizer(
    config: ServerConfig,
    client: RateLimitedClient,
    index: TranslationIndex,
) -> Synchronizer:
    """Wire the GlotPress client and package builder into a synchronizer."""
    return Synchronizer(
        projects=GlotPressClient(client, config.gp_api_url),
        packages=PackageBuilder(
            client,
            gp_url=config.gp_url,
            downloads_dir=config.downloads_dir,
            root_project=config.root_project,
        ),
        index=index,
        root_project=config.root_project,
        skip_inactive=config.skip_inactive_projects,
    )


def create_app(
    config: ServerConfig,
    index: Optional[TranslationIndex] = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Server configuration
        index: Translation index to serve (a new empty one by default)

    Returns:
        Configured FastAPI application

    Raises:
        FilesystemError: If the downloads directory cannot be created
    """
    index = index if index is not None else TranslationIndex()

    downloads_dir = Path(config.downloads_path)
    try:
        downloads_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create downloads directory {downloads_dir}: {e}") from e

    app = FastAPI(
        title="WooCommerce Language Packs API",
        description="Language packs built from GlotPress translations",
        version="1.0.0",
    )
    app.state.config = config
    app.state.index = index
    app.state.client = None
    app.state.scheduler = None

    @app.on_event("startup")
    async def startup_event():
        """Start polling GlotPress in poll mode."""
        logger.info(f"Update mode {config.mode}")
        logger.info(f"Serving {DOWNLOADS_PREFIX} from {downloads_dir}")

        if config.mode == "poll":
            client = RateLimitedClient(
                requests_per_minute=config.requests_per_minute,
                timeout=config.request_timeout,
                max_retries=config.max_retries,
                user_agent=config.user_agent,
            )
            scheduler = PollScheduler(
                build_synchronizer(config, client, index),
                interval=config.poll_interval,
            )
            scheduler.start()
            app.state.client = client
            app.state.scheduler = scheduler

    @app.on_event("shutdown")
    async def shutdown_event():
        """Stop polling and close the HTTP session."""
        if app.state.scheduler is not None:
            await app.state.scheduler.stop()
            app.state.scheduler = None
        if app.state.client is not None:
            await app.state.client.close()
            app.state.client = None

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Check API health and polling status."""
        scheduler = app.state.scheduler
        return HealthResponse(
            status="healthy",
            mode=config.mode,
            polling=scheduler is not None and scheduler.running,
            translations=len(index),
        )

    @app.get("/api/v1/plugins")
    def plugins(slug: str = "", version: str = "", locale: str = ""):
        """Get the language packs of a plugin version.

        Without ``locale`` all translations of the version are returned,
        keyed by locale.
        """
        if not slug:
            return json_error("missing_slug", "Missing slug in query string")
        if not version:
            return json_error("missing_version", "Missing version in query string")

        try:
            if not locale:
                translations = index.list_translations(slug, version)
                return {key: t.model_dump() for key, t in translations.items()}
            return index.get_translation(slug, version, locale).model_dump()
        except TranslationNotFound as e:
            return json_error(e.code, str(e))

    @app.get("/api/v1/themes")
    def themes():
        """Theme language packs are not served."""
        return json_error("error_not_implemented", "Not implemented")

    if config.mode == "notified":

        @app.api_route("/api/v1/update", methods=["GET", "POST"])
        def update():
            """Update notifications from GlotPress are not implemented."""
            return json_error("error_not_implemented", "Not implemented")

    if config.expose_db:

        @app.get("/_db")
        def dump_db():
            """Dump the in-memory index."""
            return index.dump()

    app.mount(
        DOWNLOADS_PREFIX.rstrip("/"),
        StaticFiles(directory=downloads_dir),
        name="downloads",
    )

    return app


def run_server(config: ServerConfig) -> None:
    """Run the language packs server.

    Args:
        config: Server configuration
    """
    import uvicorn

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_config=None,
    )
