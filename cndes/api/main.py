"""
FastAPI Application — CNDES Document Registry.

Architecture:
  - PostgreSQL (prod) / SQLite (dev) for documents, catalogs, users, counters
  - Local uploads directory for attachments, served under /uploads
  - Bearer JWT sessions on every /api route except /api/login
  - Built web client (SPA) served from CLIENT_DIST_DIR when present
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from cndes.api.dependencies import Container, build_container
from cndes.api.errors import register_exception_handlers
from cndes.api.middleware import RequestSizeLimitMiddleware
from cndes.api.routes.auth import router as auth_router
from cndes.api.routes.catalogs import router as catalogs_router
from cndes.api.routes.documents import router as documents_router
from cndes.api.routes.users import router as users_router
from cndes.config.settings import Settings, get_settings
from cndes.infrastructure.db.database import configure_database, describe_database, init_db
from cndes.infrastructure.db.seed import (
    DEPARTMENTS,
    EXTERNAL_ENTITIES,
    ensure_admin_user,
    load_demo_documents,
    seed_catalog,
)

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables, seed catalogs, bootstrap the admin."""
    container: Container = app.state.container
    _bootstrap(container)
    logger.info(f"CNDES registry started ({describe_database()}, env={container.settings.env})")
    yield
    logger.info("CNDES registry stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory. Tests pass their own Settings."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    configure_database(settings.database_url)

    app = FastAPI(
        title="CNDES Document Registry",
        description="Registry of incoming, outgoing and internal correspondence with attachments.",
        version=APP_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = build_container(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_bytes)
    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api", tags=["Auth"])
    app.include_router(documents_router, prefix="/api", tags=["Documents"])
    app.include_router(catalogs_router, prefix="/api", tags=["Catalogs"])
    app.include_router(users_router, prefix="/api", tags=["Users"])

    # ── Health ──
    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "version": APP_VERSION,
            "database": describe_database(),
            "documents_stored": len(app.state.container.documents.list_ids()),
        }

    # ── Attachments & UI ──
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.uploads_dir, check_dir=False),
        name="uploads",
    )
    _mount_client(app, Path(settings.client_dist_dir))

    return app


def _bootstrap(container: Container) -> None:
    settings = container.settings
    init_db()
    container.storage.ensure_root()

    if settings.seed_catalogs:
        added = seed_catalog(container.departments, DEPARTMENTS)
        added += seed_catalog(container.external_entities, EXTERNAL_ENTITIES)
        if added:
            logger.info(f"Seeded {added} catalog entries")

    if settings.load_demo_documents:
        load_demo_documents(container.documents)

    if ensure_admin_user(
        container.users,
        container.hasher,
        username=settings.admin_username,
        password=settings.admin_password,
        name=settings.admin_name,
    ):
        logger.info(f"Created bootstrap admin {settings.admin_username}")


def _mount_client(app: FastAPI, dist_dir: Path) -> None:
    """Serves the built SPA; unknown paths fall back to index.html."""
    index = dist_dir / "index.html"
    if not index.exists():
        logger.info(f"No client build at {dist_dir}, serving the API only")
        return

    root = dist_dir.resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_client(full_path: str):
        if full_path.split("/", 1)[0] in ("api", "uploads"):
            raise HTTPException(status_code=404, detail="Not Found")
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        return FileResponse(index)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    run_settings = get_settings()
    uvicorn.run(
        "cndes.api.main:app",
        host=run_settings.api_host,
        port=run_settings.api_port,
        reload=run_settings.debug,
    )
