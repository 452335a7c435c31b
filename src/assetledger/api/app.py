"""FastAPI application with lifespan, error mapping and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from assetledger.access.guard import AuthorizationGuard
from assetledger.api.deps import Services
from assetledger.api.routes import access, health, imports, records
from assetledger.audit.recorder import ChangeAuditRecorder
from assetledger.core.config import AppSettings
from assetledger.core.exceptions import (
    AssetLedgerError,
    CacheError,
    DuplicateRecordError,
    ParseError,
    PermissionDenied,
    PersistenceError,
    PreviewNotFoundError,
    RecordNotFoundError,
    UnknownEntityError,
    UnknownFieldError,
)
from assetledger.core.logging import get_logger, setup_logging
from assetledger.importing.importer import BatchImporter
from assetledger.importing.service import ImportService
from assetledger.persistence import Persistence, create_persistence
from assetledger.records.service import RecordService

logger = get_logger(__name__)

# Most specific first; handlers are looked up along the exception's MRO.
_STATUS_CODES: list[tuple[type[AssetLedgerError], int]] = [
    (ParseError, 400),
    (PermissionDenied, 403),
    (RecordNotFoundError, 404),
    (PreviewNotFoundError, 404),
    (UnknownEntityError, 404),
    (DuplicateRecordError, 409),
    (UnknownFieldError, 422),
    (PersistenceError, 502),
    (CacheError, 503),
    (AssetLedgerError, 500),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize and tear down application resources."""
    settings: AppSettings = app.state.settings
    setup_logging(level=settings.log_level, format=settings.log_format)
    logger.info(
        "app_started",
        environment=settings.environment,
        storage_backend=settings.storage_backend,
    )
    yield


def build_services(settings: AppSettings, persistence: Persistence) -> Services:
    guard = AuthorizationGuard(persistence.directory)
    recorder = ChangeAuditRecorder(persistence.audit)
    importer = BatchImporter(persistence.records, guard, recorder)
    return Services(
        settings=settings,
        persistence=persistence,
        guard=guard,
        imports=ImportService(persistence.records, persistence.cache, importer, settings.imports),
        records=RecordService(persistence.records, guard, recorder),
    )


def _register_error_handlers(app: FastAPI) -> None:
    for exc_type, status_code in _STATUS_CODES:

        async def handler(request: Request, exc: Exception, status_code: int = status_code):
            if status_code >= 500:
                logger.error("request_failed", path=request.url.path, error=str(exc))
            return JSONResponse(
                status_code=status_code,
                content={"error": type(exc).__name__, "detail": str(exc)},
            )

        app.add_exception_handler(exc_type, handler)


def create_app(
    settings: AppSettings | None = None, persistence: Persistence | None = None
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or AppSettings()
    persistence = persistence or create_persistence(settings)

    app = FastAPI(
        title="AssetLedger Inventory Import Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = build_services(settings, persistence)

    _register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(imports.router, prefix="/imports")
    app.include_router(records.router, prefix="/records")
    app.include_router(access.router, prefix="/access")
    return app
