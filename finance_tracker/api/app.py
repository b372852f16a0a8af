"""
FastAPI Application

Builds the app, mounts the resource routers and translates every domain
error into a JSON {"error": "..."} body with the matching status code.

Error mapping:
- Request validation, report parameters, ledger and tax rule errors -> 400
- NotFoundError -> 404
- DuplicateError -> 409
- Anything else -> 500 with a generic message (details only in the log)
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_tracker import __version__
from finance_tracker.api.routes import ROUTERS
from finance_tracker.audit import configure_logging
from finance_tracker.config import Settings, get_settings, validate_all_settings
from finance_tracker.ledger import LedgerError
from finance_tracker.orchestrator import AppComponents, create_app_components
from finance_tracker.queries import ReportParameterError
from finance_tracker.services.storage import DuplicateError, NotFoundError, StorageError
from finance_tracker.tax import TaxCalculationError


logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(errors: list) -> str:
    """First validation problem as 'field: message'."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(
        str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")
    )
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _validation_message(exc.errors()))

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _validation_message(exc.errors()))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(DuplicateError)
    async def duplicate_handler(request: Request, exc: DuplicateError):
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(LedgerError)
    async def ledger_handler(request: Request, exc: LedgerError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(TaxCalculationError)
    async def tax_handler(request: Request, exc: TaxCalculationError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(ReportParameterError)
    async def report_parameter_handler(request: Request, exc: ReportParameterError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(StorageError)
    async def storage_handler(request: Request, exc: StorageError):
        logger.error("storage_failure", path=request.url.path, error=str(exc))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
            exc_info=exc,
        )
        await request.app.state.components.audit_logger.log_error(
            error_type=type(exc).__name__,
            error_message=str(exc),
            details={"path": request.url.path},
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def create_app(
    components: Optional[AppComponents] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        components: Pre-built components (tests pass their own storage);
                   built from settings when omitted
        settings: Settings to use; defaults to get_settings()
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.components.close()

    app = FastAPI(
        title=app_settings.api_title,
        version=__version__,
        debug=app_settings.debug_mode,
        lifespan=lifespan,
    )
    app.state.components = components or create_app_components(settings)

    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    checks = validate_all_settings()
    if not all(value is True for key, value in checks.items() if not key.endswith("_error")):
        logger.error("settings_invalid", **checks)
        raise SystemExit(1)
    app_settings = settings.app
    uvicorn.run(
        create_app(settings=settings),
        host=app_settings.api_host,
        port=app_settings.api_port,
        log_level=app_settings.log_level.lower(),
    )
