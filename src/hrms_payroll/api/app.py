"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hrms_payroll import __version__
from hrms_payroll.api.routes import health_router, payroll_runs_router, payslips_router
from hrms_payroll.config import configure_logging, settings
from hrms_payroll.database import dispose_db, init_db
from hrms_payroll.directory import EmployeeDirectory, HttpEmployeeDirectory
from hrms_payroll.exceptions import (
    ConcurrentModificationError,
    DuplicatePayslipError,
    DuplicateRunError,
    NotFoundError,
    PayrollError,
    PayrollProcessingError,
    ValidationError,
)
from hrms_payroll.services.state_machine import InvalidTransitionError

logger = logging.getLogger(__name__)

# First match wins; subclasses precede their bases.
ERROR_STATUS: list[tuple[type[PayrollError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateRunError, status.HTTP_409_CONFLICT),
    (DuplicatePayslipError, status.HTTP_409_CONFLICT),
    (ConcurrentModificationError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PayrollProcessingError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_for(exc: PayrollError) -> int:
    for exc_type, status_code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    owned_directory: HttpEmployeeDirectory | None = None

    if app.state.session_factory is None:
        _, app.state.session_factory = init_db()
    if app.state.directory is None and settings.employee_directory_url:
        owned_directory = HttpEmployeeDirectory(
            settings.employee_directory_url,
            timeout=settings.employee_directory_timeout,
        )
        app.state.directory = owned_directory
        logger.info("Using employee directory at %s", settings.employee_directory_url)

    yield

    if owned_directory is not None:
        await owned_directory.aclose()
    await dispose_db()


def create_app(
    directory: EmployeeDirectory | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="HRMS Payroll API",
        description="Payroll runs, payslips and payroll items",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.directory = directory
    app.state.session_factory = session_factory

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollError)
    async def payroll_exception_handler(request: Request, exc: PayrollError) -> JSONResponse:
        status_code = status_for(exc)
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": str(exc),
                "code": exc.code,
                "errors": getattr(exc, "errors", None),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_runs_router, prefix="/api/v1")
    app.include_router(payslips_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
