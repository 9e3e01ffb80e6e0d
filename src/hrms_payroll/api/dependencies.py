"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrms_payroll.database import init_db
from hrms_payroll.directory.base import EmployeeDirectory
from hrms_payroll.services.context import ActorContext
from hrms_payroll.services.payroll_run_service import PayrollRunService


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    factory = getattr(request.app.state, "session_factory", None)
    if factory is None:
        _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_actor(
    x_organization_id: Annotated[str | None, Header()] = None,
    x_user: Annotated[str | None, Header()] = None,
) -> ActorContext:
    """Build the caller context from gateway-supplied headers."""
    if not x_organization_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-ID header is required",
        )
    try:
        organization_id = int(x_organization_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Organization-ID format",
        )
    if not x_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User header is required",
        )
    return ActorContext(user=x_user, organization_id=organization_id)


async def get_expected_version(
    if_match: Annotated[str | None, Header()] = None,
) -> int | None:
    """Optional optimistic-concurrency version from If-Match."""
    if if_match is None:
        return None
    try:
        return int(if_match.strip('W/"'))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="If-Match must carry the run version number",
        )


def get_directory(request: Request) -> EmployeeDirectory | None:
    return getattr(request.app.state, "directory", None)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Actor = Annotated[ActorContext, Depends(get_actor)]
ExpectedVersion = Annotated[int | None, Depends(get_expected_version)]
Directory = Annotated[EmployeeDirectory | None, Depends(get_directory)]


async def get_payroll_service(db: DbSession, directory: Directory) -> PayrollRunService:
    return PayrollRunService(db, directory=directory)


PayrollService = Annotated[PayrollRunService, Depends(get_payroll_service)]
