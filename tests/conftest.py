"""Pytest fixtures for payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hrms_payroll.calculators.types import EmployeeCompensation
from hrms_payroll.database import create_schema, make_session_factory
from hrms_payroll.directory import AttendanceRecord, InMemoryEmployeeDirectory
from hrms_payroll.services import ActorContext, PayrollRunService

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ORG_ID = 1
OTHER_ORG_ID = 2


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def ctx() -> ActorContext:
    return ActorContext(user="alice", organization_id=ORG_ID)


@pytest.fixture
def other_ctx() -> ActorContext:
    return ActorContext(user="mallory", organization_id=OTHER_ORG_ID)


@pytest.fixture
def directory() -> InMemoryEmployeeDirectory:
    """Two salaried employees and one hourly contractor in organization 1."""
    directory = InMemoryEmployeeDirectory(
        employees=[
            EmployeeCompensation(
                employee_id=42,
                organization_id=ORG_ID,
                employee_number="E-042",
                full_name="Dana Reyes",
                employment_type="FULL_TIME",
                salary_amount=Decimal("5000.00"),
                benefit_elections={"health_insurance": Decimal("150.00")},
            ),
            EmployeeCompensation(
                employee_id=43,
                organization_id=ORG_ID,
                employee_number="E-043",
                full_name="Sam Okafor",
                employment_type="CONTRACT",
                hourly_rate=Decimal("40.00"),
            ),
            EmployeeCompensation(
                employee_id=44,
                organization_id=ORG_ID,
                employee_number="E-044",
                full_name="Former Employee",
                salary_amount=Decimal("3000.00"),
                is_active=False,
            ),
            EmployeeCompensation(
                employee_id=90,
                organization_id=OTHER_ORG_ID,
                employee_number="X-090",
                full_name="Other Org",
                salary_amount=Decimal("9000.00"),
            ),
        ]
    )
    directory.record_attendance(
        AttendanceRecord(43, date(2024, 1, 2), regular_hours=Decimal("8"))
    )
    directory.record_attendance(
        AttendanceRecord(
            43, date(2024, 1, 3), regular_hours=Decimal("8"), overtime_hours=Decimal("2")
        )
    )
    # Outside the January period
    directory.record_attendance(
        AttendanceRecord(43, date(2024, 2, 1), regular_hours=Decimal("8"))
    )
    return directory


@pytest.fixture
def service(session, directory) -> PayrollRunService:
    return PayrollRunService(session, directory=directory)


@pytest_asyncio.fixture
async def january_run(service, ctx):
    """A draft run for January 2024."""
    return await service.create_run(
        ctx,
        name="January 2024",
        pay_period_start=date(2024, 1, 1),
        pay_period_end=date(2024, 1, 31),
        pay_date=date(2024, 2, 1),
    )
