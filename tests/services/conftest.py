"""Service test fixtures: async DB, FastAPI test client and a seeded tenant.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test database
    - `world` seeds two tenants: acme (one organization, a user per role, a small
      reporting line) and globex (one admin), plus a tenant-less sysadmin

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection, so rows
      committed by fixtures are visible to the app
    - Identity is sent the way the gateway sends it: the X-User-Id header
      (tests/services/helpers.py as_user)
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import hrms.infrastructure.database as db_module
from hrms.db.base import Base
from hrms.infrastructure.database import DatabaseSessionManager, get_db
from hrms.main import app
from hrms.models.compensation_band_template import CompensationBandTemplate
from hrms.models.employee import Employee
from hrms.models.leave_type_template import LeaveTypeTemplate
from hrms.models.organization import Organization
from hrms.models.skill_template import SkillTemplate
from hrms.models.tenant import Tenant
from hrms.models.user import User
from hrms.services.employee_service import employee_number_for


@dataclass
class World:
    tenant: Tenant
    organization: Organization
    sysadmin: User
    admin: User
    hr: User
    manager: User
    employee: User
    peer: User
    hr_employee: Employee
    manager_employee: Employee
    employee_profile: Employee
    peer_profile: Employee
    other_tenant: Tenant
    other_organization: Organization
    other_admin: User


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


def _user(tenant, organization, email, role, first="Test", last=None) -> User:
    return User(
        id=uuid.uuid4(),
        tenant_id=tenant.id if tenant else None,
        organization_id=organization.id if organization else None,
        email=email, first_name=first, last_name=last or role.title(), role=role,
    )


def _employee(user: User, manager: Employee | None = None, **extra) -> Employee:
    employee_id = uuid.uuid4()
    return Employee(
        id=employee_id,
        tenant_id=user.tenant_id,
        organization_id=user.organization_id,
        user_id=user.id,
        employee_number=employee_number_for(employee_id),
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        hire_date=date(2023, 1, 9),
        manager_id=manager.id if manager else None,
        **extra,
    )


@pytest.fixture
async def world(test_db) -> World:
    """Two tenants with users per role; see module docstring."""
    tenant = Tenant(
        id=uuid.uuid4(), name="Acme", slug="acme",
        subscription_plan="professional", subscription_status="active",
        features={}, settings={},
    )
    organization = Organization(
        id=uuid.uuid4(), tenant_id=tenant.id, name="Acme Italia", slug="italia",
        max_employees=50, features={"leave_management": True}, settings={},
    )
    other_tenant = Tenant(
        id=uuid.uuid4(), name="Globex", slug="globex",
        subscription_plan="trial", subscription_status="trial",
        trial_ends_at=datetime.now(timezone.utc) + timedelta(days=10),
        features={}, settings={},
    )
    other_organization = Organization(
        id=uuid.uuid4(), tenant_id=other_tenant.id, name="Globex HQ", slug="hq",
        features={}, settings={},
    )
    test_db.add_all([tenant, other_tenant])
    await test_db.flush()
    test_db.add_all([organization, other_organization])
    await test_db.flush()

    sysadmin = _user(None, None, "root@hrms.test", "sysadmin")
    admin = _user(tenant, organization, "admin@acme.test", "admin")
    hr = _user(tenant, organization, "hr@acme.test", "hr")
    manager = _user(tenant, organization, "manager@acme.test", "manager", first="Marta")
    employee = _user(tenant, organization, "employee@acme.test", "employee", first="Enzo")
    peer = _user(tenant, organization, "peer@acme.test", "employee", first="Paola")
    other_admin = _user(other_tenant, other_organization, "admin@globex.test", "admin")
    test_db.add_all([sysadmin, admin, hr, manager, employee, peer, other_admin])
    await test_db.flush()

    hr_employee = _employee(hr)
    manager_employee = _employee(manager, department="Engineering")
    test_db.add_all([hr_employee, manager_employee])
    await test_db.flush()
    employee_profile = _employee(
        employee, manager_employee, department="Engineering",
        vacation_balance=10.0, sick_balance=5.0,
    )
    peer_profile = _employee(peer, department="Sales")
    test_db.add_all([employee_profile, peer_profile])
    await test_db.commit()

    return World(
        tenant=tenant, organization=organization, sysadmin=sysadmin, admin=admin,
        hr=hr, manager=manager, employee=employee, peer=peer,
        hr_employee=hr_employee, manager_employee=manager_employee,
        employee_profile=employee_profile, peer_profile=peer_profile,
        other_tenant=other_tenant, other_organization=other_organization,
        other_admin=other_admin,
    )


@pytest.fixture
async def skill_template(test_db) -> SkillTemplate:
    template = SkillTemplate(
        id=uuid.uuid4(), name="Python", category="engineering",
        description="General-purpose programming",
        proficiency_levels=["beginner", "intermediate", "advanced"],
        version="1.0",
    )
    test_db.add(template)
    await test_db.commit()
    return template


@pytest.fixture
async def leave_type_template(test_db) -> LeaveTypeTemplate:
    template = LeaveTypeTemplate(
        id=uuid.uuid4(), name="Parental leave", category="family",
        description="Paid leave for new parents",
        max_days_per_year=20, carry_over_days=0, requires_approval=True, is_paid=True,
        version="1.0",
    )
    test_db.add(template)
    await test_db.commit()
    return template


@pytest.fixture
async def compensation_band_template(test_db) -> CompensationBandTemplate:
    template = CompensationBandTemplate(
        id=uuid.uuid4(), name="Engineering L3", category="engineering",
        salary_range={"min": 45000, "max": 60000, "currency": "EUR"},
        grade_levels=["L3a", "L3b"], progression_criteria=["peer review"],
        version="1.0",
    )
    test_db.add(template)
    await test_db.commit()
    return template
