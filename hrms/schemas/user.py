"""User Schemas: account creation/update and the public user view (no password hash)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from hrms.core.domain_types import Locale, UserRole, UserStatus
from hrms.schemas.common import ORMModel, Pagination


class UserCreate(BaseModel):
    """organization_id defaults to the caller's organization."""
    email: str = Field(min_length=3, max_length=255)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    password: str | None = Field(None, min_length=8, max_length=128)
    role: UserRole = UserRole.EMPLOYEE
    organization_id: UUID | None = None
    locale: Locale = Locale.EN

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("email must be a valid address")
        return v


class UserUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    role: UserRole | None = None
    status: UserStatus | None = None
    locale: Locale | None = None
    password: str | None = Field(None, min_length=8, max_length=128)


class UserResponse(ORMModel):
    id: UUID
    tenant_id: UUID | None
    organization_id: UUID | None
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    locale: str
    last_login_at: datetime | None
    deleted_at: datetime | None
    created_at: datetime


class UserList(BaseModel):
    users: list[UserResponse]
    pagination: Pagination


class CurrentUserResponse(UserResponse):
    employee_id: UUID | None = None
    permissions: dict[str, dict[str, str]] = {}
