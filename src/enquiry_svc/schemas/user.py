from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from enquiry_svc import config
from enquiry_svc.models.enums import UserRole
from enquiry_svc.schemas.enquiry import Pagination


def _normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip().lower()


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.User

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value):
        return _normalize_email(value)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[UserRole] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value):
        return _normalize_email(value)


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserResponse(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserListResponse(BaseModel):
    users: List[UserResponse]
    pagination: Pagination


class PageQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE)
