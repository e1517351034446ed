from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from enquiry_svc.models.enums import UserRole
from enquiry_svc.schemas.user import UserResponse


class Token(BaseModel):
    access_token: str
    token_type: str
    user: Optional[UserResponse] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[UserRole] = None
