"""
User Schemas

Request/response models for user and authentication endpoints.

Signup Rules:
=============
- email: valid address, stored lowercased
- name: at least 2 characters
- password: at least 8 characters with an uppercase letter, a lowercase
  letter, a digit and one of @$!%*?&
"""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from cerebero.shared.schemas.common import BaseSchema


PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")


class SignupRequest(BaseModel):
    email: EmailStr
    name: str = Field(description="Display name (minimum 2 characters)")
    password: str = Field(description="Password (see signup rules)")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError(
                "Password must be at least 8 characters and include uppercase, "
                "lowercase, number and special character (@$!%*?&)"
            )
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()


class UserResponse(BaseSchema):
    id: str
    email: str
    name: str
    created_at: datetime


class PublicUserResponse(BaseSchema):
    email: str
    name: str
    created_at: datetime


class SignupResponse(BaseModel):
    message: str
    user: UserResponse


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
