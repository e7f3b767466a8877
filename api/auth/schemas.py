"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from accounts.schemas import EMAIL_PATTERN


class TokenRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1, max_length=128)


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: str = Field(..., min_length=6, max_length=60, pattern=EMAIL_PATTERN)


class TokenResponse(BaseModel):
    token: str
