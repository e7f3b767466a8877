"""
Organization API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrganizationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str | None = None
    num_employees: int | None = Field(default=None, ge=0, alias="numEmployees")
    logo_url: str | None = Field(default=None, alias="logoUrl")

    @field_validator("handle")
    @classmethod
    def _lowercase_handle(cls, value: str) -> str:
        if value != value.lower():
            raise ValueError("handle must be lowercase")
        return value


class OrganizationUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    num_employees: int | None = Field(default=None, ge=0, alias="numEmployees")
    logo_url: str | None = Field(default=None, alias="logoUrl")

    @field_validator("name")
    @classmethod
    def _not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("name may not be null")
        return value
