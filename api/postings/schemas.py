"""
Posting API schemas (request models).
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# postings.id is a SERIAL (int4) column.
MAX_POSTING_ID = 2_147_483_647


class PostingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str = Field(..., min_length=1)
    salary: int | None = Field(default=None, ge=0)
    # Fraction of the company, 0..1.
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    organization_handle: str = Field(..., min_length=1, max_length=25, alias="organizationHandle")


class PostingUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def _not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("title may not be null")
        return value
