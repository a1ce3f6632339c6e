# wealth_api/schemas/record_schema.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_required(value: Optional[str], field: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be empty")
    return value


# --- Request schemas ---
class RecordBase(BaseModel):
    description: str
    category: str
    amount: float = Field(..., ge=0, description="Amount cannot be negative")

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v):
        return _strip_required(v, "Description")

    @field_validator("category")
    @classmethod
    def category_not_empty(cls, v):
        return _strip_required(v, "Category")


class RecordCreate(RecordBase):
    pass


class LiabilityCreate(RecordBase):
    interest_rate: float = Field(..., ge=0, description="Interest rate cannot be negative")


class RecordUpdate(BaseModel):
    description: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v):
        return _strip_required(v, "Description")

    @field_validator("category")
    @classmethod
    def category_not_empty(cls, v):
        return _strip_required(v, "Category")


class LiabilityUpdate(RecordUpdate):
    interest_rate: Optional[float] = Field(None, ge=0)


# --- Response schemas ---
class RecordResponse(BaseModel):
    id: str
    user_id: str
    description: str
    category: str
    amount: float
    date_added: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LiabilityResponse(RecordResponse):
    interest_rate: float
