from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from stitchhub.schemas.common import parse_datetime, strip_text


class MaterialBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    supplier: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=0)
    cost: float = Field(..., ge=0)

    @field_validator('name', 'supplier', mode='before')
    @classmethod
    def strip_names(cls, v):
        return strip_text(v)


class MaterialCreate(MaterialBase):
    date_received: Optional[Union[datetime, str]] = None

    @field_validator('date_received', mode='before')
    @classmethod
    def parse_received(cls, v):
        return parse_datetime(v)


class MaterialUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    supplier: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[int] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    date_received: Optional[Union[datetime, str]] = None

    @field_validator('name', 'supplier', mode='before')
    @classmethod
    def strip_names(cls, v):
        return strip_text(v)

    @field_validator('date_received', mode='before')
    @classmethod
    def parse_received(cls, v):
        return parse_datetime(v)


class MaterialResponse(MaterialBase):
    id: int
    date_received: datetime

    class Config:
        from_attributes = True


class MaterialSummary(BaseModel):
    total_cost: float
    total_quantity: int
    total_records: int


class SupplierTotal(BaseModel):
    supplier: str
    total_cost: float
    total_quantity: int
    count: int


class MaterialStats(BaseModel):
    summary: MaterialSummary
    by_supplier: List[SupplierTotal]
