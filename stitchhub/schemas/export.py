from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
import datetime as dt
from datetime import datetime, date
from stitchhub.schemas.common import parse_date, strip_text
from stitchhub.schemas.work import DescriptionResponse


class ExportCreate(BaseModel):
    date: Union[date, str]
    company_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=1)
    price_per_unit: float = Field(..., ge=0.01)
    description_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=500)
    update_description_price: bool = False

    @field_validator('date', mode='before')
    @classmethod
    def parse_export_date(cls, v):
        return parse_date(v)

    @field_validator('company_name', mode='before')
    @classmethod
    def strip_company(cls, v):
        return strip_text(v)

    @field_validator('description', mode='before')
    @classmethod
    def strip_description(cls, v):
        return strip_text(v) or None


class ExportUpdate(BaseModel):
    date: Optional[Union[dt.date, str]] = None
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[int] = Field(None, ge=1)
    price_per_unit: Optional[float] = Field(None, ge=0.01)
    description_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=500)
    update_description_price: bool = False

    @field_validator('date', mode='before')
    @classmethod
    def parse_export_date(cls, v):
        return parse_date(v)

    @field_validator('company_name', mode='before')
    @classmethod
    def strip_company(cls, v):
        return strip_text(v)

    @field_validator('description', mode='before')
    @classmethod
    def strip_description(cls, v):
        return strip_text(v) or None


class CompanyResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CompanyUsage(CompanyResponse):
    export_count: int = 0


class ExportResponse(BaseModel):
    id: int
    date: date
    company_id: int
    description_id: int
    quantity: int
    price_per_unit: float
    total_amount: float
    created_at: datetime
    updated_at: datetime
    company: Optional[CompanyResponse] = None
    description: Optional[DescriptionResponse] = None

    class Config:
        from_attributes = True


class ExportSummary(BaseModel):
    total_revenue: float
    total_quantity: int
    total_exports: int
    average_revenue: float
    average_price: float


class CompanyTotal(BaseModel):
    company: str
    total_revenue: float
    total_quantity: int
    count: int


class DescriptionTotal(BaseModel):
    description: str
    total_revenue: float
    total_quantity: int
    count: int


class ExportStats(BaseModel):
    summary: ExportSummary
    by_company: List[CompanyTotal]
    by_description: List[DescriptionTotal]
