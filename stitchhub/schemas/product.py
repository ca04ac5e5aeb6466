from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Union
from datetime import datetime
from stitchhub.schemas.common import parse_datetime, strip_text


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=0)
    client: str = Field(..., min_length=1, max_length=255)
    revenue: Optional[float] = Field(None, ge=0)

    @field_validator('name', 'client', mode='before')
    @classmethod
    def strip_names(cls, v):
        return strip_text(v)


class ProductCreate(ProductBase):
    start_date: Union[datetime, str]
    end_date: Optional[Union[datetime, str]] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_product_dates(cls, v):
        return parse_datetime(v)

    @model_validator(mode='after')
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[int] = Field(None, ge=0)
    client: Optional[str] = Field(None, min_length=1, max_length=255)
    revenue: Optional[float] = Field(None, ge=0)
    start_date: Optional[Union[datetime, str]] = None
    end_date: Optional[Union[datetime, str]] = None

    @field_validator('name', 'client', mode='before')
    @classmethod
    def strip_names(cls, v):
        return strip_text(v)

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_product_dates(cls, v):
        return parse_datetime(v)


class ProductResponse(ProductBase):
    id: int
    start_date: datetime
    end_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    total_products: int
    total_quantity: int
    total_revenue: float
    in_progress: int
    completed: int


class ClientTotal(BaseModel):
    client: str
    total_revenue: float
    total_quantity: int
    count: int


class ProductStats(BaseModel):
    summary: ProductSummary
    by_client: List[ClientTotal]
