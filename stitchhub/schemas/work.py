from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Union
from datetime import datetime, date
from stitchhub.schemas.common import parse_date, strip_text
from stitchhub.schemas.user import UserSummary


class DescriptionCreate(BaseModel):
    text: str = Field(..., min_length=2, max_length=500)
    price_per_unit: Optional[float] = Field(None, gt=0)

    @field_validator('text', mode='before')
    @classmethod
    def strip_description(cls, v):
        return strip_text(v)


class DescriptionResponse(BaseModel):
    id: int
    text: str
    price_per_unit: Optional[float] = None

    class Config:
        from_attributes = True


class DescriptionUsage(DescriptionResponse):
    work_count: int = 0
    export_count: int = 0


class WorkCreate(BaseModel):
    date: Union[date, str]
    quantity: int = Field(..., gt=0)
    price_per_unit: float = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=500)
    description_id: Optional[int] = None
    user_id: Optional[int] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_work_date(cls, v):
        return parse_date(v)

    @field_validator('description', mode='before')
    @classmethod
    def strip_description(cls, v):
        return strip_text(v) or None

    @model_validator(mode='after')
    def check_description(self):
        if not self.description and self.description_id is None:
            raise ValueError('Either description or description_id is required')
        return self


class WorkUpdate(BaseModel):
    quantity: Optional[int] = Field(None, gt=0)
    price_per_unit: Optional[float] = Field(None, gt=0)
    description: Optional[str] = Field(None, max_length=500)
    description_id: Optional[int] = None

    @field_validator('description', mode='before')
    @classmethod
    def strip_description(cls, v):
        return strip_text(v) or None


class WorkResponse(BaseModel):
    id: int
    date: date
    quantity: int
    price_per_unit: float
    total_amount: float
    description_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    description: Optional[DescriptionResponse] = None
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class WorkSummary(BaseModel):
    total_amount: float
    total_quantity: int
    total_entries: int
    average_amount: float


class WorkByUser(BaseModel):
    user_id: int
    user_name: str
    total_amount: float
    total_quantity: int
    count: int


class WorkByDescription(BaseModel):
    description: str
    total_amount: float
    total_quantity: int
    count: int


class WorkByDay(BaseModel):
    date: date
    total_amount: float
    total_quantity: int
    count: int


class WorkStats(BaseModel):
    summary: WorkSummary
    by_user: List[WorkByUser]
    by_description: List[WorkByDescription]
    daily: List[WorkByDay]
