from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from stitchhub.models.expense import ExpenseType
from stitchhub.schemas.common import parse_datetime, strip_text


class ExpenseBase(BaseModel):
    category: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0.01)
    note: Optional[str] = Field(None, max_length=500)

    @field_validator('category', 'note', mode='before')
    @classmethod
    def strip_strings(cls, v):
        return strip_text(v)


class ExpenseCreate(ExpenseBase):
    """Body of the typed create endpoints; the route decides the type."""
    date: Optional[Union[datetime, str]] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_expense_date(cls, v):
        return parse_datetime(v)


class ExpenseUpdate(BaseModel):
    type: Optional[ExpenseType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[float] = Field(None, ge=0.01)
    note: Optional[str] = Field(None, max_length=500)
    date: Optional[Union[datetime, str]] = None

    @field_validator('category', 'note', mode='before')
    @classmethod
    def strip_strings(cls, v):
        return strip_text(v)

    @field_validator('date', mode='before')
    @classmethod
    def parse_expense_date(cls, v):
        return parse_datetime(v)


class ExpenseResponse(ExpenseBase):
    id: int
    type: str
    date: datetime

    class Config:
        from_attributes = True


class ExpenseSummary(BaseModel):
    total_amount: float
    total_records: int
    average_amount: float


class CategoryTotal(BaseModel):
    category: str
    total: float
    count: int


class TypeTotal(BaseModel):
    type: str
    total: float
    count: int


class MonthTotal(BaseModel):
    month: str
    total: float


class ExpenseStats(BaseModel):
    summary: ExpenseSummary
    by_category: List[CategoryTotal]
    by_type: Optional[List[TypeTotal]] = None
    monthly_breakdown: List[MonthTotal]
