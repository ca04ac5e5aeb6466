from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from stitchhub.models.user import UserRole
from stitchhub.schemas.common import parse_datetime, strip_text


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.WORKER
    monthly_salary: Optional[float] = Field(None, ge=0)

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return strip_text(v)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    role: Optional[UserRole] = None
    monthly_salary: Optional[float] = Field(None, ge=0)

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return strip_text(v)


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    monthly_salary: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)
    role: Optional[UserRole] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class RoleCount(BaseModel):
    role: str
    count: int


class UserStats(BaseModel):
    total_users: int
    by_role: List[RoleCount]


class SalaryPaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    date: Optional[Union[datetime, str]] = None
    note: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_payment_date(cls, v):
        return parse_datetime(v)


class SalaryPaymentBase(BaseModel):
    id: int
    amount: float
    date: datetime
    note: Optional[str] = None

    class Config:
        from_attributes = True


class SalaryPaymentResponse(SalaryPaymentBase):
    user_id: int
    user: Optional[UserSummary] = None


class WorkerSalaryDetails(BaseModel):
    id: int
    name: str
    email: str
    role: str
    month: str
    monthly_salary: Optional[float] = None
    total_paid_this_month: float
    remaining_salary: float
    salary_payments: List[SalaryPaymentBase]
    total_work_amount: float
    total_work_entries: int
    created_at: datetime
