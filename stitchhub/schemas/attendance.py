from pydantic import BaseModel, field_validator
from typing import Optional, List, Union
from datetime import datetime, date
from stitchhub.models.attendance import AttendanceStatus
from stitchhub.schemas.common import parse_date
from stitchhub.schemas.user import UserSummary
from stitchhub.schemas.work import DescriptionResponse


class AttendanceCreate(BaseModel):
    date: Union[date, str]
    user_id: int
    status: AttendanceStatus

    @field_validator('date', mode='before')
    @classmethod
    def parse_attendance_date(cls, v):
        return parse_date(v)


class AttendanceStatusUpdate(BaseModel):
    user_id: int
    status: AttendanceStatus


class AttendanceWork(BaseModel):
    id: int
    quantity: int
    price_per_unit: float
    total_amount: float
    description: Optional[DescriptionResponse] = None

    class Config:
        from_attributes = True


class AttendanceResponse(BaseModel):
    id: int
    date: date
    status: str
    user_id: int
    work_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None
    work: Optional[AttendanceWork] = None

    class Config:
        from_attributes = True


class DayCounts(BaseModel):
    total: int
    present: int
    absent: int
    half_day: int
    leave: int


class AttendanceByDate(BaseModel):
    date: date
    records: List[AttendanceResponse]
    summary: DayCounts


class DateRange(BaseModel):
    start_date: date
    end_date: date


class AttendanceSummaryStats(BaseModel):
    total_days: int
    present_days: int
    absent_days: int
    half_days: int
    leave_days: int
    attendance_rate: int


class UserAttendanceCounts(BaseModel):
    user_id: int
    user_name: str
    present: int = 0
    absent: int = 0
    half_day: int = 0
    leave: int = 0
    total: int = 0


class AttendanceSummary(BaseModel):
    date_range: DateRange
    summary: AttendanceSummaryStats
    by_user: List[UserAttendanceCounts]


class ReportDay(BaseModel):
    date: date
    status: Optional[str] = None
    has_work: bool
    quantity: int
    amount: float


class ReportStats(BaseModel):
    present: int
    absent: int
    half_day: int
    leave: int
    no_record: int
    total_earnings: float
    total_quantity: int


class WorkerReport(BaseModel):
    worker: UserSummary
    attendance: List[ReportDay]
    stats: ReportStats


class AttendanceReport(BaseModel):
    date_range: DateRange
    dates: List[date]
    report: List[WorkerReport]
