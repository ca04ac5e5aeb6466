from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from stitchhub.core.database import get_db
from stitchhub.models.user import User
from stitchhub.schemas.attendance import (
    AttendanceCreate, AttendanceStatusUpdate, AttendanceResponse,
    AttendanceByDate, AttendanceSummary, AttendanceReport
)
from stitchhub.schemas.common import parse_date
from stitchhub.api.deps import get_current_user, get_owner_user, scoped_user_id
from stitchhub.services.attendance_service import attendance_service

router = APIRouter(prefix="/attendance", tags=["Attendance"])


def _path_date(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date '{value}', expected YYYY-MM-DD"
        )


@router.get("/my-attendance", response_model=List[AttendanceResponse])
async def get_my_attendance(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get my attendance history, newest first."""
    return attendance_service.list_for_user(db, current_user.id, start_date, end_date, skip, limit)


@router.get("/by-date/{day}", response_model=AttendanceByDate)
async def get_attendance_by_date(
    day: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Everyone's attendance for one day with status counts."""
    return attendance_service.get_by_date(db, _path_date(day))


@router.get("/range/{start_date}/{end_date}", response_model=List[AttendanceResponse])
async def get_attendance_range(
    start_date: str,
    end_date: str,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return attendance_service.get_range(
        db, _path_date(start_date), _path_date(end_date), scoped_user_id(current_user, user_id)
    )


@router.get("/summary/{start_date}/{end_date}", response_model=AttendanceSummary)
async def get_attendance_summary(
    start_date: str,
    end_date: str,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Status counts and attendance rate over a date range."""
    return attendance_service.get_summary(
        db, _path_date(start_date), _path_date(end_date), scoped_user_id(current_user, user_id)
    )


@router.get("/report/all/{start_date}/{end_date}", response_model=AttendanceReport)
async def get_attendance_report(
    start_date: str,
    end_date: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Day-by-day attendance and earnings grid for every worker."""
    return attendance_service.get_report(db, _path_date(start_date), _path_date(end_date))


@router.post("/", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
async def create_attendance(
    data: AttendanceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Record a day manually (leave, absence, half day...)."""
    return attendance_service.create_manual(db, data.user_id, data.date, data.status)


@router.put("/{day}/status", response_model=AttendanceResponse)
async def update_attendance_status(
    day: str,
    data: AttendanceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return attendance_service.set_status(db, data.user_id, _path_date(day), data.status)


@router.get("/{day}", response_model=Optional[AttendanceResponse])
async def get_attendance_for_day(
    day: str,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """A single day's record, or null when nothing was recorded."""
    target_user_id = scoped_user_id(current_user, user_id) or current_user.id
    return attendance_service.get_for_user_and_date(db, target_user_id, _path_date(day))
