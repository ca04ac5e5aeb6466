from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime
from stitchhub.core.database import get_db
from stitchhub.models.user import User, UserRole
from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.work import (
    WorkCreate, WorkUpdate, WorkResponse, WorkStats,
    DescriptionCreate, DescriptionResponse, DescriptionUsage
)
from stitchhub.api.deps import get_current_user, get_owner_user, require_roles, scoped_user_id
from stitchhub.services.work_service import work_service
from stitchhub.services.description_service import description_service
from stitchhub.services.spreadsheet_service import spreadsheet_service

router = APIRouter(prefix="/work", tags=["Work"])

WORK_CSV_COLUMNS = ["id", "date", "worker", "description", "quantity", "price_per_unit", "total_amount"]


@router.post("/", response_model=WorkResponse, status_code=status.HTTP_201_CREATED)
async def create_work(
    work_data: WorkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.OWNER, UserRole.WORKER))
):
    """
    Log a day's work.

    Workers always log for themselves. Owners may log for another user via
    ``user_id``. The worker is marked present for that day.
    """
    user_id = current_user.id
    if current_user.is_owner and work_data.user_id:
        if not db.query(User.id).filter(User.id == work_data.user_id).first():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User with ID {work_data.user_id} not found"
            )
        user_id = work_data.user_id

    return work_service.create_work(db, work_data, user_id)


@router.get("/", response_model=List[WorkResponse])
async def list_work(
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    description: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """List work entries with filters (worker, dates, description text)."""
    description = description.strip() if description and description.strip() else None
    return work_service.list_works(db, user_id, start_date, end_date, description, skip, limit)


@router.get("/my-work", response_model=List[WorkResponse])
async def list_my_work(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return work_service.list_works(db, current_user.id, start_date, end_date, skip=skip, limit=limit)


@router.get("/statistics", response_model=WorkStats)
async def get_work_statistics(
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Work totals. Workers only ever see their own figures."""
    return work_service.get_statistics(db, scoped_user_id(current_user, user_id), start_date, end_date)


@router.get("/descriptions", response_model=List[DescriptionUsage])
async def list_descriptions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return description_service.list_with_usage(db)


@router.post("/descriptions", response_model=DescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_description(
    data: DescriptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return description_service.create(db, data.text, data.price_per_unit)


@router.get("/export/csv")
async def export_work_csv(
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    description: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Export work entries to CSV."""
    works = work_service.list_works(db, user_id, start_date, end_date, description)

    data = [
        {
            "id": work.id,
            "date": work.date.isoformat(),
            "worker": work.user.name if work.user else "",
            "description": work.description.text if work.description else "",
            "quantity": work.quantity,
            "price_per_unit": work.price_per_unit,
            "total_amount": work.total_amount,
        }
        for work in works
    ]

    csv_buffer = spreadsheet_service.to_csv(data, WORK_CSV_COLUMNS)

    return StreamingResponse(
        csv_buffer,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=work_{datetime.now().strftime('%Y%m%d')}.csv"}
    )


def _get_work_or_404(db: Session, work_id: int):
    work = work_service.get(db, work_id)
    if not work:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work with ID {work_id} not found"
        )
    return work


@router.get("/{work_id}", response_model=WorkResponse)
async def get_work(
    work_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    work = _get_work_or_404(db, work_id)
    if not current_user.is_owner and work.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own work entries"
        )
    return work


@router.put("/{work_id}", response_model=WorkResponse)
async def update_work(
    work_id: int,
    work_data: WorkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    work = _get_work_or_404(db, work_id)
    return work_service.update_work(db, work, work_data)


@router.delete("/{work_id}", response_model=MessageResponse)
async def delete_work(
    work_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Delete a work entry; the linked attendance day goes back to ABSENT."""
    work = _get_work_or_404(db, work_id)
    work_service.delete_work(db, work)
    return {"message": "Work deleted successfully"}
