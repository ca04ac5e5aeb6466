from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from stitchhub.core.database import get_db
from stitchhub.models.user import User
from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.work import DescriptionUsage
from stitchhub.schemas.export import ExportCreate, ExportUpdate, ExportResponse, ExportStats, CompanyUsage
from stitchhub.api.deps import get_owner_user
from stitchhub.services.export_service import export_service
from stitchhub.services.description_service import description_service

router = APIRouter(prefix="/exports", tags=["Exports"])


@router.get("/descriptions", response_model=List[DescriptionUsage])
async def list_descriptions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Descriptions shared with work entries."""
    return description_service.list_with_usage(db)


@router.post("/", response_model=ExportResponse, status_code=status.HTTP_201_CREATED)
async def create_export(
    export_data: ExportCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Record a shipment; unknown companies and descriptions are created."""
    return export_service.create(db, export_data)


@router.get("/", response_model=List[ExportResponse])
async def list_exports(
    company_name: Optional[str] = None,
    description: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    company_name = company_name.strip() if company_name and company_name.strip() else None
    description = description.strip() if description and description.strip() else None
    return export_service.list_exports(db, company_name, description, start_date, end_date, skip, limit)


@router.get("/statistics", response_model=ExportStats)
async def get_export_statistics(
    company_name: Optional[str] = None,
    description: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return export_service.get_statistics(db, company_name, description, start_date, end_date)


@router.get("/companies", response_model=List[CompanyUsage])
async def list_companies(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return export_service.list_companies(db)


@router.get("/{export_id}", response_model=ExportResponse)
async def get_export(
    export_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return export_service.get(db, export_id)


@router.put("/{export_id}", response_model=ExportResponse)
async def update_export(
    export_id: int,
    export_data: ExportUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return export_service.update(db, export_id, export_data)


@router.delete("/{export_id}", response_model=MessageResponse)
async def delete_export(
    export_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    export_service.delete(db, export_id)
    return {"message": "Export deleted successfully"}
