from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from datetime import date, datetime, timedelta
from stitchhub.core.database import get_db
from stitchhub.models.user import User, UserRole
from stitchhub.models.material import Material
from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.material import MaterialCreate, MaterialUpdate, MaterialResponse, MaterialStats
from stitchhub.api.deps import get_owner_user, require_roles
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/materials", tags=["Materials"])


def _get_material_or_404(db: Session, material_id: int) -> Material:
    material = db.query(Material).filter(Material.id == material_id).first()
    if not material:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Material with ID {material_id} not found"
        )
    return material


@router.post("/", response_model=MaterialResponse, status_code=status.HTTP_201_CREATED)
async def create_material(
    material_data: MaterialCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Record a delivery of raw material."""
    material = Material(
        name=material_data.name,
        supplier=material_data.supplier,
        quantity=material_data.quantity,
        cost=material_data.cost,
        date_received=material_data.date_received or datetime.utcnow()
    )

    db.add(material)
    db.commit()
    db.refresh(material)

    logger.info(f"Material {material.id} received from {material.supplier}: {material.quantity} x {material.name}")
    return material


@router.get("/", response_model=List[MaterialResponse])
async def list_materials(
    supplier: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.OWNER, UserRole.WORKER))
):
    query = db.query(Material)

    if supplier and supplier.strip():
        query = query.filter(Material.supplier.ilike(f"%{supplier.strip()}%"))
    if start_date:
        query = query.filter(Material.date_received >= datetime.combine(start_date, datetime.min.time()))
    if end_date:
        query = query.filter(Material.date_received < datetime.combine(end_date, datetime.min.time()) + timedelta(days=1))

    return query.order_by(Material.date_received.desc(), Material.id.desc()).offset(skip).limit(limit).all()


@router.get("/statistics", response_model=MaterialStats)
async def get_material_statistics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Total cost and quantity, overall and per supplier."""
    cost = func.coalesce(func.sum(Material.cost), 0.0)
    quantity = func.coalesce(func.sum(Material.quantity), 0)
    count = func.count(Material.id)

    total_cost, total_quantity, total_records = db.query(cost, quantity, count).one()

    by_supplier = (
        db.query(Material.supplier, cost, quantity, count)
        .group_by(Material.supplier)
        .order_by(cost.desc())
        .all()
    )

    return {
        "summary": {
            "total_cost": float(total_cost),
            "total_quantity": int(total_quantity),
            "total_records": total_records,
        },
        "by_supplier": [
            {"supplier": supplier, "total_cost": float(c), "total_quantity": int(q), "count": n}
            for supplier, c, q, n in by_supplier
        ],
    }


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.OWNER, UserRole.WORKER))
):
    return _get_material_or_404(db, material_id)


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: int,
    material_data: MaterialUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    material = _get_material_or_404(db, material_id)

    update_data = material_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(material, field, value)

    db.commit()
    db.refresh(material)
    return material


@router.delete("/{material_id}", response_model=MessageResponse)
async def delete_material(
    material_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    material = _get_material_or_404(db, material_id)
    db.delete(material)
    db.commit()

    logger.info(f"Material {material_id} deleted")
    return {"message": "Material deleted successfully"}
