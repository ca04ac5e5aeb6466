from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import func, case
from typing import List, Optional
from stitchhub.core.database import get_db
from stitchhub.models.user import User
from stitchhub.models.product import Product
from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductStats
from stitchhub.api.deps import get_owner_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found"
        )
    return product


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    product = Product(**product_data.model_dump())

    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info(f"Product {product.id} for {product.client} created")
    return product


@router.get("/", response_model=List[ProductResponse])
async def list_products(
    client: Optional[str] = None,
    product_status: Optional[str] = Query(None, alias="status", pattern="^(in_progress|completed)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """List products; ``status`` is ``in_progress`` (no end date) or ``completed``."""
    query = db.query(Product)

    if client and client.strip():
        query = query.filter(Product.client.ilike(f"%{client.strip()}%"))
    if product_status == "in_progress":
        query = query.filter(Product.end_date.is_(None))
    elif product_status == "completed":
        query = query.filter(Product.end_date.isnot(None))

    return query.order_by(Product.start_date.desc(), Product.id.desc()).offset(skip).limit(limit).all()


@router.get("/statistics", response_model=ProductStats)
async def get_product_statistics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    revenue = func.coalesce(func.sum(Product.revenue), 0.0)
    quantity = func.coalesce(func.sum(Product.quantity), 0)
    count = func.count(Product.id)
    completed = func.coalesce(func.sum(case((Product.end_date.isnot(None), 1), else_=0)), 0)

    total_products, total_quantity, total_revenue, total_completed = db.query(
        count, quantity, revenue, completed
    ).one()

    by_client = (
        db.query(Product.client, revenue, quantity, count)
        .group_by(Product.client)
        .order_by(revenue.desc())
        .all()
    )

    return {
        "summary": {
            "total_products": total_products,
            "total_quantity": int(total_quantity),
            "total_revenue": float(total_revenue),
            "in_progress": total_products - int(total_completed),
            "completed": int(total_completed),
        },
        "by_client": [
            {"client": client, "total_revenue": float(r), "total_quantity": int(q), "count": n}
            for client, r, q, n in by_client
        ],
    }


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return _get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    product = _get_product_or_404(db, product_id)

    update_data = product_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in ("end_date", "revenue"):
            continue
        setattr(product, field, value)

    if product.end_date and product.end_date < product.start_date:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date"
        )

    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    product = _get_product_or_404(db, product_id)
    db.delete(product)
    db.commit()

    logger.info(f"Product {product_id} deleted")
    return {"message": "Product deleted successfully"}
