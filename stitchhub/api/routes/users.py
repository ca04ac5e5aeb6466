from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from datetime import date
from stitchhub.core.database import get_db
from stitchhub.core.security import get_password_hash, verify_password
from stitchhub.models.user import User
from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.user import (
    UserCreate, UserUpdate, UserResponse, UserStats, ChangePasswordRequest,
    SalaryPaymentCreate, SalaryPaymentResponse, WorkerSalaryDetails
)
from stitchhub.api.deps import get_current_user, get_owner_user, ensure_self_or_owner
from stitchhub.services.salary_service import salary_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found"
        )
    return user


@router.get("/", response_model=List[UserResponse])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """List all users, newest first."""
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit).all()


@router.get("/stats", response_model=UserStats)
async def get_user_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    rows = db.query(User.role, func.count(User.id)).group_by(User.role).order_by(User.role).all()
    return {
        "total_users": sum(count for _, count in rows),
        "by_role": [{"role": role, "count": count} for role, count in rows],
    }


@router.get("/me", response_model=UserResponse)
async def get_my_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.delete("/salary-payments/{payment_id}", response_model=MessageResponse)
async def delete_salary_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    salary_service.delete_payment(db, payment_id)
    return {"message": "Salary payment deleted successfully"}


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Create a new user (owner only)."""
    email = user_data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )

    user = User(
        email=email,
        name=user_data.name,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role.value,
        monthly_salary=user_data.monthly_salary,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} ({user.role}) created by {current_user.id}")
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_self_or_owner(current_user, user_id, "You can only view your own profile")
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a user. Workers may edit their own profile but not their role."""
    ensure_self_or_owner(current_user, user_id, "You can only update your own profile")
    user = _get_user_or_404(db, user_id)

    update_data = user_data.model_dump(exclude_unset=True)

    new_role = update_data.get("role")
    if new_role is not None and new_role.value != user.role and not current_user.is_owner:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only owners can change roles"
        )

    if update_data.get("email"):
        update_data["email"] = update_data["email"].lower()
        taken = db.query(User).filter(User.email == update_data["email"], User.id != user_id).first()
        if taken:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered"
            )

    for field, value in update_data.items():
        if value is None and field != "monthly_salary":
            continue
        if field == "role":
            value = value.value
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} updated by {current_user.id}")
    return user


@router.post("/{user_id}/change-password", response_model=MessageResponse)
async def change_password(
    user_id: int,
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_self_or_owner(current_user, user_id, "You can only change your own password")
    user = _get_user_or_404(db, user_id)

    if not verify_password(data.current_password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    user.hashed_password = get_password_hash(data.new_password)
    db.commit()
    logger.info(f"Password changed for user {user_id}")
    return {"message": "Password changed successfully"}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Delete a user together with their work, attendance and salary payments."""
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )

    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()

    logger.info(f"User {user_id} deleted by {current_user.id}")
    return {"message": "User deleted successfully"}


# ---- salary ----

@router.get("/{user_id}/salary", response_model=WorkerSalaryDetails)
async def get_salary_details(
    user_id: int,
    month: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Monthly salary, payments made and work earned for ``month`` (YYYY-MM)."""
    ensure_self_or_owner(current_user, user_id, "You can only view your own salary")
    user = _get_user_or_404(db, user_id)
    return salary_service.get_worker_details(db, user, month)


@router.post("/{user_id}/salary-payments", response_model=SalaryPaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_salary_payment(
    user_id: int,
    data: SalaryPaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    user = _get_user_or_404(db, user_id)
    return salary_service.create_payment(db, user, data)


@router.get("/{user_id}/salary-payments", response_model=List[SalaryPaymentResponse])
async def list_salary_payments(
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    ensure_self_or_owner(current_user, user_id, "You can only view your own salary payments")
    _get_user_or_404(db, user_id)
    return salary_service.list_payments(db, user_id, start_date, end_date)
