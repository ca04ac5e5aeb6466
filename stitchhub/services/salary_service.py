from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from stitchhub.models.user import User, SalaryPayment
from stitchhub.models.work import Work
from stitchhub.schemas.user import SalaryPaymentCreate
import logging

logger = logging.getLogger(__name__)


def month_bounds(month: Optional[str] = None, today: Optional[datetime] = None) -> Tuple[datetime, datetime, str]:
    """
    Resolve a ``YYYY-MM`` string to a half-open datetime range.

    Args:
        month: Month to resolve; the current month when omitted
        today: Reference time used when ``month`` is omitted

    Returns:
        (start, end_exclusive, "YYYY-MM")
    """
    if month:
        try:
            start = datetime.strptime(month.strip(), "%Y-%m")
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Month must be in YYYY-MM format"
            )
    else:
        now = today or datetime.utcnow()
        start = datetime(now.year, now.month, 1)

    if start.month == 12:
        end = datetime(start.year + 1, 1, 1)
    else:
        end = datetime(start.year, start.month + 1, 1)
    return start, end, start.strftime("%Y-%m")


class SalaryService:
    """Monthly salary balance and salary payments."""

    def get_worker_details(self, db: Session, user: User, month: Optional[str] = None) -> Dict:
        start, end, label = month_bounds(month)

        in_month = [
            SalaryPayment.user_id == user.id,
            SalaryPayment.date >= start,
            SalaryPayment.date < end,
        ]

        payments = db.query(SalaryPayment).filter(*in_month).order_by(SalaryPayment.date.desc()).all()
        total_paid = float(
            db.query(func.coalesce(func.sum(SalaryPayment.amount), 0.0)).filter(*in_month).scalar()
        )

        work_amount, work_entries = db.query(
            func.coalesce(func.sum(Work.total_amount), 0.0),
            func.count(Work.id)
        ).filter(
            Work.user_id == user.id,
            Work.date >= start.date(),
            Work.date < end.date()
        ).one()

        monthly_salary = user.monthly_salary or 0.0

        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "month": label,
            "monthly_salary": user.monthly_salary,
            "total_paid_this_month": total_paid,
            "remaining_salary": monthly_salary - total_paid,
            "salary_payments": payments,
            "total_work_amount": float(work_amount),
            "total_work_entries": work_entries,
            "created_at": user.created_at,
        }

    def create_payment(self, db: Session, user: User, data: SalaryPaymentCreate) -> SalaryPayment:
        payment = SalaryPayment(
            user_id=user.id,
            amount=data.amount,
            date=data.date or datetime.utcnow(),
            note=data.note or None,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)

        logger.info(f"Salary payment {payment.id} of {payment.amount} recorded for user {user.id}")
        return payment

    def list_payments(self, db: Session, user_id: int, start_date: Optional[date] = None,
                      end_date: Optional[date] = None) -> List[SalaryPayment]:
        query = db.query(SalaryPayment).options(joinedload(SalaryPayment.user)).filter(
            SalaryPayment.user_id == user_id
        )
        if start_date:
            query = query.filter(SalaryPayment.date >= datetime.combine(start_date, datetime.min.time()))
        if end_date:
            # inclusive of the whole end day
            query = query.filter(SalaryPayment.date < datetime.combine(end_date, datetime.min.time()) + timedelta(days=1))
        return query.order_by(SalaryPayment.date.desc()).all()

    def delete_payment(self, db: Session, payment_id: int) -> None:
        payment = db.query(SalaryPayment).filter(SalaryPayment.id == payment_id).first()
        if not payment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Salary payment with ID {payment_id} not found"
            )

        db.delete(payment)
        db.commit()
        logger.info(f"Salary payment {payment_id} deleted")


# Singleton instance
salary_service = SalaryService()
