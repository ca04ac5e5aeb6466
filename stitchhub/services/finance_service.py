from datetime import date, datetime, timedelta
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy import func, extract
from sqlalchemy.orm import Session
from stitchhub.models.expense import Expense, ExpenseType
from stitchhub.schemas.expense import ExpenseCreate, ExpenseUpdate
import logging

logger = logging.getLogger(__name__)


class FinanceService:
    """Company and home expense bookkeeping."""

    def _filtered(self, query, expense_type: Optional[ExpenseType] = None, category: Optional[str] = None,
                  start_date: Optional[date] = None, end_date: Optional[date] = None):
        if expense_type:
            query = query.filter(Expense.type == expense_type.value)
        if category:
            query = query.filter(Expense.category.ilike(f"%{category}%"))
        if start_date:
            query = query.filter(Expense.date >= datetime.combine(start_date, datetime.min.time()))
        if end_date:
            # inclusive of the whole end day
            end = datetime.combine(end_date, datetime.min.time()) + timedelta(days=1)
            query = query.filter(Expense.date < end)
        return query

    def create(self, db: Session, data: ExpenseCreate, expense_type: ExpenseType) -> Expense:
        expense = Expense(
            type=expense_type.value,
            category=data.category,
            amount=data.amount,
            note=data.note or None,
            date=data.date or datetime.utcnow(),
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)

        logger.info(f"{expense_type.value} expense {expense.id} created: {expense.category} {expense.amount}")
        return expense

    def get(self, db: Session, expense_id: int) -> Expense:
        expense = db.query(Expense).filter(Expense.id == expense_id).first()
        if not expense:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Expense with ID {expense_id} not found"
            )
        return expense

    def update(self, db: Session, expense_id: int, data: ExpenseUpdate) -> Expense:
        expense = self.get(db, expense_id)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if field == "type" and value is not None:
                value = value.value
            if value is None and field != "note":
                continue
            setattr(expense, field, value)

        db.commit()
        db.refresh(expense)
        return expense

    def delete(self, db: Session, expense_id: int) -> None:
        expense = self.get(db, expense_id)
        db.delete(expense)
        db.commit()
        logger.info(f"Expense {expense_id} deleted")

    def list_expenses(self, db: Session, expense_type: Optional[ExpenseType] = None, category: Optional[str] = None,
                      start_date: Optional[date] = None, end_date: Optional[date] = None,
                      skip: int = 0, limit: Optional[int] = None) -> List[Expense]:
        query = self._filtered(db.query(Expense), expense_type, category, start_date, end_date)
        query = query.order_by(Expense.date.desc(), Expense.id.desc()).offset(skip)
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_statistics(self, db: Session, expense_type: Optional[ExpenseType] = None, fixed_type: bool = False,
                       start_date: Optional[date] = None, end_date: Optional[date] = None) -> Dict:
        """
        Aggregate expenses.

        ``by_type`` is only computed when the caller did not pin the type to a
        single book (the company/home endpoints).
        """
        total = func.coalesce(func.sum(Expense.amount), 0.0)
        count = func.count(Expense.id)

        total_amount, total_records, average_amount = self._filtered(
            db.query(total, count, func.coalesce(func.avg(Expense.amount), 0.0)),
            expense_type, None, start_date, end_date
        ).one()

        by_category = (
            self._filtered(db.query(Expense.category, total, count), expense_type, None, start_date, end_date)
            .group_by(Expense.category)
            .order_by(total.desc())
            .all()
        )

        by_type = None
        if not fixed_type:
            by_type = [
                {"type": row_type, "total": float(t), "count": c}
                for row_type, t, c in (
                    self._filtered(db.query(Expense.type, total, count), expense_type, None, start_date, end_date)
                    .group_by(Expense.type)
                    .order_by(Expense.type.asc())
                    .all()
                )
            ]

        year = extract("year", Expense.date)
        month = extract("month", Expense.date)
        monthly = (
            self._filtered(db.query(year, month, total), expense_type, None, start_date, end_date)
            .group_by(year, month)
            .order_by(year, month)
            .all()
        )

        return {
            "summary": {
                "total_amount": float(total_amount),
                "total_records": total_records,
                "average_amount": float(average_amount),
            },
            "by_category": [
                {"category": category, "total": float(t), "count": c}
                for category, t, c in by_category
            ],
            "by_type": by_type,
            "monthly_breakdown": [
                {"month": f"{int(y):04d}-{int(m):02d}", "total": float(t)}
                for y, m, t in monthly
            ],
        }

    def get_categories(self, db: Session, expense_type: Optional[ExpenseType] = None) -> List[str]:
        query = db.query(Expense.category).distinct()
        if expense_type:
            query = query.filter(Expense.type == expense_type.value)
        return [row[0] for row in query.order_by(Expense.category.asc()).all()]


# Singleton instance
finance_service = FinanceService()
