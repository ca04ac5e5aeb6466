from datetime import date
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from stitchhub.models.user import User
from stitchhub.models.work import Work, WorkDescription
from stitchhub.schemas.work import WorkCreate, WorkUpdate
from stitchhub.services.attendance_service import attendance_service
from stitchhub.services.description_service import description_service
import logging

logger = logging.getLogger(__name__)


class WorkService:
    """Daily work entries and their write-through to attendance."""

    def _with_details(self, query):
        return query.options(joinedload(Work.description), joinedload(Work.user))

    def get(self, db: Session, work_id: int) -> Optional[Work]:
        return self._with_details(db.query(Work)).filter(Work.id == work_id).first()

    def create_work(self, db: Session, data: WorkCreate, user_id: int) -> Work:
        """
        Log a work entry and mark the worker present for that day.

        The description lookup, the work row and the attendance row are
        committed together or not at all.
        """
        try:
            description = description_service.get_or_create(db, data.description, data.description_id)

            work = Work(
                user_id=user_id,
                date=data.date,
                quantity=data.quantity,
                price_per_unit=data.price_per_unit,
                total_amount=data.quantity * data.price_per_unit,
                description_id=description.id,
            )
            db.add(work)
            db.flush()

            attendance_service.mark_present_for_work(db, work)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Work {work.id} logged for user {user_id} on {work.date}: {work.quantity} x {work.price_per_unit}")
        return self.get(db, work.id)

    def update_work(self, db: Session, work: Work, data: WorkUpdate) -> Work:
        update_data = data.model_dump(exclude_unset=True)

        try:
            if update_data.get("description") or update_data.get("description_id") is not None:
                description = description_service.get_or_create(
                    db, update_data.get("description"), update_data.get("description_id")
                )
                work.description_id = description.id

            if update_data.get("quantity") is not None:
                work.quantity = update_data["quantity"]
            if update_data.get("price_per_unit") is not None:
                work.price_per_unit = update_data["price_per_unit"]
            work.total_amount = work.quantity * work.price_per_unit

            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Work {work.id} updated")
        return self.get(db, work.id)

    def delete_work(self, db: Session, work: Work) -> None:
        """Delete a work entry, reverting its attendance day to ABSENT."""
        work_id = work.id
        try:
            attendance_service.revert_for_work(db, work)
            db.delete(work)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Work {work_id} deleted")

    def _filtered(self, query, user_id: Optional[int] = None, start_date: Optional[date] = None,
                  end_date: Optional[date] = None, description: Optional[str] = None):
        if user_id:
            query = query.filter(Work.user_id == user_id)
        if start_date:
            query = query.filter(Work.date >= start_date)
        if end_date:
            query = query.filter(Work.date <= end_date)
        if description:
            query = query.join(WorkDescription, Work.description_id == WorkDescription.id).filter(
                WorkDescription.text.ilike(f"%{description}%")
            )
        return query

    def list_works(self, db: Session, user_id: Optional[int] = None, start_date: Optional[date] = None,
                   end_date: Optional[date] = None, description: Optional[str] = None,
                   skip: int = 0, limit: Optional[int] = None) -> List[Work]:
        query = self._filtered(self._with_details(db.query(Work)), user_id, start_date, end_date, description)
        query = query.order_by(Work.date.desc(), Work.id.desc()).offset(skip)
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_statistics(self, db: Session, user_id: Optional[int] = None, start_date: Optional[date] = None,
                       end_date: Optional[date] = None) -> Dict:
        """Totals overall, per worker, per description and per day."""
        amount = func.coalesce(func.sum(Work.total_amount), 0.0)
        quantity = func.coalesce(func.sum(Work.quantity), 0)
        count = func.count(Work.id)

        total_amount, total_quantity, total_entries, average_amount = self._filtered(
            db.query(amount, quantity, count, func.coalesce(func.avg(Work.total_amount), 0.0)),
            user_id, start_date, end_date
        ).one()

        by_user = (
            self._filtered(
                db.query(Work.user_id, User.name, amount, quantity, count).select_from(Work),
                user_id, start_date, end_date
            )
            .join(User, Work.user_id == User.id)
            .group_by(Work.user_id, User.name)
            .order_by(amount.desc())
            .all()
        )

        by_description = (
            self._filtered(
                db.query(WorkDescription.text, amount, quantity, count).select_from(Work),
                user_id, start_date, end_date
            )
            .join(WorkDescription, Work.description_id == WorkDescription.id)
            .group_by(WorkDescription.text)
            .order_by(amount.desc())
            .all()
        )

        daily = (
            self._filtered(db.query(Work.date, amount, quantity, count), user_id, start_date, end_date)
            .group_by(Work.date)
            .order_by(Work.date.asc())
            .all()
        )

        return {
            "summary": {
                "total_amount": float(total_amount),
                "total_quantity": int(total_quantity),
                "total_entries": total_entries,
                "average_amount": float(average_amount),
            },
            "by_user": [
                {"user_id": uid, "user_name": name, "total_amount": float(a), "total_quantity": int(q), "count": c}
                for uid, name, a, q, c in by_user
            ],
            "by_description": [
                {"description": text, "total_amount": float(a), "total_quantity": int(q), "count": c}
                for text, a, q, c in by_description
            ],
            "daily": [
                {"date": day, "total_amount": float(a), "total_quantity": int(q), "count": c}
                for day, a, q, c in daily
            ],
        }


# Singleton instance
work_service = WorkService()
