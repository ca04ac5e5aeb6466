from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from stitchhub.models.attendance import Attendance, AttendanceStatus
from stitchhub.models.user import User, UserRole
from stitchhub.models.work import Work
import logging

logger = logging.getLogger(__name__)

MAX_REPORT_DAYS = 366


def check_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must not be after end_date"
        )


def attendance_rate(total_days: int, present: int, half_days: int, leave: int) -> int:
    """Percentage of workable days attended, half days counting as 0.5."""
    if total_days <= 0:
        return 0
    possible = total_days - leave
    if possible <= 0:
        return 100
    effective = present + half_days * 0.5
    # round half up
    return int(effective / possible * 100 + 0.5)


class AttendanceService:
    """Attendance tracking derived from daily work entries."""

    def _with_details(self, query):
        return query.options(
            joinedload(Attendance.user),
            joinedload(Attendance.work).joinedload(Work.description),
        )

    def get_for_user_and_date(self, db: Session, user_id: int, day: date) -> Optional[Attendance]:
        return self._with_details(db.query(Attendance)).filter(
            Attendance.user_id == user_id,
            Attendance.date == day
        ).first()

    # ---- work synchronisation (caller owns the transaction) ----

    def mark_present_for_work(self, db: Session, work: Work) -> Attendance:
        """Create or update the (user, date) row as PRESENT and link it to ``work``."""
        attendance = db.query(Attendance).filter(
            Attendance.user_id == work.user_id,
            Attendance.date == work.date
        ).first()

        if attendance is None:
            attendance = Attendance(
                user_id=work.user_id,
                date=work.date,
                status=AttendanceStatus.PRESENT.value,
            )
            db.add(attendance)

        attendance.status = AttendanceStatus.PRESENT.value
        attendance.work = work
        db.flush()
        logger.info(f"Attendance {attendance.id} for user {work.user_id} on {work.date} marked PRESENT by work {work.id}")
        return attendance

    def revert_for_work(self, db: Session, work: Work) -> Optional[Attendance]:
        """
        Detach ``work`` from its attendance row before the work is deleted.

        If the user logged other work that day the row stays PRESENT and is
        relinked to the latest remaining entry; otherwise it goes back to
        ABSENT with no link.
        """
        attendance = db.query(Attendance).filter(Attendance.work_id == work.id).first()
        if attendance is None:
            return None

        remaining = (
            db.query(Work)
            .filter(Work.user_id == work.user_id, Work.date == work.date, Work.id != work.id)
            .order_by(Work.id.desc())
            .first()
        )

        if remaining is not None:
            attendance.status = AttendanceStatus.PRESENT.value
            attendance.work = remaining
            db.flush()
            logger.info(f"Attendance {attendance.id} for user {work.user_id} on {work.date} relinked to work {remaining.id}")
            return attendance

        attendance.status = AttendanceStatus.ABSENT.value
        attendance.work = None
        db.flush()
        logger.info(f"Attendance {attendance.id} for user {work.user_id} on {work.date} reverted to ABSENT")
        return attendance

    # ---- manual management ----

    def _get_user(self, db: Session, user_id: int) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User with ID {user_id} not found"
            )
        return user

    def create_manual(self, db: Session, user_id: int, day: date, attendance_status: AttendanceStatus) -> Attendance:
        """Record attendance for a day without work (leave, absence...)."""
        self._get_user(db, user_id)

        existing = db.query(Attendance).filter(
            Attendance.user_id == user_id,
            Attendance.date == day
        ).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Attendance already exists for user {user_id} on {day.isoformat()}"
            )

        attendance = Attendance(user_id=user_id, date=day, status=attendance_status.value)
        db.add(attendance)
        db.commit()
        logger.info(f"Manual attendance for user {user_id} on {day} set to {attendance_status.value}")
        return self.get_for_user_and_date(db, user_id, day)

    def set_status(self, db: Session, user_id: int, day: date, attendance_status: AttendanceStatus) -> Attendance:
        """Update the status of a day, creating the row when missing."""
        self._get_user(db, user_id)

        attendance = db.query(Attendance).filter(
            Attendance.user_id == user_id,
            Attendance.date == day
        ).first()

        if attendance:
            attendance.status = attendance_status.value
        else:
            attendance = Attendance(user_id=user_id, date=day, status=attendance_status.value)
            db.add(attendance)

        db.commit()
        logger.info(f"Attendance for user {user_id} on {day} set to {attendance_status.value}")
        return self.get_for_user_and_date(db, user_id, day)

    # ---- queries ----

    def list_for_user(self, db: Session, user_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None,
                      skip: int = 0, limit: Optional[int] = None) -> List[Attendance]:
        query = self._with_details(db.query(Attendance)).filter(Attendance.user_id == user_id)
        if start_date:
            query = query.filter(Attendance.date >= start_date)
        if end_date:
            query = query.filter(Attendance.date <= end_date)
        query = query.order_by(Attendance.date.desc()).offset(skip)
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_by_date(self, db: Session, day: date) -> Dict:
        records = (
            self._with_details(db.query(Attendance))
            .join(User, Attendance.user_id == User.id)
            .filter(Attendance.date == day)
            .order_by(User.name.asc())
            .all()
        )

        counts = {s.value: 0 for s in AttendanceStatus}
        for record in records:
            counts[record.status] = counts.get(record.status, 0) + 1

        return {
            "date": day,
            "records": records,
            "summary": {
                "total": len(records),
                "present": counts[AttendanceStatus.PRESENT.value],
                "absent": counts[AttendanceStatus.ABSENT.value],
                "half_day": counts[AttendanceStatus.HALF_DAY.value],
                "leave": counts[AttendanceStatus.LEAVE.value],
            },
        }

    def get_range(self, db: Session, start_date: date, end_date: date, user_id: Optional[int] = None) -> List[Attendance]:
        check_range(start_date, end_date)
        query = self._with_details(db.query(Attendance)).filter(
            Attendance.date >= start_date,
            Attendance.date <= end_date
        )
        if user_id:
            query = query.filter(Attendance.user_id == user_id)
        return query.order_by(Attendance.date.desc(), Attendance.user_id.asc()).all()

    def get_summary(self, db: Session, start_date: date, end_date: date, user_id: Optional[int] = None) -> Dict:
        """Status counts over a range, overall and per user."""
        check_range(start_date, end_date)

        filters = [Attendance.date >= start_date, Attendance.date <= end_date]
        if user_id:
            filters.append(Attendance.user_id == user_id)

        total_days = db.query(func.count(Attendance.date.distinct())).filter(*filters).scalar() or 0

        rows = (
            db.query(Attendance.user_id, User.name, Attendance.status, func.count(Attendance.id))
            .select_from(Attendance)
            .join(User, Attendance.user_id == User.id)
            .filter(*filters)
            .group_by(Attendance.user_id, User.name, Attendance.status)
            .order_by(User.name.asc())
            .all()
        )

        status_keys = {
            AttendanceStatus.PRESENT.value: "present",
            AttendanceStatus.ABSENT.value: "absent",
            AttendanceStatus.HALF_DAY.value: "half_day",
            AttendanceStatus.LEAVE.value: "leave",
        }
        totals = {key: 0 for key in status_keys.values()}
        by_user: Dict[int, Dict] = {}

        for row_user_id, user_name, row_status, count in rows:
            key = status_keys.get(row_status)
            if key is None:
                continue
            totals[key] += count
            entry = by_user.setdefault(row_user_id, {
                "user_id": row_user_id,
                "user_name": user_name,
                "present": 0,
                "absent": 0,
                "half_day": 0,
                "leave": 0,
                "total": 0,
            })
            entry[key] += count
            entry["total"] += count

        return {
            "date_range": {"start_date": start_date, "end_date": end_date},
            "summary": {
                "total_days": total_days,
                "present_days": totals["present"],
                "absent_days": totals["absent"],
                "half_days": totals["half_day"],
                "leave_days": totals["leave"],
                "attendance_rate": attendance_rate(
                    total_days, totals["present"], totals["half_day"], totals["leave"]
                ),
            },
            "by_user": list(by_user.values()),
        }

    def get_report(self, db: Session, start_date: date, end_date: date) -> Dict:
        """Day-by-day grid of every worker's attendance and earnings."""
        check_range(start_date, end_date)
        if (end_date - start_date).days + 1 > MAX_REPORT_DAYS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Report range cannot exceed {MAX_REPORT_DAYS} days"
            )

        workers = (
            db.query(User)
            .filter(User.role == UserRole.WORKER.value)
            .order_by(User.name.asc())
            .all()
        )

        rows = (
            db.query(Attendance.user_id, Attendance.date, Attendance.status, Work.quantity, Work.total_amount)
            .outerjoin(Work, Attendance.work_id == Work.id)
            .filter(Attendance.date >= start_date, Attendance.date <= end_date)
            .all()
        )
        by_key: Dict[Tuple[int, date], tuple] = {
            (row_user_id, row_date): (row_status, quantity, amount)
            for row_user_id, row_date, row_status, quantity, amount in rows
        }

        dates = []
        current = start_date
        while current <= end_date:
            dates.append(current)
            current += timedelta(days=1)

        report = []
        for worker in workers:
            days = []
            for day in dates:
                record_status, quantity, amount = by_key.get((worker.id, day), (None, None, None))
                days.append({
                    "date": day,
                    "status": record_status,
                    "has_work": quantity is not None,
                    "quantity": quantity or 0,
                    "amount": amount or 0.0,
                })

            stats = {
                "present": sum(1 for d in days if d["status"] == AttendanceStatus.PRESENT.value),
                "absent": sum(1 for d in days if d["status"] == AttendanceStatus.ABSENT.value),
                "half_day": sum(1 for d in days if d["status"] == AttendanceStatus.HALF_DAY.value),
                "leave": sum(1 for d in days if d["status"] == AttendanceStatus.LEAVE.value),
                "no_record": sum(1 for d in days if d["status"] is None),
                "total_earnings": sum(d["amount"] for d in days),
                "total_quantity": sum(d["quantity"] for d in days),
            }
            report.append({"worker": worker, "attendance": days, "stats": stats})

        return {
            "date_range": {"start_date": start_date, "end_date": end_date},
            "dates": dates,
            "report": report,
        }


# Singleton instance
attendance_service = AttendanceService()
