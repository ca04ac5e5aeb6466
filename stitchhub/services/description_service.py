from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from stitchhub.models.work import Work, WorkDescription
from stitchhub.models.export import Export
import logging

logger = logging.getLogger(__name__)


class DescriptionService:
    """Shared lookup of work descriptions used by work entries and exports."""

    def get_or_create(self, db: Session, text: Optional[str] = None, description_id: Optional[int] = None) -> WorkDescription:
        """
        Resolve a description by id, falling back to its text.

        An unknown id is ignored when a text is also given; an unknown text is
        inserted. The caller owns the transaction: new rows are only flushed.
        """
        if description_id is not None:
            existing = db.query(WorkDescription).filter(WorkDescription.id == description_id).first()
            if existing:
                return existing

        if text:
            existing = db.query(WorkDescription).filter(WorkDescription.text == text).first()
            if existing:
                return existing

            description = WorkDescription(text=text)
            db.add(description)
            db.flush()
            logger.info(f"Created work description {description.id}: {text!r}")
            return description

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Description text or a valid description_id is required"
        )

    def create(self, db: Session, text: str, price_per_unit: Optional[float] = None) -> WorkDescription:
        existing = db.query(WorkDescription).filter(WorkDescription.text == text).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Description '{text}' already exists"
            )

        description = WorkDescription(text=text, price_per_unit=price_per_unit)
        db.add(description)
        db.commit()
        db.refresh(description)
        return description

    def list_with_usage(self, db: Session) -> List[dict]:
        """All descriptions ordered by text with how often each is referenced."""
        work_counts = (
            db.query(Work.description_id, func.count(Work.id).label("work_count"))
            .group_by(Work.description_id)
            .subquery()
        )
        export_counts = (
            db.query(Export.description_id, func.count(Export.id).label("export_count"))
            .group_by(Export.description_id)
            .subquery()
        )

        rows = (
            db.query(
                WorkDescription,
                func.coalesce(work_counts.c.work_count, 0),
                func.coalesce(export_counts.c.export_count, 0),
            )
            .outerjoin(work_counts, work_counts.c.description_id == WorkDescription.id)
            .outerjoin(export_counts, export_counts.c.description_id == WorkDescription.id)
            .order_by(WorkDescription.text.asc())
            .all()
        )

        return [
            {
                "id": description.id,
                "text": description.text,
                "price_per_unit": description.price_per_unit,
                "work_count": work_count,
                "export_count": export_count,
            }
            for description, work_count, export_count in rows
        ]


# Singleton instance
description_service = DescriptionService()
