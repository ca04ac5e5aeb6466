from datetime import date
from typing import Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from stitchhub.models.export import Company, Export
from stitchhub.models.work import WorkDescription
from stitchhub.schemas.export import ExportCreate, ExportUpdate
from stitchhub.services.description_service import description_service
import logging

logger = logging.getLogger(__name__)


class ExportService:
    """Export shipments to client companies."""

    def _with_details(self, query):
        return query.options(joinedload(Export.company), joinedload(Export.description))

    def get_or_create_company(self, db: Session, name: str) -> Company:
        company = db.query(Company).filter(Company.name == name).first()
        if company:
            return company

        company = Company(name=name)
        db.add(company)
        db.flush()
        logger.info(f"Created company {company.id}: {name!r}")
        return company

    def list_companies(self, db: Session) -> List[Dict]:
        rows = (
            db.query(Company, func.count(Export.id))
            .outerjoin(Export, Export.company_id == Company.id)
            .group_by(Company.id)
            .order_by(Company.name.asc())
            .all()
        )
        return [
            {"id": company.id, "name": company.name, "export_count": export_count}
            for company, export_count in rows
        ]

    def get(self, db: Session, export_id: int) -> Export:
        export = self._with_details(db.query(Export)).filter(Export.id == export_id).first()
        if not export:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Export with ID {export_id} not found"
            )
        return export

    def _apply_description(self, db: Session, text: Optional[str], description_id: Optional[int],
                           price_per_unit: Optional[float], update_price: bool) -> WorkDescription:
        description = description_service.get_or_create(db, text, description_id)
        if update_price and price_per_unit:
            description.price_per_unit = price_per_unit
        return description

    def create(self, db: Session, data: ExportCreate) -> Export:
        try:
            description = self._apply_description(
                db, data.description, data.description_id, data.price_per_unit, data.update_description_price
            )
            company = self.get_or_create_company(db, data.company_name)

            export = Export(
                date=data.date,
                company_id=company.id,
                description_id=description.id,
                quantity=data.quantity,
                price_per_unit=data.price_per_unit,
                total_amount=data.quantity * data.price_per_unit,
            )
            db.add(export)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Export {export.id} to {company.name} recorded: {export.quantity} x {export.price_per_unit}")
        return self.get(db, export.id)

    def update(self, db: Session, export_id: int, data: ExportUpdate) -> Export:
        export = self.get(db, export_id)
        update_data = data.model_dump(exclude_unset=True)

        try:
            if update_data.get("date") is not None:
                export.date = update_data["date"]
            if update_data.get("company_name"):
                export.company_id = self.get_or_create_company(db, update_data["company_name"]).id
            if update_data.get("quantity") is not None:
                export.quantity = update_data["quantity"]
            if update_data.get("price_per_unit") is not None:
                export.price_per_unit = update_data["price_per_unit"]

            if update_data.get("description") or update_data.get("description_id") is not None:
                description = self._apply_description(
                    db,
                    update_data.get("description"),
                    update_data.get("description_id"),
                    update_data.get("price_per_unit"),
                    data.update_description_price,
                )
                export.description_id = description.id

            export.total_amount = export.quantity * export.price_per_unit
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Export {export_id} updated")
        return self.get(db, export_id)

    def delete(self, db: Session, export_id: int) -> None:
        export = self.get(db, export_id)
        db.delete(export)
        db.commit()
        logger.info(f"Export {export_id} deleted")

    def _filtered(self, query, company_name: Optional[str] = None, description: Optional[str] = None,
                  start_date: Optional[date] = None, end_date: Optional[date] = None):
        if company_name:
            query = query.filter(Export.company.has(Company.name.ilike(f"%{company_name}%")))
        if description:
            query = query.filter(Export.description.has(WorkDescription.text.ilike(f"%{description}%")))
        if start_date:
            query = query.filter(Export.date >= start_date)
        if end_date:
            query = query.filter(Export.date <= end_date)
        return query

    def list_exports(self, db: Session, company_name: Optional[str] = None, description: Optional[str] = None,
                     start_date: Optional[date] = None, end_date: Optional[date] = None,
                     skip: int = 0, limit: Optional[int] = None) -> List[Export]:
        query = self._filtered(self._with_details(db.query(Export)), company_name, description, start_date, end_date)
        query = query.order_by(Export.date.desc(), Export.created_at.desc(), Export.id.desc()).offset(skip)
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_statistics(self, db: Session, company_name: Optional[str] = None, description: Optional[str] = None,
                       start_date: Optional[date] = None, end_date: Optional[date] = None) -> Dict:
        revenue = func.coalesce(func.sum(Export.total_amount), 0.0)
        quantity = func.coalesce(func.sum(Export.quantity), 0)
        count = func.count(Export.id)

        total_revenue, total_quantity, total_exports, average_revenue, average_price = self._filtered(
            db.query(
                revenue, quantity, count,
                func.coalesce(func.avg(Export.total_amount), 0.0),
                func.coalesce(func.avg(Export.price_per_unit), 0.0),
            ).select_from(Export),
            company_name, description, start_date, end_date
        ).one()

        by_company = (
            self._filtered(db.query(Company.name, revenue, quantity, count).select_from(Export),
                           company_name, description, start_date, end_date)
            .join(Company, Export.company_id == Company.id)
            .group_by(Company.id, Company.name)
            .order_by(revenue.desc())
            .all()
        )

        by_description = (
            self._filtered(db.query(WorkDescription.text, revenue, quantity, count).select_from(Export),
                           company_name, description, start_date, end_date)
            .join(WorkDescription, Export.description_id == WorkDescription.id)
            .group_by(WorkDescription.id, WorkDescription.text)
            .order_by(revenue.desc())
            .all()
        )

        return {
            "summary": {
                "total_revenue": float(total_revenue),
                "total_quantity": int(total_quantity),
                "total_exports": total_exports,
                "average_revenue": float(average_revenue),
                "average_price": float(average_price),
            },
            "by_company": [
                {"company": name, "total_revenue": float(r), "total_quantity": int(q), "count": c}
                for name, r, q, c in by_company
            ],
            "by_description": [
                {"description": text, "total_revenue": float(r), "total_quantity": int(q), "count": c}
                for text, r, q, c in by_description
            ],
        }


# Singleton instance
export_service = ExportService()
