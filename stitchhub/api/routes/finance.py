from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, datetime
from stitchhub.core.database import get_db
from stitchhub.models.user import User
from stitchhub.models.expense import ExpenseType
from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseStats
from stitchhub.api.deps import get_owner_user
from stitchhub.services.finance_service import finance_service
from stitchhub.services.spreadsheet_service import spreadsheet_service

router = APIRouter(prefix="/finance", tags=["Finance"])

EXPENSE_COLUMNS = ["id", "date", "type", "category", "amount", "note"]


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() if value and value.strip() else None


def _expense_rows(expenses) -> List[dict]:
    return [
        {
            "id": expense.id,
            "date": expense.date,
            "type": expense.type,
            "category": expense.category,
            "amount": expense.amount,
            "note": expense.note or "",
        }
        for expense in expenses
    ]


# ---- company expenses ----

@router.post("/company", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_company_expense(
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.create(db, expense_data, ExpenseType.COMPANY)


@router.get("/company", response_model=List[ExpenseResponse])
async def list_company_expenses(
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.list_expenses(db, ExpenseType.COMPANY, _clean(category), start_date, end_date, skip, limit)


@router.get("/company/statistics", response_model=ExpenseStats)
async def get_company_statistics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get_statistics(db, ExpenseType.COMPANY, True, start_date, end_date)


@router.get("/company/categories", response_model=List[str])
async def get_company_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get_categories(db, ExpenseType.COMPANY)


# ---- home expenses ----

@router.post("/home", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_home_expense(
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.create(db, expense_data, ExpenseType.HOME)


@router.get("/home", response_model=List[ExpenseResponse])
async def list_home_expenses(
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.list_expenses(db, ExpenseType.HOME, _clean(category), start_date, end_date, skip, limit)


@router.get("/home/statistics", response_model=ExpenseStats)
async def get_home_statistics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get_statistics(db, ExpenseType.HOME, True, start_date, end_date)


@router.get("/home/categories", response_model=List[str])
async def get_home_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get_categories(db, ExpenseType.HOME)


# ---- all expenses ----

@router.get("/", response_model=List[ExpenseResponse])
async def list_expenses(
    type: Optional[ExpenseType] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """List company and home expenses together."""
    return finance_service.list_expenses(db, type, _clean(category), start_date, end_date, skip, limit)


@router.get("/statistics", response_model=ExpenseStats)
async def get_statistics(
    type: Optional[ExpenseType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get_statistics(db, type, False, start_date, end_date)


@router.get("/categories", response_model=List[str])
async def get_categories(
    type: Optional[ExpenseType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get_categories(db, type)


@router.get("/export/csv")
async def export_expenses_csv(
    type: Optional[ExpenseType] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Export expenses to CSV."""
    expenses = finance_service.list_expenses(db, type, _clean(category), start_date, end_date)

    csv_buffer = spreadsheet_service.to_csv(_expense_rows(expenses), EXPENSE_COLUMNS)

    return StreamingResponse(
        csv_buffer,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=expenses_{datetime.now().strftime('%Y%m%d')}.csv"}
    )


@router.get("/export/excel")
async def export_expenses_excel(
    type: Optional[ExpenseType] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    """Export expenses to Excel."""
    expenses = finance_service.list_expenses(db, type, _clean(category), start_date, end_date)
    excel_buffer = spreadsheet_service.to_excel(_expense_rows(expenses), EXPENSE_COLUMNS, sheet_name="Expenses")

    return StreamingResponse(
        excel_buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=expenses_{datetime.now().strftime('%Y%m%d')}.xlsx"}
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.get(db, expense_id)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_data: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    return finance_service.update(db, expense_id, expense_data)


@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_owner_user)
):
    finance_service.delete(db, expense_id)
    return {"message": "Expense deleted successfully"}
