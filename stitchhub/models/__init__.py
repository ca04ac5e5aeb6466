from stitchhub.models.user import User, UserRole, SalaryPayment
from stitchhub.models.work import Work, WorkDescription
from stitchhub.models.attendance import Attendance, AttendanceStatus
from stitchhub.models.material import Material
from stitchhub.models.product import Product
from stitchhub.models.expense import Expense, ExpenseType
from stitchhub.models.export import Company, Export

__all__ = [
    "User",
    "UserRole",
    "SalaryPayment",
    "Work",
    "WorkDescription",
    "Attendance",
    "AttendanceStatus",
    "Material",
    "Product",
    "Expense",
    "ExpenseType",
    "Company",
    "Export",
]
