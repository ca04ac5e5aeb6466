from stitchhub.schemas.common import MessageResponse
from stitchhub.schemas.user import (
    UserCreate, UserUpdate, UserResponse, Token, SignupRequest, ChangePasswordRequest,
    SalaryPaymentCreate, SalaryPaymentResponse, WorkerSalaryDetails, UserStats
)
from stitchhub.schemas.work import (
    WorkCreate, WorkUpdate, WorkResponse, WorkStats,
    DescriptionCreate, DescriptionResponse, DescriptionUsage
)
from stitchhub.schemas.attendance import (
    AttendanceCreate, AttendanceStatusUpdate, AttendanceResponse,
    AttendanceByDate, AttendanceSummary, AttendanceReport
)
from stitchhub.schemas.material import MaterialCreate, MaterialUpdate, MaterialResponse, MaterialStats
from stitchhub.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductStats
from stitchhub.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseStats
from stitchhub.schemas.export import ExportCreate, ExportUpdate, ExportResponse, ExportStats, CompanyUsage

__all__ = [
    "MessageResponse",
    "UserCreate", "UserUpdate", "UserResponse", "Token", "SignupRequest", "ChangePasswordRequest",
    "SalaryPaymentCreate", "SalaryPaymentResponse", "WorkerSalaryDetails", "UserStats",
    "WorkCreate", "WorkUpdate", "WorkResponse", "WorkStats",
    "DescriptionCreate", "DescriptionResponse", "DescriptionUsage",
    "AttendanceCreate", "AttendanceStatusUpdate", "AttendanceResponse",
    "AttendanceByDate", "AttendanceSummary", "AttendanceReport",
    "MaterialCreate", "MaterialUpdate", "MaterialResponse", "MaterialStats",
    "ProductCreate", "ProductUpdate", "ProductResponse", "ProductStats",
    "ExpenseCreate", "ExpenseUpdate", "ExpenseResponse", "ExpenseStats",
    "ExportCreate", "ExportUpdate", "ExportResponse", "ExportStats", "CompanyUsage",
]
