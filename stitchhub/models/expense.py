from sqlalchemy import Column, Integer, String, Float, DateTime, Text
from datetime import datetime
import enum
from stitchhub.core.database import Base


class ExpenseType(str, enum.Enum):
    COMPANY = "COMPANY"
    HOME = "HOME"


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), nullable=False, index=True)
    category = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    note = Column(Text, nullable=True)
