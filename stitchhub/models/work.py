from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from stitchhub.core.database import Base


class WorkDescription(Base):
    """Deduplicated label shared by work entries and export records."""
    __tablename__ = "work_descriptions"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(String(500), unique=True, index=True, nullable=False)
    price_per_unit = Column(Float, nullable=True)  # default price suggested to clients

    works = relationship("Work", back_populates="description")
    exports = relationship("Export", back_populates="description")


class Work(Base):
    __tablename__ = "works"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price_per_unit = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)
    description_id = Column(Integer, ForeignKey("work_descriptions.id", ondelete="RESTRICT"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="works")
    description = relationship("WorkDescription", back_populates="works")
    attendance = relationship("Attendance", back_populates="work", uselist=False)
