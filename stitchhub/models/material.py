from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime
from stitchhub.core.database import Base


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    supplier = Column(String(255), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    cost = Column(Float, nullable=False)
    date_received = Column(DateTime, nullable=False, default=datetime.utcnow)
