from sqlalchemy import Column, Integer, String, Float, DateTime
from stitchhub.core.database import Base


class Product(Base):
    """A customer order being produced; open while ``end_date`` is empty."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    client = Column(String(255), nullable=False, index=True)
    revenue = Column(Float, nullable=True)
