from sqlalchemy import Column, Float, ForeignKey, Integer
from .base import Base


class FramePricing(Base):
    __tablename__ = "framePricing"

    id = Column(Integer, primary_key=True, autoincrement=True)
    frameSpecId = Column(Integer, ForeignKey("frameSpecifications.id"), nullable=False, unique=True)
    basePrice = Column(Float, nullable=False)
