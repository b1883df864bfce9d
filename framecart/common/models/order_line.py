from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, func
from .base import Base


class OrderLine(Base):
    __tablename__ = "orderLines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created = Column(DateTime, nullable=False, server_default=func.now())
    orderId = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    animalId = Column(Integer, ForeignKey("animals.id"), nullable=False)
    frameSpecId = Column(Integer, ForeignKey("frameSpecifications.id"), nullable=False)
    frameMaterialId = Column(Integer, ForeignKey("frameMaterials.id"), nullable=False)
    withMat = Column(Integer, nullable=False, server_default="1")  # 0/1
    quantity = Column(Integer, nullable=False, server_default="1")
    unitPrice = Column(Float, nullable=False)
    totalPrice = Column(Float, nullable=False)
