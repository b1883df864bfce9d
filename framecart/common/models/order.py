import enum
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, String, func
from .base import Base


class OrderStatus(enum.Enum):
    """An order is the cart while OPEN; PAID is terminal."""

    OPEN = "open"
    PAID = "paid"

    def sql_condition(self, alias: Optional[str] = None) -> str:
        column = f"{alias}.paid" if alias else "paid"
        return f"{column} IS NULL" if self is OrderStatus.OPEN else f"{column} IS NOT NULL"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created = Column(DateTime, nullable=False, server_default=func.now())
    sessionId = Column(String(128), nullable=True, index=True)
    userId = Column(Integer, nullable=True, index=True)
    paid = Column(DateTime, nullable=True)
