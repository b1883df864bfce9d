from sqlalchemy import Column, Float, Integer, String, Text
from .base import Base, multilingual


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = multilingual(Text, nullable=False)
    description = multilingual(Text, nullable=True)
    quantity = Column(Integer, nullable=False, server_default="0")
    price = Column(Float, nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    categories = Column(Text, nullable=True)
