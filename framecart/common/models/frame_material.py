from sqlalchemy import Column, Float, Integer, String, Text
from .base import Base, multilingual


class FrameMaterial(Base):
    __tablename__ = "frameMaterials"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = multilingual(Text, nullable=False)
    material = multilingual(Text, nullable=True)
    color = multilingual(Text, nullable=True)
    style = multilingual(Text, nullable=True)
    slug = Column(String(255), nullable=False, unique=True)
    priceMultiplier = Column(Float, nullable=False, server_default="1")
    cssBackground = Column(Text, nullable=True)  # any valid css "background" value
