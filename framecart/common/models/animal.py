from sqlalchemy import Column, Float, Integer, String, Text
from .base import Base, multilingual


class Animal(Base):
    __tablename__ = "animals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = multilingual(Text, nullable=False)
    description = multilingual(Text, nullable=True)
    category = multilingual(Text, nullable=True)
    slug = Column(String(255), nullable=False, unique=True)
    wikiUrl = Column(String(512), nullable=True)
    imageAspectRatio = Column(Float, nullable=True)
