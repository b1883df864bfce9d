from sqlalchemy import Column, Float, Integer, String, Text
from .base import Base, multilingual


class FrameSpecification(Base):
    """Physical frame size, with the image area and the mat opening."""
    __tablename__ = "frameSpecifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = multilingual(Text, nullable=False)
    description = multilingual(Text, nullable=True)
    slug = Column(String(255), nullable=False, unique=True)
    frameWidthCm = Column(Float, nullable=False)
    frameHeightCm = Column(Float, nullable=False)
    imageAreaWidthCm = Column(Float, nullable=False)
    imageAreaHeightCm = Column(Float, nullable=False)
    matOpeningWidthCm = Column(Float, nullable=True)
    matOpeningHeightCm = Column(Float, nullable=True)
