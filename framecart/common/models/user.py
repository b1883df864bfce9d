from sqlalchemy import Column, DateTime, Integer, String, func
from .base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created = Column(DateTime, nullable=False, server_default=func.now())
    email = Column(String(255), nullable=False, unique=True)
    firstName = Column(String(255), nullable=True)
    lastName = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default="user", server_default="user")
    password = Column(String(255), nullable=False)
