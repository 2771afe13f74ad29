from sqlalchemy import Boolean, Column, Integer, String

from .base import BaseModel


class AdminUser(BaseModel):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)
    display_name = Column(String, nullable=False, default="Admin")
    is_active = Column(Boolean, nullable=False, default=True)
