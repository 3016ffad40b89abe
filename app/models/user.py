"""
User model
"""

from sqlalchemy import Column, Integer, String

from app.core.db import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    username = Column(String(255), unique=True, nullable=False, index=True)  # email
    password = Column(String(255), nullable=False)  # werkzeug hash
