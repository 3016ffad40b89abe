"""
User-related Pydantic schemas
"""

from typing import Optional
from pydantic import BaseModel

class UserRegister(BaseModel):
    """Registration payload; field rules are enforced by the validators"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

class UserLogin(BaseModel):
    """Login payload"""
    username: Optional[str] = None
    password: Optional[str] = None

class UserPublic(BaseModel):
    """User as exposed to other users (no password)"""
    id: int
    first_name: str
    last_name: str
    username: str

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    success: bool = True
    message: str
    token: str
