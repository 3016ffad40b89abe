"""
User account routes - registration and login
"""

from fastapi import APIRouter, Depends, status

from app.schemas.common import CreatedResponse
from app.schemas.user import LoginResponse, UserLogin, UserRegister
from app.services.repositories import Repository, get_repository
from app.services.user_service import UserService

router = APIRouter()

@router.post("/register", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    repo: Repository = Depends(get_repository)
):
    """Register a new user"""
    user = UserService(repo).register(payload)
    return CreatedResponse(message="User registered successfully", id=user["id"])

@router.post("/login", response_model=LoginResponse)
async def login(
    payload: UserLogin,
    repo: Repository = Depends(get_repository)
):
    """Exchange credentials for a bearer token"""
    token = UserService(repo).login(payload)
    return LoginResponse(message="Login successful", token=token)
