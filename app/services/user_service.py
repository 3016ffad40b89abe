"""
User registration and login
"""

import logging

from app.core.errors import AuthenticationError
from app.schemas.user import UserLogin, UserRegister
from app.services.repositories import Repository, Row
from app.services.validators import validate_registration
from app.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

class UserService:
    """Service for account operations"""

    def __init__(self, repo: Repository):
        self.repo = repo

    def register(self, payload: UserRegister) -> Row:
        """Validate and store a new user; duplicate usernames raise ConflictError"""
        validate_registration(
            payload.first_name, payload.last_name, payload.username, payload.password
        )
        user = self.repo.create_user({
            "first_name": payload.first_name.strip(),
            "last_name": payload.last_name.strip(),
            "username": payload.username.strip(),
            "password": hash_password(payload.password),
        })
        logger.info(f"Registered user {user['id']} ({user['username']})")
        return user

    def login(self, payload: UserLogin) -> str:
        """Return a signed token for valid credentials"""
        user = self.repo.get_user_by_username((payload.username or "").strip())
        if not user or not payload.password or not verify_password(payload.password, user["password"]):
            logger.warning(f"Failed login for {payload.username!r}")
            raise AuthenticationError("Invalid username or password")
        return create_access_token(user)
