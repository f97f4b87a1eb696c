"""
Authentication Service
Resolves the acting user from a bearer token or, in development mode,
from the X-Dev-User-Id / X-Dev-User-Role headers
"""

from datetime import datetime
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from expense_manager.config.database import get_db
from expense_manager.config.headers import DEV_ROLE_HEADER, DEV_USER_ID_HEADER
from expense_manager.config.settings import settings
from expense_manager.models.lifecycle import UserRole, coerce_role
from expense_manager.models.user import User
from expense_manager.utils.security import verify_password, create_access_token, decode_token
from expense_manager.utils.logger import setup_logger

logger = setup_logger()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class AuthService:
    """Authentication service"""

    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password

        Args:
            db: Database session
            email: User email
            password: Password

        Returns:
            User: Authenticated user or None
        """
        user = db.query(User).filter(User.email == email).first()

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        if not user.is_active:
            return None

        # Update last login
        user.last_login = datetime.utcnow()
        db.commit()

        logger.info(f"User authenticated: {user.email}")
        return user

    def create_token(self, user: User) -> str:
        """Create an access token for user"""
        return create_access_token(
            data={
                "sub": str(user.id),
                "email": user.email,
                "role": user.role.value,
            }
        )

    def _user_from_token(self, db: Session, token: str) -> Optional[User]:
        payload = decode_token(token)
        if payload is None or payload.get("sub") is None:
            return None
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            return None
        return db.query(User).filter(User.id == user_id).first()

    def _dev_mode_user(self, db: Session, request: Request) -> Optional[User]:
        """
        Pick the development user named by the dev headers

        X-Dev-User-Id wins over X-Dev-User-Role; the role header selects the
        lowest-id active user holding that role.
        """
        dev_user_id = request.headers.get(DEV_USER_ID_HEADER)
        if dev_user_id:
            try:
                user = db.query(User).filter(User.id == int(dev_user_id)).first()
            except ValueError:
                user = None
            if user:
                return user
            logger.warning(f"Development user with ID {dev_user_id} not found")

        dev_role = request.headers.get(DEV_ROLE_HEADER)
        if not dev_role:
            return None

        try:
            role = coerce_role(dev_role)
        except ValueError:
            logger.warning(f"Unknown development role header: {dev_role}")
            return None

        return db.query(User).filter(
            User.role == role,
            User.is_active == True
        ).order_by(User.id).first()

    async def get_current_user(
        self,
        request: Request,
        token: Optional[str] = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Get current user from the bearer token or the development headers

        Args:
            request: Incoming request (for the development headers)
            token: JWT token, if any
            db: Database session

        Returns:
            User: Current user

        Raises:
            HTTPException: If no user can be resolved or the account is inactive
        """
        user = None

        if token:
            user = self._user_from_token(db, token)
            if user is None and not settings.DEV_MODE:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Could not validate credentials",
                    headers={"WWW-Authenticate": "Bearer"},
                )

        if user is None and settings.DEV_MODE:
            user = self._dev_mode_user(db, request)

        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is inactive"
            )

        return user

    def require_role(self, *roles: UserRole):
        """
        Dependency factory requiring one of the given roles

        Args:
            roles: Accepted roles
        """
        async def role_checker(current_user: User = Depends(self.get_current_user)):
            if current_user.role not in roles:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Access denied: Only {' or '.join(r.value.lower() for r in roles)} users can perform this action"
                )
            return current_user

        return role_checker


# Create singleton instance
auth_service = AuthService()
