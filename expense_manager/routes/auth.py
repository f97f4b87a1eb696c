"""
Authentication Routes
Login, current user and logout
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from expense_manager.config.database import get_db
from expense_manager.services.auth_service import auth_service
from expense_manager.schemas.auth import LoginRequest, LoginResponse
from expense_manager.schemas.user import UserResponse
from expense_manager.models.user import User
from expense_manager.utils.logger import setup_logger, log_audit

logger = setup_logger()
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Login endpoint

    Returns a bearer token along with the signed-in user's identity and role
    """
    user = auth_service.authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.warning(f"Failed login attempt for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    log_audit(user.id, "LOGIN", f"email={user.email}")
    logger.info(f"User logged in: {user.email}")

    return LoginResponse(
        token=auth_service.create_token(user),
        user_id=user.id,
        full_name=user.full_name,
        email=user.email,
        role=user.role
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(auth_service.get_current_user)):
    """Get the acting user"""
    return current_user


@router.post("/logout")
async def logout(current_user: User = Depends(auth_service.get_current_user)):
    """
    Logout endpoint

    Tokens are stateless; the client discards its token
    """
    logger.info(f"User logged out: {current_user.email}")
    return {"success": True, "message": "Logged out successfully"}
