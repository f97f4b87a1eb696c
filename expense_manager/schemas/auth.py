"""
Authentication Schemas
Pydantic models for authentication requests and responses
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional

from expense_manager.models.lifecycle import UserRole


class LoginRequest(BaseModel):
    """Login request schema"""
    email: str
    password: str


class LoginResponse(BaseModel):
    """Token plus the identity of the signed-in user"""
    token: Optional[str] = None
    token_type: str = "Bearer"
    user_id: int
    full_name: str
    email: str
    role: UserRole

    class Config:
        alias_generator = to_camel
        populate_by_name = True

