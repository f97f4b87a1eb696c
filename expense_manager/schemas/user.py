"""
User Schemas
Pydantic models for user-related responses
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from expense_manager.models.lifecycle import UserRole


class UserResponse(BaseModel):
    """Schema for user response"""
    id: int
    full_name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
