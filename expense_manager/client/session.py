"""
API Session
Who is calling the expense service and where it lives
"""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional

from expense_manager.config.headers import DEV_ROLE_HEADER, DEV_USER_ID_HEADER
from expense_manager.config.settings import settings
from expense_manager.models.lifecycle import UserRole, coerce_role


class ApiSession(BaseModel):
    """
    Connection and identity for one acting user

    Passed explicitly to every client. In development mode the service picks
    the acting user from the role/user-id headers; a bearer token from
    login takes precedence when present.
    """
    role: UserRole
    base_url: str = Field(default_factory=lambda: settings.API_BASE_URL)
    token: Optional[str] = None
    user_id: Optional[int] = None
    timeout: float = Field(default_factory=lambda: settings.CLIENT_TIMEOUT_SECONDS)

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, value):
        return coerce_role(value)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def headers(self) -> Dict[str, str]:
        """Request headers identifying this session"""
        headers = {
            "Content-Type": "application/json",
            DEV_ROLE_HEADER: self.role.value,
        }
        if self.user_id is not None:
            headers[DEV_USER_ID_HEADER] = str(self.user_id)
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
