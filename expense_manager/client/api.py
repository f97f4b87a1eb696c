"""
Expense API Client Factory
Builds the role client for a session, and logs in to obtain a session
"""

import httpx
from typing import Dict, Optional, Type

from expense_manager.client.base import BaseExpenseClient, handle_response
from expense_manager.client.employee import EmployeeExpenseClient
from expense_manager.client.finance import FinanceExpenseClient
from expense_manager.client.manager import ManagerExpenseClient
from expense_manager.client.notifications import NotificationClient
from expense_manager.client.session import ApiSession
from expense_manager.config.settings import settings
from expense_manager.exceptions import ExpenseApiError
from expense_manager.models.lifecycle import UserRole
from expense_manager.schemas.auth import LoginRequest, LoginResponse
from expense_manager.utils.logger import setup_logger

logger = setup_logger()


class ExpenseApiClient:
    """Entry point for the role-specific expense clients"""

    ROLE_CLIENTS: Dict[UserRole, Type[BaseExpenseClient]] = {
        UserRole.EMPLOYEE: EmployeeExpenseClient,
        UserRole.MANAGER: ManagerExpenseClient,
        UserRole.FINANCE: FinanceExpenseClient,
    }

    @classmethod
    def for_session(
        cls,
        session: ApiSession,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> BaseExpenseClient:
        """Return the expense client matching the session's role"""
        return cls.ROLE_CLIENTS[session.role](session, transport=transport)

    @staticmethod
    def notifications(
        session: ApiSession,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> NotificationClient:
        return NotificationClient(session, transport=transport)

    @staticmethod
    async def login(
        email: str,
        password: str,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> ApiSession:
        """
        Exchange credentials for a token-carrying session

        Raises:
            ExpenseApiError: If the credentials are rejected or the service is unreachable
        """
        base_url = base_url or settings.API_BASE_URL
        payload = LoginRequest(email=email, password=password).model_dump()

        async with httpx.AsyncClient(
            base_url=base_url,
            timeout=settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport
        ) as http:
            try:
                response = await http.post("/api/auth/login", json=payload)
            except httpx.RequestError as e:
                logger.error(f"Login request failed: {e!r}")
                raise ExpenseApiError(f"Network error: {e}") from e

        login = LoginResponse.model_validate(handle_response(response))
        logger.info(f"Logged in as {login.email} ({login.role.value})")
        return ApiSession(
            role=login.role,
            base_url=base_url,
            token=login.token,
            user_id=login.user_id
        )
