"""
Base Expense Client
Shared HTTP plumbing for the role clients: request, error mapping, parsing
"""

import httpx
from typing import Any, Dict, List, Optional

from expense_manager.client.session import ApiSession
from expense_manager.exceptions import ExpenseApiError
from expense_manager.schemas.expense import ExpenseResponse
from expense_manager.utils.logger import setup_logger

logger = setup_logger()

EXPENSES_PATH = "/api/expenses"


def handle_response(response: httpx.Response) -> Any:
    """
    Return the decoded body of a successful response

    Args:
        response: Response from the expense service

    Returns:
        Decoded JSON body, or None for an empty body

    Raises:
        ExpenseApiError: For any non-2xx status. The message comes from the
            body's "message", then its "detail", then "HTTP <code>: <reason>".
    """
    if response.is_success:
        if not response.content:
            return None
        return response.json()

    message = None
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if message is not None and not isinstance(message, str):
            message = str(message)

    if not message:
        message = f"HTTP {response.status_code}: {response.reason_phrase}"

    raise ExpenseApiError(message, status_code=response.status_code)


class BaseExpenseClient:
    """
    Async client for the expense service

    Use as an async context manager, or call ``aclose()`` when done.
    A custom ``transport`` can be injected (e.g. an ASGI app in tests).
    """

    def __init__(self, session: ApiSession, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=session.base_url,
            timeout=session.timeout,
            transport=transport
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            response = await self._http.request(
                method,
                path,
                json=json,
                params=params,
                headers=self.session.headers()
            )
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e!r}")
            raise ExpenseApiError(f"Network error: {e}") from e

        return handle_response(response)

    async def _expense(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> ExpenseResponse:
        data = await self._request(method, path, json=json)
        return ExpenseResponse.model_validate(data)

    async def _expenses(self, path: str) -> List[ExpenseResponse]:
        data = await self._request("GET", path)
        return [ExpenseResponse.model_validate(item) for item in data or []]

    async def get(self, expense_id: int) -> ExpenseResponse:
        """Fetch one expense"""
        return await self._expense("GET", f"{EXPENSES_PATH}/{expense_id}")
