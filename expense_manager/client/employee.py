"""
Employee Expense Client
Submit, list, edit and delete the caller's own expenses
"""

from typing import List, Optional, Union
from decimal import Decimal

from expense_manager.client.base import BaseExpenseClient, EXPENSES_PATH
from expense_manager.exceptions import ExpenseNotEditableError
from expense_manager.models.lifecycle import can_delete, can_edit, validate_amount
from expense_manager.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from expense_manager.utils.logger import setup_logger

logger = setup_logger()

Amount = Union[Decimal, float, int, str]

# Default for update fields that keep their current value; None clears a field
KEEP = object()


class EmployeeExpenseClient(BaseExpenseClient):
    """Client for the employee endpoints"""

    async def create(
        self,
        title: str,
        amount: Amount,
        description: Optional[str] = None,
        receipt_url: Optional[str] = None
    ) -> ExpenseResponse:
        """
        Submit a new expense

        Raises:
            InvalidAmountError: If the amount is not positive with cent precision
            ExpenseApiError: If the service refuses the request
        """
        payload = ExpenseCreate(
            title=title,
            amount=validate_amount(amount),
            description=description,
            receipt_url=receipt_url
        )
        expense = await self._expense("POST", EXPENSES_PATH, json=payload.model_dump(by_alias=True, mode="json"))
        logger.info(f"Submitted expense {expense.id} ({expense.amount})")
        return expense

    async def my_expenses(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/my-expenses")

    async def my_pending(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/my-pending")

    async def my_rejected(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/my-rejected")

    async def my_approved(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/my-approved")

    async def my_paid(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/my-paid")

    async def update(
        self,
        expense: ExpenseResponse,
        title=KEEP,
        amount=KEEP,
        description=KEEP,
        receipt_url=KEEP
    ) -> ExpenseResponse:
        """
        Replace an expense's fields; omitted fields keep their current value

        Passing None for description or receipt_url clears it.

        Args:
            expense: The expense as last fetched

        Raises:
            ExpenseNotEditableError: If the expense is past manager review (no request is sent)
        """
        if not can_edit(expense.status):
            raise ExpenseNotEditableError(expense.id, expense.status.value)

        payload = ExpenseUpdate(
            title=expense.title if title is KEEP else title,
            amount=expense.amount if amount is KEEP else validate_amount(amount),
            description=expense.description if description is KEEP else description,
            receipt_url=expense.receipt_url if receipt_url is KEEP else receipt_url
        )
        return await self._expense(
            "PUT",
            f"{EXPENSES_PATH}/{expense.id}",
            json=payload.model_dump(by_alias=True, mode="json")
        )

    async def delete(self, expense: ExpenseResponse) -> str:
        """
        Delete an expense

        Raises:
            ExpenseNotEditableError: If the expense is past manager review (no request is sent)
        """
        if not can_delete(expense.status):
            raise ExpenseNotEditableError(expense.id, expense.status.value)

        data = await self._request("DELETE", f"{EXPENSES_PATH}/{expense.id}")
        logger.info(f"Deleted expense {expense.id}")
        return (data or {}).get("message", "")
