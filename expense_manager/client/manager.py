"""
Manager Expense Client
Review queue, approve/reject (single and batch) and dashboard stats
"""

import asyncio
from typing import Iterable, List, Optional

from expense_manager.client.base import BaseExpenseClient, EXPENSES_PATH
from expense_manager.client.batch import BatchResult, run_batch
from expense_manager.client.stats import ManagerStats
from expense_manager.models.lifecycle import validate_rejection_comment
from expense_manager.schemas.approval import ManagerActionRequest, ManagerRejectionRequest
from expense_manager.schemas.expense import ExpenseResponse


class ManagerExpenseClient(BaseExpenseClient):
    """Client for the manager endpoints"""

    async def pending_approval(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/pending-manager-approval")

    async def approved(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/approved-by-manager")

    async def history(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/manager-history")

    async def approve(self, expense_id: int, comment: Optional[str] = None) -> ExpenseResponse:
        """Approve a pending expense; it moves on to finance"""
        body = ManagerActionRequest(comment=comment).model_dump(exclude_none=True)
        return await self._expense("POST", f"{EXPENSES_PATH}/{expense_id}/approve", json=body)

    async def reject(self, expense_id: int, comment: str) -> ExpenseResponse:
        """
        Reject a pending expense

        Raises:
            CommentRequiredError: If the comment is empty or whitespace (no request is sent)
        """
        comment = validate_rejection_comment(comment)
        body = ManagerRejectionRequest(comment=comment).model_dump()
        return await self._expense("POST", f"{EXPENSES_PATH}/{expense_id}/reject", json=body)

    async def batch_approve(self, expense_ids: Iterable[int], comment: Optional[str] = None) -> BatchResult:
        return await run_batch(expense_ids, lambda expense_id: self.approve(expense_id, comment), "manager approve")

    async def batch_reject(self, expense_ids: Iterable[int], comment: str) -> BatchResult:
        """
        Reject several expenses with one shared comment

        Raises:
            CommentRequiredError: If the comment is empty or whitespace (no request is sent)
        """
        comment = validate_rejection_comment(comment)
        return await run_batch(expense_ids, lambda expense_id: self.reject(expense_id, comment), "manager reject")

    async def stats(self) -> ManagerStats:
        pending, approved = await asyncio.gather(self.pending_approval(), self.approved())
        return ManagerStats.from_lists(pending, approved)
