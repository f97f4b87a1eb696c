"""
Finance Expense Client
Payout queue, approve/reject (single and batch) and dashboard stats
"""

import asyncio
from datetime import date
from typing import Iterable, List, Optional

from expense_manager.client.base import BaseExpenseClient, EXPENSES_PATH
from expense_manager.client.batch import BatchResult, run_batch
from expense_manager.client.stats import FinanceStats
from expense_manager.models.lifecycle import validate_rejection_comment
from expense_manager.schemas.approval import FinanceActionRequest, FinanceRejectionRequest
from expense_manager.schemas.expense import ExpenseResponse


class FinanceExpenseClient(BaseExpenseClient):
    """Client for the finance endpoints"""

    async def pending_approval(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/pending-finance-approval")

    async def paid(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/approved-by-finance")

    async def history(self) -> List[ExpenseResponse]:
        return await self._expenses(f"{EXPENSES_PATH}/finance-history")

    async def approve(
        self,
        expense_id: int,
        note: Optional[str] = None,
        reimbursement_method: Optional[str] = None,
        expected_payout_date: Optional[date] = None
    ) -> ExpenseResponse:
        """Approve payout; the expense becomes PAID"""
        body = FinanceActionRequest(
            note=note,
            reimbursement_method=reimbursement_method,
            expected_payout_date=expected_payout_date
        ).model_dump(by_alias=True, exclude_none=True, mode="json")
        return await self._expense("POST", f"{EXPENSES_PATH}/{expense_id}/finance-approve", json=body)

    async def reject(self, expense_id: int, comment: str) -> ExpenseResponse:
        """
        Reject payout

        Raises:
            CommentRequiredError: If the comment is empty or whitespace (no request is sent)
        """
        comment = validate_rejection_comment(comment)
        body = FinanceRejectionRequest(comment=comment).model_dump()
        return await self._expense("POST", f"{EXPENSES_PATH}/{expense_id}/finance-reject", json=body)

    async def batch_approve(
        self,
        expense_ids: Iterable[int],
        note: Optional[str] = None,
        reimbursement_method: Optional[str] = None,
        expected_payout_date: Optional[date] = None
    ) -> BatchResult:
        return await run_batch(
            expense_ids,
            lambda expense_id: self.approve(expense_id, note, reimbursement_method, expected_payout_date),
            "finance approve"
        )

    async def batch_reject(self, expense_ids: Iterable[int], comment: str) -> BatchResult:
        """
        Reject several payouts with one shared comment

        Raises:
            CommentRequiredError: If the comment is empty or whitespace (no request is sent)
        """
        comment = validate_rejection_comment(comment)
        return await run_batch(expense_ids, lambda expense_id: self.reject(expense_id, comment), "finance reject")

    async def stats(self) -> FinanceStats:
        to_pay, paid = await asyncio.gather(self.pending_approval(), self.paid())
        return FinanceStats.from_lists(to_pay, paid)
