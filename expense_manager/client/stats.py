"""
Dashboard Statistics
Counts and totals computed from the role's expense lists
"""

from decimal import Decimal
from pydantic import BaseModel
from typing import List

from expense_manager.schemas.expense import ExpenseResponse
from expense_manager.utils.helpers import sum_amounts


class ManagerStats(BaseModel):
    total_count: int
    total_amount: Decimal
    pending_count: int
    pending_amount: Decimal
    approved_count: int
    approved_amount: Decimal

    @classmethod
    def from_lists(cls, pending: List[ExpenseResponse], approved: List[ExpenseResponse]) -> "ManagerStats":
        return cls(
            total_count=len(pending) + len(approved),
            total_amount=sum_amounts(e.amount for e in pending + approved),
            pending_count=len(pending),
            pending_amount=sum_amounts(e.amount for e in pending),
            approved_count=len(approved),
            approved_amount=sum_amounts(e.amount for e in approved),
        )


class FinanceStats(BaseModel):
    """Expenses that reached finance: awaiting payout plus already paid"""
    total_expenses: int
    total_amount: Decimal
    to_pay: int
    to_pay_amount: Decimal
    paid: int
    paid_amount: Decimal

    @classmethod
    def from_lists(cls, to_pay: List[ExpenseResponse], paid: List[ExpenseResponse]) -> "FinanceStats":
        return cls(
            total_expenses=len(to_pay) + len(paid),
            total_amount=sum_amounts(e.amount for e in to_pay + paid),
            to_pay=len(to_pay),
            to_pay_amount=sum_amounts(e.amount for e in to_pay),
            paid=len(paid),
            paid_amount=sum_amounts(e.amount for e in paid),
        )
