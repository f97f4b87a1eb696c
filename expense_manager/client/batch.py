"""
Batch Actions
Apply one action to many expenses as independent concurrent requests
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List

from expense_manager.schemas.expense import ExpenseResponse
from expense_manager.utils.logger import setup_logger

logger = setup_logger()


@dataclass
class BatchFailure:
    expense_id: int
    error: Exception


@dataclass
class BatchResult:
    """Outcome of a batch action; partial success is kept, nothing is rolled back"""
    succeeded: List[ExpenseResponse] = field(default_factory=list)
    failed: List[BatchFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    @property
    def failed_ids(self) -> List[int]:
        return [failure.expense_id for failure in self.failed]


async def run_batch(
    expense_ids: Iterable[int],
    action: Callable[[int], Awaitable[ExpenseResponse]],
    label: str
) -> BatchResult:
    """
    Run ``action`` for every id concurrently and collect the outcomes

    Args:
        expense_ids: Expenses to act on
        action: Coroutine function performing the single-expense call
        label: Action name for log lines

    Returns:
        BatchResult: Successes in input order plus one failure per failed id
    """
    ids = list(expense_ids)
    outcomes = await asyncio.gather(*(action(expense_id) for expense_id in ids), return_exceptions=True)

    result = BatchResult()
    for expense_id, outcome in zip(ids, outcomes):
        if isinstance(outcome, Exception):
            logger.warning(f"Batch {label} failed for expense {expense_id}: {outcome}")
            result.failed.append(BatchFailure(expense_id=expense_id, error=outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            result.succeeded.append(outcome)

    logger.info(f"Batch {label}: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
    return result
