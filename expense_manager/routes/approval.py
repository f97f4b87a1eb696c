"""
Approval Routes
Manager and finance workflow endpoints: review queues and decisions
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from expense_manager.config.database import get_db
from expense_manager.services.auth_service import auth_service
from expense_manager.services.expense_service import expense_service
from expense_manager.models.lifecycle import UserRole
from expense_manager.models.user import User
from expense_manager.schemas.expense import ExpenseResponse
from expense_manager.schemas.approval import (
    ManagerActionRequest,
    ManagerRejectionRequest,
    FinanceActionRequest,
    FinanceRejectionRequest,
)
from expense_manager.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()

require_manager = auth_service.require_role(UserRole.MANAGER)
require_finance = auth_service.require_role(UserRole.FINANCE)


# ============= MANAGER OPERATIONS =============

@router.get("/pending-manager-approval", response_model=List[ExpenseResponse])
async def get_pending_manager_approval(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Get all expenses awaiting manager approval"""
    expenses = expense_service.list_for_role(db, UserRole.MANAGER, "pending_review")
    logger.info(f"{current_user.email} viewing {len(expenses)} pending manager approvals")
    return expenses


@router.get("/approved-by-manager", response_model=List[ExpenseResponse])
async def get_approved_by_manager(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Get expenses approved by a manager (awaiting payout or paid)"""
    return expense_service.list_for_role(db, UserRole.MANAGER, "approved")


@router.get("/manager-history", response_model=List[ExpenseResponse])
async def get_manager_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Get every expense a manager has already decided on"""
    return expense_service.list_for_role(db, UserRole.MANAGER, "history")


@router.post("/{expense_id}/approve", response_model=ExpenseResponse)
async def approve_expense(
    expense_id: int,
    action: ManagerActionRequest = ManagerActionRequest(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """
    Approve a pending expense (Manager action)

    Changes status from PENDING_MANAGER to PENDING_FINANCE
    """
    logger.info(f"Manager {current_user.email} approving expense {expense_id}")
    return await expense_service.manager_approve(db, expense_id, current_user, action.comment)


@router.post("/{expense_id}/reject", response_model=ExpenseResponse)
async def reject_expense(
    expense_id: int,
    action: ManagerRejectionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """
    Reject a pending expense (Manager action)

    Changes status from PENDING_MANAGER to REJECTED_MANAGER; a comment is required
    """
    logger.info(f"Manager {current_user.email} rejecting expense {expense_id}")
    return await expense_service.manager_reject(db, expense_id, current_user, action.comment)


# ============= FINANCE OPERATIONS =============

@router.get("/pending-finance-approval", response_model=List[ExpenseResponse])
async def get_pending_finance_approval(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_finance)
):
    """Get all expenses awaiting finance approval"""
    expenses = expense_service.list_for_role(db, UserRole.FINANCE, "to_pay")
    logger.info(f"{current_user.email} viewing {len(expenses)} pending finance approvals")
    return expenses


@router.get("/approved-by-finance", response_model=List[ExpenseResponse])
async def get_approved_by_finance(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_finance)
):
    """Get paid expenses"""
    return expense_service.list_for_role(db, UserRole.FINANCE, "paid")


@router.get("/finance-history", response_model=List[ExpenseResponse])
async def get_finance_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_finance)
):
    """Get every expense that has reached finance"""
    return expense_service.list_for_role(db, UserRole.FINANCE, "history")


@router.post("/{expense_id}/finance-approve", response_model=ExpenseResponse)
async def finance_approve_expense(
    expense_id: int,
    action: FinanceActionRequest = FinanceActionRequest(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_finance)
):
    """
    Approve payout with optional payout details (Finance action)

    Changes status from PENDING_FINANCE to PAID
    """
    logger.info(f"Finance {current_user.email} approving expense {expense_id}")
    return await expense_service.finance_approve(db, expense_id, current_user, action)


@router.post("/{expense_id}/finance-reject", response_model=ExpenseResponse)
async def finance_reject_expense(
    expense_id: int,
    action: FinanceRejectionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_finance)
):
    """
    Reject payout (Finance action)

    Changes status from PENDING_FINANCE to REJECTED_FINANCE; a comment is required
    """
    logger.info(f"Finance {current_user.email} rejecting expense {expense_id}")
    return await expense_service.finance_reject(db, expense_id, current_user, action.comment)
