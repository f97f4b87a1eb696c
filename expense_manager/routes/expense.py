"""
Expense Routes
Employee endpoints: submit, list, view, edit and delete own expenses
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from expense_manager.config.database import get_db
from expense_manager.services.auth_service import auth_service
from expense_manager.services.expense_service import expense_service
from expense_manager.models.user import User
from expense_manager.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, MessageResponse
from expense_manager.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_expense(
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Create a new expense request (starts as PENDING_MANAGER)"""
    return await expense_service.create_expense(db, current_user, expense_data)


@router.get("/my-expenses", response_model=List[ExpenseResponse])
async def get_my_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get all of the current user's expenses"""
    return expense_service.list_owned(db, current_user, "my_expenses")


@router.get("/my-pending", response_model=List[ExpenseResponse])
async def get_my_pending_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get the current user's expenses awaiting manager review"""
    return expense_service.list_owned(db, current_user, "pending")


@router.get("/my-rejected", response_model=List[ExpenseResponse])
async def get_my_rejected_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get the current user's expenses rejected by manager or finance"""
    return expense_service.list_owned(db, current_user, "rejected")


@router.get("/my-approved", response_model=List[ExpenseResponse])
async def get_my_approved_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get the current user's manager-approved expenses awaiting payout"""
    return expense_service.list_owned(db, current_user, "approved")


@router.get("/my-paid", response_model=List[ExpenseResponse])
async def get_my_paid_expenses(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get the current user's paid expenses"""
    return expense_service.list_owned(db, current_user, "paid")


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Get expense details

    Employees can only view their own expenses; managers and finance can view any.
    """
    return expense_service.get_visible_expense(db, expense_id, current_user)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_data: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Update an existing expense

    Rules:
    - Only the owner can update
    - Status must be PENDING_MANAGER, REJECTED_MANAGER or REJECTED_FINANCE
    - A rejected expense is resubmitted (back to PENDING_MANAGER)
    """
    return await expense_service.update_expense(db, expense_id, current_user, expense_data)


@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Delete an expense

    Rules:
    - Only the owner can delete
    - Status must be PENDING_MANAGER, REJECTED_MANAGER or REJECTED_FINANCE
    """
    await expense_service.delete_expense(db, expense_id, current_user)
    return {"message": "Expense deleted successfully"}
