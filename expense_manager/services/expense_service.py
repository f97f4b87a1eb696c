"""
Expense Service
Business logic for the expense lifecycle: creation, owner edits and the
manager/finance decisions, each checked against the lifecycle model
"""

from sqlalchemy.orm import Session
from typing import List, Optional

from expense_manager.exceptions import (
    ExpenseAccessDeniedError,
    ExpenseNotEditableError,
    ExpenseNotFoundError,
)
from expense_manager.models.approval import Approval, ApprovalDecision, ApprovalLevel
from expense_manager.models.expense import ExpenseRequest
from expense_manager.models.lifecycle import (
    INITIAL_STATUS,
    UserRole,
    WorkflowAction,
    partition_statuses,
    validate_rejection_comment,
)
from expense_manager.models.user import User
from expense_manager.schemas.approval import FinanceActionRequest
from expense_manager.schemas.expense import ExpenseCreate, ExpenseUpdate
from expense_manager.services.notification_service import notification_service
from expense_manager.utils.logger import setup_logger, log_audit

logger = setup_logger()


class ExpenseService:
    """Service for expense-related business logic"""

    def __init__(self):
        """Initialize with dependent services"""
        self.notification_service = notification_service

    # ============= QUERIES =============

    def get_expense(self, db: Session, expense_id: int) -> ExpenseRequest:
        """
        Load an expense by id

        Raises:
            ExpenseNotFoundError: If no such expense exists
        """
        expense = db.query(ExpenseRequest).filter(ExpenseRequest.id == expense_id).first()
        if not expense:
            raise ExpenseNotFoundError(expense_id)
        return expense

    def get_visible_expense(self, db: Session, expense_id: int, user: User) -> ExpenseRequest:
        """
        Load an expense the user is allowed to see

        Raises:
            ExpenseNotFoundError: If no such expense exists
            ExpenseAccessDeniedError: If an employee asks for someone else's expense
        """
        expense = self.get_expense(db, expense_id)
        if not user.can_view_expense(expense):
            raise ExpenseAccessDeniedError()
        return expense

    def list_owned(self, db: Session, employee: User, partition: str = "my_expenses") -> List[ExpenseRequest]:
        """
        List the employee's own expenses in one dashboard partition

        Args:
            db: Database session
            employee: Owning employee
            partition: Employee partition name (my_expenses, pending, rejected, approved, paid)

        Returns:
            List of expenses, newest first
        """
        statuses = partition_statuses(UserRole.EMPLOYEE, partition)
        return db.query(ExpenseRequest).filter(
            ExpenseRequest.employee_id == employee.id,
            ExpenseRequest.status.in_(statuses)
        ).order_by(ExpenseRequest.created_at.desc(), ExpenseRequest.id.desc()).all()

    def list_for_role(self, db: Session, role: UserRole, partition: str) -> List[ExpenseRequest]:
        """
        List every expense in a manager or finance partition

        Args:
            db: Database session
            role: MANAGER or FINANCE
            partition: Partition name for that role

        Returns:
            List of expenses, newest first
        """
        statuses = partition_statuses(role, partition)
        return db.query(ExpenseRequest).filter(
            ExpenseRequest.status.in_(statuses)
        ).order_by(ExpenseRequest.created_at.desc(), ExpenseRequest.id.desc()).all()

    # ============= EMPLOYEE OPERATIONS =============

    async def create_expense(self, db: Session, employee: User, data: ExpenseCreate) -> ExpenseRequest:
        """
        Create a new expense request (starts as PENDING_MANAGER)

        Args:
            db: Database session
            employee: Submitting employee
            data: Validated expense fields

        Returns:
            ExpenseRequest: The stored expense
        """
        expense = ExpenseRequest(
            employee_id=employee.id,
            title=data.title,
            description=data.description,
            amount=data.amount,
            receipt_url=data.receipt_url,
            status=INITIAL_STATUS
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)

        log_audit(employee.id, "EXPENSE_CREATED", f"expense={expense.id} amount={expense.amount}")
        logger.info(f"Expense {expense.id} created by {employee.email} for {expense.amount}")

        await self.notification_service.notify_new_expense(db, expense)
        return expense

    def _owned_editable(self, db: Session, expense_id: int, employee: User, deleting: bool = False) -> ExpenseRequest:
        expense = self.get_expense(db, expense_id)

        if expense.employee_id != employee.id:
            raise ExpenseAccessDeniedError("You can only change your own expenses")

        allowed = expense.is_deletable() if deleting else expense.is_editable()
        if not allowed:
            logger.warning(
                f"Employee {employee.email} attempted to change expense {expense.id} "
                f"with status {expense.status.value}"
            )
            raise ExpenseNotEditableError(expense.id, expense.status.value)

        return expense

    async def update_expense(
        self,
        db: Session,
        expense_id: int,
        employee: User,
        data: ExpenseUpdate
    ) -> ExpenseRequest:
        """
        Update a pending or rejected expense

        A rejected expense goes back to PENDING_MANAGER when edited.

        Args:
            db: Database session
            expense_id: Expense to update
            employee: Acting employee (must own the expense)
            data: Replacement field values

        Returns:
            ExpenseRequest: The updated expense
        """
        expense = self._owned_editable(db, expense_id, employee)
        previous_status = expense.status

        expense.title = data.title
        expense.description = data.description
        expense.amount = data.amount
        expense.receipt_url = data.receipt_url
        new_status = expense.apply_action(UserRole.EMPLOYEE, WorkflowAction.EDIT)

        db.commit()
        db.refresh(expense)

        log_audit(
            employee.id,
            "EXPENSE_UPDATED",
            f"expense={expense.id} status={previous_status.value}->{new_status.value}"
        )
        logger.info(f"Expense {expense.id} updated by {employee.email}. Status: {new_status.value}")

        if previous_status != new_status:
            await self.notification_service.notify_new_expense(db, expense)
        return expense

    async def delete_expense(self, db: Session, expense_id: int, employee: User):
        """
        Delete a pending or rejected expense

        Args:
            db: Database session
            expense_id: Expense to delete
            employee: Acting employee (must own the expense)
        """
        expense = self._owned_editable(db, expense_id, employee, deleting=True)
        status = expense.status.value

        db.delete(expense)
        db.commit()

        log_audit(employee.id, "EXPENSE_DELETED", f"expense={expense_id} status={status}")
        logger.info(f"Expense {expense_id} deleted by {employee.email}")

    # ============= MANAGER / FINANCE OPERATIONS =============

    def _decide(
        self,
        db: Session,
        expense_id: int,
        actor: User,
        action: WorkflowAction,
        comment: Optional[str] = None,
        payment_reference: Optional[str] = None
    ) -> ExpenseRequest:
        expense = self.get_expense(db, expense_id)
        previous_status = expense.status

        # Raises InvalidTransitionError for the wrong status or role
        new_status = expense.apply_action(actor.role, action)

        level = ApprovalLevel.MANAGER if actor.role == UserRole.MANAGER else ApprovalLevel.FINANCE
        decision = ApprovalDecision.APPROVED if action == WorkflowAction.APPROVE else ApprovalDecision.REJECTED
        expense.approvals.append(Approval(
            approver_id=actor.id,
            level=level,
            decision=decision,
            comment=comment,
            payment_reference=payment_reference
        ))

        db.commit()
        db.refresh(expense)

        log_audit(
            actor.id,
            f"{level.value}_{decision.value}",
            f"expense={expense.id} status={previous_status.value}->{new_status.value}"
        )
        logger.info(
            f"Expense {expense.id} {decision.value.lower()} by {actor.email} ({level.value}). "
            f"New status: {new_status.value}"
        )
        return expense

    async def manager_approve(
        self,
        db: Session,
        expense_id: int,
        manager: User,
        comment: Optional[str] = None
    ) -> ExpenseRequest:
        """
        Approve a pending expense (PENDING_MANAGER -> PENDING_FINANCE)

        Args:
            db: Database session
            expense_id: Expense to approve
            manager: Acting manager
            comment: Optional approval comment
        """
        expense = self._decide(db, expense_id, manager, WorkflowAction.APPROVE, comment=comment)
        await self.notification_service.notify_approved_by_manager(db, expense, manager)
        return expense

    async def manager_reject(self, db: Session, expense_id: int, manager: User, comment: str) -> ExpenseRequest:
        """
        Reject a pending expense (PENDING_MANAGER -> REJECTED_MANAGER)

        Args:
            db: Database session
            expense_id: Expense to reject
            manager: Acting manager
            comment: Required rejection reason
        """
        comment = validate_rejection_comment(comment)
        expense = self._decide(db, expense_id, manager, WorkflowAction.REJECT, comment=comment)
        await self.notification_service.notify_rejected_by_manager(db, expense, manager, comment)
        return expense

    async def finance_approve(
        self,
        db: Session,
        expense_id: int,
        finance_user: User,
        payout: FinanceActionRequest
    ) -> ExpenseRequest:
        """
        Approve payout (PENDING_FINANCE -> PAID)

        Args:
            db: Database session
            expense_id: Expense to pay
            finance_user: Acting finance user
            payout: Optional note, reimbursement method and expected payout date
        """
        expense = self._decide(
            db,
            expense_id,
            finance_user,
            WorkflowAction.APPROVE,
            comment=payout.note,
            payment_reference=payout.payment_reference()
        )
        await self.notification_service.notify_paid(db, expense, finance_user)
        return expense

    async def finance_reject(self, db: Session, expense_id: int, finance_user: User, comment: str) -> ExpenseRequest:
        """
        Reject payout (PENDING_FINANCE -> REJECTED_FINANCE)

        Args:
            db: Database session
            expense_id: Expense to reject
            finance_user: Acting finance user
            comment: Required rejection reason
        """
        comment = validate_rejection_comment(comment)
        expense = self._decide(db, expense_id, finance_user, WorkflowAction.REJECT, comment=comment)
        await self.notification_service.notify_rejected_by_finance(db, expense, finance_user, comment)
        return expense


# Create singleton instance
expense_service = ExpenseService()
