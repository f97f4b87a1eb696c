"""
Notification Service
Creates notifications for the people affected by each workflow step
"""

from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Optional

from expense_manager.models.expense import ExpenseRequest
from expense_manager.models.lifecycle import UserRole
from expense_manager.models.notification import Notification, NotificationType
from expense_manager.models.user import User
from expense_manager.utils.helpers import format_currency
from expense_manager.utils.logger import setup_logger

logger = setup_logger()


class NotificationService:
    """Service for managing notifications"""

    def _users_with_role(self, db: Session, role: UserRole) -> List[User]:
        return db.query(User).filter(
            User.role == role,
            User.is_active == True
        ).all()

    def _add(
        self,
        db: Session,
        recipients: List[User],
        type: NotificationType,
        title: str,
        message: str,
        expense: ExpenseRequest,
        triggered_by: Optional[User] = None
    ) -> int:
        for recipient in recipients:
            db.add(Notification(
                recipient_id=recipient.id,
                triggered_by_id=triggered_by.id if triggered_by else None,
                type=type,
                title=title,
                message=message,
                expense_id=expense.id
            ))
        db.commit()
        return len(recipients)

    async def notify_new_expense(self, db: Session, expense: ExpenseRequest):
        """
        Notify managers that a new expense awaits review

        Args:
            db: Database session
            expense: Newly submitted expense
        """
        managers = self._users_with_role(db, UserRole.MANAGER)
        if not managers:
            logger.warning(f"No active managers found to notify for expense {expense.id}")
            return

        count = self._add(
            db,
            managers,
            NotificationType.NEW_EXPENSE_SUBMITTED,
            "New Expense Submitted",
            f"{expense.employee_name} submitted a new expense: {expense.title} "
            f"({format_currency(expense.amount)})",
            expense,
            triggered_by=expense.employee
        )
        logger.info(f"Notified {count} managers about expense {expense.id}")

    async def notify_approved_by_manager(self, db: Session, expense: ExpenseRequest, manager: User):
        """
        Notify the employee of the approval and finance of the pending payout

        Args:
            db: Database session
            expense: Approved expense
            manager: Approving manager
        """
        self._add(
            db,
            [expense.employee],
            NotificationType.EXPENSE_APPROVED_BY_MANAGER,
            "Expense Approved by Manager",
            f"Your expense '{expense.title}' has been approved by {manager.full_name} and sent to Finance.",
            expense,
            triggered_by=manager
        )

        finance_users = self._users_with_role(db, UserRole.FINANCE)
        if not finance_users:
            logger.warning(f"No active finance users found to notify for expense {expense.id}")
            return

        count = self._add(
            db,
            finance_users,
            NotificationType.EXPENSE_PENDING_FINANCE_APPROVAL,
            "New Expense Awaiting Finance Approval",
            f"Expense '{expense.title}' approved by manager {manager.full_name} awaits your review.",
            expense,
            triggered_by=manager
        )
        logger.info(f"Notified employee {expense.employee_id} and {count} finance users about expense {expense.id}")

    async def notify_rejected_by_manager(
        self,
        db: Session,
        expense: ExpenseRequest,
        manager: User,
        reason: str
    ):
        """Notify the employee that their manager rejected the expense"""
        self._add(
            db,
            [expense.employee],
            NotificationType.EXPENSE_REJECTED_BY_MANAGER,
            "Expense Rejected by Manager",
            f"Your expense '{expense.title}' has been rejected by {manager.full_name}. Reason: {reason}",
            expense,
            triggered_by=manager
        )
        logger.info(f"Notified user {expense.employee_id} about expense {expense.id} manager rejection")

    async def notify_paid(self, db: Session, expense: ExpenseRequest, finance_user: User):
        """Notify the employee that finance approved the payout"""
        self._add(
            db,
            [expense.employee],
            NotificationType.EXPENSE_PAID,
            "Expense Payment Approved",
            f"Your expense '{expense.title}' has been approved for payment by Finance "
            f"({format_currency(expense.amount)}).",
            expense,
            triggered_by=finance_user
        )
        logger.info(f"Notified user {expense.employee_id} about expense {expense.id} payment")

    async def notify_rejected_by_finance(
        self,
        db: Session,
        expense: ExpenseRequest,
        finance_user: User,
        reason: str
    ):
        """Notify the employee that finance rejected the payout"""
        self._add(
            db,
            [expense.employee],
            NotificationType.EXPENSE_REJECTED_BY_FINANCE,
            "Expense Payment Rejected",
            f"Your expense '{expense.title}' has been rejected by Finance. Reason: {reason}",
            expense,
            triggered_by=finance_user
        )
        logger.info(f"Notified user {expense.employee_id} about expense {expense.id} finance rejection")

    # ============= RECIPIENT OPERATIONS =============

    def list_for_user(self, db: Session, user: User, unread_only: bool = False) -> List[Notification]:
        """Get the user's notifications, newest first"""
        query = db.query(Notification).filter(Notification.recipient_id == user.id)
        if unread_only:
            query = query.filter(Notification.is_read == False)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def unread_count(self, db: Session, user: User) -> int:
        return db.query(Notification).filter(
            Notification.recipient_id == user.id,
            Notification.is_read == False
        ).count()

    def mark_read(self, db: Session, notification_id: int, user: User) -> Optional[Notification]:
        """
        Mark one of the user's notifications as read

        Returns:
            Notification: The updated notification, or None if the user has no such notification
        """
        notification = db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.recipient_id == user.id
        ).first()

        if not notification:
            return None

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            db.commit()
            db.refresh(notification)
            logger.info(f"User {user.email} marked notification {notification_id} as read")

        return notification

    def mark_all_read(self, db: Session, user: User) -> int:
        """
        Mark all of the user's notifications as read

        Returns:
            int: Number of notifications that changed
        """
        count = db.query(Notification).filter(
            Notification.recipient_id == user.id,
            Notification.is_read == False
        ).update({
            "is_read": True,
            "read_at": datetime.utcnow()
        }, synchronize_session=False)
        db.commit()

        logger.info(f"User {user.email} marked {count} notifications as read")
        return count


# Create singleton instance
notification_service = NotificationService()
