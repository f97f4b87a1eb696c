"""
Expense Model
Represents expense requests submitted by employees
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from expense_manager.config.database import Base
from expense_manager.models.lifecycle import (
    ExpenseStatus,
    INITIAL_STATUS,
    UserRole,
    WorkflowAction,
    can_delete,
    can_edit,
    next_status,
)


class ExpenseRequest(Base):
    """Expense request model"""
    __tablename__ = "expense_requests"

    id = Column(Integer, primary_key=True, index=True)

    # Employee information
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Expense details
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    receipt_url = Column(String(500), nullable=True)

    # Status and workflow
    status = Column(Enum(ExpenseStatus), default=INITIAL_STATUS, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    employee = relationship("User", back_populates="expenses", foreign_keys=[employee_id])
    approvals = relationship(
        "Approval",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="Approval.created_at"
    )

    def __repr__(self):
        return f"<ExpenseRequest {self.id} - {self.title} - {self.status.value}>"

    @property
    def employee_name(self) -> str:
        return self.employee.full_name if self.employee else None

    @property
    def employee_email(self) -> str:
        return self.employee.email if self.employee else None

    def is_editable(self) -> bool:
        """Check if the owning employee may still edit this expense"""
        return can_edit(self.status)

    def is_deletable(self) -> bool:
        """Check if the owning employee may still delete this expense"""
        return can_delete(self.status)

    def apply_action(self, role: UserRole, action: WorkflowAction) -> ExpenseStatus:
        """
        Move the expense to the status reached by ``action``

        Args:
            role: Role of the acting user
            action: Workflow action being applied

        Returns:
            ExpenseStatus: The new status

        Raises:
            InvalidTransitionError: If the action is illegal from the current status
        """
        new_status = next_status(self.status, role, action)
        self.status = new_status
        self.updated_at = datetime.utcnow()
        return new_status
