"""
User Model
Represents system users with role-based access control
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from datetime import datetime

from expense_manager.config.database import Base
from expense_manager.models.lifecycle import UserRole


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    expenses = relationship("ExpenseRequest", back_populates="employee", foreign_keys="ExpenseRequest.employee_id")
    approvals = relationship("Approval", back_populates="approver", foreign_keys="Approval.approver_id")
    notifications = relationship(
        "Notification",
        back_populates="recipient",
        foreign_keys="Notification.recipient_id",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    def can_view_expense(self, expense) -> bool:
        """Owners see their own expenses; managers and finance see all"""
        if self.role in (UserRole.MANAGER, UserRole.FINANCE):
            return True
        return expense.employee_id == self.id
