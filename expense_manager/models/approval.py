"""
Approval Model
Records each manager or finance decision on an expense request
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from expense_manager.config.database import Base


class ApprovalDecision(str, enum.Enum):
    """Decision taken by the approver"""
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ApprovalLevel(str, enum.Enum):
    """Approval levels - MANAGER then FINANCE"""
    MANAGER = "MANAGER"
    FINANCE = "FINANCE"


class Approval(Base):
    """Approval model"""
    __tablename__ = "approvals"

    id = Column(Integer, primary_key=True, index=True)

    # Expense and Approver
    expense_id = Column(Integer, ForeignKey("expense_requests.id"), nullable=False)
    approver_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Approval details
    level = Column(Enum(ApprovalLevel), nullable=False)
    decision = Column(Enum(ApprovalDecision), nullable=False)

    # Manager comment, finance note or finance rejection reason
    comment = Column(Text, nullable=True)

    # Finance payout details, e.g. "Method: Bank Transfer | Expected Payout: 2024-05-01"
    payment_reference = Column(String(300), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    expense = relationship("ExpenseRequest", back_populates="approvals")
    approver = relationship("User", back_populates="approvals", foreign_keys=[approver_id])

    def __repr__(self):
        return f"<Approval {self.level.value} - {self.decision.value}>"
