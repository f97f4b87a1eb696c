"""
Notification Model
Represents notifications sent to users when an expense changes hands
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, Enum
from sqlalchemy.orm import relationship
from datetime import datetime

from expense_manager.config.database import Base
from expense_manager.models.lifecycle import NotificationType


class Notification(Base):
    """Notification model"""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)

    # Recipient and the user whose action triggered the notification
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    triggered_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Notification details
    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)

    # Related expense (optional); kept as a plain id so deleting an expense leaves history intact
    expense_id = Column(Integer, nullable=True, index=True)

    # Status
    is_read = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    read_at = Column(DateTime, nullable=True)

    # Relationships
    recipient = relationship("User", back_populates="notifications", foreign_keys=[recipient_id])
    triggered_by = relationship("User", foreign_keys=[triggered_by_id])

    @property
    def triggered_by_name(self):
        return self.triggered_by.full_name if self.triggered_by else None

    def __repr__(self):
        return f"<Notification {self.type.value} - User {self.recipient_id}>"
