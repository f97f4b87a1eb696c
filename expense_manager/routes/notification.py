"""
Notification Routes
User notification management endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from expense_manager.config.database import get_db
from expense_manager.services.auth_service import auth_service
from expense_manager.services.notification_service import notification_service
from expense_manager.models.user import User
from expense_manager.schemas.notification import NotificationResponse, UnreadCountResponse
from expense_manager.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
@router.get("/", response_model=List[NotificationResponse], include_in_schema=False)
async def get_my_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Get current user's notifications

    **Parameters:**
    - unread_only: If True, only return unread notifications
    """
    notifications = notification_service.list_for_user(db, current_user, unread_only=unread_only)
    logger.info(f"User {current_user.email} fetched {len(notifications)} notifications")
    return notifications


@router.get("/unread/count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get count of unread notifications (lightweight endpoint for polling)"""
    return UnreadCountResponse(unread_count=notification_service.unread_count(db, current_user))


@router.put("/read-all")
async def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Mark all notifications as read for current user"""
    count = notification_service.mark_all_read(db, current_user)
    return {
        "success": True,
        "message": f"Marked {count} notifications as read",
        "count": count
    }


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Mark a specific notification as read"""
    notification = notification_service.mark_read(db, notification_id, current_user)

    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )

    return notification
