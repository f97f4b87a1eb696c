"""
Notification Client
Read and acknowledge notifications, and pull new ones at a fixed interval
"""

import asyncio
from typing import AsyncIterator, List, Optional, Set

from expense_manager.client.base import BaseExpenseClient
from expense_manager.config.settings import settings
from expense_manager.schemas.notification import NotificationResponse, UnreadCountResponse
from expense_manager.utils.logger import setup_logger

logger = setup_logger()

NOTIFICATIONS_PATH = "/api/notifications"


class NotificationClient(BaseExpenseClient):
    """Client for the notification endpoints"""

    async def list(self, unread_only: bool = False) -> List[NotificationResponse]:
        data = await self._request("GET", NOTIFICATIONS_PATH, params={"unread_only": unread_only})
        return [NotificationResponse.model_validate(item) for item in data or []]

    async def unread_count(self) -> int:
        data = await self._request("GET", f"{NOTIFICATIONS_PATH}/unread/count")
        return UnreadCountResponse.model_validate(data).unread_count

    async def mark_read(self, notification_id: int) -> NotificationResponse:
        data = await self._request("PUT", f"{NOTIFICATIONS_PATH}/{notification_id}/read")
        return NotificationResponse.model_validate(data)

    async def mark_all_read(self) -> int:
        """Returns the number of notifications that were unread"""
        data = await self._request("PUT", f"{NOTIFICATIONS_PATH}/read-all")
        return (data or {}).get("count", 0)

    async def poll(
        self,
        interval: Optional[float] = None,
        max_polls: Optional[int] = None
    ) -> AsyncIterator[List[NotificationResponse]]:
        """
        Pull unread notifications every ``interval`` seconds

        Yields only notifications not seen by an earlier poll; empty polls
        yield nothing. Stops after ``max_polls`` pulls when given, otherwise
        runs until the consumer stops iterating.

        Args:
            interval: Seconds between pulls (defaults to NOTIFICATION_POLL_SECONDS)
            max_polls: Number of pulls before stopping
        """
        interval = settings.NOTIFICATION_POLL_SECONDS if interval is None else interval
        seen: Set[int] = set()
        polls = 0

        while True:
            unread = await self.list(unread_only=True)
            polls += 1

            fresh = [n for n in unread if n.id not in seen]
            if fresh:
                seen.update(n.id for n in fresh)
                logger.debug(f"Poll {polls}: {len(fresh)} new notifications")
                yield fresh

            if max_polls is not None and polls >= max_polls:
                return
            await asyncio.sleep(interval)
