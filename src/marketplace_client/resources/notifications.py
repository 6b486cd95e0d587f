from typing import Any, Optional

from .base import Resource, compact


class NotificationsResource(Resource):
    """In-app notifications under /api/notification."""

    async def list_notifications(
        self, page: Optional[int] = None, limit: Optional[int] = None, unread_only: bool = False
    ) -> Any:
        params = compact({"page": page, "limit": limit, "unreadOnly": "true" if unread_only else None})
        return await self._client.request("/api/notification", {"params": params})

    async def mark_read(self, notification_id: str) -> Any:
        return await self._client.request(f"/api/notification/{notification_id}/read", {"method": "PUT"})

    async def mark_all_read(self) -> Any:
        return await self._client.request("/api/notification/read-all", {"method": "PUT"})

    async def delete_notification(self, notification_id: str) -> Any:
        return await self._client.request(f"/api/notification/{notification_id}", {"method": "DELETE"})
