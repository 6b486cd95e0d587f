from typing import Any

from .base import Resource


class SubscriptionsResource(Resource):
    """Subscription plans and checkout under /api/subscription."""

    async def list_plans(self) -> Any:
        return await self._client.request("/api/subscription/admin/plans")

    async def current_subscription(self) -> Any:
        return await self._client.request("/api/subscription/current")

    async def history(self) -> Any:
        return await self._client.request("/api/subscription/history")

    async def cancel(self) -> Any:
        return await self._client.request("/api/subscription/cancel", {"method": "POST"})

    async def create_checkout(self, plan_id: str) -> Any:
        return await self._client.request(
            "/api/subscription/checkout", {"method": "POST", "body": {"planId": plan_id}}
        )
