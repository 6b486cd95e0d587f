from typing import Any, Dict

from .base import Resource


class AuthResource(Resource):
    """Account endpoints under /api/user."""

    async def login(self, email: str, password: str) -> Any:
        return await self._client.request(
            "/api/user/login", {"method": "POST", "body": {"email": email, "password": password}}
        )

    async def register(self, user_data: Dict[str, Any]) -> Any:
        return await self._client.request("/api/user/register", {"method": "POST", "body": user_data})

    async def get_user_details(self) -> Any:
        return await self._client.request("/api/user/details")

    async def get_user_usage(self) -> Any:
        return await self._client.request("/api/user/usage")

    async def update_user(self, user_data: Dict[str, Any]) -> Any:
        return await self._client.request("/api/user/update", {"method": "PUT", "body": user_data})

    async def forgot_password(self, email: str) -> Any:
        return await self._client.request(
            "/api/user/forgot-password", {"method": "POST", "body": {"email": email}}
        )

    async def reset_password(self, token: str, password: str) -> Any:
        return await self._client.request(
            "/api/user/reset-password",
            {"method": "POST", "body": {"token": token, "password": password}},
        )
