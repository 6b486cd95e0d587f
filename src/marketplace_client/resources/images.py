from typing import Any, Dict

from .base import Resource


class ImagesResource(Resource):
    """Image generation and gallery endpoints under /api/image."""

    async def generate_image(
        self,
        prompt: str,
        quality: str = "standard",
        style: str = "photographic",
        service: str = "gemini",
    ) -> Any:
        body = {"prompt": prompt, "quality": quality, "style": style, "service": service}
        return await self._client.request("/api/image/generate", {"method": "POST", "body": body})

    async def list_images(
        self, page: int = 1, limit: int = 20, search: str = "", style: str = "", quality: str = ""
    ) -> Any:
        params = {"page": page, "limit": limit, "search": search, "style": style, "quality": quality}
        return await self._client.request("/api/image", {"params": params})

    async def get_image(self, image_id: str) -> Any:
        return await self._client.request(f"/api/image/{image_id}")

    async def update_image(self, image_id: str, update_data: Dict[str, Any]) -> Any:
        return await self._client.request(f"/api/image/{image_id}", {"method": "PUT", "body": update_data})

    async def delete_image(self, image_id: str) -> Any:
        return await self._client.request(f"/api/image/{image_id}", {"method": "DELETE"})

    async def search_images(self, query: str) -> Any:
        return await self._client.request("/api/image/search", {"params": {"query": query}})

    async def public_images(self, page: int = 1, limit: int = 20) -> Any:
        return await self._client.request("/api/image/public", {"params": {"page": page, "limit": limit}})
