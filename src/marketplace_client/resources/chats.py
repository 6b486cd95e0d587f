from typing import Any, Dict, List, Optional

from ..cancel import CancellationToken
from ..core.request import RequestBuilder
from ..types import MultipartForm, ProgressCallback
from .base import FileInput, Resource, compact, to_file_field


class ChatsResource(Resource):
    """AI chat endpoints under /api/chat."""

    async def create_chat(
        self,
        first_message: str,
        title: Optional[str] = None,
        mode: str = "text",
        context: Optional[List[Any]] = None,
        files: Optional[List[Any]] = None,
        variant_count: int = 1,
    ) -> Any:
        body = {
            "firstMessage": first_message,
            "title": title,
            "mode": mode,
            "context": context or [],
            "files": files or [],
            "variantCount": variant_count,
        }
        return await self._client.request("/api/chat", {"method": "POST", "body": body})

    async def list_chats(self, page: int = 1, limit: int = 20, search: str = "") -> Any:
        params = {"page": page, "limit": limit, "search": search}
        return await self._client.request("/api/chat", {"params": params})

    async def get_chat(self, chat_id: str, limit: Optional[int] = None, offset: Optional[int] = None) -> Any:
        params = compact({"limit": limit, "offset": offset})
        return await self._client.request(f"/api/chat/{chat_id}", {"params": params})

    async def send_message(
        self,
        chat_id: str,
        content: str,
        mode: str = "text",
        context: Optional[List[Any]] = None,
        files: Optional[List[Any]] = None,
        variant_count: int = 1,
        force_generate: bool = False,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """
        Send a chat message. With ``on_progress`` the reply is streamed and
        every generation stage is reported before the final message returns.
        """
        options = (
            RequestBuilder("POST")
            .json({
                "content": content,
                "mode": mode,
                "context": context or [],
                "files": files or [],
                "variantCount": variant_count,
                "forceGenerate": force_generate,
            })
            .on_progress(on_progress)
            .cancel_token(cancel_token)
            .build()
        )
        return await self._client.request(f"/api/chat/{chat_id}/messages", options)

    async def save_message(
        self,
        chat_id: str,
        content: str,
        image_url: Optional[str] = None,
        image_data: Optional[Dict[str, Any]] = None,
        role: str = "user",
    ) -> Any:
        body = {"content": content, "imageUrl": image_url, "imageData": image_data, "role": role}
        return await self._client.request(f"/api/chat/{chat_id}/save-message", {"method": "POST", "body": body})

    async def rename_chat(self, chat_id: str, title: str) -> Any:
        return await self._client.request(f"/api/chat/{chat_id}/title", {"method": "PUT", "body": {"title": title}})

    async def delete_chat(self, chat_id: str) -> Any:
        return await self._client.request(f"/api/chat/{chat_id}", {"method": "DELETE"})

    async def search_chats(self, query: str) -> Any:
        return await self._client.request("/api/chat/search", {"params": {"query": query}})

    async def rate_message(self, chat_id: str, message_index: int, thumbs_up: bool, thumbs_down: bool) -> Any:
        body = {"messageIndex": message_index, "thumbsUp": thumbs_up, "thumbsDown": thumbs_down}
        return await self._client.request(f"/api/chat/{chat_id}/rate-message", {"method": "POST", "body": body})

    async def edit_image(self, chat_id: str, image: FileInput, prompt: str, mask_data: Optional[str] = None) -> Any:
        filename, content, content_type = await to_file_field(image)
        form = MultipartForm().add_file("image", filename, content, content_type).add_field("prompt", prompt)
        if mask_data:
            form.add_field("maskData", mask_data)
        return await self._client.request(f"/api/chat/{chat_id}/edit-image", {"method": "POST", "body": form})

    async def generate_variation(self, chat_id: str, image: FileInput) -> Any:
        filename, content, content_type = await to_file_field(image)
        form = MultipartForm().add_file("image", filename, content, content_type)
        return await self._client.request(
            f"/api/chat/{chat_id}/generate-variation", {"method": "POST", "body": form}
        )
