from typing import Any, List, Optional

from ..types import MultipartForm
from .base import FileInput, Resource, to_file_field


class ConversationsResource(Resource):
    """Direct messaging endpoints under /api/conversation."""

    async def list_conversations(self, page: int = 1, limit: int = 20) -> Any:
        return await self._client.request("/api/conversation", {"params": {"page": page, "limit": limit}})

    async def get_conversation(self, conversation_id: str) -> Any:
        return await self._client.request(f"/api/conversation/{conversation_id}")

    async def get_messages(self, conversation_id: str, page: int = 1, limit: int = 20) -> Any:
        return await self._client.request(
            f"/api/conversation/{conversation_id}/messages", {"params": {"page": page, "limit": limit}}
        )

    async def send_message(self, conversation_id: str, content: str, attachments: Optional[List[Any]] = None) -> Any:
        body = {"content": content, "attachments": attachments or []}
        return await self._client.request(
            f"/api/conversation/{conversation_id}/messages", {"method": "POST", "body": body}
        )

    async def mark_read(self, conversation_id: str) -> Any:
        return await self._client.request(f"/api/conversation/{conversation_id}/read", {"method": "PUT"})

    async def upload_attachment(self, conversation_id: str, file: FileInput) -> Any:
        filename, content, content_type = await to_file_field(file)
        form = MultipartForm().add_file("file", filename, content, content_type)
        return await self._client.request(
            f"/api/conversation/{conversation_id}/attachments", {"method": "POST", "body": form}
        )

    async def get_or_create(self, brief_id: str, user_id: str) -> Any:
        return await self._client.request(f"/api/conversation/brief/{brief_id}/user/{user_id}")
