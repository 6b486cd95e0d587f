from typing import Any, Dict, List, Optional

from ..types import MultipartForm
from .base import FileInput, Resource, compact, to_file_field


class BriefsResource(Resource):
    """Brief marketplace: briefs, bids, revisions and the brief message thread."""

    async def create_brief(self, brief_data: Dict[str, Any]) -> Any:
        return await self._client.request("/api/brief", {"method": "POST", "body": brief_data})

    async def extract_from_chat(self, chat_id: str) -> Any:
        return await self._client.request(f"/api/brief/extract-from-chat/{chat_id}")

    async def list_briefs(self, **params: Any) -> Any:
        return await self._client.request("/api/brief", {"params": compact(params)})

    async def my_briefs(self, **params: Any) -> Any:
        return await self._client.request("/api/brief/client/my-briefs", {"params": compact(params)})

    async def my_bids(self, **params: Any) -> Any:
        return await self._client.request("/api/brief/my-bids", {"params": compact(params)})

    async def get_brief(self, brief_id: str) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}")

    async def update_brief(self, brief_id: str, update_data: Dict[str, Any]) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}", {"method": "PUT", "body": update_data})

    async def delete_brief(self, brief_id: str) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}", {"method": "DELETE"})

    async def create_payment_intent(self, brief_id: str) -> Any:
        return await self._client.request(
            "/api/brief/create-payment-intent", {"method": "POST", "body": {"briefId": brief_id}}
        )

    async def confirm_payment(self, payment_intent_id: str) -> Any:
        return await self._client.request(
            "/api/brief/confirm-payment", {"method": "POST", "body": {"paymentIntentId": payment_intent_id}}
        )

    # Bids

    async def submit_bid(self, brief_id: str, bid_data: Dict[str, Any]) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}/bids", {"method": "POST", "body": bid_data})

    async def list_bids(self, brief_id: str, **params: Any) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}/bids", {"params": compact(params)})

    async def get_bid(self, brief_id: str, bid_id: str) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}/bids/{bid_id}")

    async def accept_bid(self, brief_id: str, bid_id: str) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}/bids/{bid_id}/accept", {"method": "PUT"})

    async def revise_bid(self, brief_id: str, bid_id: str, bid_data: Dict[str, Any]) -> Any:
        return await self._client.request(
            f"/api/brief/{brief_id}/bids/{bid_id}/revise", {"method": "PUT", "body": bid_data}
        )

    async def reject_bid(self, brief_id: str, bid_id: str, rejection_reason: Optional[str] = None) -> Any:
        return await self._client.request(
            f"/api/brief/{brief_id}/bids/{bid_id}/reject",
            {"method": "PUT", "body": {"rejectionReason": rejection_reason}},
        )

    async def request_bid_revision(self, brief_id: str, bid_id: str, requirements: str = "") -> Any:
        return await self._client.request(
            f"/api/brief/{brief_id}/bids/{bid_id}/request-revision",
            {"method": "PUT", "body": {"requirements": requirements}},
        )

    # Files and revisions

    async def upload_reference_files(self, brief_id: str, files: List[FileInput]) -> Any:
        form = MultipartForm()
        for file in files:
            filename, content, content_type = await to_file_field(file)
            form.add_file("files", filename, content, content_type)
        return await self._client.request(f"/api/brief/{brief_id}/upload", {"method": "POST", "body": form})

    async def request_revision(self, brief_id: str, revision_data: Dict[str, Any]) -> Any:
        return await self._client.request(
            f"/api/brief/{brief_id}/revisions", {"method": "POST", "body": revision_data}
        )

    async def list_revisions(self, brief_id: str) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}/revisions")

    async def mark_completed(self, brief_id: str) -> Any:
        return await self._client.request(f"/api/brief/{brief_id}/complete", {"method": "PUT"})

    # Message thread

    async def send_message(
        self,
        brief_id: str,
        content: str,
        attachments: Optional[List[Any]] = None,
        bidder_id: Optional[str] = None,
    ) -> Any:
        body = {"content": content, "attachments": attachments or [], "bidderId": bidder_id}
        return await self._client.request(f"/api/brief/{brief_id}/messages", {"method": "POST", "body": body})

    async def get_messages(self, brief_id: str, bidder_id: Optional[str] = None) -> Any:
        params = compact({"bidderId": bidder_id or None})
        return await self._client.request(f"/api/brief/{brief_id}/messages", {"params": params})

    async def upload_attachment(self, brief_id: str, file: FileInput) -> Any:
        filename, content, content_type = await to_file_field(file)
        form = MultipartForm().add_file("file", filename, content, content_type)
        return await self._client.request(
            f"/api/brief/{brief_id}/messages/upload", {"method": "POST", "body": form}
        )
