from typing import Any, Dict, List, Optional

from ..types import BlobResponse
from .base import Resource, compact


class BillingResource(Resource):
    """Payments, licenses, transactions, invoices and wallet."""

    async def create_payment_intent(self, cart_item_ids: List[str], license_type: str = "purchase") -> Any:
        body = {"cartItemIds": cart_item_ids, "licenseType": license_type}
        return await self._client.request("/api/stripe/create-payment-intent", {"method": "POST", "body": body})

    async def confirm_payment(self, payment_intent_id: str) -> Any:
        return await self._client.request(
            "/api/stripe/confirm-payment", {"method": "POST", "body": {"paymentIntentId": payment_intent_id}}
        )

    async def list_licenses(
        self,
        license_type: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Any:
        params = compact({"page": page, "limit": limit, "licenseType": license_type or None, "status": status or None})
        return await self._client.request("/api/stripe/licenses", {"params": params})

    async def download_asset(self, license_id: str) -> BlobResponse:
        """Download a licensed asset; the filename is on ``BlobResponse.filename``."""
        return await self._client.request(
            f"/api/stripe/download/{license_id}", {"method": "GET", "response_type": "blob"}
        )

    async def repurchase_asset(self, license_id: str, license_type: str = "purchase") -> Any:
        body = {"licenseId": license_id, "licenseType": license_type}
        return await self._client.request("/api/stripe/repurchase", {"method": "POST", "body": body})

    async def list_transactions(
        self,
        status: Optional[str] = None,
        license_type: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Any:
        params = compact({"page": page, "limit": limit, "status": status or None, "licenseType": license_type or None})
        return await self._client.request("/api/stripe/transactions", {"params": params})

    async def get_transaction(self, transaction_id: str) -> Any:
        return await self._client.request(f"/api/stripe/transaction/{transaction_id}")

    async def get_invoice(self, invoice_id: str) -> Any:
        return await self._client.request(f"/api/invoice/{invoice_id}")

    async def wallet_balance(self) -> Any:
        return await self._client.request("/api/wallet/balance")

    async def wallet_history(self, **params: Any) -> Any:
        return await self._client.request("/api/wallet/history", {"params": compact(params)})

    async def single_prices(self) -> Any:
        return await self._client.request("/api/singleprice")

    async def single_price(self, asset_type: str) -> Any:
        return await self._client.request(f"/api/singleprice/{asset_type}")

    async def license_with_credits(self, payload: Dict[str, Any]) -> Any:
        return await self._client.request("/api/stripe/license-with-credits", {"method": "POST", "body": payload})
