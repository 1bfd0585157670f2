import logging
from typing import Optional

import httpx

from ..config import settings
from ..domain import PaymentRequest, ServiceResult

logger = logging.getLogger(__name__)


class PaystackClient:
    """Payment initiator backed by Paystack's hosted checkout."""

    def __init__(self,
                 secret_key: Optional[str] = None,
                 base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 ):
        self.secret_key = secret_key if secret_key is not None else settings.paystack_secret_key
        self.base_url = (base_url or settings.paystack_api_base).rstrip("/")
        self.timeout = timeout or settings.paystack_timeout

    @property
    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    async def initialize_payment(self, request: PaymentRequest) -> ServiceResult:
        """
        Initialize a Paystack transaction.

        On success ``data`` holds ``authorizationUrl``, ``reference`` and
        ``accessCode``. Transport errors and non-2xx answers come back as a
        failed result carrying Paystack's message when it sent one.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    f"{self.base_url}/transaction/initialize",
                    json=request.to_payload(),
                    headers=self.headers,
                )
        except httpx.HTTPError as e:
            logger.error("paystack unreachable", extra={"error": str(e)})
            return ServiceResult.fail("Payment service unavailable")

        try:
            body = resp.json() if resp.content else {}
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code < 200 or resp.status_code >= 300 or body.get("status") is not True:
            message = (body.get("message") or f"HTTP {resp.status_code}").strip()
            logger.warning("paystack rejected initialization", extra={"status_code": resp.status_code, "paystack_message": message})
            return ServiceResult.fail(message)

        data = body.get("data")
        if not isinstance(data, dict):
            data = {}
        return ServiceResult.ok({
            "authorizationUrl": data.get("authorization_url"),
            "reference": data.get("reference"),
            "accessCode": data.get("access_code"),
        })
