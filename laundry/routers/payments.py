from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..domain import GateOutcome, ReadyOrderPaymentResult, ReadyOrderPaymentService
from ..providers import get_ready_order_payment_service
from ..schemas import CheckoutOut, ReadyOrderPaymentIn, ReadyOrderPaymentOut

router = APIRouter(prefix="/api/payment", tags=["payments"])

INVALID_BODY = "Invalid request body"


@router.post("/ready-order", response_model=ReadyOrderPaymentOut)
async def ready_order_payment(
    request: Request,
    service: ReadyOrderPaymentService = Depends(get_ready_order_payment_service),
):
    """Start the hosted checkout for an order that is ready and paid on pickup.

    The body is parsed here rather than by FastAPI so a body that is not a
    JSON object with string ids gets the same ``{success, error}`` 400 as
    missing ids.
    """
    raw_body = await request.body()
    try:
        payload = ReadyOrderPaymentIn.model_validate_json(raw_body or b"{}")
    except ValidationError:
        result = ReadyOrderPaymentResult.rejected(GateOutcome.MALFORMED_REQUEST, INVALID_BODY)
    else:
        result = await service.initiate_ready_order_payment(payload.order_id, payload.customer_id)

    if result.success:
        out = ReadyOrderPaymentOut(
            success=True,
            data=CheckoutOut(authorization_url=result.authorization_url, reference=result.reference),
        )
    else:
        out = ReadyOrderPaymentOut(success=False, error=result.error)
    return JSONResponse(out.model_dump(by_alias=True, exclude_none=True), status_code=result.status_code)
