import logging

from fastapi import APIRouter, Depends, HTTPException

from ..models import User
from ..providers import get_identity_provider
from ..schemas import CustomerOut, RegisterCustomerIn
from ..services.store import CONFLICT
from ..utils import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=CustomerOut, status_code=201)
async def register(payload: RegisterCustomerIn, identity=Depends(get_identity_provider)):
    """Register a customer. The customer logs in separately once their email is verified."""
    user = User(
        email=payload.email.lower(),
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone=payload.phone,
        phone_country_code=payload.phone_country_code,
        password_hash=hash_password(payload.password),
    )
    res = await identity.register_customer(user)
    if not res.success:
        raise HTTPException(status_code=409 if res.code == CONFLICT else 500, detail=res.error or "Registration failed")

    logger.info("customer registered", extra={"user_id": res.data.id})
    return res.data
