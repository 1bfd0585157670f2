from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from fastapi import Header, HTTPException
from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def require_service_api_key(x_api_key: Optional[str] = Header(default=None)):
    if x_api_key != settings.service_api_key:
        raise HTTPException(status_code=401, detail="Invalid X-API-KEY")
    return True


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# ---- Naira / kobo ----

def naira_to_kobo(amount: Union[float, str, Decimal]) -> int:
    """Convert a Naira amount to kobo, rounding half up to the nearest kobo."""
    kobo = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(kobo)


def kobo_to_naira(amount: int) -> float:
    return amount / 100


def format_naira_from_kobo(amount: int) -> str:
    """``150050`` -> ``"₦1,500.50"``."""
    return f"₦{kobo_to_naira(amount):,.2f}"
