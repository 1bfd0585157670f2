"""Wiring of the collaborators used by the routers.

Routers take these through ``Depends`` so tests can swap any of them with
``app.dependency_overrides``.
"""

from fastapi import Depends

from .config import settings
from .domain import ReadyOrderPaymentService
from .services.paystack import PaystackClient
from .services.store import SqlIdentityProvider, SqlOrderStore, SqlServiceCatalogue


def get_order_store() -> SqlOrderStore:
    return SqlOrderStore()


def get_identity_provider() -> SqlIdentityProvider:
    return SqlIdentityProvider()


def get_service_catalogue() -> SqlServiceCatalogue:
    return SqlServiceCatalogue()


def get_payment_initiator() -> PaystackClient:
    return PaystackClient()


def get_ready_order_payment_service(
    orders=Depends(get_order_store),
    identity=Depends(get_identity_provider),
    payments=Depends(get_payment_initiator),
) -> ReadyOrderPaymentService:
    return ReadyOrderPaymentService(
        orders=orders,
        identity=identity,
        payments=payments,
        currency=settings.currency,
        app_url=settings.app_url,
    )
